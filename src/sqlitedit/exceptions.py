class SqliteditError(RuntimeError):
    """Base class for errors reported back to the user."""


class EngineError(SqliteditError):
    """Raised when the embedded SQLite engine rejects an operation.

    Covers malformed files, SQL errors and constraint violations. The original
    ``sqlite3.Error`` is chained as ``__cause__``.
    """


class ValidationError(SqliteditError):
    """Raised when a submitted form value cannot be stored in its column."""

    def __init__(self, column: str, reason: str = "does not allow empty values"):
        self.column = column
        self.reason = reason
        super().__init__(f'Column "{column}" {reason}')


class PolicyError(SqliteditError):
    """Raised when the table's shape (or a missing confirmation) forbids an action."""
