"""Thin adapter over an in-memory ``sqlite3`` connection.

The editor never works on the user's file directly: the uploaded bytes are copied
into a private in-memory database, every change is applied there, and ``export``
hands back a snapshot of the current state.
"""

from __future__ import annotations

import logging
import sqlite3
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from .exceptions import EngineError

_logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: Tuple[str, ...] = (".db", ".sqlite", ".sqlite3")


def is_supported_filename(name: str) -> bool:
    """Return True if ``name`` carries one of the SQLite file extensions we accept."""
    return Path(name or "").suffix.lower() in SUPPORTED_EXTENSIONS


@dataclass(frozen=True)
class QueryResult:
    """Column names plus the value grid returned by a statement."""

    columns: List[str]
    rows: List[Tuple[Any, ...]]

    def records(self) -> List[Dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def scalar(self, default: Any = None) -> Any:
        if not self.rows or not self.rows[0]:
            return default
        return self.rows[0][0]


class Database:
    """An open in-memory SQLite database.

    Connections are opened in autocommit mode; multi-statement changes go through
    :meth:`transaction`.
    """

    def __init__(self, conn: sqlite3.Connection, name: str = "database.db") -> None:
        self._conn = conn
        self._in_transaction = False
        self.name = name

    # ------------------------------------------------------------------
    # Opening
    # ------------------------------------------------------------------
    @classmethod
    def from_bytes(cls, data: bytes, name: str = "database.db") -> "Database":
        """Open a copy of a serialized SQLite database held in memory.

        The bytes are not validated up front; anything SQLite refuses to read
        surfaces as :class:`EngineError`.
        """
        mem = sqlite3.connect(":memory:", isolation_level=None, check_same_thread=False)
        try:
            with tempfile.TemporaryDirectory(prefix="sqlitedit-") as tmp:
                src_path = Path(tmp) / "source.db"
                src_path.write_bytes(bytes(data))
                src = sqlite3.connect(str(src_path))
                try:
                    src.backup(mem)
                finally:
                    src.close()
            # Forces SQLite to actually parse the header and schema.
            mem.execute("SELECT COUNT(*) FROM sqlite_master").fetchone()
        except sqlite3.Error as exc:
            mem.close()
            _logger.error("Failed to open %s: %s", name, exc)
            raise EngineError(f"Unable to open database {name}: {exc}") from exc

        _logger.info("Opened %s (%d bytes) in memory", name, len(data))
        return cls(mem, name=name)

    @classmethod
    def from_path(cls, path: Path | str) -> "Database":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"SQLite database not found at {p}")
        if not p.is_file():
            raise ValueError(f"SQLite database path {p} is not a file")
        return cls.from_bytes(p.read_bytes(), name=p.name)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------
    def query(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Execute ``sql`` and return its column names and rows."""
        _logger.debug("query: %s %r", sql, tuple(params))
        try:
            cur = self._conn.execute(sql, tuple(params))
            columns = [d[0] for d in cur.description or ()]
            rows = [tuple(r) for r in cur.fetchall()]
        except sqlite3.Error as exc:
            _logger.warning("query failed: %s (%s)", sql, exc)
            raise EngineError(str(exc)) from exc
        return QueryResult(columns=columns, rows=rows)

    def run(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute a statement that returns no rows; return the affected row count."""
        _logger.debug("run: %s %r", sql, tuple(params))
        try:
            cur = self._conn.execute(sql, tuple(params))
        except sqlite3.Error as exc:
            _logger.warning("statement failed: %s (%s)", sql, exc)
            raise EngineError(str(exc)) from exc
        return cur.rowcount

    @contextmanager
    def transaction(self) -> Iterator["Database"]:
        """Group statements so they are applied together or not at all."""
        if self._in_transaction:
            yield self
            return

        try:
            self._conn.execute("BEGIN")
        except sqlite3.Error as exc:
            raise EngineError(str(exc)) from exc

        self._in_transaction = True
        try:
            yield self
        except BaseException:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            _logger.info("Transaction rolled back")
            raise
        else:
            try:
                self._conn.execute("COMMIT")
            except sqlite3.Error as exc:
                if self._conn.in_transaction:
                    self._conn.execute("ROLLBACK")
                raise EngineError(str(exc)) from exc
        finally:
            self._in_transaction = False

    # ------------------------------------------------------------------
    # Export / lifecycle
    # ------------------------------------------------------------------
    def export(self) -> bytes:
        """Return a byte-for-byte snapshot of the current database state."""
        try:
            with tempfile.TemporaryDirectory(prefix="sqlitedit-") as tmp:
                out_path = Path(tmp) / "export.db"
                dst = sqlite3.connect(str(out_path))
                try:
                    self._conn.backup(dst)
                finally:
                    dst.close()
                data = out_path.read_bytes()
        except sqlite3.Error as exc:
            _logger.error("Export of %s failed: %s", self.name, exc)
            raise EngineError(f"Unable to export database: {exc}") from exc

        _logger.info("Exported %s (%d bytes)", self.name, len(data))
        return data

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
