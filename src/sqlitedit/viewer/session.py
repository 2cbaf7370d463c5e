"""Per-user editing session: the open database plus what is currently selected."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from sqlitedit.engine import Database
from sqlitedit.exceptions import PolicyError, SqliteditError

from .editor import RowEditor, SaveOutcome, delete_row
from .grid import GridRow, load_rows
from .schema import ColumnDescriptor, describe_columns, primary_key_columns
from .tables import TableSummary, filter_tables, list_tables

_logger = logging.getLogger(__name__)

TAB_DATA = "data"
TAB_STRUCTURE = "structure"


@dataclass
class Session:
    """Selection state for one open database.

    Created when a file is loaded; the table-specific part is replaced wholesale on
    every table switch, and the whole object is dropped when the file is closed.
    """

    db: Database
    file_name: str
    default_limit: Optional[int] = 100
    strict: bool = False
    tables: List[TableSummary] = field(default_factory=list)
    table: Optional[str] = None
    columns: List[ColumnDescriptor] = field(default_factory=list)
    key_columns: List[str] = field(default_factory=list)
    rows: List[GridRow] = field(default_factory=list)
    limit: Optional[int] = 100
    search: str = ""
    tab: str = TAB_DATA
    editor: Optional[RowEditor] = None
    revision: int = 0
    _export_cache: Optional[Tuple[int, bytes]] = field(default=None, repr=False, compare=False)

    @classmethod
    def open(
        cls,
        data: bytes,
        file_name: str,
        *,
        default_limit: Optional[int] = 100,
        strict: bool = False,
    ) -> "Session":
        db = Database.from_bytes(data, name=file_name)
        session = cls(
            db=db,
            file_name=file_name,
            default_limit=default_limit,
            strict=strict,
            limit=default_limit,
        )
        session.refresh_tables()
        return session

    # ------------------------------------------------------------------
    # Table browser
    # ------------------------------------------------------------------
    def refresh_tables(self) -> List[TableSummary]:
        self.tables = list_tables(self.db)
        return self.tables

    def visible_tables(self) -> List[TableSummary]:
        return filter_tables(self.tables, self.search)

    def select_table(self, name: str) -> None:
        if name not in {t.name for t in self.tables}:
            raise PolicyError(f'No table named "{name}"')

        _logger.debug("Selecting table %s", name)
        self.table = name
        self.limit = self.default_limit
        self.editor = None
        self.tab = TAB_DATA
        try:
            self.reload()
        except SqliteditError:
            # drop the previous table's rows and keys
            self.columns = []
            self.key_columns = []
            self.rows = []
            raise

    def switch_tab(self, tab: str) -> None:
        if tab not in (TAB_DATA, TAB_STRUCTURE):
            raise ValueError(f"Unknown tab {tab!r}")
        self.tab = tab

    # ------------------------------------------------------------------
    # Data grid
    # ------------------------------------------------------------------
    def _require_table(self) -> str:
        if self.table is None:
            raise PolicyError("Select a table first")
        return self.table

    def set_limit(self, limit: Optional[int]) -> None:
        """Change the row limit (``None`` fetches every row) and reload."""
        previous, self.limit = self.limit, limit
        if self.table is None:
            return
        try:
            self.reload()
        except SqliteditError:
            self.limit = previous
            raise

    def reload(self) -> None:
        """Re-read structure and rows of the current table."""
        table = self._require_table()
        columns = describe_columns(self.db, table)
        rows = load_rows(self.db, table, self.limit, columns=columns)
        self.columns = columns
        self.key_columns = primary_key_columns(columns)
        self.rows = rows

    @property
    def editable(self) -> bool:
        return bool(self.key_columns)

    # ------------------------------------------------------------------
    # Row editor
    # ------------------------------------------------------------------
    def open_insert(self) -> RowEditor:
        editor = RowEditor(self.db, self._require_table(), strict=self.strict)
        editor.open_for_insert()
        self.editor = editor
        return editor

    def open_edit(self, row: GridRow) -> RowEditor:
        table = self._require_table()
        if not self.key_columns:
            raise PolicyError(f'Table "{table}" has no primary key; rows cannot be updated')
        editor = RowEditor(self.db, table, strict=self.strict)
        editor.open_for_edit(row)
        self.editor = editor
        return editor

    def save(self, values: Mapping[str, str]) -> SaveOutcome:
        if self.editor is None or not self.editor.is_open:
            raise PolicyError("The editor is not open")
        try:
            outcome = self.editor.save(values)
        except PolicyError:
            # the grid may be showing a row that is gone
            self.reload()
            raise
        self.editor = None
        self._after_write()
        return outcome

    def cancel_edit(self) -> None:
        if self.editor is not None:
            self.editor.cancel()
        self.editor = None

    def delete(self, row: GridRow, *, confirmed: bool) -> int:
        removed = delete_row(self.db, self._require_table(), row, confirmed=confirmed)
        self._after_write()
        return removed

    def _after_write(self) -> None:
        self.revision += 1
        self.reload()
        self.refresh_tables()

    # ------------------------------------------------------------------
    # Export / lifecycle
    # ------------------------------------------------------------------
    def export(self) -> bytes:
        """Snapshot of the database, re-serialized only after a write through this session."""
        if self._export_cache is None or self._export_cache[0] != self.revision:
            self._export_cache = (self.revision, self.db.export())
        return self._export_cache[1]

    def row_counts(self) -> Dict[str, int]:
        return {t.name: t.row_count for t in self.tables}

    def close(self) -> None:
        _logger.info("Closing %s", self.file_name)
        self.editor = None
        self.db.close()
