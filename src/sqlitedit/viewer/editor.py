"""Row insert/edit/delete logic behind the editor form.

The form is generated from the table's column descriptors; every submitted value is
a string which is converted according to the column's declared type before it is
bound to the statement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlitedit.engine import Database
from sqlitedit.exceptions import PolicyError, ValidationError

from . import sql
from .grid import GridRow, format_cell
from .schema import ColumnDescriptor, column_info, describe_columns, primary_key_columns

_logger = logging.getLogger(__name__)

_REAL_MARKERS = ("REAL", "FLOAT", "DOUBLE")


class EditorMode(str, Enum):
    CLOSED = "closed"
    INSERT = "insert"
    EDIT = "edit"


@dataclass(frozen=True)
class FormField:
    """One input of the editor form."""

    column: ColumnDescriptor
    value: str = ""

    @property
    def name(self) -> str:
        return self.column.name

    @property
    def placeholder(self) -> str:
        return "required" if self.column.not_null else "NULL"

    @property
    def missing_required(self) -> bool:
        return self.column.not_null and not self.value.strip()


@dataclass(frozen=True)
class SaveOutcome:
    """What a save did. ``action`` is one of inserted/updated/rekeyed/unchanged."""

    action: str
    message: str
    key: Dict[str, Any] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return self.action != "unchanged"


def is_null_text(text: str) -> bool:
    stripped = (text or "").strip()
    return not stripped or stripped.upper() == "NULL"


def coerce_value(raw: Optional[str], column: ColumnDescriptor, *, strict: bool = False) -> Any:
    """Convert submitted text into the value bound for ``column``.

    Empty input and the literal ``NULL`` become ``None`` (rejected for NOT NULL
    columns). ``INT`` affinities parse as int and ``REAL``/``FLOAT``/``DOUBLE`` as
    float; when parsing fails the trimmed text is kept unless ``strict`` is set.
    """
    text = (raw or "").strip()
    if is_null_text(text):
        if column.not_null:
            raise ValidationError(column.name)
        return None

    affinity = column.affinity
    if "INT" in affinity:
        try:
            return int(text)
        except ValueError:
            if strict:
                raise ValidationError(column.name, "expects an integer value") from None
            return text
    if any(marker in affinity for marker in _REAL_MARKERS):
        try:
            return float(text)
        except ValueError:
            if strict:
                raise ValidationError(column.name, "expects a numeric value") from None
            return text
    return text


def default_text(value: Any) -> str:
    """Turn a declared default (SQL text from the pragma) into form text."""
    if value is None:
        return ""
    text = str(value)
    if len(text) >= 2 and text[0] == text[-1] == "'":
        return text[1:-1].replace("''", "'")
    return text


def _same_value(old: Any, new: Any) -> bool:
    if old is None or new is None:
        return old is None and new is None
    return str(old) == str(new)


class RowEditor:
    """Editor form state for one table: ``CLOSED -> OPEN(insert|edit) -> CLOSED``."""

    def __init__(self, db: Database, table: str, *, strict: bool = False) -> None:
        self.db = db
        self.table = table
        self.strict = strict
        self.mode = EditorMode.CLOSED
        self.original: Optional[GridRow] = None
        self.fields: List[FormField] = []

    @property
    def is_open(self) -> bool:
        return self.mode is not EditorMode.CLOSED

    def open_for_insert(self) -> List[FormField]:
        columns = describe_columns(self.db, self.table)
        self.mode = EditorMode.INSERT
        self.original = None
        self.fields = [FormField(column=c, value=default_text(c.default_value)) for c in columns]
        return self.fields

    def open_for_edit(self, row: GridRow) -> List[FormField]:
        columns = describe_columns(self.db, self.table)
        self.mode = EditorMode.EDIT
        self.original = row
        self.fields = []
        for col in columns:
            current = row.values.get(col.name)
            text = "" if current is None else format_cell(current)
            self.fields.append(FormField(column=col, value=text))
        return self.fields

    def cancel(self) -> None:
        self.mode = EditorMode.CLOSED
        self.original = None
        self.fields = []

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------
    def collect(self, values: Mapping[str, str], columns: Sequence[ColumnDescriptor]) -> Dict[str, Any]:
        """Validate and convert every submitted value; raises before anything is written."""
        data: Dict[str, Any] = {}
        for name, raw in values.items():
            col = column_info(columns, name)
            original = self.original.values.get(name) if self.original is not None else None
            if isinstance(original, (bytes, bytearray)) and raw == format_cell(original):
                # Untouched BLOB placeholder: keep the stored bytes.
                data[name] = original
                continue
            data[name] = coerce_value(raw, col, strict=self.strict)
        return data

    def save(self, values: Mapping[str, str]) -> SaveOutcome:
        if not self.is_open:
            raise PolicyError("The editor is not open")

        columns = describe_columns(self.db, self.table)
        key_columns = primary_key_columns(columns)

        if self.mode is EditorMode.EDIT and not key_columns:
            raise PolicyError(f'Table "{self.table}" has no primary key; rows cannot be updated')

        data = self.collect(values, columns)

        if self.mode is EditorMode.INSERT:
            outcome = self._insert(data, key_columns)
        else:
            outcome = self._update(data, key_columns)

        self.cancel()
        return outcome

    def _insert(self, data: Dict[str, Any], key_columns: Sequence[str]) -> SaveOutcome:
        stmt, params = sql.insert_row(self.table, data)
        self.db.run(stmt, params)
        _logger.info("Inserted row into %s", self.table)
        return SaveOutcome("inserted", "Row added", sql.key_of(data, key_columns))

    def _update(self, data: Dict[str, Any], key_columns: Sequence[str]) -> SaveOutcome:
        assert self.original is not None
        if list(self.original.key) == list(key_columns):
            old_key = dict(self.original.key)
        else:
            old_key = sql.key_of(self.original.values, key_columns)

        new_key = {c: data.get(c, old_key[c]) for c in key_columns}
        key_changed = any(not _same_value(old_key[c], new_key[c]) for c in key_columns)

        if key_changed:
            delete_stmt, delete_params = sql.delete_row(self.table, old_key)
            insert_stmt, insert_params = sql.insert_row(self.table, data)
            with self.db.transaction():
                if self.db.run(delete_stmt, delete_params) == 0:
                    raise PolicyError("The row no longer exists; reload the table and try again")
                self.db.run(insert_stmt, insert_params)
            _logger.info("Re-keyed row in %s: %r -> %r", self.table, old_key, new_key)
            return SaveOutcome("rekeyed", "Row updated (primary key changed)", new_key)

        updates = {c: v for c, v in data.items() if c not in key_columns}
        if not updates:
            return SaveOutcome("unchanged", "Nothing to update", old_key)

        stmt, params = sql.update_row(self.table, updates, old_key)
        if self.db.run(stmt, params) == 0:
            raise PolicyError("The row no longer exists; reload the table and try again")
        _logger.info("Updated row %r in %s", old_key, self.table)
        return SaveOutcome("updated", "Row updated", old_key)


def delete_row(db: Database, table: str, row: GridRow, *, confirmed: bool) -> int:
    """Delete ``row`` by its captured key. Returns the number of rows removed."""
    key_columns = primary_key_columns(describe_columns(db, table))
    if not key_columns:
        raise PolicyError(f'Table "{table}" has no primary key; rows cannot be deleted')
    if not confirmed:
        raise PolicyError("Deletion was not confirmed")

    key = dict(row.key) if list(row.key) == key_columns else sql.key_of(row.values, key_columns)
    stmt, params = sql.delete_row(table, key)
    removed = db.run(stmt, params)
    _logger.info("Deleted %d row(s) from %s where %r", removed, table, key)
    return removed
