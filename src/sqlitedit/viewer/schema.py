"""Column metadata helpers built on ``PRAGMA table_info``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from sqlitedit.engine import Database
from sqlitedit.exceptions import EngineError

from .sql import quote_identifier

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnDescriptor:
    """One column of a table as reported by the engine.

    ``pk_position`` is the 1-based position of the column inside the primary key
    (0 when the column is not part of it).
    """

    name: str
    declared_type: str = ""
    not_null: bool = False
    default_value: Any = None
    is_primary_key: bool = False
    cid: int = 0
    pk_position: int = 0

    @property
    def affinity(self) -> str:
        return (self.declared_type or "").upper()


def describe_columns(db: Database, table: str) -> List[ColumnDescriptor]:
    """Return the columns of ``table`` in declaration order.

    If the engine refuses the pragma the schema is treated as unknown and an
    empty list is returned.
    """
    try:
        result = db.query(f"PRAGMA table_info({quote_identifier(table)})")
    except EngineError as exc:
        _logger.warning("Could not describe table %s: %s", table, exc)
        return []

    columns: List[ColumnDescriptor] = []
    for cid, name, col_type, not_null, default_value, pk in result.rows:
        columns.append(
            ColumnDescriptor(
                name=name,
                declared_type=col_type or "",
                not_null=bool(not_null),
                default_value=default_value,
                is_primary_key=bool(pk),
                cid=int(cid),
                pk_position=int(pk or 0),
            )
        )
    return columns


def primary_key_columns(columns: Sequence[ColumnDescriptor]) -> List[str]:
    """Names of the key columns, in key order."""
    keyed = [c for c in columns if c.is_primary_key]
    return [c.name for c in sorted(keyed, key=lambda c: c.pk_position)]


def column_info(columns: Sequence[ColumnDescriptor], name: str) -> ColumnDescriptor:
    """Look up ``name``; unknown columns are reported as plain TEXT."""
    found = find_column(columns, name)
    if found is None:
        return ColumnDescriptor(name=name, declared_type="TEXT")
    return found


def find_column(columns: Sequence[ColumnDescriptor], name: str) -> Optional[ColumnDescriptor]:
    for col in columns:
        if col.name == name:
            return col
    return None
