"""Helpers for listing and filtering the tables of an open database."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from sqlitedit.engine import Database
from sqlitedit.exceptions import EngineError

from .sql import count_rows

_logger = logging.getLogger(__name__)

_LIST_TABLES_SQL = (
    "SELECT name FROM sqlite_master "
    "WHERE type='table' AND name NOT LIKE 'sqlite_%' "
    "ORDER BY name"
)


@dataclass(frozen=True)
class TableSummary:
    """Summary information about a table in the SQLite database."""

    name: str
    row_count: int


def table_names(db: Database) -> List[str]:
    return [name for (name,) in db.query(_LIST_TABLES_SQL).rows]


def row_count(db: Database, table: str) -> int:
    """Row count of ``table``; 0 if the engine cannot count it (e.g. a broken virtual table)."""
    sql, params = count_rows(table)
    try:
        return int(db.query(sql, params).scalar(0) or 0)
    except EngineError as exc:
        _logger.warning("Could not count rows of %s: %s", table, exc)
        return 0


def list_tables(db: Database) -> List[TableSummary]:
    """Return user tables sorted by name, with row counts; ``sqlite_*`` tables are skipped."""
    return [TableSummary(name=name, row_count=row_count(db, name)) for name in table_names(db)]


def filter_tables(tables: Iterable[TableSummary], query: str) -> List[TableSummary]:
    """Case-insensitive substring match on the table name. The input is not modified."""
    needle = (query or "").lower()
    if not needle:
        return list(tables)
    return [t for t in tables if needle in t.name.lower()]
