"""SQL text assembly for row reads and writes.

Values always travel as ``?`` parameters. SQLite cannot parameterize identifiers,
so table and column names are quoted here instead.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

Statement = Tuple[str, List[Any]]


def quote_identifier(name: str) -> str:
    """Quote a table/column name, doubling any embedded double quotes."""
    return '"' + str(name).replace('"', '""') + '"'


def _where(key: Dict[str, Any]) -> Tuple[str, List[Any]]:
    if not key:
        raise ValueError("A row key needs at least one column")
    clause = " AND ".join(f"{quote_identifier(c)} = ?" for c in key)
    return clause, list(key.values())


def select_rows(table: str, limit: Optional[int] = None) -> Statement:
    sql = f"SELECT * FROM {quote_identifier(table)}"
    params: List[Any] = []
    if limit is not None:
        sql += " LIMIT ?"
        params.append(int(limit))
    return sql, params


def count_rows(table: str) -> Statement:
    return f"SELECT COUNT(*) FROM {quote_identifier(table)}", []


def insert_row(table: str, values: Dict[str, Any]) -> Statement:
    if not values:
        return f"INSERT INTO {quote_identifier(table)} DEFAULT VALUES", []
    cols = ", ".join(quote_identifier(c) for c in values)
    placeholders = ", ".join("?" for _ in values)
    return (
        f"INSERT INTO {quote_identifier(table)} ({cols}) VALUES ({placeholders})",
        list(values.values()),
    )


def update_row(table: str, values: Dict[str, Any], key: Dict[str, Any]) -> Statement:
    if not values:
        raise ValueError("UPDATE needs at least one column to set")
    assignments = ", ".join(f"{quote_identifier(c)} = ?" for c in values)
    where, where_params = _where(key)
    return (
        f"UPDATE {quote_identifier(table)} SET {assignments} WHERE {where}",
        [*values.values(), *where_params],
    )


def delete_row(table: str, key: Dict[str, Any]) -> Statement:
    where, where_params = _where(key)
    return f"DELETE FROM {quote_identifier(table)} WHERE {where}", where_params


def key_of(row: Dict[str, Any], key_columns: Sequence[str]) -> Dict[str, Any]:
    """Return the ``{column: value}`` key of ``row`` for ``key_columns``."""
    return {c: row.get(c) for c in key_columns}
