"""Fetching and rendering one page of table rows."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from sqlitedit.engine import Database

from .schema import ColumnDescriptor, describe_columns, primary_key_columns
from .sql import key_of, select_rows

NULL_MARKER = "NULL"


@dataclass(frozen=True)
class GridRow:
    """A fetched row plus the key values captured when it was read.

    Edits and deletes target ``key``, never the row's position on screen.
    ``key`` is empty for tables without a primary key.
    """

    values: Dict[str, Any]
    key: Dict[str, Any] = field(default_factory=dict)

    def label(self) -> str:
        if not self.key:
            return "(no key)"
        return ", ".join(f"{c}={format_cell(v)}" for c, v in self.key.items())


def load_rows(
    db: Database,
    table: str,
    limit: Optional[int] = 100,
    columns: Optional[Sequence[ColumnDescriptor]] = None,
) -> List[GridRow]:
    """Run ``SELECT * FROM <table> [LIMIT n]``; ``limit=None`` fetches everything."""
    if columns is None:
        columns = describe_columns(db, table)
    key_columns = primary_key_columns(columns)

    sql, params = select_rows(table, limit)
    result = db.query(sql, params)
    return [
        GridRow(values=record, key=key_of(record, key_columns)) for record in result.records()
    ]


def format_cell(value: Any) -> str:
    """Plain display text for a cell value (not escaped)."""
    if value is None:
        return NULL_MARKER
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<BLOB {len(bytes(value))} bytes>"
    return str(value)


def _header_cell(name: str, col: Optional[ColumnDescriptor]) -> str:
    badge = '<span class="sqe-pk">PK</span>' if col is not None and col.is_primary_key else ""
    col_type = html.escape(col.declared_type) if col is not None else ""
    return (
        f"<th>{html.escape(name)}{badge}"
        f'<span class="sqe-type">{col_type}</span></th>'
    )


def _body_cell(value: Any) -> str:
    if value is None:
        return f'<td><span class="sqe-null">{NULL_MARKER}</span></td>'
    return f"<td>{html.escape(format_cell(value))}</td>"


def render_grid_html(
    rows: Sequence[GridRow],
    columns: Sequence[ColumnDescriptor],
    *,
    table: str = "",
) -> str:
    """Render ``rows`` as an HTML table.

    Every name and value coming from the loaded file is escaped before it is
    placed in the markup. NULLs get their own marker so they cannot be mistaken
    for the string ``"NULL"``.
    """
    if not rows:
        caption = f" {html.escape(table)}" if table else ""
        return f'<div class="sqe-empty">Table{caption} is empty</div>'

    by_name = {c.name: c for c in columns}
    names = list(rows[0].values.keys()) or [c.name for c in columns]

    head = "".join(_header_cell(n, by_name.get(n)) for n in names)
    body_rows = []
    for i, row in enumerate(rows, start=1):
        cells = "".join(_body_cell(row.values.get(n)) for n in names)
        body_rows.append(f'<tr><td class="sqe-rownum">{i}</td>{cells}</tr>')

    return (
        '<div class="sqe-grid"><table>'
        f'<thead><tr><th class="sqe-rownum">#</th>{head}</tr></thead>'
        f"<tbody>{''.join(body_rows)}</tbody>"
        "</table></div>"
    )


def rows_to_frame(rows: Sequence[GridRow], columns: Sequence[ColumnDescriptor]) -> pd.DataFrame:
    """The loaded page as a DataFrame (column order follows the table definition)."""
    names = [c.name for c in columns]
    if rows and not names:
        names = list(rows[0].values.keys())
    return pd.DataFrame([r.values for r in rows], columns=names)


GRID_CSS = """
<style>
  .sqe-grid { max-height: 560px; overflow: auto; border: 1px solid #e5e7eb; border-radius: 8px; }
  .sqe-grid table { border-collapse: collapse; width: 100%; font-size: 12px; }
  .sqe-grid th { position: sticky; top: 0; background: #f9fafb; text-align: left; padding: 6px 10px; }
  .sqe-grid td { padding: 4px 10px; border-top: 1px solid #f3f4f6; max-width: 320px;
                 overflow: hidden; text-overflow: ellipsis; white-space: nowrap; }
  .sqe-rownum { color: #9ca3af; text-align: center; }
  .sqe-null { color: #d1d5db; font-style: italic; }
  .sqe-pk { margin-left: 6px; font-size: 9px; color: #1d4ed8; background: #dbeafe;
            padding: 1px 4px; border-radius: 4px; }
  .sqe-type { display: block; font-size: 10px; color: #9ca3af; font-weight: normal; }
  .sqe-empty { padding: 48px; text-align: center; color: #9ca3af; }
</style>
"""
