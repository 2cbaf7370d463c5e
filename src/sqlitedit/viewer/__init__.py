"""Database browsing and row editing (no Streamlit imports here)."""

from .editor import (
    EditorMode,
    FormField,
    RowEditor,
    SaveOutcome,
    coerce_value,
    delete_row,
)
from .grid import GridRow, format_cell, load_rows, render_grid_html, rows_to_frame
from .schema import ColumnDescriptor, describe_columns, primary_key_columns
from .session import TAB_DATA, TAB_STRUCTURE, Session
from .sql import quote_identifier
from .tables import TableSummary, filter_tables, list_tables

__all__ = [
    "ColumnDescriptor",
    "describe_columns",
    "primary_key_columns",
    "TableSummary",
    "list_tables",
    "filter_tables",
    "GridRow",
    "load_rows",
    "format_cell",
    "render_grid_html",
    "rows_to_frame",
    "EditorMode",
    "FormField",
    "RowEditor",
    "SaveOutcome",
    "coerce_value",
    "delete_row",
    "Session",
    "TAB_DATA",
    "TAB_STRUCTURE",
    "quote_identifier",
]
