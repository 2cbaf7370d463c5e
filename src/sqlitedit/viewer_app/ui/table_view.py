from __future__ import annotations

import html
from typing import Sequence

import pandas as pd
import streamlit as st

from sqlitedit.exceptions import SqliteditError
from sqlitedit.viewer import TAB_DATA, TAB_STRUCTURE, GridRow, Session
from sqlitedit.viewer.grid import render_grid_html, rows_to_frame
from sqlitedit.viewer.sql import quote_identifier
from sqlitedit.viewer_app.config import limit_choices, limit_label
from sqlitedit.viewer_app.services import feedback, state
from sqlitedit.viewer_app.ui.editor_form import render_editor_form

_TAB_LABELS = {TAB_DATA: "Data", TAB_STRUCTURE: "Structure"}


def structure_frame(session: Session) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Column": c.name,
                "Type": c.declared_type,
                "Not null": "✔" if c.not_null else "",
                "Default": "None" if c.default_value is None else str(c.default_value),
                "Primary key": "Yes" if c.is_primary_key else "No",
            }
            for c in session.columns
        ]
    )


def _render_controls(session: Session) -> None:
    choices = limit_choices(session.default_limit, session.limit)
    labels = [label for (label, _value) in choices]
    index = labels.index(limit_label(session.limit))

    c_limit, c_refresh, c_add, _ = st.columns([2, 1, 1, 4])
    with c_limit:
        choice = st.selectbox(
            "Rows",
            labels,
            index=index,
            label_visibility="collapsed",
        )
    new_limit = dict(choices)[choice]
    if new_limit != session.limit:
        try:
            session.set_limit(new_limit)
        except SqliteditError as exc:
            feedback.report(exc, "Loading rows")

    with c_refresh:
        if st.button("Refresh", use_container_width=True, key="refresh_table"):
            try:
                session.reload()
                session.refresh_tables()
            except SqliteditError as exc:
                feedback.report(exc, "Refreshing table")
            st.rerun()
    with c_add:
        if st.button("Add row", use_container_width=True, key="add_row"):
            try:
                session.open_insert()
                state.next_form()
            except SqliteditError as exc:
                feedback.report(exc, "Opening editor")
            st.rerun()


def row_choices(rows: Sequence[GridRow]) -> dict[int, str]:
    """Picker options by grid position; labels may repeat, positions never do."""
    return {i: row.label() for i, row in enumerate(rows)}


def _render_row_actions(session: Session) -> None:
    if not session.rows:
        return
    if not session.editable:
        st.info(
            "This table has no primary key. Rows can be inserted, "
            "but not edited or deleted from here."
        )
        return

    rows = list(session.rows)
    choices = row_choices(rows)
    c_pick, c_edit, c_del, c_confirm = st.columns([4, 1, 1, 2])
    with c_pick:
        picked = st.selectbox(
            "Row",
            list(choices),
            format_func=choices.__getitem__,
            key=f"row_pick_{session.table}",
            label_visibility="collapsed",
        )
    with c_confirm:
        confirmed = st.checkbox(
            "Confirm delete (cannot be undone)", key=f"confirm_delete_{session.table}"
        )

    if picked is None or picked >= len(rows):
        return
    row = rows[picked]

    with c_edit:
        if st.button("Edit", use_container_width=True, key="edit_row"):
            try:
                session.open_edit(row)
                state.next_form()
            except SqliteditError as exc:
                feedback.report(exc, "Opening editor")
            st.rerun()
    with c_del:
        if st.button("Delete", use_container_width=True, key="delete_row"):
            try:
                session.delete(row, confirmed=confirmed)
            except SqliteditError as exc:
                feedback.report(exc, "Deleting row")
            else:
                feedback.notify("Row deleted", "success")
            st.rerun()


def render_data_tab(session: Session) -> None:
    _render_controls(session)
    render_editor_form(session)

    st.markdown(
        render_grid_html(session.rows, session.columns, table=session.table or ""),
        unsafe_allow_html=True,
    )

    total = session.row_counts().get(session.table or "")
    if session.rows and total is not None:
        st.caption(f"Showing {len(session.rows)} of {total} row(s)")

    _render_row_actions(session)

    if session.rows:
        csv_bytes = rows_to_frame(session.rows, session.columns).to_csv(index=False)
        st.download_button(
            "Download page as CSV",
            data=csv_bytes,
            file_name=f"{session.table}.csv",
            mime="text/csv",
            key="download_csv",
        )


def render_structure_tab(session: Session) -> None:
    if not session.columns:
        st.info("No column information available for this table.")
        return
    st.dataframe(structure_frame(session), hide_index=True, width="stretch")
    st.caption(f"`PRAGMA table_info({quote_identifier(session.table or '')})`")


def render_table_view(session: Session) -> None:
    if session.table is None:
        st.info("Select a table in the sidebar to see its rows.")
        return

    st.markdown(f"### {html.escape(session.table)}")

    tab = st.radio(
        "View",
        [TAB_DATA, TAB_STRUCTURE],
        index=[TAB_DATA, TAB_STRUCTURE].index(session.tab),
        format_func=lambda t: _TAB_LABELS[t],
        horizontal=True,
        label_visibility="collapsed",
    )
    session.switch_tab(tab)

    if session.tab == TAB_DATA:
        render_data_tab(session)
    else:
        render_structure_tab(session)
