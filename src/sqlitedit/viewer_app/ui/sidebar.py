from __future__ import annotations

import streamlit as st

from sqlitedit.exceptions import SqliteditError
from sqlitedit.viewer import Session
from sqlitedit.viewer_app.services import feedback, state


def _render_export(session: Session) -> None:
    try:
        data = session.export()
    except SqliteditError as exc:
        feedback.report(exc, "Export")
        return

    st.sidebar.download_button(
        "Export",
        data=data,
        file_name=session.file_name or "database.db",
        mime="application/x-sqlite3",
        use_container_width=True,
        key="export_db",
    )


def render_sidebar(session: Session) -> None:
    sb = st.sidebar
    sb.header("Database")
    sb.markdown(f"**File:** `{session.file_name}`")
    sb.caption(f"{len(session.tables)} table(s)")

    cols = sb.columns(2)
    with cols[0]:
        _render_export(session)
    with cols[1]:
        if st.button("Close", use_container_width=True, key="close_db"):
            state.close_session()
            st.rerun()

    sb.divider()
    session.search = sb.text_input(
        "Search tables",
        value=session.search,
        placeholder="Filter by name",
        key="table_search",
    )

    visible = session.visible_tables()
    if not visible:
        sb.caption("No matching tables" if session.tables else "No tables in this database")
        return

    for table in visible:
        active = table.name == session.table
        if sb.button(
            f"{table.name}  ·  {table.row_count}",
            key=f"table_{table.name}",
            type="primary" if active else "secondary",
            use_container_width=True,
        ):
            try:
                session.select_table(table.name)
            except SqliteditError as exc:
                feedback.report(exc, "Loading table")
            st.rerun()
