from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import streamlit as st

from sqlitedit.engine import is_supported_filename
from sqlitedit.exceptions import EngineError
from sqlitedit.viewer import Session
from sqlitedit.viewer_app.config import UPLOAD_TYPES, Settings
from sqlitedit.viewer_app.services import feedback, state

_logger = logging.getLogger(__name__)


def _open(data: bytes, name: str, settings: Settings) -> Optional[Session]:
    if not is_supported_filename(name):
        feedback.notify("Please choose a .db, .sqlite or .sqlite3 file", "error")
        return None

    with st.spinner(f"Loading {name} ..."):
        try:
            session = Session.open(
                data,
                name,
                default_limit=settings.default_limit,
                strict=settings.strict_types,
            )
        except EngineError as exc:
            feedback.show_error(f"Failed to load database: {exc}")
            return None

    state.set_session(session)
    feedback.notify("Database loaded", "success")
    return session


def render_welcome(settings: Settings) -> Optional[Session]:
    """Landing screen: pick or drop a database file. Returns the new session, if any."""
    st.title("SQLite Editor")
    st.caption(
        "Open a SQLite database to browse and edit it. "
        "Changes are made to an in-memory copy; use **Export** to download the result."
    )

    uploaded = st.file_uploader(
        "Drop a database file here or click to browse",
        type=UPLOAD_TYPES,
        key=f"db_upload_{state.upload_generation()}",
    )
    if uploaded is not None:
        return _open(uploaded.getvalue(), uploaded.name, settings)

    if settings.db_path:
        path = Path(settings.db_path)
        st.divider()
        st.markdown(f"Database given on the command line: `{path}`")
        if st.button("Open", key="open_cli_db"):
            if not path.is_file():
                feedback.show_error(f"Database not found: {path}")
                return None
            return _open(path.read_bytes(), path.name, settings)

    return None
