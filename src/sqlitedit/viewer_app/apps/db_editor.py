from __future__ import annotations

import logging

import streamlit as st

from sqlitedit.env_loader import load_env_files
from sqlitedit.logging_config import configure_logging
from sqlitedit.viewer.grid import GRID_CSS
from sqlitedit.viewer_app.config import load_settings
from sqlitedit.viewer_app.services import feedback, state
from sqlitedit.viewer_app.ui.sidebar import render_sidebar
from sqlitedit.viewer_app.ui.table_view import render_table_view
from sqlitedit.viewer_app.ui.welcome import render_welcome

_logger = logging.getLogger(__name__)

_PAGE_CSS = """
<style>
  html, body, [class*="css"]  { font-size: 13px; }
  .block-container { padding-top: 1rem; padding-bottom: 1rem; }
  section[data-testid="stSidebar"] .block-container { padding-top: 1rem; }
  section[data-testid="stSidebar"] button p { text-align: left; }
</style>
"""


def main() -> None:
    st.set_page_config(page_title="SQLite Editor", layout="wide")
    st.markdown(_PAGE_CSS + GRID_CSS, unsafe_allow_html=True)

    load_env_files(quiet=True)
    configure_logging(logging.INFO)

    # `sqlitedit view DB` hands the path over in SQLITEDIT_DB
    settings = load_settings()

    session = state.get_session()
    if session is None:
        session = render_welcome(settings)
        if session is not None:
            st.rerun()
        feedback.flush()
        return

    render_sidebar(session)
    render_table_view(session)
    feedback.flush()


if __name__ == "__main__":
    main()
