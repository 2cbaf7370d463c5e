"""Where the per-browser-session objects live in ``st.session_state``."""

from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from sqlitedit.viewer import Session

_logger = logging.getLogger(__name__)

_SESSION_KEY = "_sqlitedit_session"
_UPLOAD_GEN_KEY = "_sqlitedit_upload_gen"
_FORM_GEN_KEY = "_sqlitedit_form_gen"


def get_session() -> Optional[Session]:
    return st.session_state.get(_SESSION_KEY)


def set_session(session: Session) -> None:
    old = get_session()
    if old is not None and old is not session:
        old.close()
    st.session_state[_SESSION_KEY] = session


def close_session() -> None:
    """Drop the open database and reset the uploader widget."""
    session = st.session_state.pop(_SESSION_KEY, None)
    if session is not None:
        session.close()
    st.session_state[_UPLOAD_GEN_KEY] = upload_generation() + 1


def upload_generation() -> int:
    return int(st.session_state.get(_UPLOAD_GEN_KEY, 0))


def form_generation() -> int:
    return int(st.session_state.get(_FORM_GEN_KEY, 0))


def next_form() -> int:
    """Bump the form generation so freshly opened forms get new widget keys."""
    gen = form_generation() + 1
    st.session_state[_FORM_GEN_KEY] = gen
    return gen
