"""Transient notifications that survive ``st.rerun()``."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import streamlit as st

from sqlitedit.exceptions import EngineError, SqliteditError

_logger = logging.getLogger(__name__)

_FEEDBACK_KEY = "_sqlitedit_feedback"

_ICONS = {
    "success": "✅",
    "info": "ℹ️",
    "warning": "⚠️",
    "error": "❌",
}


@dataclass(frozen=True)
class Notice:
    message: str
    kind: str = "info"
    banner: bool = False


def _queue() -> list[Notice]:
    if _FEEDBACK_KEY not in st.session_state:
        st.session_state[_FEEDBACK_KEY] = []
    return st.session_state[_FEEDBACK_KEY]


def notify(message: str, kind: str = "info") -> None:
    """Queue a toast for the next render."""
    if kind not in _ICONS:
        kind = "info"
    _queue().append(Notice(message=message, kind=kind))


def show_error(message: str) -> None:
    """Queue an error banner; errors are also logged."""
    _logger.error(message)
    _queue().append(Notice(message=message, kind="error", banner=True))


def pending() -> list[Notice]:
    """Notices queued since the last flush."""
    return list(_queue())


def flush() -> None:
    """Render and clear everything queued so far."""
    notices = pending()
    _queue().clear()
    for notice in notices:
        if notice.banner:
            st.error(notice.message, icon=_ICONS["error"])
        else:
            st.toast(notice.message, icon=_ICONS[notice.kind])


def report(exc: SqliteditError, action: str) -> None:
    """Route a caught error to the right channel.

    Validation and policy problems are short toasts; engine failures get a banner.
    """
    if isinstance(exc, EngineError):
        show_error(f"{action} failed: {exc}")
    else:
        _logger.info("%s rejected: %s", action, exc)
        notify(str(exc), "error")
