from __future__ import annotations

import streamlit as st

from sqlitedit.exceptions import SqliteditError
from sqlitedit.viewer import EditorMode, FormField, Session
from sqlitedit.viewer_app.services import feedback, state


def _field_label(field: FormField) -> str:
    label = field.name
    if field.column.is_primary_key:
        label += " 🔑"
    if field.column.declared_type:
        label += f"  ({field.column.declared_type})"
    return label


def render_editor_form(session: Session) -> None:
    """Insert/edit form generated from the table's column descriptors."""
    editor = session.editor
    if editor is None or not editor.is_open:
        return

    is_edit = editor.mode is EditorMode.EDIT
    gen = state.form_generation()

    with st.container(border=True):
        st.subheader("Edit row" if is_edit else "Insert row")
        if is_edit and editor.original is not None:
            st.caption(f"Editing {editor.original.label()}")

        with st.form(key=f"row_editor_{gen}"):
            values: dict[str, str] = {}
            cols = st.columns(2)
            for i, field in enumerate(editor.fields):
                with cols[i % 2]:
                    values[field.name] = st.text_input(
                        _field_label(field),
                        value=field.value,
                        placeholder=field.placeholder,
                        key=f"field_{gen}_{field.column.cid}",
                    )
                    if field.missing_required:
                        st.caption(":red[This field cannot be empty]")

            c_save, c_cancel = st.columns([1, 1])
            with c_save:
                save = st.form_submit_button("Save", type="primary", use_container_width=True)
            with c_cancel:
                cancel = st.form_submit_button("Cancel", use_container_width=True)

    if cancel:
        session.cancel_edit()
        st.rerun()

    if save:
        try:
            outcome = session.save(values)
        except SqliteditError as exc:
            feedback.report(exc, "Saving row")
            st.rerun()
        else:
            feedback.notify(outcome.message, "success" if outcome.changed else "warning")
            st.rerun()
