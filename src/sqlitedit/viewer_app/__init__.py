"""Streamlit front end for the SQLite editor."""
