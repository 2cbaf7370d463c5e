"""CLI command to launch the Streamlit editor."""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional

import click

from .engine import is_supported_filename
from .viewer_app.config import ENV_DB_PATH

_logger = logging.getLogger(__name__)


@click.command(name="view")
@click.argument(
    "db_path",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--port", type=int, default=8501, show_default=True)
@click.option("--headless/--no-headless", default=False, help="Do not open a browser window.")
def viewer_cmd(db_path: Optional[Path], port: int, headless: bool) -> None:
    """Launch the browser editor, optionally offering DB_PATH on the start screen."""
    if db_path is not None and not is_supported_filename(db_path.name):
        raise click.ClickException(
            f"{db_path.name} is not a .db, .sqlite or .sqlite3 file"
        )

    if importlib.util.find_spec("streamlit") is None:
        raise click.ClickException(
            "Streamlit is not installed in this environment. "
            "Install it with 'pip install streamlit' and try again."
        )

    try:
        mod = importlib.import_module("sqlitedit.viewer_app.apps.db_editor")
    except ImportError as exc:  # pragma: no cover - packaging issue
        raise click.ClickException(
            "Could not import sqlitedit.viewer_app.apps.db_editor; is sqlitedit installed correctly?"
        ) from exc

    script_path = Path(inspect.getfile(mod))

    env = os.environ.copy()
    if db_path is not None:
        env[ENV_DB_PATH] = str(db_path.resolve())

    cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(script_path),
        "--server.port",
        str(port),
        "--server.headless",
        "true" if headless else "false",
    ]

    click.echo(f"Launching SQLite editor on port {port} ...")
    _logger.debug("Running %s", cmd)
    try:
        # Streamlit reports its own errors; pass its exit code through.
        raise SystemExit(subprocess.call(cmd, env=env))
    except OSError as exc:  # pragma: no cover - runtime environment issue
        raise click.ClickException(f"Failed to launch Streamlit: {exc}") from exc
