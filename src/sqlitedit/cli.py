from __future__ import annotations

import logging
from typing import Optional, cast

import click
from click import Command

from . import __version__
from .command_db_info import columns_cmd, tables_cmd
from .command_viewer import viewer_cmd
from .env_loader import load_env_files
from .logging_config import configure_logging

_logger = logging.getLogger(__name__)

# Load .env very early, so everything else sees env vars
load_env_files(quiet=True)


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="sqlitedit")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int]) -> None:
    """SQLite editor CLI. Use 'view' to open the browser editor."""
    configure_logging(loglevel)
    _logger.debug("CLI start, version=%s", __version__)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Cast ensures IDE knows of the Command type
cli.add_command(cast(Command, viewer_cmd))
cli.add_command(cast(Command, tables_cmd))
cli.add_command(cast(Command, columns_cmd))
