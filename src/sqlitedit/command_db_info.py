from __future__ import annotations

from pathlib import Path

import click

from .engine import Database
from .exceptions import SqliteditError
from .viewer import describe_columns, filter_tables, list_tables

_db_argument = click.argument(
    "db_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def _open(db_path: Path) -> Database:
    try:
        return Database.from_path(db_path)
    except (FileNotFoundError, ValueError, SqliteditError) as exc:
        raise click.ClickException(str(exc)) from exc


@click.command(name="tables")
@_db_argument
@click.option("--filter", "query", default="", help="Only show tables whose name contains this text.")
def tables_cmd(db_path: Path, query: str) -> None:
    """List the tables of DB_PATH with their row counts."""
    with _open(db_path) as db:
        try:
            tables = filter_tables(list_tables(db), query)
        except SqliteditError as exc:
            raise click.ClickException(str(exc)) from exc

    click.echo(f"SQLite DB: {db_path}")
    if not tables:
        click.echo("No tables found.")
        return

    click.echo("Tables:")
    for t in tables:
        click.echo(f"  - {t.name}: {t.row_count} rows")


@click.command(name="columns")
@_db_argument
@click.argument("table")
def columns_cmd(db_path: Path, table: str) -> None:
    """Describe the columns of TABLE in DB_PATH."""
    with _open(db_path) as db:
        columns = describe_columns(db, table)

    if not columns:
        raise click.ClickException(f"No column information for table {table!r}")

    for c in columns:
        flags = []
        if c.is_primary_key:
            flags.append("PK")
        if c.not_null:
            flags.append("NOT NULL")
        if c.default_value is not None:
            flags.append(f"DEFAULT {c.default_value}")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"{c.name} {c.declared_type or '(none)'}{suffix}")
