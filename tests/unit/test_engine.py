from __future__ import annotations

from pathlib import Path

import pytest

from sqlitedit.engine import Database, QueryResult, is_supported_filename
from sqlitedit.exceptions import EngineError


def test_query_returns_columns_and_rows(users_db: Database) -> None:
    result = users_db.query("SELECT id, name FROM users")

    assert result.columns == ["id", "name"]
    assert result.rows == [(1, "Alice")]
    assert result.records() == [{"id": 1, "name": "Alice"}]


def test_scalar_default_for_empty_result() -> None:
    assert QueryResult(columns=["x"], rows=[]).scalar(default=7) == 7


def test_run_returns_affected_rows(users_db: Database) -> None:
    assert users_db.run("UPDATE users SET name = ? WHERE id = ?", ("Alicia", 1)) == 1
    assert users_db.query("SELECT name FROM users").scalar() == "Alicia"


def test_sql_errors_are_wrapped(users_db: Database) -> None:
    with pytest.raises(EngineError) as excinfo:
        users_db.query("SELECT * FROM no_such_table")
    assert "no_such_table" in str(excinfo.value)
    assert excinfo.value.__cause__ is not None


def test_constraint_violation_is_engine_error(users_db: Database) -> None:
    with pytest.raises(EngineError):
        users_db.run("INSERT INTO users (id, name) VALUES (?, ?)", (1, "Duplicate"))


def test_garbage_bytes_fail_to_open() -> None:
    with pytest.raises(EngineError):
        Database.from_bytes(b"this is definitely not a sqlite database" * 50, name="junk.db")


def test_transaction_rolls_back_on_error(users_db: Database) -> None:
    with pytest.raises(EngineError):
        with users_db.transaction():
            users_db.run("DELETE FROM users WHERE id = ?", (1,))
            users_db.run("INSERT INTO users (id, name) VALUES (?, ?)", (2, None))

    assert users_db.query("SELECT id, name FROM users").rows == [(1, "Alice")]


def test_transaction_commits(users_db: Database) -> None:
    with users_db.transaction():
        users_db.run("INSERT INTO users (id, name) VALUES (?, ?)", (2, "Bob"))
        users_db.run("INSERT INTO users (id, name) VALUES (?, ?)", (3, "Cara"))

    assert users_db.query("SELECT COUNT(*) FROM users").scalar() == 3


def test_export_reflects_changes_and_reopens(users_db: Database) -> None:
    users_db.run("INSERT INTO users (id, name) VALUES (?, ?)", (2, "Bob"))

    data = users_db.export()
    assert data.startswith(b"SQLite format 3\x00")

    with Database.from_bytes(data, name="copy.db") as copy:
        assert copy.query("SELECT name FROM users ORDER BY id").rows == [("Alice",), ("Bob",)]


def test_from_path(shop_file: Path) -> None:
    with Database.from_path(shop_file) as db:
        assert db.name == "shop.sqlite"
        assert db.query("SELECT COUNT(*) FROM products").scalar() == 2


def test_from_path_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Database.from_path(tmp_path / "missing.db")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("app.db", True),
        ("APP.SQLITE", True),
        ("data.sqlite3", True),
        ("notes.txt", False),
        ("db", False),
        ("", False),
    ],
)
def test_is_supported_filename(name: str, expected: bool) -> None:
    assert is_supported_filename(name) is expected
