from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Callable

import pytest

from sqlitedit.engine import Database

USERS_SCHEMA = """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL
    );
    INSERT INTO users (id, name) VALUES (1, 'Alice');
"""

SHOP_SCHEMA = """
    CREATE TABLE products (
        sku TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        price REAL DEFAULT 0.0,
        stock INTEGER DEFAULT 0,
        note TEXT DEFAULT 'n/a'
    );
    CREATE TABLE order_lines (
        order_id INTEGER NOT NULL,
        line_no INTEGER NOT NULL,
        sku TEXT,
        qty INTEGER,
        PRIMARY KEY (line_no, order_id)
    );
    CREATE TABLE audit_log (
        happened_at TEXT,
        message TEXT
    );
    CREATE TABLE counters (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        label TEXT
    );
    INSERT INTO products VALUES ('A-1', 'Anvil', 12.5, 3, NULL);
    INSERT INTO products VALUES ('B-2', 'Bucket', 4.0, 10, 'blue');
    INSERT INTO order_lines VALUES (100, 1, 'A-1', 2);
    INSERT INTO order_lines VALUES (100, 2, 'B-2', 1);
    INSERT INTO audit_log VALUES ('2024-01-01', 'created');
    INSERT INTO audit_log VALUES ('2024-01-02', 'updated');
    INSERT INTO counters (label) VALUES ('first');
"""


@pytest.fixture()
def make_db_bytes(tmp_path: Path) -> Callable[[str], bytes]:
    """Build a SQLite file from a SQL script and return its bytes."""
    counter = {"n": 0}

    def _make(script: str) -> bytes:
        counter["n"] += 1
        path = tmp_path / f"fixture_{counter['n']}.db"
        conn = sqlite3.connect(str(path))
        try:
            conn.executescript(script)
            conn.commit()
        finally:
            conn.close()
        return path.read_bytes()

    return _make


@pytest.fixture()
def users_db(make_db_bytes) -> Database:
    db = Database.from_bytes(make_db_bytes(USERS_SCHEMA), name="users.db")
    yield db
    db.close()


@pytest.fixture()
def shop_db(make_db_bytes) -> Database:
    db = Database.from_bytes(make_db_bytes(SHOP_SCHEMA), name="shop.sqlite")
    yield db
    db.close()


@pytest.fixture()
def shop_file(tmp_path: Path, make_db_bytes) -> Path:
    path = tmp_path / "shop.sqlite"
    path.write_bytes(make_db_bytes(SHOP_SCHEMA))
    return path


@pytest.fixture()
def shop_bytes(make_db_bytes) -> bytes:
    return make_db_bytes(SHOP_SCHEMA)


@pytest.fixture()
def users_bytes(make_db_bytes) -> bytes:
    return make_db_bytes(USERS_SCHEMA)
