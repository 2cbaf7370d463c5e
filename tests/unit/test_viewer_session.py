from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from sqlitedit.exceptions import EngineError, PolicyError
from sqlitedit.viewer import TAB_DATA, TAB_STRUCTURE, GridRow, Session


def _row(session: Session, sku: str) -> GridRow:
    return next(r for r in session.rows if r.key == {"sku": sku})


@pytest.fixture()
def shop_session(shop_bytes) -> Session:
    session = Session.open(shop_bytes, "shop.sqlite")
    yield session
    session.close()


def test_open_lists_tables(shop_session: Session) -> None:
    assert shop_session.table is None
    assert [t.name for t in shop_session.tables] == [
        "audit_log",
        "counters",
        "order_lines",
        "products",
    ]


def test_open_rejects_non_database() -> None:
    with pytest.raises(EngineError):
        Session.open(b"not a database" * 100, "junk.db")


def test_select_table_loads_structure_and_rows(shop_session: Session) -> None:
    shop_session.switch_tab(TAB_STRUCTURE)

    shop_session.select_table("products")

    assert shop_session.table == "products"
    assert shop_session.tab == TAB_DATA
    assert shop_session.key_columns == ["sku"]
    assert [c.name for c in shop_session.columns][:2] == ["sku", "title"]
    assert len(shop_session.rows) == 2
    assert shop_session.editable


def test_select_unknown_table(shop_session: Session) -> None:
    with pytest.raises(PolicyError):
        shop_session.select_table("nope")


def test_select_table_resets_limit(shop_session: Session) -> None:
    shop_session.select_table("audit_log")
    shop_session.set_limit(1)
    assert len(shop_session.rows) == 1

    shop_session.select_table("products")
    assert shop_session.limit == 100

    shop_session.set_limit(None)
    assert len(shop_session.rows) == 2


def test_search_filters_visible_tables_only(shop_session: Session) -> None:
    shop_session.search = "ORDER"

    assert [t.name for t in shop_session.visible_tables()] == ["order_lines"]
    assert len(shop_session.tables) == 4


def test_unknown_tab(shop_session: Session) -> None:
    with pytest.raises(ValueError):
        shop_session.switch_tab("sql")


def test_insert_requires_selected_table(shop_session: Session) -> None:
    with pytest.raises(PolicyError):
        shop_session.open_insert()


def test_save_reloads_rows_and_counts(shop_session: Session) -> None:
    shop_session.select_table("products")
    shop_session.open_insert()

    outcome = shop_session.save({"sku": "C-3", "title": "Chisel"})

    assert outcome.action == "inserted"
    assert shop_session.editor is None
    assert len(shop_session.rows) == 3
    assert shop_session.row_counts()["products"] == 3


def test_save_without_open_editor(shop_session: Session) -> None:
    shop_session.select_table("products")
    with pytest.raises(PolicyError):
        shop_session.save({"sku": "X"})


def test_save_of_vanished_row_refreshes_grid(shop_session: Session) -> None:
    shop_session.select_table("products")
    shop_session.open_edit(_row(shop_session, "A-1"))
    shop_session.db.run("DELETE FROM products WHERE sku = 'A-1'")

    with pytest.raises(PolicyError):
        shop_session.save({"sku": "A-1", "title": "Anvil"})

    assert [r.key for r in shop_session.rows] == [{"sku": "B-2"}]


def test_edit_is_refused_for_keyless_table(shop_session: Session) -> None:
    shop_session.select_table("audit_log")
    assert not shop_session.editable

    with pytest.raises(PolicyError):
        shop_session.open_edit(shop_session.rows[0])


def test_delete_reloads_rows(shop_session: Session) -> None:
    shop_session.select_table("products")
    row = _row(shop_session, "B-2")

    assert shop_session.delete(row, confirmed=True) == 1
    assert [r.key for r in shop_session.rows] == [{"sku": "A-1"}]
    assert shop_session.row_counts()["products"] == 1


def test_cancel_edit(shop_session: Session) -> None:
    shop_session.select_table("products")
    shop_session.open_edit(shop_session.rows[0])

    shop_session.cancel_edit()

    assert shop_session.editor is None
    assert shop_session.row_counts()["products"] == 2


def test_users_scenario_through_session(users_bytes) -> None:
    session = Session.open(users_bytes, "users.db")
    session.select_table("users")

    session.open_edit(session.rows[0])
    session.save({"id": "2", "name": "Bob"})

    assert [r.values for r in session.rows] == [{"id": 2, "name": "Bob"}]
    assert session.row_counts() == {"users": 1}
    session.close()


def test_export_round_trip_preserves_tables_and_counts(shop_session: Session) -> None:
    data = shop_session.export()

    reopened = Session.open(data, "shop.sqlite")
    try:
        assert reopened.row_counts() == shop_session.row_counts()
    finally:
        reopened.close()


@pytest.fixture()
def unreadable_bytes(tmp_path: Path) -> bytes:
    """Table ``broken`` needs a SQL function that only the creating connection had."""
    path = tmp_path / "broken.db"
    conn = sqlite3.connect(str(path))
    try:
        conn.create_function("shout", 1, lambda v: str(v).upper(), deterministic=True)
        conn.executescript(
            """
            CREATE TABLE fine (id INTEGER PRIMARY KEY, name TEXT);
            INSERT INTO fine VALUES (1, 'from-fine');
            CREATE TABLE broken (
                id INTEGER PRIMARY KEY,
                x TEXT,
                loud TEXT GENERATED ALWAYS AS (shout(x))
            );
            INSERT INTO broken (id, x) VALUES (7, 'quiet');
            """
        )
        conn.commit()
    finally:
        conn.close()
    return path.read_bytes()


def test_unreadable_table_leaves_nothing_from_previous_table(unreadable_bytes: bytes) -> None:
    session = Session.open(unreadable_bytes, "broken.db")
    try:
        session.select_table("fine")
        assert session.rows[0].key == {"id": 1}

        with pytest.raises(EngineError):
            session.select_table("broken")

        assert session.table == "broken"
        assert session.rows == []
        assert session.columns == []
        assert not session.editable
        with pytest.raises(PolicyError):
            session.open_edit(GridRow(values={"id": 1, "name": "from-fine"}, key={"id": 1}))
    finally:
        session.close()


def test_failed_reload_keeps_previous_grid(shop_session: Session, monkeypatch) -> None:
    shop_session.select_table("products")
    before = list(shop_session.rows)

    def boom(*args, **kwargs):
        raise EngineError("disk I/O error")

    monkeypatch.setattr("sqlitedit.viewer.session.load_rows", boom)
    with pytest.raises(EngineError):
        shop_session.set_limit(1)

    assert shop_session.rows == before
    assert shop_session.key_columns == ["sku"]
    assert shop_session.limit == 100


def test_export_is_reused_until_next_write(shop_session: Session, monkeypatch) -> None:
    calls = []
    real_export = shop_session.db.export

    def counting_export() -> bytes:
        calls.append(1)
        return real_export()

    monkeypatch.setattr(shop_session.db, "export", counting_export)
    shop_session.select_table("products")

    first = shop_session.export()
    shop_session.search = "prod"
    assert shop_session.export() is first
    assert len(calls) == 1

    shop_session.delete(_row(shop_session, "A-1"), confirmed=True)
    after = shop_session.export()

    assert len(calls) == 2
    reopened = Session.open(after, "shop.sqlite")
    try:
        assert reopened.row_counts()["products"] == 1
    finally:
        reopened.close()
