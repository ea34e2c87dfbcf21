import sqlite3
from datetime import date

import pytest

from office_expenses.core.errors import NotFoundError
from office_expenses.db.migrate import CURRENT_SCHEMA_VERSION, apply_migrations
from tests.factories import make_expense


def test_insert_assigns_id_and_timestamps(db) -> None:
    first = db.insert_expense(make_expense(10, date(2024, 3, 1)), entered_by="Office Admin")
    second = db.insert_expense(make_expense(20, date(2024, 2, 1), "Rent", "Parking"))
    assert first != second
    row = db.get_expense(first)
    assert row["amount"] == 10
    assert row["date"] == "2024-03-01"
    assert row["entered_by"] == "Office Admin"
    assert row["created_at"] and row["updated_at"]
    # insertion order, not date order
    assert [r["id"] for r in db.list_expenses()] == [first, second]


def test_update_replaces_fields(db) -> None:
    expense_id = db.insert_expense(make_expense(10, date(2024, 3, 1), branch="BranchA"))
    db.update_expense(expense_id, make_expense(99, date(2024, 3, 2), "Rent", "Parking"))
    row = db.get_expense(expense_id)
    assert (row["amount"], row["category"], row["subcategory"], row["branch"]) == (
        99,
        "Rent",
        "Parking",
        None,
    )


def test_update_unknown_raises_not_found(db) -> None:
    with pytest.raises(NotFoundError):
        db.update_expense(12345, make_expense(1, date(2024, 3, 1)))


def test_delete_is_idempotent(db) -> None:
    expense_id = db.insert_expense(make_expense(10, date(2024, 3, 1)))
    assert db.delete_expense(999) is False
    assert db.count_expenses() == 1
    assert db.delete_expense(expense_id) is True
    assert db.delete_expense(expense_id) is False
    assert db.list_expenses() == []


def test_budget_upsert_overwrites_amounts(db) -> None:
    assert db.get_budget(2024, 3) is None
    db.save_budget(2024, 3, {"Travel": 1000, "Rent": 2000})
    db.save_budget(2024, 3, {"Travel": 500})
    assert db.get_budget(2024, 3) == {"Travel": 500.0}
    db.save_budget(2023, 12, {})
    assert db.list_budgets() == {"2023-12": {}, "2024-03": {"Travel": 500.0}}


def test_delete_budget(db) -> None:
    db.save_budget(2024, 3, {"Travel": 1000})
    assert db.delete_budget(2024, 3) is True
    assert db.delete_budget(2024, 3) is False
    assert db.list_budgets() == {}


def test_migrations_are_idempotent(settings) -> None:
    assert apply_migrations(settings.db_path) == CURRENT_SCHEMA_VERSION
    assert apply_migrations(settings.db_path) == CURRENT_SCHEMA_VERSION


def test_migration_adds_entered_by_to_legacy_table(settings) -> None:
    conn = sqlite3.connect(settings.db_path)
    conn.execute(
        """
        CREATE TABLE expenses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            description TEXT NOT NULL,
            amount REAL NOT NULL,
            date TEXT NOT NULL,
            category TEXT NOT NULL,
            subcategory TEXT NOT NULL,
            vendor TEXT,
            notes TEXT,
            branch TEXT,
            created_at TEXT NOT NULL DEFAULT '',
            updated_at TEXT NOT NULL DEFAULT ''
        )
        """
    )
    conn.commit()
    conn.close()

    apply_migrations(settings.db_path)

    conn = sqlite3.connect(settings.db_path)
    columns = {row[1] for row in conn.execute("PRAGMA table_info(expenses)")}
    conn.close()
    assert "entered_by" in columns


def test_connections_are_closed_after_each_call(db, monkeypatch) -> None:
    opened = []
    real_connect = sqlite3.connect

    def tracking_connect(*args, **kwargs):
        conn = real_connect(*args, **kwargs)
        opened.append(conn)
        return conn

    monkeypatch.setattr(sqlite3, "connect", tracking_connect)
    expense_id = db.insert_expense(make_expense(10, date(2024, 3, 1)))
    db.list_expenses()
    db.save_budget(2024, 3, {"Travel": 500})
    with pytest.raises(NotFoundError):
        db.update_expense(expense_id + 100, make_expense(5, date(2024, 3, 2)))

    assert len(opened) == 4
    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
