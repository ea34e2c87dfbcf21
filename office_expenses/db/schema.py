"""Database schema DDL definitions and initialization utilities.

Tables:
  - expenses: individual office expense records
  - budgets: one row per budget period (year, month)
  - budget_amounts: per-category amounts belonging to a budget period
  - metadata: key/value store (schema version)
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    description TEXT NOT NULL,
    amount REAL NOT NULL CHECK (amount > 0),
    date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    category TEXT NOT NULL,
    subcategory TEXT NOT NULL,
    vendor TEXT,
    notes TEXT,
    branch TEXT, -- 'BranchA' | 'BranchB' | NULL
    entered_by TEXT,
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

BUDGETS_DDL = f"""
CREATE TABLE IF NOT EXISTS budgets (
    year INTEGER NOT NULL,
    month INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    PRIMARY KEY (year, month)
);
"""

BUDGET_AMOUNTS_DDL = """
CREATE TABLE IF NOT EXISTS budget_amounts (
    year INTEGER NOT NULL,
    month INTEGER NOT NULL,
    category TEXT NOT NULL,
    amount REAL NOT NULL DEFAULT 0 CHECK (amount >= 0),
    PRIMARY KEY (year, month, category),
    FOREIGN KEY (year, month) REFERENCES budgets(year, month) ON DELETE CASCADE
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

EXPENSES_DATE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(date);"
)

DDL_ORDER: Sequence[str] = (
    EXPENSES_DDL,
    BUDGETS_DDL,
    BUDGET_AMOUNTS_DDL,
    METADATA_DDL,
    EXPENSES_DATE_INDEX_DDL,
)


def init_db(path: Path) -> None:
    """Create all tables idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
