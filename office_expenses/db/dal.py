"""Data Access Layer for expenses and monthly budgets.

Responsibilities
----------------
- CRUD helpers for expense records (ids and timestamps assigned here).
- Upsert / delete of budget periods keyed by (year, month) together with their
  per-category amounts.
- Rows are returned as plain dicts; callers build pydantic models from them.
"""

from __future__ import annotations

from contextlib import closing, contextmanager
from pathlib import Path
import logging
import sqlite3
from typing import Any, Dict, Iterator, List, Mapping, Optional

from office_expenses.core.errors import NotFoundError
from office_expenses.models import ExpenseIn
from office_expenses.services.budget_utils import budget_key

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"
EXPENSE_COLUMNS = (
    "description",
    "amount",
    "date",
    "category",
    "subcategory",
    "vendor",
    "notes",
    "branch",
)

logger = logging.getLogger("office_expenses.db")


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits or rolls back, then closes."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        with closing(conn), conn:
            yield conn

    @staticmethod
    def _expense_values(expense: ExpenseIn) -> List[Any]:
        return [
            expense.description,
            float(expense.amount),
            expense.date.isoformat(),
            expense.category,
            expense.subcategory,
            expense.vendor,
            expense.notes,
            expense.branch,
        ]

    # ------------------------------------------------------------------
    # Expenses
    def insert_expense(
        self, expense: ExpenseIn, entered_by: Optional[str] = None
    ) -> int:
        columns = ", ".join(EXPENSE_COLUMNS)
        placeholders = ", ".join("?" for _ in EXPENSE_COLUMNS)
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO expenses ({columns}, entered_by, created_at, updated_at)
                VALUES ({placeholders}, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                self._expense_values(expense) + [entered_by],
            )
            conn.commit()
            expense_id = int(cur.lastrowid)
        logger.debug("inserted expense %s", expense_id)
        return expense_id

    def get_expense(self, expense_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM expenses WHERE id = ?", (expense_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def list_expenses(self) -> List[Dict[str, Any]]:
        """Return every expense in insertion order."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM expenses ORDER BY id ASC")
            return [dict(r) for r in cur.fetchall()]

    def count_expenses(self) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM expenses")
            row = cur.fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    def update_expense(self, expense_id: int, expense: ExpenseIn) -> None:
        """Replace every user-editable field of an expense.

        Raises NotFoundError when the id is unknown.
        """
        assignments = ", ".join(f"{c} = ?" for c in EXPENSE_COLUMNS)
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE expenses
                SET {assignments}, updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                self._expense_values(expense) + [expense_id],
            )
            if cur.rowcount == 0:
                raise NotFoundError("expense not found")
            conn.commit()

    def delete_expense(self, expense_id: int) -> bool:
        """Delete an expense; returns False when it was already absent."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            conn.commit()
            return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Budgets (one per calendar month)
    def save_budget(self, year: int, month: int, amounts: Mapping[str, float]) -> None:
        """Create or overwrite the budget for (year, month)."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO budgets (year, month, created_at, updated_at)
                VALUES (?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                ON CONFLICT(year, month) DO UPDATE SET
                    updated_at = ({UTC_NOW_SQL})
                """,
                (year, month),
            )
            cur.execute(
                "DELETE FROM budget_amounts WHERE year = ? AND month = ?",
                (year, month),
            )
            cur.executemany(
                """
                INSERT INTO budget_amounts (year, month, category, amount)
                VALUES (?, ?, ?, ?)
                """,
                [(year, month, cat, float(amt)) for cat, amt in amounts.items()],
            )
            conn.commit()

    def get_budget(self, year: int, month: int) -> Optional[Dict[str, float]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT 1 FROM budgets WHERE year = ? AND month = ?", (year, month)
            )
            if cur.fetchone() is None:
                return None
            cur.execute(
                """
                SELECT category, amount FROM budget_amounts
                WHERE year = ? AND month = ?
                """,
                (year, month),
            )
            return {r["category"]: float(r["amount"]) for r in cur.fetchall()}

    def list_budgets(self) -> Dict[str, Dict[str, float]]:
        """Return budget key -> category amounts, ordered by period."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT year, month FROM budgets ORDER BY year, month")
            budgets: Dict[str, Dict[str, float]] = {
                budget_key(r["year"], r["month"]): {} for r in cur.fetchall()
            }
            cur.execute("SELECT year, month, category, amount FROM budget_amounts")
            for r in cur.fetchall():
                key = budget_key(r["year"], r["month"])
                if key in budgets:
                    budgets[key][r["category"]] = float(r["amount"])
            return budgets

    def delete_budget(self, year: int, month: int) -> bool:
        """Delete a budget period; returns False when it was already absent."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "DELETE FROM budget_amounts WHERE year = ? AND month = ?",
                (year, month),
            )
            cur.execute(
                "DELETE FROM budgets WHERE year = ? AND month = ?", (year, month)
            )
            conn.commit()
            return cur.rowcount > 0
