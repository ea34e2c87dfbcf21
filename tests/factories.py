from datetime import date
from typing import Optional

from office_expenses.models import ExpenseIn


def make_expense(
    amount: float,
    day: date,
    category: str = "Travel",
    subcategory: str = "Flights",
    branch: Optional[str] = None,
    description: str = "expense",
) -> ExpenseIn:
    return ExpenseIn(
        description=description,
        amount=amount,
        date=day,
        category=category,
        subcategory=subcategory,
        branch=branch,
    )


def expense_payload(**overrides) -> dict:
    payload = {
        "description": "Flight to client site",
        "amount": 420.5,
        "date": "2024-03-05",
        "category": "Travel",
        "subcategory": "Flights",
        "vendor": "SkyAir",
        "branch": "BranchA",
    }
    payload.update(overrides)
    return payload
