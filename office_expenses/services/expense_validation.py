"""Input-boundary checks for filter parameters.

Pydantic models already enforce expense field rules (amount > 0, taxonomy
membership, subcategory within category). Query-string filters arrive as
plain strings, so routes call these helpers before handing values to the
aggregation engine, which assumes well-formed input.
"""

from __future__ import annotations
from datetime import date
from typing import Optional

from office_expenses.models.constants import BRANCHES, EXPENSE_TYPES


def check_date_range(start: Optional[date], end: Optional[date]) -> None:
    if start and end and start > end:
        raise ValueError("start_date cannot be after end_date")


def check_filters(
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    branch: Optional[str] = None,
) -> None:
    """Raise ValueError for filter values outside the fixed taxonomy."""
    if category and category not in EXPENSE_TYPES:
        raise ValueError("unsupported category")
    if subcategory:
        pool = (
            EXPENSE_TYPES[category]
            if category
            else [s for subs in EXPENSE_TYPES.values() for s in subs]
        )
        if subcategory not in pool:
            raise ValueError("unsupported subcategory for category filter")
    if branch and branch not in BRANCHES:
        raise ValueError("unsupported branch")
