"""Budget period helpers.

Budgets are keyed by calendar month. The canonical textual key is ``YYYY-MM``;
``parse_budget_key`` also accepts the unpadded ``YYYY-M`` form used by older
clients. Helpers here stay framework-agnostic so both API routes and the
dashboard builder reuse them.
"""

from __future__ import annotations
import calendar
from typing import Dict, Any, List, Mapping, Tuple

from office_expenses.models.constants import CATEGORIES
from office_expenses.services.money import round2


def budget_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def parse_budget_key(key: str) -> Tuple[int, int]:
    """Return (year, month) for a budget key or raise ValueError."""
    parts = key.strip().split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"invalid budget key '{key}' (expected YYYY-MM)")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12 or year < 1:
        raise ValueError(f"invalid budget key '{key}' (expected YYYY-MM)")
    return year, month


def budget_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def complete_amounts(amounts: Mapping[str, float] | None) -> Dict[str, float]:
    """Amounts for every taxonomy category in display order; missing -> 0."""
    amounts = amounts or {}
    return {cat: float(amounts.get(cat, 0) or 0) for cat in CATEGORIES}


def budget_total(amounts: Mapping[str, float] | None) -> float:
    return round2(sum(complete_amounts(amounts).values()))


def budget_summary(year: int, month: int, amounts: Mapping[str, float]) -> Dict[str, Any]:
    return {
        "key": budget_key(year, month),
        "year": year,
        "month": month,
        "label": budget_label(year, month),
        "amounts": complete_amounts(amounts),
        "total": budget_total(amounts),
    }


def budget_options(budgets: Mapping[str, Mapping[str, float]]) -> List[Dict[str, Any]]:
    """Dropdown options for the stored budget periods, oldest first."""
    options = []
    for key in budgets:
        year, month = parse_budget_key(key)
        options.append(
            {
                "key": budget_key(year, month),
                "year": year,
                "month": month,
                "label": budget_label(year, month),
            }
        )
    return sorted(options, key=lambda o: (o["year"], o["month"]))
