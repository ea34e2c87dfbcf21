"""Aggregation engine: filter, aggregate and trend over expense snapshots.

All functions are pure. They read attribute-style records (pydantic
``ExpenseOut`` / ``ExpenseIn`` or anything with the same attributes) and
return newly built values; inputs are never mutated. Callers re-invoke them
whenever filters or the underlying collections change.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from office_expenses.models.constants import CATEGORIES

UP = "up"
DOWN = "down"
FLAT = "flat"


class ExpenseLike(Protocol):
    amount: float
    date: date
    category: str
    subcategory: str
    branch: Optional[str]


def _as_date(value: date | datetime) -> date:
    # time-of-day is ignored; calendar-day granularity only
    if isinstance(value, datetime):
        return value.date()
    return value


# ---------------- Filter -----------------
def filter_expenses(
    expenses: Iterable[ExpenseLike],
    start: date,
    end: date,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    branch: Optional[str] = None,
) -> List[ExpenseLike]:
    """Return expenses dated within [start, end] matching every given predicate.

    Empty/None predicates match everything. Input order is preserved.
    """
    start, end = _as_date(start), _as_date(end)
    return [
        exp
        for exp in expenses
        if start <= _as_date(exp.date) <= end
        and (not category or exp.category == category)
        and (not subcategory or exp.subcategory == subcategory)
        and (not branch or exp.branch == branch)
    ]


# ---------------- Aggregate -----------------
def total_amount(expenses: Iterable[ExpenseLike]) -> float:
    return sum((exp.amount for exp in expenses), 0.0)


def totals_by_category(expenses: Iterable[ExpenseLike]) -> Dict[str, float]:
    """Sum of amounts per category, keyed in first-seen order."""
    totals: Dict[str, float] = {}
    for exp in expenses:
        totals[exp.category] = totals.get(exp.category, 0.0) + exp.amount
    return totals


def days_in_range(start: date, end: date) -> int:
    return (_as_date(end) - _as_date(start)).days + 1


def days_in_budget_month(
    year: Optional[int] = None, month: Optional[int] = None, fallback: int = 30
) -> int:
    """Calendar days in the budget month, or ``fallback`` when none is selected."""
    if year is None or month is None:
        return fallback
    return calendar.monthrange(year, month)[1]


def prorate_budget(
    amounts: Optional[Mapping[str, float]],
    days_selected: int,
    days_in_month: int,
) -> Dict[str, float]:
    """Scale each category's monthly amount by the selected share of the month.

    ``amounts is None`` means no budget is selected: every category is 0.
    """
    if amounts is None:
        return {cat: 0.0 for cat in CATEGORIES}
    prorated = {
        cat: float(amounts.get(cat, 0) or 0) * days_selected / days_in_month
        for cat in CATEGORIES
    }
    for cat, amount in amounts.items():
        if cat not in prorated:
            prorated[cat] = float(amount or 0) * days_selected / days_in_month
    return prorated


# ---------------- Trend -----------------
@dataclass(frozen=True)
class TrendResult:
    current_period_total: float
    previous_period_total: float
    percentage_change: float
    direction: str


def shift_month(value: date, months: int = -1) -> date:
    """Move a date by whole calendar months, clamping the day to month end."""
    value = _as_date(value)
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def previous_period(start: date, end: date) -> Tuple[date, date]:
    return shift_month(start, -1), shift_month(end, -1)


def previous_period_expenses(
    expenses: Iterable[ExpenseLike],
    start: date,
    end: date,
    category: Optional[str] = None,
    branch: Optional[str] = None,
) -> List[ExpenseLike]:
    """Expenses of the window one month earlier, same category/branch filters."""
    prev_start, prev_end = previous_period(start, end)
    return filter_expenses(
        expenses, prev_start, prev_end, category=category, branch=branch
    )


def compute_trend(current_total: float, previous_total: float) -> TrendResult:
    if previous_total > 0:
        pct = (current_total - previous_total) / previous_total * 100
    elif current_total > 0:
        pct = 100.0
    else:
        pct = 0.0
    if current_total > previous_total:
        direction = UP
    elif current_total < previous_total:
        direction = DOWN
    else:
        direction = FLAT
    return TrendResult(
        current_period_total=current_total,
        previous_period_total=previous_total,
        percentage_change=pct,
        direction=direction,
    )


# ---------------- Chart series -----------------
@dataclass(frozen=True)
class ChartPoint:
    category: str
    current_value: float
    previous_value: float
    proportional_budget: float


def build_chart_series(
    current: Sequence[ExpenseLike],
    previous: Sequence[ExpenseLike],
    prorated: Mapping[str, float],
    category: Optional[str] = None,
) -> List[ChartPoint]:
    """Budget-vs-spending bars for categories with current or previous spend.

    Known taxonomy categories come first in display order; anything else
    follows in first-seen order.
    """
    current_totals = totals_by_category(current)
    previous_totals = totals_by_category(previous)
    seen = set(current_totals) | set(previous_totals)
    ordered = [c for c in CATEGORIES if c in seen]
    for cat in list(current_totals) + list(previous_totals):
        if cat not in ordered:
            ordered.append(cat)
    return [
        ChartPoint(
            category=cat,
            current_value=current_totals.get(cat, 0.0),
            previous_value=previous_totals.get(cat, 0.0),
            proportional_budget=float(prorated.get(cat, 0.0)),
        )
        for cat in ordered
        if not category or cat == category
    ]
