"""Dashboard view-model builder.

Composes the aggregation engine into the single payload the expense page
renders: filtered list, category totals, chart series, trend and budget
summary.

Defaults:
    - No date range and no budget key: the current calendar month, and that
      month's budget when one is stored.
    - Budget key but no date range: the whole budget month.
    - Only one bound given: the other one comes from the month of the bound
      that was given (or from the budget month when that range is ordered).
    - No budget selected: proportional figures are 0 and the proration divisor
      falls back to ``fallback_days_in_month``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from office_expenses.services import aggregation as agg
from office_expenses.services.budget_utils import (
    budget_key,
    complete_amounts,
    parse_budget_key,
)
from office_expenses.services.money import round2


@dataclass(frozen=True)
class DashboardFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    branch: Optional[str] = None
    budget_key: Optional[str] = None


@dataclass(frozen=True)
class BudgetSummary:
    key: Optional[str]
    amounts: Dict[str, float]
    full_month_total: float
    proportional_total: float
    proportional_amounts: Dict[str, float]
    days_selected: int
    days_in_month: int


@dataclass(frozen=True)
class Dashboard:
    start_date: date
    end_date: date
    expenses: List[agg.ExpenseLike]
    total: float
    totals_by_category: Dict[str, float]
    chart: List[agg.ChartPoint]
    trend: agg.TrendResult
    budget: BudgetSummary
    filters: DashboardFilters = field(default_factory=DashboardFilters)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def resolve_window(
    filters: DashboardFilters,
    budgets: Mapping[str, Mapping[str, float]],
    today: date,
) -> Tuple[date, date, Optional[str]]:
    """Return (start, end, selected budget key) after applying page defaults.

    A single given bound fills the other from the selected budget month when
    that keeps the range ordered, otherwise from the given bound's own month.
    """
    start, end = filters.start_date, filters.end_date
    selected = filters.budget_key
    if selected:
        year, month = parse_budget_key(selected)
        selected = budget_key(year, month)
        budget_start, budget_end = month_bounds(year, month)
    else:
        budget_start = budget_end = None
        if start is None and end is None:
            current_key = budget_key(today.year, today.month)
            if current_key in budgets:
                selected = current_key

    if start is None and end is None:
        if budget_start is not None:
            start, end = budget_start, budget_end
        else:
            start, end = month_bounds(today.year, today.month)
    elif end is None:
        if budget_end is not None and budget_end >= start:
            end = budget_end
        else:
            end = month_bounds(start.year, start.month)[1]
    elif start is None:
        if budget_start is not None and budget_start <= end:
            start = budget_start
        else:
            start = month_bounds(end.year, end.month)[0]
    if start > end:
        raise ValueError("start_date cannot be after end_date")
    return start, end, selected


def summarize_budget(
    amounts: Optional[Mapping[str, float]],
    key: Optional[str],
    days_selected: int,
    fallback_days_in_month: int = 30,
) -> BudgetSummary:
    if key is not None:
        year, month = parse_budget_key(key)
        days_in_month = agg.days_in_budget_month(year, month)
    else:
        days_in_month = agg.days_in_budget_month(fallback=fallback_days_in_month)
    prorated = agg.prorate_budget(amounts, days_selected, days_in_month)
    full = complete_amounts(amounts)
    return BudgetSummary(
        key=key,
        amounts=full,
        full_month_total=round2(sum(full.values())),
        proportional_total=round2(sum(prorated.values())),
        proportional_amounts={cat: round2(v) for cat, v in prorated.items()},
        days_selected=days_selected,
        days_in_month=days_in_month,
    )


def build_dashboard(
    expenses: Sequence[agg.ExpenseLike],
    budgets: Mapping[str, Mapping[str, float]],
    filters: DashboardFilters,
    today: Optional[date] = None,
    fallback_days_in_month: int = 30,
) -> Dashboard:
    today = today or date.today()
    start, end, key = resolve_window(filters, budgets, today)

    current = agg.filter_expenses(
        expenses,
        start,
        end,
        category=filters.category,
        subcategory=filters.subcategory,
        branch=filters.branch,
    )
    previous = agg.previous_period_expenses(
        expenses, start, end, category=filters.category, branch=filters.branch
    )

    # an unknown key behaves like no budget selected
    amounts = budgets.get(key) if key is not None else None
    if amounts is None:
        key = None
    budget = summarize_budget(
        amounts, key, agg.days_in_range(start, end), fallback_days_in_month
    )

    current_total = agg.total_amount(current)
    trend = agg.compute_trend(current_total, agg.total_amount(previous))
    return Dashboard(
        start_date=start,
        end_date=end,
        expenses=current,
        total=round2(current_total),
        totals_by_category={
            cat: round2(v) for cat, v in agg.totals_by_category(current).items()
        },
        chart=agg.build_chart_series(
            current, previous, budget.proportional_amounts, category=filters.category
        ),
        trend=trend,
        budget=budget,
        filters=filters,
    )
