from __future__ import annotations

from datetime import date

import pytest

from office_expenses.services.dashboard import (
    DashboardFilters,
    build_dashboard,
    month_bounds,
    resolve_window,
)
from tests.factories import make_expense

BUDGETS = {"2024-03": {"Travel": 1000, "Rent": 2000}}


@pytest.fixture
def expenses():
    return [
        make_expense(100, date(2024, 3, 5), branch="BranchA"),
        make_expense(200, date(2024, 3, 20), "Rent", "Office Space", branch="BranchB"),
        make_expense(50, date(2024, 2, 5), branch="BranchA"),
        make_expense(999, date(2024, 4, 1), "Marketing", "Digital Ads"),
    ]


def test_month_bounds() -> None:
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))


def test_first_ten_days_with_selected_budget(expenses) -> None:
    d = build_dashboard(
        expenses,
        BUDGETS,
        DashboardFilters(
            start_date=date(2024, 3, 1), end_date=date(2024, 3, 10), budget_key="2024-03"
        ),
    )
    assert [e.amount for e in d.expenses] == [100]
    assert d.total == 100.0
    assert d.totals_by_category == {"Travel": 100.0}
    assert d.budget.key == "2024-03"
    assert d.budget.days_selected == 10
    assert d.budget.days_in_month == 31
    assert d.budget.full_month_total == 3000.0
    assert d.budget.proportional_total == 967.74
    assert d.budget.amounts["Travel"] == 1000.0
    assert d.budget.amounts["Furniture"] == 0.0

    # previous window is 1-10 February
    assert d.trend.previous_period_total == 50
    assert d.trend.percentage_change == pytest.approx(100.0)
    assert d.trend.direction == "up"

    (travel,) = d.chart
    assert travel.category == "Travel"
    assert travel.current_value == 100
    assert travel.previous_value == 50
    assert travel.proportional_budget == 322.58


def test_defaults_to_current_month_and_its_budget(expenses) -> None:
    d = build_dashboard(expenses, BUDGETS, DashboardFilters(), today=date(2024, 3, 15))
    assert (d.start_date, d.end_date) == (date(2024, 3, 1), date(2024, 3, 31))
    assert d.budget.key == "2024-03"
    assert d.total == 300.0
    assert d.budget.days_selected == 31
    assert d.budget.proportional_total == 3000.0
    assert d.trend.previous_period_total == 50


def test_budget_key_without_range_selects_whole_month(expenses) -> None:
    start, end, key = resolve_window(
        DashboardFilters(budget_key="2024-3"), BUDGETS, date(2025, 1, 1)
    )
    assert (start, end, key) == (date(2024, 3, 1), date(2024, 3, 31), "2024-03")


def test_explicit_range_does_not_auto_select_budget(expenses) -> None:
    d = build_dashboard(
        expenses,
        BUDGETS,
        DashboardFilters(start_date=date(2024, 3, 1), end_date=date(2024, 3, 31)),
        today=date(2024, 3, 15),
    )
    assert d.budget.key is None
    assert d.budget.proportional_total == 0.0


def test_no_budget_uses_fallback_divisor(expenses) -> None:
    d = build_dashboard(
        expenses, BUDGETS, DashboardFilters(), today=date(2024, 5, 10), fallback_days_in_month=30
    )
    assert d.budget.key is None
    assert d.budget.days_in_month == 30
    assert d.budget.full_month_total == 0.0
    assert d.budget.proportional_total == 0.0
    assert d.expenses == []
    # April spend is the previous period
    assert d.trend.previous_period_total == 999
    assert d.trend.direction == "down"
    assert d.trend.percentage_change == pytest.approx(-100.0)


def test_unknown_budget_key_behaves_like_no_budget(expenses) -> None:
    d = build_dashboard(expenses, BUDGETS, DashboardFilters(budget_key="2023-07"))
    assert d.budget.key is None
    assert (d.start_date, d.end_date) == (date(2023, 7, 1), date(2023, 7, 31))


def test_branch_filter_applies_to_both_periods(expenses) -> None:
    d = build_dashboard(
        expenses, BUDGETS, DashboardFilters(branch="BranchB"), today=date(2024, 3, 15)
    )
    assert [e.amount for e in d.expenses] == [200]
    assert d.trend.previous_period_total == 0
    assert d.trend.percentage_change == 100.0
    assert [p.category for p in d.chart] == ["Rent"]


def test_invalid_budget_key_raises() -> None:
    with pytest.raises(ValueError):
        build_dashboard([], {}, DashboardFilters(budget_key="March"))


def test_start_only_ends_at_its_own_month_end() -> None:
    start, end, key = resolve_window(
        DashboardFilters(start_date=date(2024, 5, 10)), BUDGETS, date(2024, 3, 15)
    )
    assert (start, end, key) == (date(2024, 5, 10), date(2024, 5, 31), None)


def test_end_only_starts_at_its_own_month_start() -> None:
    start, end, key = resolve_window(
        DashboardFilters(end_date=date(2024, 1, 20)), BUDGETS, date(2024, 3, 15)
    )
    assert (start, end, key) == (date(2024, 1, 1), date(2024, 1, 20), None)


def test_single_bound_uses_budget_month_when_ordered() -> None:
    filters = DashboardFilters(start_date=date(2024, 3, 10), budget_key="2024-03")
    assert resolve_window(filters, BUDGETS, date(2024, 6, 1)) == (
        date(2024, 3, 10),
        date(2024, 3, 31),
        "2024-03",
    )
    # a start past the budget month falls back to the start's own month
    filters = DashboardFilters(start_date=date(2024, 4, 10), budget_key="2024-03")
    start, end, _ = resolve_window(filters, BUDGETS, date(2024, 6, 1))
    assert (start, end) == (date(2024, 4, 10), date(2024, 4, 30))


def test_reversed_range_raises() -> None:
    with pytest.raises(ValueError):
        build_dashboard(
            [],
            {},
            DashboardFilters(start_date=date(2024, 5, 1), end_date=date(2024, 4, 1)),
        )
