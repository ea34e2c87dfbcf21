from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from office_expenses.core.config import Settings
from office_expenses.db.dal import Database
from office_expenses.models import ExpenseOut, row_to_expense_out
from office_expenses.routers.deps import get_app_settings, get_db
from office_expenses.services.budget_utils import parse_budget_key
from office_expenses.services.dashboard import (
    Dashboard,
    DashboardFilters,
    build_dashboard,
)
from office_expenses.services.expense_validation import check_date_range, check_filters
from office_expenses.services.money import percent_of, round2

router = APIRouter(prefix="/analytics", tags=["analytics"])


class ChartPoint(BaseModel):
    category: str
    current_value: float
    previous_value: float
    proportional_budget: float


class Trend(BaseModel):
    current_period_total: float
    previous_period_total: float
    percentage_change: float
    direction: str


class BudgetSummary(BaseModel):
    key: Optional[str]
    amounts: Dict[str, float]
    full_month_total: float
    proportional_total: float
    proportional_amounts: Dict[str, float]
    days_selected: int
    days_in_month: int


class DashboardOut(BaseModel):
    start_date: date
    end_date: date
    expenses: List[ExpenseOut]
    total: float
    totals_by_category: Dict[str, float]
    chart: List[ChartPoint]
    trend: Trend
    budget: BudgetSummary


class CategoryTotal(BaseModel):
    category: str
    total: float
    percent: float


def _dashboard(
    db: Database,
    settings: Settings,
    start_date: Optional[date],
    end_date: Optional[date],
    category: Optional[str],
    subcategory: Optional[str],
    branch: Optional[str],
    budget: Optional[str],
    as_of: Optional[date],
) -> Dashboard:
    try:
        check_date_range(start_date, end_date)
        check_filters(category, subcategory, branch)
        if budget:
            parse_budget_key(budget)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    filters = DashboardFilters(
        start_date=start_date,
        end_date=end_date,
        category=category or None,
        subcategory=subcategory or None,
        branch=branch or None,
        budget_key=budget or None,
    )
    expenses = [row_to_expense_out(r) for r in db.list_expenses()]
    return build_dashboard(
        expenses,
        db.list_budgets(),
        filters,
        today=as_of,
        fallback_days_in_month=settings.fallback_days_in_month,
    )


def _trend_out(d: Dashboard) -> Trend:
    return Trend(
        current_period_total=round2(d.trend.current_period_total),
        previous_period_total=round2(d.trend.previous_period_total),
        percentage_change=round2(d.trend.percentage_change),
        direction=d.trend.direction,
    )


@router.get(
    "/dashboard",
    response_model=DashboardOut,
    summary="Filtered expenses with budget-vs-spending chart, trend and budget summary",
)
async def dashboard_endpoint(
    start_date: Optional[date] = Query(None, description="Range start inclusive"),
    end_date: Optional[date] = Query(None, description="Range end inclusive"),
    category: Optional[str] = Query(None),
    subcategory: Optional[str] = Query(None),
    branch: Optional[str] = Query(None),
    budget: Optional[str] = Query(None, description="Budget period key (YYYY-MM)"),
    as_of: Optional[date] = Query(None, description="Reference day for defaults (today)"),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Single payload for the expense page.

    Defaults: no range and no budget -> current month (auto-selecting its
    budget if stored); budget without range -> that whole month.
    """
    d = _dashboard(
        db, settings, start_date, end_date, category, subcategory, branch, budget, as_of
    )
    return DashboardOut(
        start_date=d.start_date,
        end_date=d.end_date,
        expenses=d.expenses,
        total=d.total,
        totals_by_category=d.totals_by_category,
        chart=[
            ChartPoint(
                category=p.category,
                current_value=round2(p.current_value),
                previous_value=round2(p.previous_value),
                proportional_budget=round2(p.proportional_budget),
            )
            for p in d.chart
        ],
        trend=_trend_out(d),
        budget=BudgetSummary(**asdict(d.budget)),
    )


@router.get("/trend", response_model=Trend, summary="Current vs previous month-shifted window")
async def trend_endpoint(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category: Optional[str] = Query(None),
    subcategory: Optional[str] = Query(None),
    branch: Optional[str] = Query(None),
    as_of: Optional[date] = Query(None),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    d = _dashboard(
        db, settings, start_date, end_date, category, subcategory, branch, None, as_of
    )
    return _trend_out(d)


@router.get(
    "/category-totals",
    response_model=List[CategoryTotal],
    summary="Spend per category for the filtered range",
)
async def category_totals_endpoint(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category: Optional[str] = Query(None),
    subcategory: Optional[str] = Query(None),
    branch: Optional[str] = Query(None),
    as_of: Optional[date] = Query(None),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    d = _dashboard(
        db, settings, start_date, end_date, category, subcategory, branch, None, as_of
    )
    grand = d.total
    return [
        CategoryTotal(
            category=cat,
            total=total,
            percent=percent_of(total, grand),
        )
        for cat, total in sorted(
            d.totals_by_category.items(), key=lambda kv: kv[1], reverse=True
        )
    ]
