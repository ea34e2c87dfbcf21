import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from office_expenses.core.config import Settings
from office_expenses.core.errors import NotFoundError
from office_expenses.db.dal import Database
from office_expenses.models import (
    ExpenseCreateIn,
    ExpenseIn,
    ExpenseOut,
    ExpenseUpdateIn,
    row_to_expense_out,
)
from office_expenses.routers.deps import get_app_settings, get_db
from office_expenses.services.aggregation import filter_expenses
from office_expenses.services.expense_validation import check_date_range, check_filters

router = APIRouter(prefix="/expenses", tags=["expenses"])
logger = logging.getLogger("office_expenses.expenses")


def _fetch_or_404(db: Database, expense_id: int) -> ExpenseOut:
    row = db.get_expense(expense_id)
    if not row:
        raise HTTPException(status_code=404, detail="expense not found")
    return row_to_expense_out(row)


def _validation_422(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422, detail=exc.errors(include_url=False, include_context=False)
    )


# Routes -----------------------------------------------------------
@router.post("/", response_model=ExpenseOut, status_code=201, summary="Create an expense")
async def create_expense(
    payload: ExpenseCreateIn,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    entered_by = payload.entered_by or settings.default_entered_by
    expense_id = db.insert_expense(payload, entered_by=entered_by)
    logger.info("expense %s created (%s / %s)", expense_id, payload.category, payload.subcategory)
    return _fetch_or_404(db, expense_id)


@router.get("/", response_model=List[ExpenseOut], summary="List expenses with optional filters")
async def list_expenses_endpoint(
    start_date: Optional[date] = Query(None, description="Filter: start date inclusive"),
    end_date: Optional[date] = Query(None, description="Filter: end date inclusive"),
    category: Optional[str] = Query(None, description="Filter by category"),
    subcategory: Optional[str] = Query(None, description="Filter by subcategory"),
    branch: Optional[str] = Query(None, description="Filter by branch tag"),
    db: Database = Depends(get_db),
):
    try:
        check_date_range(start_date, end_date)
        check_filters(category, subcategory, branch)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    expenses = [row_to_expense_out(r) for r in db.list_expenses()]
    return filter_expenses(
        expenses,
        start_date or date.min,
        end_date or date.max,
        category=category,
        subcategory=subcategory,
        branch=branch,
    )


@router.get("/{expense_id}", response_model=ExpenseOut, summary="Fetch one expense")
async def get_expense(expense_id: int, db: Database = Depends(get_db)):
    return _fetch_or_404(db, expense_id)


@router.put("/{expense_id}", response_model=ExpenseOut, summary="Replace an expense")
async def replace_expense(
    expense_id: int,
    payload: ExpenseIn,
    db: Database = Depends(get_db),
):
    try:
        db.update_expense(expense_id, payload)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="expense not found")
    logger.info("expense %s replaced", expense_id)
    return _fetch_or_404(db, expense_id)


@router.patch("/{expense_id}", response_model=ExpenseOut, summary="Edit an expense (partial)")
async def patch_expense(
    expense_id: int,
    payload: ExpenseUpdateIn,
    db: Database = Depends(get_db),
):
    # 1. Fetch existing expense
    existing = _fetch_or_404(db, expense_id)

    # 2. Merge explicitly sent fields over stored values and re-validate
    merged_fields = existing.model_dump(include=set(ExpenseIn.model_fields))
    merged_fields.update(payload.model_dump(include=payload.model_fields_set))
    try:
        merged = ExpenseIn(**merged_fields)
    except ValidationError as exc:
        raise _validation_422(exc)

    # 3. Persist
    try:
        db.update_expense(expense_id, merged)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="expense not found")
    logger.info("expense %s updated (%s)", expense_id, ", ".join(sorted(payload.model_fields_set)))
    return _fetch_or_404(db, expense_id)


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
async def delete_expense(expense_id: int, db: Database = Depends(get_db)):
    # idempotent: deleting an unknown id is not an error
    if db.delete_expense(expense_id):
        logger.info("expense %s deleted", expense_id)
    else:
        logger.debug("expense %s already absent", expense_id)
    return None
