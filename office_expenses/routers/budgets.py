import logging
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException, Path

from office_expenses.db.dal import Database
from office_expenses.models import BudgetIn, BudgetOption, BudgetOut
from office_expenses.routers.deps import get_db
from office_expenses.services.budget_utils import (
    budget_options,
    budget_summary,
    parse_budget_key,
)

router = APIRouter(prefix="/budgets", tags=["budgets"])
logger = logging.getLogger("office_expenses.budgets")


def _parse_key_or_400(key: str) -> Tuple[int, int]:
    try:
        return parse_budget_key(key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[BudgetOut], summary="List monthly budgets")
async def list_budgets(db: Database = Depends(get_db)):
    out = []
    for key, amounts in db.list_budgets().items():
        year, month = parse_budget_key(key)
        out.append(BudgetOut(**budget_summary(year, month, amounts)))
    return out


@router.get(
    "/options", response_model=List[BudgetOption], summary="Budget periods for selection"
)
async def list_budget_options(db: Database = Depends(get_db)):
    return [BudgetOption(**o) for o in budget_options(db.list_budgets())]


@router.get("/{key}", response_model=BudgetOut, summary="Fetch one monthly budget")
async def get_budget(
    key: str = Path(..., description="Budget period key (YYYY-MM)"),
    db: Database = Depends(get_db),
):
    year, month = _parse_key_or_400(key)
    amounts = db.get_budget(year, month)
    if amounts is None:
        raise HTTPException(status_code=404, detail="budget not found")
    return BudgetOut(**budget_summary(year, month, amounts))


@router.put("/{key}", response_model=BudgetOut, summary="Create or replace a monthly budget")
async def save_budget(
    payload: BudgetIn,
    key: str = Path(..., description="Budget period key (YYYY-MM)"),
    db: Database = Depends(get_db),
):
    year, month = _parse_key_or_400(key)
    db.save_budget(year, month, payload.amounts)
    amounts = db.get_budget(year, month)
    if amounts is None:
        raise HTTPException(status_code=500, detail="failed to persist budget")
    logger.info("budget %s saved (%d categories)", key, len(payload.amounts))
    return BudgetOut(**budget_summary(year, month, amounts))


@router.delete("/{key}", status_code=204, summary="Delete a monthly budget")
async def delete_budget(
    key: str = Path(..., description="Budget period key (YYYY-MM)"),
    db: Database = Depends(get_db),
):
    year, month = _parse_key_or_400(key)
    if db.delete_budget(year, month):
        logger.info("budget %s deleted", key)
    return None
