from fastapi import APIRouter

from office_expenses.models import BRANCHES, EXPENSE_TYPES, CategoryTaxonomy

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=CategoryTaxonomy, summary="Expense taxonomy and branches")
async def list_categories():
    return CategoryTaxonomy(
        categories={cat: list(subs) for cat, subs in EXPENSE_TYPES.items()},
        branches=dict(BRANCHES),
    )
