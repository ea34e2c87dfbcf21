from fastapi import APIRouter, Depends

from office_expenses.db.dal import Database
from office_expenses.routers.deps import get_db

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe with expense count")
async def health(db: Database = Depends(get_db)):
    return {"status": "ok", "expenses": db.count_expenses()}
