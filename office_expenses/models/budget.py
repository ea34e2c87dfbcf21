from __future__ import annotations
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from .constants import EXPENSE_TYPES


class BudgetIn(BaseModel):
    """Per-category amounts for one calendar month."""

    amounts: Dict[str, float] = Field(default_factory=dict)

    @field_validator("amounts")
    @classmethod
    def valid_amounts(cls, v: Dict[str, float]) -> Dict[str, float]:
        unknown = sorted(k for k in v if k not in EXPENSE_TYPES)
        if unknown:
            raise ValueError(f"unsupported categories: {', '.join(unknown)}")
        negative = sorted(k for k, amount in v.items() if amount < 0)
        if negative:
            raise ValueError(f"budget amounts cannot be negative: {', '.join(negative)}")
        return v


class BudgetOut(BaseModel):
    key: str
    year: int
    month: int
    label: str
    amounts: Dict[str, float]
    total: float


class BudgetOption(BaseModel):
    key: str
    year: int
    month: int
    label: str


class CategoryTaxonomy(BaseModel):
    categories: Dict[str, List[str]]
    branches: Dict[str, str]
