from __future__ import annotations
import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import BRANCHES, EXPENSE_TYPES, is_valid_subcategory


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class ExpenseIn(BaseModel):
    description: str
    amount: float = Field(..., gt=0)
    date: dt.date
    category: str
    subcategory: str
    vendor: Optional[str] = None
    notes: Optional[str] = None
    branch: Optional[str] = None

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("description cannot be empty")
        return v.strip()

    @field_validator("category")
    @classmethod
    def valid_category(cls, v: str) -> str:
        if v not in EXPENSE_TYPES:
            raise ValueError("unsupported category")
        return v

    @field_validator("vendor", "notes", "branch", mode="before")
    @classmethod
    def empty_optional(cls, v):  # type: ignore[override]
        if isinstance(v, str):
            return _blank_to_none(v)
        return v

    @field_validator("branch")
    @classmethod
    def valid_branch(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in BRANCHES:
            raise ValueError("unsupported branch")
        return v

    @model_validator(mode="after")
    def subcategory_in_category(self) -> "ExpenseIn":
        # category already validated; subcategory must come from its list
        if not is_valid_subcategory(self.category, self.subcategory):
            raise ValueError(
                f"subcategory '{self.subcategory}' does not belong to category '{self.category}'"
            )
        return self


class ExpenseCreateIn(ExpenseIn):
    entered_by: Optional[str] = None

    @field_validator("entered_by", mode="before")
    @classmethod
    def empty_author(cls, v):  # type: ignore[override]
        if isinstance(v, str):
            return _blank_to_none(v)
        return v


class ExpenseOut(ExpenseIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    entered_by: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class ExpenseUpdateIn(BaseModel):
    """Partial update model.

    All fields optional; at least one must be provided. The merged record is
    re-validated as an ``ExpenseIn`` by the route, so cross-field rules
    (subcategory membership) are checked against the stored values too.
    """

    description: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[dt.date] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    vendor: Optional[str] = None
    notes: Optional[str] = None
    branch: Optional[str] = None

    @model_validator(mode="after")
    def at_least_one(self) -> "ExpenseUpdateIn":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided for update")
        return self


def row_to_expense_out(row: dict) -> ExpenseOut:
    return ExpenseOut.model_validate(row)
