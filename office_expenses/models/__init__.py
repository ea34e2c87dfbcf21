"""Pydantic domain models for the Office Expense Tracker."""

from .constants import BRANCHES, CATEGORIES, EXPENSE_TYPES  # re-export
from .expense import ExpenseIn, ExpenseCreateIn, ExpenseOut, ExpenseUpdateIn, row_to_expense_out
from .budget import BudgetIn, BudgetOut, BudgetOption, CategoryTaxonomy

__all__ = [
    "BRANCHES",
    "CATEGORIES",
    "EXPENSE_TYPES",
    "ExpenseIn",
    "ExpenseCreateIn",
    "ExpenseOut",
    "ExpenseUpdateIn",
    "row_to_expense_out",
    "BudgetIn",
    "BudgetOut",
    "BudgetOption",
    "CategoryTaxonomy",
]
