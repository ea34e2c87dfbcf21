"""Office Expense Tracker service."""

__version__ = "0.1.0"
