"""Money / rounding helpers.

Amounts are currency-agnostic floats; every figure that leaves the service
(totals, prorated budgets, percentages) goes through ``round2`` so API
responses and dashboard summaries agree to the cent.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def percent_of(part: float, whole: float) -> float:
    """Share of ``whole`` in percent, 0 when there is nothing to divide."""
    if whole <= 0:
        return 0.0
    return round2(part / whole * 100)
