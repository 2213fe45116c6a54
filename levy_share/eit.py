from __future__ import annotations

from decimal import Decimal
from typing import Any, NamedTuple

from levy_share.core import parse_amount

DEFAULT_EIT_RATE = Decimal("0.0125")


class EitEstimate(NamedTuple):
    yearly: Decimal
    monthly: Decimal


def estimate_eit(annual_income: Any, rate: Decimal = DEFAULT_EIT_RATE) -> EitEstimate:
    """Flat-rate local earned income tax on annual income."""
    yearly = parse_amount(annual_income) * rate
    return EitEstimate(yearly=yearly, monthly=yearly / 12)
