from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
MONEY_NOISE_RE = re.compile(r"[$,\s]")
# Plain ASCII decimal notation with an optional exponent.
NUMBER_RE = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")


def as_decimal(val: Any) -> Decimal:
    if val is None:
        return Decimal("0.00")
    if isinstance(val, Decimal):
        return val
    return Decimal(str(val))


def parse_amount(raw: Any) -> Decimal:
    """
    Coerce loosely formatted currency text into a Decimal.

    Strips `$`, thousands separators and whitespace. Empty, unparsable and
    non-finite input all become zero; this never raises. Negative values
    pass through unclamped.
    """
    if raw is None or isinstance(raw, bool):
        return ZERO
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else ZERO

    clean = MONEY_NOISE_RE.sub("", str(raw))
    if not NUMBER_RE.match(clean):
        return ZERO
    try:
        value = Decimal(clean)
    except (InvalidOperation, ValueError):
        return ZERO
    if not value.is_finite():
        return ZERO
    return value


def quantize_money(value: Decimal) -> Decimal:
    # Large amounts need more than the default 28 digits to carry cents.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def as_float(value: Decimal | None) -> float | None:
    if value is None:
        return None
    return float(quantize_money(value))


def to_cents(value: Decimal) -> int:
    amount = quantize_money(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 5)
        return int(amount * 100)


def format_money(value: Decimal | None) -> str:
    if value is None:
        return "n/a"
    amount = quantize_money(as_decimal(value))
    sign = "-" if amount < 0 else ""
    return f"{sign}${amount.copy_abs():,.2f}"


def parse_unit_count(raw: Any) -> int | None:
    """Whole unit count from free text, or None when nothing usable was entered."""
    value = parse_amount(raw)
    if value == ZERO:
        return None
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def per_unit_factor(enabled: bool, units: Any) -> Decimal:
    """
    Scale factor applied to every user-entered parcel amount.

    Returns 1 when per-unit mode is off, or when it is on but the unit count
    is missing or below one. Otherwise returns 1/units.
    """
    if not enabled:
        return ONE
    count = units if isinstance(units, int) and not isinstance(units, bool) else parse_unit_count(units)
    if count is None or count < 1:
        return ONE
    return ONE / Decimal(count)


def per_unit_status(enabled: bool, units: Any) -> str:
    if not enabled:
        return "Per-unit factor: Off"
    count = units if isinstance(units, int) and not isinstance(units, bool) else parse_unit_count(units)
    if count is None or count < 1:
        return "Per-unit factor: On (enter units)"
    return f"Per-unit factor: 1/{count}"
