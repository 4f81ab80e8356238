"""Decimal money helpers. Amounts are rounded half-up to cents."""
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    """amount * percentage / 100, rounded to cents (19.995 @ 10% -> 2.00)."""
    return round_money(amount * percentage / HUNDRED)


def clamp_discount(amount: Decimal, ceiling: Decimal) -> Decimal:
    """Round to cents and keep within [0, ceiling]; the ceiling is truncated, never rounded up."""
    amount = round_money(max(amount, ZERO))
    ceiling = max(ceiling, ZERO).quantize(CENT, rounding=ROUND_DOWN)
    return min(amount, ceiling)
