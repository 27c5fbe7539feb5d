"""Decimal money utilities.

All prices, amounts and totals are Decimal with two decimal places. No float
arithmetic: values are rounded when they are finalized, never deferred.
"""

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
TWOPLACES = Decimal("0.01")


def to_decimal(value: Decimal | int | str | float) -> Decimal:
    """Coerce to Decimal. Floats go through str() so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round2(value: Decimal | int | str | float) -> Decimal:
    """Round to cents, half away from zero: 2.345 -> 2.35, -2.345 -> -2.35."""
    return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def money_display(value: Decimal) -> str:
    """Format for humans: Decimal('1500') -> '$1,500.00', Decimal('-12') -> '-$12.00'."""
    amount = round2(value)
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
