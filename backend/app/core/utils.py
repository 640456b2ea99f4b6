"""
Utility functions for the application.
"""
import math
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, localcontext

CENT = Decimal("0.01")


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime for storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def round_currency(value: float) -> float:
    """
    Round a money amount to 2 decimal places, halves away from zero.

    The float is converted through its shortest repr so that values such as
    1.005 round the way they read. Infinities and NaN are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, exact.adjusted() + 3)
        rounded = exact.quantize(CENT, rounding=ROUND_HALF_UP)
    # Adding 0.0 normalizes -0.0
    return float(rounded) + 0.0


def format_amount(value: float, negative_in_parens: bool = False) -> str:
    """Format an amount with 2 decimals, optionally wrapping negatives in parentheses."""
    if negative_in_parens and value < 0:
        return f"({abs(value):.2f})"
    return f"{value:.2f}"
