"""
Money rounding for stats output.

Internal sums are kept at full precision; rounding happens once, on output.

Usage:
    from app.utils.money import round_money

    round_money(10.005)      -> 10.01
    round_money(2.5, 0)      -> 3.0
"""
from decimal import Decimal, ROUND_HALF_UP


def round_money(amount, places: int = 2) -> float:
    """
    Round half-up (not banker's rounding) to the given number of places.

    Args:
        amount: int / float / Decimal
        places: digits after the decimal point

    Returns:
        float rounded for display / JSON
    """
    quant = Decimal(1).scaleb(-places)
    return float(Decimal(str(amount)).quantize(quant, rounding=ROUND_HALF_UP))


def share_percentage(part: float, total: float) -> float:
    """Share of total in percent, one decimal place; 0 when total is 0."""
    if total <= 0:
        return 0.0
    return round_money(part / total * 1000, 0) / 10
