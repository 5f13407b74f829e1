"""
Validation utilities
"""
import re
from decimal import Decimal, InvalidOperation

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def normalize_decimal_input(value: str) -> str:
    """
    Normalize an amount: comma decimal separator becomes a dot

    Example:
        >>> normalize_decimal_input("100,50")
        "100.50"
    """
    return value.strip().replace(",", ".")


def parse_cost(value, max_decimal_places: int = 2) -> Decimal:
    """
    Parse a subscription cost (positive, at most max_decimal_places digits)

    Args:
        value: str / int / float / Decimal

    Returns:
        Decimal

    Raises:
        ValueError: not a number, not positive, or too many decimal places

    Example:
        >>> parse_cost("9,99")
        Decimal('9.99')
        >>> parse_cost("9.999")
        ValueError: at most 2 decimal places allowed
    """
    if isinstance(value, bool):
        raise ValueError("cost must be a number")
    normalized = normalize_decimal_input(str(value))
    try:
        amount = Decimal(normalized)
    except (InvalidOperation, ValueError):
        raise ValueError("cost must be a number")

    if not amount.is_finite():
        raise ValueError("cost must be a number")
    if amount <= 0:
        raise ValueError("cost must be positive")
    quant = Decimal(1).scaleb(-max_decimal_places)
    if amount != amount.quantize(quant):
        raise ValueError(f"at most {max_decimal_places} decimal places allowed")

    return amount.quantize(quant)


def validate_hex_color(value: str) -> str:
    """#RRGGBB"""
    if not _HEX_COLOR_RE.match(value):
        raise ValueError("color must be in #RRGGBB format")
    return value


def validate_currency(value: str) -> str:
    code = value.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError("currency must be a 3-letter code")
    return code
