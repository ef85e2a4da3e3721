# promo_engine/utils/decimal_utils.py
from decimal import Decimal


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value instead of binary noise
    return Decimal(str(value))


def format_amount(value) -> str:
    """Plain notation without trailing zeros, e.g. Decimal("300.000000") -> "300"."""
    return "{:f}".format(to_decimal(value).normalize())
