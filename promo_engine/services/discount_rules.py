# promo_engine/services/discount_rules.py
"""
Pure pricing rules shared by the discount engine and the promotion directory.
"""
from decimal import Decimal
from typing import Iterable

from promo_engine.models.discount_models import DiscountType
from promo_engine.utils.decimal_utils import to_decimal


def line_total(item) -> Decimal:
    return to_decimal(item.unit_price) * item.quantity


def calculate_subtotal(items: Iterable) -> Decimal:
    return sum((line_total(item) for item in items), Decimal("0"))


def is_eligible(item, promotion) -> bool:
    """
    Product ids and categories are independent alternatives: a match on
    either one is enough. A promotion with neither list set applies to everything.
    """
    product_ids = promotion.eligible_product_ids or []
    categories = promotion.eligible_product_categories or []

    if product_ids and item.product_id in product_ids:
        return True
    if categories and item.category and item.category in categories:
        return True
    return not product_ids and not categories


def eligible_amount(items: Iterable, promotion) -> Decimal:
    return sum((line_total(item) for item in items if is_eligible(item, promotion)), Decimal("0"))


def compute_discount(discount_type, discount_value, applicable_amount) -> Decimal:
    """
    PERCENTAGE is not clamped here, values over 100 are caught by the
    engine's global cap. FIXED never exceeds the amount it is applied to.
    """
    value = to_decimal(discount_value)
    # A >100% voucher leaves a negative base for the next one
    amount = max(to_decimal(applicable_amount), Decimal("0"))

    if DiscountType(discount_type) == DiscountType.PERCENTAGE:
        return amount * value / 100
    return min(value, amount)
