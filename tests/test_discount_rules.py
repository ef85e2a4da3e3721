from decimal import Decimal

import pytest

from promo_engine.models.discount_models import DiscountType
from promo_engine.schemas.order_schemas import LineItem
from promo_engine.services.discount_rules import (
    calculate_subtotal,
    compute_discount,
    eligible_amount,
    is_eligible,
)
from conftest import promotion_spec


def item(product_id="prod1", category="electronics", price="100", quantity=1):
    return LineItem(
        product_id=product_id,
        product_name=product_id.title(),
        category=category,
        unit_price=Decimal(price),
        quantity=quantity,
    )


# -----------------------
# Eligibility
# -----------------------
def test_product_id_match_is_eligible():
    promo = promotion_spec("P", product_ids=["prod1"])
    assert is_eligible(item("prod1"), promo)
    assert not is_eligible(item("prod2"), promo)


def test_category_match_is_eligible():
    promo = promotion_spec("P", categories=["electronics"])
    assert is_eligible(item(category="electronics"), promo)
    assert not is_eligible(item(category="clothing"), promo)


def test_item_without_category_never_matches_categories():
    promo = promotion_spec("P", categories=["electronics"])
    assert not is_eligible(item(category=None), promo)


def test_empty_lists_apply_to_everything():
    promo = promotion_spec("P")
    assert is_eligible(item(category=None), promo)
    assert is_eligible(item("anything", category="garden"), promo)


def test_ids_and_categories_are_alternatives():
    promo = promotion_spec("P", product_ids=["prod9"], categories=["electronics"])
    # category match is enough even though the id list does not match
    assert is_eligible(item("prod1", category="electronics"), promo)
    # product id match is enough even though the category does not match
    assert is_eligible(item("prod9", category="clothing"), promo)
    # neither set matches: not eligible, even though the lists are non-empty
    assert not is_eligible(item("prod2", category="clothing"), promo)


def test_none_lists_behave_like_empty_lists():
    promo = promotion_spec("P")
    promo.eligible_product_ids = None
    promo.eligible_product_categories = None
    assert is_eligible(item(), promo)


# -----------------------
# Amounts
# -----------------------
def test_subtotal_sums_price_times_quantity(cart):
    assert calculate_subtotal(cart) == Decimal("250")


def test_subtotal_keeps_cents():
    items = [item(price="19.99", quantity=3), item("prod2", price="0.01", quantity=1)]
    assert calculate_subtotal(items) == Decimal("59.98")


def test_eligible_amount_only_counts_eligible_items(cart):
    promo = promotion_spec("P", categories=["electronics"])
    assert eligible_amount(cart, promo) == Decimal("200")


# -----------------------
# Discount math
# -----------------------
@pytest.mark.parametrize(
    "value, base, expected",
    [
        ("20", "250", "50"),
        ("50", "125", "62.5"),
        ("12.5", "10", "1.25"),
        ("150", "100", "150"),
    ],
)
def test_percentage_discount_is_exact(value, base, expected):
    assert compute_discount(DiscountType.PERCENTAGE, Decimal(value), Decimal(base)) == Decimal(expected)


def test_fixed_discount_is_capped_by_base():
    assert compute_discount(DiscountType.FIXED, Decimal("30"), Decimal("250")) == Decimal("30")
    assert compute_discount(DiscountType.FIXED, Decimal("1000"), Decimal("250")) == Decimal("250")


def test_discount_type_accepts_raw_values():
    assert compute_discount("fixed", 5, 200) == Decimal("5")
    assert compute_discount("percentage", 10, 200) == Decimal("20")


def test_discount_never_negative_on_negative_base():
    assert compute_discount(DiscountType.FIXED, Decimal("30"), Decimal("-50")) == Decimal("0")
    assert compute_discount(DiscountType.PERCENTAGE, Decimal("30"), Decimal("-50")) == Decimal("0")
