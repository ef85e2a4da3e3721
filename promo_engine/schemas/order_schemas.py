# promo_engine/schemas/order_schemas.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from promo_engine.schemas.common_schemas import Money, NonNegativeDecimal


# --------------------------
# Line items
# --------------------------
class LineItem(BaseModel):
    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    category: Optional[str] = None
    unit_price: NonNegativeDecimal
    quantity: int = Field(..., ge=1)

    class Config:
        frozen = True


# --------------------------
# Pricing run
# --------------------------
class PricingRequest(BaseModel):
    order_id: Optional[str] = None
    items: List[LineItem] = Field(..., min_length=1)
    voucher_codes: List[str] = Field(default_factory=list)
    promotion_codes: List[str] = Field(default_factory=list)


class CodeDiscount(BaseModel):
    code: str
    discount: Money


class DiscountBreakdown(BaseModel):
    voucher_discounts: List[CodeDiscount] = []
    promotion_discounts: List[CodeDiscount] = []


class PricingResult(BaseModel):
    order_id: str
    subtotal: Money
    applied_voucher_codes: List[str] = []
    applied_promotion_codes: List[str] = []
    total_discount: Money
    final_amount: Money
    breakdown: DiscountBreakdown

    class Config:
        frozen = True


# --------------------------
# Stored orders
# --------------------------
class OrderOut(BaseModel):
    id: int
    order_id: str
    items: List[LineItem]
    subtotal: Money
    applied_voucher_codes: List[str] = []
    applied_promotion_codes: List[str] = []
    total_discount: Money
    final_amount: Money
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
