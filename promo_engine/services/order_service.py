# promo_engine/services/order_service.py
import logging
import uuid
from decimal import Decimal
from typing import Callable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promo_engine.core.exceptions import DuplicateCodeError, InvalidCodeError
from promo_engine.models.order_models import Order
from promo_engine.schemas.order_schemas import (
    CodeDiscount,
    DiscountBreakdown,
    LineItem,
    PricingRequest,
    PricingResult,
)
from promo_engine.services.directories import OrderStore, PromotionDirectory, VoucherDirectory
from promo_engine.services.discount_rules import calculate_subtotal, compute_discount, eligible_amount
from promo_engine.services.promotion_service import PromotionService
from promo_engine.services.voucher_service import VoucherService
from promo_engine.utils.code_generator import canonical_code

logger = logging.getLogger(__name__)

# Combined discount can never exceed this share of the subtotal
MAX_DISCOUNT_PERCENTAGE = Decimal("50")


def new_order_id() -> str:
    return str(uuid.uuid4())


class DiscountEngine:
    """
    Prices a cart against voucher and promotion codes.

    Vouchers run first, in the order given, each one discounting what the
    previous vouchers left. Promotions run next, each against the total of
    the line items it is eligible for. The combined discount is then capped
    at MAX_DISCOUNT_PERCENTAGE of the subtotal.

    Every code is validated before any usage is recorded, so a rejected code
    leaves all counters untouched. Once validation passes, usage is
    incremented for every applied code, then the order is saved.
    """

    def __init__(
        self,
        vouchers: VoucherDirectory,
        promotions: PromotionDirectory,
        orders: OrderStore,
        id_factory: Callable[[], str] = new_order_id,
    ):
        self.vouchers = vouchers
        self.promotions = promotions
        self.orders = orders
        self.id_factory = id_factory

    async def apply_discounts(self, request: PricingRequest) -> PricingResult:
        items = list(request.items)
        voucher_codes = list(request.voucher_codes or [])
        promotion_codes = list(request.promotion_codes or [])

        # Duplicates are detected on the codes exactly as sent, before canonicalizing
        if len(set(voucher_codes)) != len(voucher_codes):
            raise DuplicateCodeError("voucher")
        if len(set(promotion_codes)) != len(promotion_codes):
            raise DuplicateCodeError("promotion")

        order_id = request.order_id or self.id_factory()
        subtotal = calculate_subtotal(items)

        applied_vouchers: List[str] = []
        applied_promotions: List[str] = []
        voucher_discounts: List[CodeDiscount] = []
        promotion_discounts: List[CodeDiscount] = []
        total_discount = Decimal("0")
        remaining_amount = subtotal

        for code in voucher_codes:
            validation = await self.vouchers.validate_voucher(code, subtotal)
            if not validation.valid or validation.voucher is None:
                logger.warning("Rejected voucher %s: %s", code, validation.error)
                raise InvalidCodeError("voucher", code, validation.error)

            voucher = validation.voucher
            discount = compute_discount(voucher.discount_type, voucher.discount_value, remaining_amount)

            applied_vouchers.append(canonical_code(code))
            voucher_discounts.append(CodeDiscount(code=canonical_code(code), discount=discount))
            total_discount += discount
            remaining_amount -= discount

        for code in promotion_codes:
            validation = await self.promotions.validate_promotion(code, items)
            if not validation.valid or validation.promotion is None:
                logger.warning("Rejected promotion %s: %s", code, validation.error)
                raise InvalidCodeError("promotion", code, validation.error)

            promotion = validation.promotion
            base = eligible_amount(items, promotion)
            discount = compute_discount(promotion.discount_type, promotion.discount_value, base)

            applied_promotions.append(canonical_code(code))
            promotion_discounts.append(CodeDiscount(code=canonical_code(code), discount=discount))
            total_discount += discount
            remaining_amount -= discount

        # Breakdown entries keep their uncapped amounts
        max_allowed_discount = subtotal * MAX_DISCOUNT_PERCENTAGE / 100
        if total_discount > max_allowed_discount:
            logger.info(
                "Order %s discount %s capped at %s", order_id, total_discount, max_allowed_discount
            )
            total_discount = max_allowed_discount

        final_amount = max(Decimal("0"), subtotal - total_discount)

        for code in applied_vouchers:
            await self.vouchers.increment_usage(code)
        for code in applied_promotions:
            await self.promotions.increment_usage(code)

        result = PricingResult(
            order_id=order_id,
            subtotal=subtotal,
            applied_voucher_codes=applied_vouchers,
            applied_promotion_codes=applied_promotions,
            total_discount=total_discount,
            final_amount=final_amount,
            breakdown=DiscountBreakdown(
                voucher_discounts=voucher_discounts,
                promotion_discounts=promotion_discounts,
            ),
        )

        await self.orders.save_order(order_id, items, result)

        logger.info(
            "Priced order %s: subtotal=%s discount=%s final=%s",
            order_id, subtotal, total_discount, final_amount,
        )
        return result


# --------------------------
# Persistence
# --------------------------
def _item_snapshot(item: LineItem) -> dict:
    data = item.model_dump()
    data["unit_price"] = str(item.unit_price)
    return data


class SqlOrderStore:
    """Saves priced orders through SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_order(self, order_id: str, items: Sequence[LineItem], result: PricingResult) -> Order:
        order = Order(
            order_id=order_id,
            items=[_item_snapshot(item) for item in items],
            subtotal=result.subtotal,
            applied_voucher_codes=list(result.applied_voucher_codes),
            applied_promotion_codes=list(result.applied_promotion_codes),
            total_discount=result.total_discount,
            final_amount=result.final_amount,
        )
        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)
        return order


def build_discount_engine(db: AsyncSession) -> DiscountEngine:
    return DiscountEngine(
        vouchers=VoucherService(db),
        promotions=PromotionService(db),
        orders=SqlOrderStore(db),
    )


# --------------------------
# Queries
# --------------------------
async def get_order_by_id(db: AsyncSession, order_id: str) -> Optional[Order]:
    result = await db.execute(select(Order).where(Order.order_id == order_id))
    return result.scalar_one_or_none()


async def get_all_orders(db: AsyncSession, limit: int = 100, offset: int = 0) -> List[Order]:
    query = (
        select(Order)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
        .offset(offset)
    )
    result = await db.execute(query)
    return result.scalars().all()
