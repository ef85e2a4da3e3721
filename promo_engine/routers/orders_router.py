# promo_engine/routers/orders_router.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from promo_engine.core.config import DEFAULT_PAGE_LIMIT
from promo_engine.core.db import get_db
from promo_engine.core.exceptions import DiscountError
from promo_engine.schemas.common_schemas import ListResponse, ResponseMessage
from promo_engine.schemas.order_schemas import OrderOut, PricingRequest, PricingResult
from promo_engine.services.order_service import (
    DiscountEngine,
    build_discount_engine,
    get_all_orders,
    get_order_by_id,
)

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_discount_engine(db: AsyncSession = Depends(get_db)) -> DiscountEngine:
    return build_discount_engine(db)


@router.get("/", response_model=ListResponse[OrderOut])
async def route_get_orders(
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    orders = await get_all_orders(db, limit=limit, offset=offset)
    return ListResponse[OrderOut](
        message="Orders retrieved successfully",
        data=[OrderOut.model_validate(o) for o in orders],
        count=len(orders),
    )


@router.get("/{order_id}", response_model=ResponseMessage[OrderOut])
async def route_get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    order = await get_order_by_id(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return ResponseMessage[OrderOut](message="Order retrieved successfully", data=OrderOut.model_validate(order))


@router.post("/apply-discounts", response_model=ResponseMessage[PricingResult])
async def route_apply_discounts(
    payload: PricingRequest,
    engine: DiscountEngine = Depends(get_discount_engine),
):
    """
    Price the cart with the given voucher and promotion codes and save the order.
    Duplicate or invalid codes are rejected with 400 and nothing is recorded.
    """
    try:
        result = await engine.apply_discounts(payload)
    except DiscountError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ResponseMessage[PricingResult](message="Discounts applied successfully", data=result)
