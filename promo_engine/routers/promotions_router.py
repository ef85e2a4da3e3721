# promo_engine/routers/promotions_router.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from promo_engine.core.db import get_db
from promo_engine.schemas.common_schemas import ListResponse, ResponseMessage
from promo_engine.schemas.promotion_schemas import PromotionCreate, PromotionOut, PromotionUpdate
from promo_engine.services.promotion_service import PromotionService

router = APIRouter(prefix="/promotions", tags=["Promotions"])


def get_promotion_service(db: AsyncSession = Depends(get_db)) -> PromotionService:
    return PromotionService(db)


@router.get("/", response_model=ListResponse[PromotionOut])
async def route_get_promotions(
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    service: PromotionService = Depends(get_promotion_service),
):
    promotions = await service.get_promotions(is_active=is_active)
    return ListResponse[PromotionOut](
        message="Promotions retrieved successfully",
        data=[PromotionOut.model_validate(p) for p in promotions],
        count=len(promotions),
    )


@router.post("/", response_model=ResponseMessage[PromotionOut], status_code=201)
async def route_create_promotion(
    payload: PromotionCreate,
    service: PromotionService = Depends(get_promotion_service),
):
    """
    Create a promotion. Leave both eligibility lists empty for a
    promotion that applies to every product.
    """
    promotion = await service.create_promotion(payload)
    return ResponseMessage[PromotionOut](message="Promotion created successfully", data=PromotionOut.model_validate(promotion))


@router.get("/{promotion_id}", response_model=ResponseMessage[PromotionOut])
async def route_get_promotion(promotion_id: int, service: PromotionService = Depends(get_promotion_service)):
    promotion = await service.get_promotion_by_id(promotion_id)
    if not promotion:
        raise HTTPException(status_code=404, detail="Promotion not found")
    return ResponseMessage[PromotionOut](message="Promotion retrieved successfully", data=PromotionOut.model_validate(promotion))


@router.put("/{promotion_id}", response_model=ResponseMessage[PromotionOut])
async def route_update_promotion(
    promotion_id: int,
    payload: PromotionUpdate,
    service: PromotionService = Depends(get_promotion_service),
):
    promotion = await service.update_promotion(promotion_id, payload)
    if not promotion:
        raise HTTPException(status_code=404, detail="Promotion not found")
    return ResponseMessage[PromotionOut](message="Promotion updated successfully", data=PromotionOut.model_validate(promotion))


@router.delete("/{promotion_id}", response_model=ResponseMessage[None])
async def route_delete_promotion(promotion_id: int, service: PromotionService = Depends(get_promotion_service)):
    if not await service.delete_promotion(promotion_id):
        raise HTTPException(status_code=404, detail="Promotion not found")
    return ResponseMessage[None](message="Promotion deleted successfully")
