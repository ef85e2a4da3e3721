# promo_engine/services/promotion_service.py
import logging
from typing import Callable, List, Optional, Sequence

from fastapi import HTTPException
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from promo_engine.models.discount_models import Promotion
from promo_engine.schemas.promotion_schemas import PromotionCreate, PromotionUpdate
from promo_engine.services.directories import PromotionValidation
from promo_engine.services.discount_rules import is_eligible
from promo_engine.utils.code_generator import canonical_code, generate_code
from promo_engine.utils.time_utils import as_utc, utc_now

logger = logging.getLogger(__name__)


class PromotionService:
    """SQL-backed promotion directory."""

    def __init__(self, db: AsyncSession, code_generator: Callable[[], str] = generate_code):
        self.db = db
        self.code_generator = code_generator

    async def create_promotion(self, payload: PromotionCreate) -> Promotion:
        code = canonical_code(payload.code or self.code_generator())

        if await self.get_promotion_by_code(code):
            raise HTTPException(status_code=409, detail="Promotion code already exists")

        data = payload.model_dump(exclude={"code"})
        promotion = Promotion(**data, code=code, used_count=0)
        self.db.add(promotion)
        await self.db.commit()
        await self.db.refresh(promotion)

        logger.info("Created promotion %s", promotion.code)
        return promotion

    async def get_promotions(self, is_active: Optional[bool] = None) -> List[Promotion]:
        query = select(Promotion)
        if is_active is not None:
            query = query.where(Promotion.is_active == is_active)
        query = query.order_by(Promotion.created_at.desc(), Promotion.id.desc())
        result = await self.db.execute(query)
        return result.scalars().all()

    async def get_promotion_by_id(self, promotion_id: int) -> Optional[Promotion]:
        return await self.db.get(Promotion, promotion_id)

    async def get_promotion_by_code(self, code: str) -> Optional[Promotion]:
        result = await self.db.execute(select(Promotion).where(Promotion.code == canonical_code(code)))
        return result.scalar_one_or_none()

    async def update_promotion(self, promotion_id: int, payload: PromotionUpdate) -> Optional[Promotion]:
        promotion = await self.get_promotion_by_id(promotion_id)
        if not promotion:
            return None

        update_data = payload.model_dump(exclude_unset=True)

        if update_data.get("code"):
            update_data["code"] = canonical_code(update_data["code"])
            existing = await self.get_promotion_by_code(update_data["code"])
            if existing and existing.id != promotion.id:
                raise HTTPException(status_code=409, detail="Promotion code already exists")

        for key, value in update_data.items():
            setattr(promotion, key, value)

        await self.db.commit()
        await self.db.refresh(promotion)
        return promotion

    async def delete_promotion(self, promotion_id: int) -> bool:
        promotion = await self.get_promotion_by_id(promotion_id)
        if not promotion:
            return False
        await self.db.delete(promotion)
        await self.db.commit()
        logger.info("Deleted promotion %s", promotion.code)
        return True

    async def validate_promotion(self, code: str, items: Sequence) -> PromotionValidation:
        promotion = await self.get_promotion_by_code(code)

        if not promotion:
            return PromotionValidation(valid=False, error="Promotion not found")

        if not promotion.is_active:
            return PromotionValidation(valid=False, promotion=promotion, error="Promotion is not active")

        if as_utc(promotion.expiration_date) < utc_now():
            return PromotionValidation(valid=False, promotion=promotion, error="Promotion has expired")

        if promotion.used_count >= promotion.usage_limit:
            return PromotionValidation(valid=False, promotion=promotion, error="Promotion usage limit exceeded")

        if not any(is_eligible(item, promotion) for item in items):
            return PromotionValidation(
                valid=False,
                promotion=promotion,
                error="Promotion does not apply to any items in the order",
            )

        return PromotionValidation(valid=True, promotion=promotion)

    async def increment_usage(self, code: str) -> None:
        await self.db.execute(
            update(Promotion)
            .where(Promotion.code == canonical_code(code))
            .values(used_count=Promotion.used_count + 1)
        )
        await self.db.commit()
