# promo_engine/services/voucher_service.py
import logging
from decimal import Decimal
from typing import Callable, List, Optional

from fastapi import HTTPException
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from promo_engine.models.discount_models import Voucher
from promo_engine.schemas.voucher_schemas import VoucherCreate, VoucherUpdate
from promo_engine.services.directories import VoucherValidation
from promo_engine.utils.code_generator import canonical_code, generate_code
from promo_engine.utils.decimal_utils import format_amount, to_decimal
from promo_engine.utils.time_utils import as_utc, utc_now

logger = logging.getLogger(__name__)


class VoucherService:
    """SQL-backed voucher directory."""

    def __init__(self, db: AsyncSession, code_generator: Callable[[], str] = generate_code):
        self.db = db
        self.code_generator = code_generator

    # -----------------------
    # CREATE
    # -----------------------
    async def create_voucher(self, payload: VoucherCreate) -> Voucher:
        code = canonical_code(payload.code or self.code_generator())

        if await self.get_voucher_by_code(code):
            raise HTTPException(status_code=409, detail="Voucher code already exists")

        data = payload.model_dump(exclude={"code"})
        voucher = Voucher(**data, code=code, used_count=0)
        self.db.add(voucher)
        await self.db.commit()
        await self.db.refresh(voucher)

        logger.info("Created voucher %s", voucher.code)
        return voucher

    # -----------------------
    # READ
    # -----------------------
    async def get_vouchers(self, is_active: Optional[bool] = None) -> List[Voucher]:
        query = select(Voucher)
        if is_active is not None:
            query = query.where(Voucher.is_active == is_active)
        query = query.order_by(Voucher.created_at.desc(), Voucher.id.desc())
        result = await self.db.execute(query)
        return result.scalars().all()

    async def get_voucher_by_id(self, voucher_id: int) -> Optional[Voucher]:
        return await self.db.get(Voucher, voucher_id)

    async def get_voucher_by_code(self, code: str) -> Optional[Voucher]:
        result = await self.db.execute(select(Voucher).where(Voucher.code == canonical_code(code)))
        return result.scalar_one_or_none()

    # -----------------------
    # UPDATE
    # -----------------------
    async def update_voucher(self, voucher_id: int, payload: VoucherUpdate) -> Optional[Voucher]:
        voucher = await self.get_voucher_by_id(voucher_id)
        if not voucher:
            return None

        update_data = payload.model_dump(exclude_unset=True)

        if update_data.get("code"):
            update_data["code"] = canonical_code(update_data["code"])
            existing = await self.get_voucher_by_code(update_data["code"])
            if existing and existing.id != voucher.id:
                raise HTTPException(status_code=409, detail="Voucher code already exists")

        for key, value in update_data.items():
            setattr(voucher, key, value)

        await self.db.commit()
        await self.db.refresh(voucher)
        return voucher

    # -----------------------
    # DELETE
    # -----------------------
    async def delete_voucher(self, voucher_id: int) -> bool:
        voucher = await self.get_voucher_by_id(voucher_id)
        if not voucher:
            return False
        await self.db.delete(voucher)
        await self.db.commit()
        logger.info("Deleted voucher %s", voucher.code)
        return True

    # -----------------------
    # DIRECTORY CONTRACT
    # -----------------------
    async def validate_voucher(self, code: str, order_subtotal: Decimal) -> VoucherValidation:
        voucher = await self.get_voucher_by_code(code)

        if not voucher:
            return VoucherValidation(valid=False, error="Voucher not found")

        if not voucher.is_active:
            return VoucherValidation(valid=False, voucher=voucher, error="Voucher is not active")

        if as_utc(voucher.expiration_date) < utc_now():
            return VoucherValidation(valid=False, voucher=voucher, error="Voucher has expired")

        if voucher.used_count >= voucher.usage_limit:
            return VoucherValidation(valid=False, voucher=voucher, error="Voucher usage limit exceeded")

        if voucher.minimum_order_value and to_decimal(order_subtotal) < to_decimal(voucher.minimum_order_value):
            return VoucherValidation(
                valid=False,
                voucher=voucher,
                error=f"Minimum order value of {format_amount(voucher.minimum_order_value)} required",
            )

        return VoucherValidation(valid=True, voucher=voucher)

    async def increment_usage(self, code: str) -> None:
        # Single UPDATE so concurrent runs never lose an increment
        await self.db.execute(
            update(Voucher)
            .where(Voucher.code == canonical_code(code))
            .values(used_count=Voucher.used_count + 1)
        )
        await self.db.commit()
