# promo_engine/schemas/voucher_schemas.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from promo_engine.models.discount_models import DiscountType
from promo_engine.schemas.common_schemas import NonNegativeDecimal
from promo_engine.utils.time_utils import as_utc, utc_now


class VoucherBase(BaseModel):
    discount_type: DiscountType
    discount_value: NonNegativeDecimal
    expiration_date: datetime
    usage_limit: int = Field(..., ge=1)
    minimum_order_value: Optional[NonNegativeDecimal] = None
    is_active: bool = True


class VoucherCreate(VoucherBase):
    # Generated when omitted
    code: Optional[str] = Field(default=None, min_length=3, max_length=50)

    @field_validator("code")
    @classmethod
    def strip_code(cls, v):
        return v.strip() if v is not None else v

    @field_validator("expiration_date")
    @classmethod
    def expiration_in_future(cls, v: datetime) -> datetime:
        v = as_utc(v)
        if v <= utc_now():
            raise ValueError("Expiration date must be in the future")
        return v


class VoucherUpdate(BaseModel):
    code: Optional[str] = Field(default=None, min_length=3, max_length=50)
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[NonNegativeDecimal] = None
    expiration_date: Optional[datetime] = None
    usage_limit: Optional[int] = Field(default=None, ge=1)
    minimum_order_value: Optional[NonNegativeDecimal] = None
    is_active: Optional[bool] = None

    # minimum_order_value is the only column that may be cleared with null
    @field_validator(
        "code",
        "discount_type",
        "discount_value",
        "expiration_date",
        "usage_limit",
        "is_active",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("code")
    @classmethod
    def strip_code(cls, v):
        return v.strip() if v is not None else v


class VoucherOut(VoucherBase):
    id: int
    code: str
    used_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
