# promo_engine/schemas/promotion_schemas.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from promo_engine.models.discount_models import DiscountType
from promo_engine.schemas.common_schemas import NonNegativeDecimal
from promo_engine.utils.time_utils import as_utc, utc_now


class PromotionBase(BaseModel):
    discount_type: DiscountType
    discount_value: NonNegativeDecimal
    expiration_date: datetime
    usage_limit: int = Field(..., ge=1)
    eligible_product_ids: List[str] = Field(default_factory=list)
    eligible_product_categories: List[str] = Field(default_factory=list)
    is_active: bool = True


class PromotionCreate(PromotionBase):
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


class PromotionUpdate(BaseModel):
    code: Optional[str] = Field(default=None, min_length=3, max_length=50)
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[NonNegativeDecimal] = None
    expiration_date: Optional[datetime] = None
    usage_limit: Optional[int] = Field(default=None, ge=1)
    eligible_product_ids: Optional[List[str]] = None
    eligible_product_categories: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator(
        "code",
        "discount_type",
        "discount_value",
        "expiration_date",
        "usage_limit",
        "eligible_product_ids",
        "eligible_product_categories",
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


class PromotionOut(PromotionBase):
    id: int
    code: str
    used_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
