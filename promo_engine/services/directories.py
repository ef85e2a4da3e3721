# promo_engine/services/directories.py
"""Collaborator contracts the discount engine depends on."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class VoucherValidation:
    valid: bool
    voucher: Optional[Any] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class PromotionValidation:
    valid: bool
    promotion: Optional[Any] = None
    error: Optional[str] = None


@runtime_checkable
class VoucherDirectory(Protocol):
    async def validate_voucher(self, code: str, order_subtotal: Decimal) -> VoucherValidation:
        ...

    async def increment_usage(self, code: str) -> None:
        ...


@runtime_checkable
class PromotionDirectory(Protocol):
    async def validate_promotion(self, code: str, items: Sequence) -> PromotionValidation:
        ...

    async def increment_usage(self, code: str) -> None:
        ...


@runtime_checkable
class OrderStore(Protocol):
    async def save_order(self, order_id: str, items: Sequence, result) -> None:
        ...
