# promo_engine/routers/vouchers_router.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from promo_engine.core.db import get_db
from promo_engine.schemas.common_schemas import ListResponse, ResponseMessage
from promo_engine.schemas.voucher_schemas import VoucherCreate, VoucherOut, VoucherUpdate
from promo_engine.services.voucher_service import VoucherService

router = APIRouter(prefix="/vouchers", tags=["Vouchers"])


def get_voucher_service(db: AsyncSession = Depends(get_db)) -> VoucherService:
    return VoucherService(db)


@router.get("/", response_model=ListResponse[VoucherOut])
async def route_get_vouchers(
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    service: VoucherService = Depends(get_voucher_service),
):
    vouchers = await service.get_vouchers(is_active=is_active)
    return ListResponse[VoucherOut](
        message="Vouchers retrieved successfully",
        data=[VoucherOut.model_validate(v) for v in vouchers],
        count=len(vouchers),
    )


@router.post("/", response_model=ResponseMessage[VoucherOut], status_code=201)
async def route_create_voucher(
    payload: VoucherCreate,
    service: VoucherService = Depends(get_voucher_service),
):
    """
    Create a voucher. A random code is generated when none is given;
    codes are stored uppercase.
    """
    voucher = await service.create_voucher(payload)
    return ResponseMessage[VoucherOut](message="Voucher created successfully", data=VoucherOut.model_validate(voucher))


@router.get("/{voucher_id}", response_model=ResponseMessage[VoucherOut])
async def route_get_voucher(voucher_id: int, service: VoucherService = Depends(get_voucher_service)):
    voucher = await service.get_voucher_by_id(voucher_id)
    if not voucher:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return ResponseMessage[VoucherOut](message="Voucher retrieved successfully", data=VoucherOut.model_validate(voucher))


@router.put("/{voucher_id}", response_model=ResponseMessage[VoucherOut])
async def route_update_voucher(
    voucher_id: int,
    payload: VoucherUpdate,
    service: VoucherService = Depends(get_voucher_service),
):
    voucher = await service.update_voucher(voucher_id, payload)
    if not voucher:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return ResponseMessage[VoucherOut](message="Voucher updated successfully", data=VoucherOut.model_validate(voucher))


@router.delete("/{voucher_id}", response_model=ResponseMessage[None])
async def route_delete_voucher(voucher_id: int, service: VoucherService = Depends(get_voucher_service)):
    if not await service.delete_voucher(voucher_id):
        raise HTTPException(status_code=404, detail="Voucher not found")
    return ResponseMessage[None](message="Voucher deleted successfully")
