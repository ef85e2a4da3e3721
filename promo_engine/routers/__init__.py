# promo_engine/routers/__init__.py
from fastapi import APIRouter
from .vouchers_router import router as vouchers_router
from .promotions_router import router as promotions_router
from .orders_router import router as orders_router

router = APIRouter(prefix="/api")

router.include_router(vouchers_router)
router.include_router(promotions_router)
router.include_router(orders_router)
