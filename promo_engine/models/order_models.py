# promo_engine/models/order_models.py
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Numeric, DateTime, JSON
from sqlalchemy.sql import func
from promo_engine.core.db import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(64), unique=True, nullable=False, index=True)

    # Snapshot of the line items as priced
    items = Column(JSON, nullable=False)

    subtotal = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    applied_voucher_codes = Column(JSON, nullable=False, default=list)
    applied_promotion_codes = Column(JSON, nullable=False, default=list)
    total_discount = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    final_amount = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
