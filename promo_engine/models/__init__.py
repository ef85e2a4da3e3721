# promo_engine/models/__init__.py
from promo_engine.models.discount_models import DiscountType, Voucher, Promotion
from promo_engine.models.order_models import Order
