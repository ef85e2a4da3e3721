import os

os.environ.setdefault("DB_TYPE", "sqlite")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from promo_engine.core.db import Base, get_db
from promo_engine.models.discount_models import DiscountType, Promotion, Voucher
from promo_engine.schemas.order_schemas import LineItem
from promo_engine.services.directories import PromotionValidation, VoucherValidation
from promo_engine.utils.code_generator import canonical_code
import promo_engine.models  # noqa: F401


# -----------------------
# Database
# -----------------------
@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite DB shared by every session of a test."""
    _engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app with get_db pointed at the test database."""
    from main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def future(days: int = 30) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def past(days: int = 1) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


async def add_voucher(db, **overrides) -> Voucher:
    data = dict(
        code="SAVE20",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("20"),
        expiration_date=future(),
        usage_limit=10,
        used_count=0,
        minimum_order_value=None,
        is_active=True,
    )
    data.update(overrides)
    voucher = Voucher(**data)
    db.add(voucher)
    await db.commit()
    await db.refresh(voucher)
    return voucher


async def add_promotion(db, **overrides) -> Promotion:
    data = dict(
        code="ELEC10",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("10"),
        expiration_date=future(),
        usage_limit=10,
        used_count=0,
        eligible_product_ids=[],
        eligible_product_categories=["electronics"],
        is_active=True,
    )
    data.update(overrides)
    promotion = Promotion(**data)
    db.add(promotion)
    await db.commit()
    await db.refresh(promotion)
    return promotion


# -----------------------
# Carts
# -----------------------
@pytest.fixture
def cart():
    """Subtotal 250: 200 of electronics and 50 of clothing."""
    return [
        LineItem(product_id="prod1", product_name="Headphones", category="electronics", unit_price=Decimal("100"), quantity=2),
        LineItem(product_id="prod2", product_name="T-Shirt", category="clothing", unit_price=Decimal("50"), quantity=1),
    ]


# -----------------------
# In-memory collaborators for the engine
# -----------------------
def voucher_spec(code, discount_type=DiscountType.PERCENTAGE, value="20"):
    return SimpleNamespace(code=code, discount_type=discount_type, discount_value=Decimal(value))


def promotion_spec(code, discount_type=DiscountType.PERCENTAGE, value="10", product_ids=(), categories=()):
    return SimpleNamespace(
        code=code,
        discount_type=discount_type,
        discount_value=Decimal(value),
        eligible_product_ids=list(product_ids),
        eligible_product_categories=list(categories),
    )


class FakeVoucherDirectory:
    def __init__(self, *specs, errors=None):
        self.specs = {spec.code: spec for spec in specs}
        self.errors = errors or {}
        self.validated = []
        self.incremented = []

    async def validate_voucher(self, code, order_subtotal):
        self.validated.append((code, order_subtotal))
        key = canonical_code(code)
        if key in self.errors:
            return VoucherValidation(valid=False, error=self.errors[key])
        spec = self.specs.get(key)
        if spec is None:
            return VoucherValidation(valid=False, error="Voucher not found")
        return VoucherValidation(valid=True, voucher=spec)

    async def increment_usage(self, code):
        self.incremented.append(code)


class FakePromotionDirectory:
    def __init__(self, *specs, errors=None):
        self.specs = {spec.code: spec for spec in specs}
        self.errors = errors or {}
        self.validated = []
        self.incremented = []

    async def validate_promotion(self, code, items):
        self.validated.append((code, list(items)))
        key = canonical_code(code)
        if key in self.errors:
            return PromotionValidation(valid=False, error=self.errors[key])
        spec = self.specs.get(key)
        if spec is None:
            return PromotionValidation(valid=False, error="Promotion not found")
        return PromotionValidation(valid=True, promotion=spec)

    async def increment_usage(self, code):
        self.incremented.append(code)


class FakeOrderStore:
    def __init__(self):
        self.saved = []

    async def save_order(self, order_id, items, result):
        self.saved.append((order_id, list(items), result))
