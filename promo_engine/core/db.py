# promo_engine/core/db.py
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from promo_engine.core.config import DATABASE_URL, DB_TYPE

Base = declarative_base()

engine_kwargs = {"echo": False, "future": True}
if DB_TYPE == "postgres":
    # PgBouncer-safe: no prepared statements
    engine_kwargs.update(
        pool_size=5,
        max_overflow=10,
        connect_args={
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
            "server_settings": {"prepareThreshold": "0"},
        },
    )

engine = create_async_engine(DATABASE_URL, **engine_kwargs)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session

import promo_engine.models

async def init_models():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
