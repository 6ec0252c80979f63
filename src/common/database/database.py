# src/common/database/database.py

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.common.config import settings
from src.models.models import Base

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
)

# Loaded attributes stay readable after commit.
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.
    """
    async with async_session() as session:
        yield session

@asynccontextmanager
async def transaction(db: AsyncSession):
    """
    Run a block as one all-or-nothing unit: commit on success, roll back on any error.
    """
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise

async def connect_to_db():
    if settings.DB_CREATE_ALL:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database ready ({engine.url.get_backend_name()})")

async def close_db_connection():
    await engine.dispose()
    logger.info("Database connections closed")
