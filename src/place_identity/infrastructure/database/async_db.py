"""
Asynchronous Database Utilities Module

Builds the SQLAlchemy asyncio engine and session factory used by the SQL
credential store. Both are created lazily on first use so that importing
the application (for example with the in-memory store) never requires a
database driver.

Key Components:
    - get_engine: The process-wide asynchronous engine.
    - get_session_factory: Factory for ``AsyncSession`` objects.
    - create_db_and_tables: Creates the ``accounts`` table if missing.
    - check_database_health: Runs ``SELECT 1``.
    - dispose_engine: Releases pooled connections on shutdown.
"""

from functools import lru_cache

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from place_identity.core.config.settings import settings
from place_identity.infrastructure.database import models  # noqa: F401  registers the tables

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    url = make_url(settings.DATABASE_URL)
    pool_options = {}
    if url.get_backend_name() != "sqlite":
        pool_options = {
            "pool_size": settings.DATABASE_POOL_SIZE,
            "max_overflow": settings.DATABASE_MAX_OVERFLOW,
            "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
            "pool_pre_ping": True,
        }
    logger.info("Creating database engine", backend=url.get_backend_name(), database=url.database)
    return create_async_engine(url, echo=settings.DATABASE_ECHO, **pool_options)


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=get_engine(), class_=AsyncSession, expire_on_commit=False)


async def create_db_and_tables(engine: AsyncEngine | None = None) -> None:
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured")


async def check_database_health() -> bool:
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return False


async def dispose_engine() -> None:
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
