"""
Async database engine and session management.

The engine is created lazily on first use so importing the package never
opens a connection pool.
"""

import logging
from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING
from urllib.parse import quote_plus

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from storefront.config.settings import get_settings

if TYPE_CHECKING:
    from storefront.config.settings import Settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_async_database_url(settings: "Settings | None" = None) -> str:
    """Build the asyncpg database URL from settings."""
    settings = settings or get_settings()
    host = settings.DB_HOST or "localhost"
    port = settings.DB_PORT or 5432
    user = settings.DB_USER or "postgres"
    database = settings.DB_NAME

    if not database:
        raise ValueError("Database name is required (DB_NAME)")

    encoded_user = quote_plus(user)
    if settings.DB_PASSWORD:
        encoded_password = quote_plus(settings.DB_PASSWORD)
        return f"postgresql+asyncpg://{encoded_user}:{encoded_password}@{host}:{port}/{database}"
    return f"postgresql+asyncpg://{encoded_user}@{host}:{port}/{database}"


def create_async_database_engine() -> AsyncEngine:
    """Create the async engine, pooled outside development."""
    settings = get_settings()
    try:
        base_config = {
            "echo": settings.DB_ECHO,
            "pool_pre_ping": True,
        }

        if settings.is_development:
            logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
            engine_config = {**base_config, "poolclass": NullPool}
        else:
            logger.info("Creating async database engine for PRODUCTION (pooled)")
            engine_config = {
                **base_config,
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "pool_recycle": settings.DB_POOL_RECYCLE,
                "pool_timeout": settings.DB_POOL_TIMEOUT,
            }

        return create_async_engine(get_async_database_url(settings), **engine_config)

    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


def get_async_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = create_async_database_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_async_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections; no-op when the engine was never created."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Async database engine disposed")
    _engine = None
    _session_factory = None


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Use cases commit through their unit of work; anything left pending
    when the request fails is rolled back here.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise

