"""
Application lifecycle management using the FastAPI lifespan pattern.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront.config.settings import get_settings
from storefront.core.container import get_container
from storefront.core.shared.logger import configure_logging
from storefront.database.async_db import dispose_engine

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Startup configures logging. Shutdown waits for queued notifications,
    then closes the database pool.
    """

    def __init__(self) -> None:
        self._initialized = False

    async def startup(self) -> None:
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        settings = get_settings()
        configure_logging(level=settings.LOG_LEVEL, format_type=settings.LOG_FORMAT)
        logger.info(f"Starting {settings.PROJECT_NAME} in {settings.ENVIRONMENT} mode")

        if not settings.NOTIFICATIONS_WEBHOOK_URL:
            logger.warning("NOTIFICATIONS_WEBHOOK_URL is not set, notifications will only be logged")

        self._initialized = True

    async def shutdown(self) -> None:
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        dispatcher = get_container().get_notification_dispatcher()
        await dispatcher.drain()
        await dispose_engine()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")


# Global lifecycle manager instance
_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """FastAPI lifespan context manager."""
    manager = get_lifecycle_manager()
    await manager.startup()
    try:
        yield
    finally:
        await manager.shutdown()
