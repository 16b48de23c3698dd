"""
Application factory for FastAPI.

Builds the checkout API: middleware, exception handlers, routes and the
health endpoint.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.exception_handlers import register_exception_handlers
from storefront.api.router import api_router
from storefront.config.settings import Settings, get_settings
from storefront.core.lifecycle import lifespan

logger = logging.getLogger(__name__)


class AppFactory:
    """Builds the checkout API from settings, one step per method."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def create_app(self) -> FastAPI:
        app = self._create_base_app()

        self._configure_middleware(app)
        self._configure_exception_handlers(app)
        self._configure_routes(app)
        self._configure_health_endpoint(app)

        logger.info(f"{self._settings.PROJECT_NAME} app built (debug={self._settings.DEBUG})")
        return app

    def _create_base_app(self) -> FastAPI:
        return FastAPI(
            title=self._settings.PROJECT_NAME,
            description=self._settings.PROJECT_DESCRIPTION,
            version=self._settings.VERSION,
            docs_url=f"{self._settings.API_V1_STR}/docs" if self._settings.DEBUG else None,
            redoc_url=f"{self._settings.API_V1_STR}/redoc" if self._settings.DEBUG else None,
            lifespan=lifespan,
        )

    def _configure_middleware(self, app: FastAPI) -> None:
        # Cart session cookie must cross origins, so credentials are allowed
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _configure_exception_handlers(self, app: FastAPI) -> None:
        register_exception_handlers(app)

    def _configure_routes(self, app: FastAPI) -> None:
        app.include_router(api_router, prefix=self._settings.API_V1_STR)

    def _configure_health_endpoint(self, app: FastAPI) -> None:
        @app.get("/health", tags=["health"])
        async def health_check() -> dict[str, str]:
            """Basic status and environment information."""
            return {
                "status": "ok",
                "environment": self._settings.ENVIRONMENT,
            }


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; tests pass their own settings."""
    return AppFactory(settings).create_app()
