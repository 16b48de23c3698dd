"""
Dependency Injection Container.

Centralized container for creating and managing application dependencies.
Wires concrete implementations to the checkout ports.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config.settings import Settings, get_settings
from storefront.domains.ecommerce.application.use_cases import (
    CheckoutUseCase,
    GetShippingOptionsUseCase,
    ValidateCouponUseCase,
)
from storefront.domains.ecommerce.infrastructure.notifications import BackgroundNotificationDispatcher

from .checkout import CheckoutContainer

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._checkout = CheckoutContainer(self.settings)
        logger.info("DependencyContainer initialized")

    def get_notification_dispatcher(self) -> BackgroundNotificationDispatcher:
        return self._checkout.get_notification_dispatcher()

    def create_checkout_use_case(self, db: AsyncSession) -> CheckoutUseCase:
        return self._checkout.create_checkout_use_case(db)

    def create_get_shipping_options_use_case(self, db: AsyncSession) -> GetShippingOptionsUseCase:
        return self._checkout.create_get_shipping_options_use_case(db)

    def create_validate_coupon_use_case(self, db: AsyncSession) -> ValidateCouponUseCase:
        return self._checkout.create_validate_coupon_use_case(db)


_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """Get the process-wide container."""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def reset_container() -> None:
    """Drop the cached container (tests, settings reload)."""
    global _container
    _container = None


__all__ = [
    "CheckoutContainer",
    "DependencyContainer",
    "get_container",
    "reset_container",
]
