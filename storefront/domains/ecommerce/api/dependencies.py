"""
Checkout API Dependencies

FastAPI dependencies building request-scoped use cases.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_di_container
from storefront.core.container import DependencyContainer
from storefront.database.async_db import get_async_db
from storefront.domains.ecommerce.application.use_cases import (
    CheckoutUseCase,
    GetShippingOptionsUseCase,
    ValidateCouponUseCase,
)


def get_checkout_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CheckoutUseCase:
    """Get CheckoutUseCase instance."""
    return container.create_checkout_use_case(db)


def get_shipping_options_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> GetShippingOptionsUseCase:
    """Get GetShippingOptionsUseCase instance."""
    return container.create_get_shipping_options_use_case(db)


def get_validate_coupon_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ValidateCouponUseCase:
    """Get ValidateCouponUseCase instance."""
    return container.create_validate_coupon_use_case(db)


__all__ = [
    "get_checkout_use_case",
    "get_shipping_options_use_case",
    "get_validate_coupon_use_case",
]
