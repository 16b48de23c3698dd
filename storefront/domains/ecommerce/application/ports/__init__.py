"""
Ecommerce Application Ports

Interface definitions (ports) for the checkout flow.
Uses Protocol for structural typing.
"""

from typing import Protocol, runtime_checkable
from uuid import UUID

from storefront.domains.ecommerce.application.dto import LowStockItem
from storefront.domains.ecommerce.domain.entities import (
    Cart,
    Coupon,
    DigitalDelivery,
    Order,
    Product,
    ProductVariant,
    ShippingZone,
)


@runtime_checkable
class ICartRepository(Protocol):
    """Interface for cart data access."""

    async def find_by_user(self, user_id: str) -> Cart | None:
        """Get the cart of a registered user"""
        ...

    async def find_by_session(self, session_id: str) -> Cart | None:
        """Get the cart of an anonymous session"""
        ...

    async def save(self, cart: Cart) -> Cart:
        """Persist cart items"""
        ...


@runtime_checkable
class IProductRepository(Protocol):
    """
    Interface for product and variant data access.

    The decrement methods are the oversell guard: they must be a single
    conditional update so two concurrent checkouts cannot both take the
    last unit of a product that does not allow backorders.
    """

    async def find_by_id(self, product_id: UUID) -> Product | None:
        """Get product by ID"""
        ...

    async def find_variant_by_id(self, variant_id: UUID) -> ProductVariant | None:
        """Get variant by ID"""
        ...

    async def decrement_stock(self, product_id: UUID, quantity: int, allow_backorder: bool) -> int | None:
        """Take stock from a product. Returns new stock, or None when there was not enough."""
        ...

    async def decrement_variant_stock(self, variant_id: UUID, quantity: int, allow_backorder: bool) -> int | None:
        """Take stock from a variant. Returns new stock, or None when there was not enough."""
        ...

    async def increment_total_sold(self, product_id: UUID, quantity: int) -> None:
        """Add to the product's sold counter"""
        ...


@runtime_checkable
class IShippingZoneRepository(Protocol):
    """Interface for shipping zone data access."""

    async def list_active(self) -> list[ShippingZone]:
        """Active zones in configured order"""
        ...

    async def find_zone_for_address(self, country: str | None, state: str | None) -> ShippingZone | None:
        """Best zone for the address, or None"""
        ...


@runtime_checkable
class ICouponRepository(Protocol):
    """Interface for coupon data access."""

    async def find_by_code(self, code: str) -> Coupon | None:
        """Get an active coupon by code (case-insensitive)"""
        ...

    async def save(self, coupon: Coupon) -> Coupon:
        """Save a coupon"""
        ...

    async def redeem(self, coupon_id: UUID) -> int | None:
        """Atomically use the coupon once. Returns the new usage count, or None when exhausted."""
        ...

    async def count_user_redemptions(self, code: str, user_id: str) -> int:
        """Orders of the user that used the code with payment pending or paid"""
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """Interface for order data access."""

    async def create(self, order: Order) -> Order:
        """Create a new order"""
        ...

    async def count_orders(self) -> int:
        """Number of orders ever created"""
        ...


@runtime_checkable
class IDigitalDeliveryRepository(Protocol):
    """Interface for digital delivery grant data access."""

    async def create(self, delivery: DigitalDelivery) -> DigitalDelivery:
        """Create a new grant"""
        ...


@runtime_checkable
class IUnitOfWork(Protocol):
    """Transaction boundary shared by the repositories of one checkout."""

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...


@runtime_checkable
class INotificationDispatcher(Protocol):
    """
    Best-effort notification channel.

    Implementations return immediately; delivery happens in the background
    and failures are logged, never raised to the caller.
    """

    def notify_order_confirmed(
        self,
        order: Order,
        deliveries: list[DigitalDelivery],
        recipient_email: str | None,
    ) -> None:
        """Queue the order confirmation"""
        ...

    def notify_low_stock(self, items: list[LowStockItem]) -> None:
        """Queue a low-stock alert for store staff"""
        ...


__all__ = [
    "ICartRepository",
    "IProductRepository",
    "IShippingZoneRepository",
    "ICouponRepository",
    "IOrderRepository",
    "IDigitalDeliveryRepository",
    "IUnitOfWork",
    "INotificationDispatcher",
]
