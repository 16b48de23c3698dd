"""
Ecommerce Application DTOs

Data Transfer Objects for the checkout flow.
"""

from dataclasses import dataclass, field, fields
from typing import Any
from uuid import UUID

from storefront.core.domain import Address
from storefront.domains.ecommerce.domain.entities import Coupon, DigitalFile
from storefront.domains.ecommerce.domain.value_objects import ProductType, VariantAttributes

# ==================== Identity DTOs ====================


@dataclass(frozen=True)
class BuyerIdentity:
    """Authenticated buyer taken from the request context."""

    user_id: str
    email: str | None = None


# ==================== Checkout Input DTOs ====================


@dataclass
class AddressInput:
    """Address as submitted by the client, before trimming."""

    first_name: str | None = None
    last_name: str | None = None
    address1: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    company: str | None = None
    address2: str | None = None
    phone: str | None = None

    def missing_fields(self) -> list[str]:
        """Required fields that are absent or blank."""
        return [name for name in Address.REQUIRED_FIELDS if not (getattr(self, name) or "").strip()]

    def to_address(self, default_country: str = "US") -> Address:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return Address.normalized(default_country=default_country, **values)


@dataclass
class CheckoutRequest:
    """Request for placing an order from a cart."""

    shipping_address: AddressInput | None
    buyer: BuyerIdentity | None = None
    session_id: str | None = None
    billing_address: AddressInput | None = None
    billing_same_as_shipping: bool = True
    guest_email: str | None = None
    shipping_method: str = "standard"
    coupon_code: str | None = None
    customer_note: str | None = None


@dataclass
class CheckoutResult:
    """What the caller gets back after a successful checkout."""

    order_id: UUID
    order_number: str
    tracking_code: str | None
    total: int
    status: str


# ==================== Cart Snapshot DTOs ====================


@dataclass(frozen=True)
class ResolvedItem:
    """Cart line joined with current catalog data."""

    product_id: UUID
    name: str
    slug: str
    sku: str
    price: int
    quantity: int
    product_type: ProductType
    allow_backorder: bool
    variant_id: UUID | None = None
    image: str | None = None
    variant_info: VariantAttributes = field(default_factory=VariantAttributes)
    digital_file: DigitalFile | None = None

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    @property
    def is_digital(self) -> bool:
        return self.product_type == ProductType.DIGITAL

    @property
    def display_name(self) -> str:
        return f"{self.name}{self.variant_info.display_suffix()}"


@dataclass
class CartSnapshot:
    """Result of resolving a cart against the catalog."""

    items: list[ResolvedItem] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    is_all_digital: bool = False

    @property
    def subtotal(self) -> int:
        return sum(item.line_total for item in self.items)


# ==================== Pricing DTOs ====================


@dataclass(frozen=True)
class CouponValidation:
    """Outcome of checking a coupon for a buyer and subtotal."""

    valid: bool
    discount_amount: int = 0
    discount_details: dict[str, Any] | None = None
    coupon: Coupon | None = None
    reason: str | None = None

    @classmethod
    def rejected(cls, reason: str, coupon: Coupon | None = None) -> "CouponValidation":
        return cls(valid=False, reason=reason, coupon=coupon)


@dataclass(frozen=True)
class PricingResult:
    """All amounts of an order, in cents."""

    subtotal: int
    shipping_cost: int
    shipping_method_id: str
    shipping_method_label: str
    tax_amount: int
    discount_amount: int
    discount_details: dict[str, Any] | None
    total: int
    coupon: Coupon | None = None


# ==================== Notification DTOs ====================


@dataclass(frozen=True)
class LowStockItem:
    """Line whose stock dropped to or below the alert threshold."""

    name: str
    sku: str
    stock_quantity: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "sku": self.sku, "stock_quantity": self.stock_quantity}


__all__ = [
    "BuyerIdentity",
    "AddressInput",
    "CheckoutRequest",
    "CheckoutResult",
    "ResolvedItem",
    "CartSnapshot",
    "CouponValidation",
    "PricingResult",
    "LowStockItem",
]
