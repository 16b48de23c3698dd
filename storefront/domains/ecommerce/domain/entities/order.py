"""
Order Entity for E-commerce Domain

Snapshot of a checkout: buyer, frozen line items, addresses and totals.
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from storefront.core.domain import Address, AggregateRoot, BusinessRuleViolationException

from ..value_objects import OrderStatus, PaymentStatus, VariantAttributes


@dataclass(frozen=True)
class OrderItem:
    """Frozen copy of a purchased line. Later catalog edits do not affect it."""

    product_id: UUID
    name: str
    slug: str
    sku: str
    price: int
    quantity: int
    variant_id: UUID | None = None
    image: str | None = None
    variant_info: VariantAttributes = field(default_factory=VariantAttributes)

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": str(self.product_id),
            "variant_id": str(self.variant_id) if self.variant_id else None,
            "name": self.name,
            "slug": self.slug,
            "sku": self.sku,
            "image": self.image,
            "price": self.price,
            "quantity": self.quantity,
            "variant_info": self.variant_info.to_list(),
            "line_total": self.line_total,
        }


@dataclass
class Order(AggregateRoot[UUID]):
    """
    Order aggregate root.

    Created once per checkout in PENDING_PAYMENT. Afterwards only its
    status changes, through `transition_to`.
    """

    order_number: str = ""
    tracking_code: str | None = None

    # Buyer, exactly one of the two
    user_id: str | None = None
    guest_email: str | None = None

    items: list[OrderItem] = field(default_factory=list)

    shipping_address: Address | None = None
    billing_address: Address | None = None
    billing_same_as_shipping: bool = True

    # Totals in cents
    subtotal: int = 0
    shipping_cost: int = 0
    shipping_method: str = "standard"
    shipping_method_label: str = ""
    tax_amount: int = 0
    discount: int = 0
    discount_details: dict[str, Any] | None = None
    total: int = 0

    status: OrderStatus = OrderStatus.PENDING_PAYMENT
    payment_status: PaymentStatus = PaymentStatus.PENDING
    customer_note: str = ""

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def discount_code(self) -> str | None:
        return self.discount_details["code"] if self.discount_details else None

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move to a new lifecycle state, enforcing the transition table."""
        if not self.status.can_transition_to(new_status):
            raise BusinessRuleViolationException(
                "order_status_transition",
                f"Cannot move order {self.order_number} from {self.status.value} to {new_status.value}",
            )
        self.status = new_status
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id) if self.id else None,
            "order_number": self.order_number,
            "tracking_code": self.tracking_code,
            "user_id": self.user_id,
            "guest_email": self.guest_email,
            "items": [item.to_dict() for item in self.items],
            "shipping_address": self.shipping_address.to_dict() if self.shipping_address else None,
            "billing_address": self.billing_address.to_dict() if self.billing_address else None,
            "subtotal": self.subtotal,
            "shipping_cost": self.shipping_cost,
            "shipping_method": self.shipping_method,
            "shipping_method_label": self.shipping_method_label,
            "tax_amount": self.tax_amount,
            "discount": self.discount,
            "discount_details": self.discount_details,
            "total": self.total,
            "status": self.status.value,
            "payment_status": self.payment_status.value,
            "customer_note": self.customer_note,
            "created_at": self.created_at.isoformat(),
        }
