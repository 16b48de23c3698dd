"""
Order Status Value Objects for E-commerce Domain

Lifecycle states of an order and of its payment, with transition rules.
"""

from storefront.core.domain import StatusEnum


class OrderStatus(StatusEnum):
    """
    Order lifecycle states.

    Checkout only creates orders in PENDING_PAYMENT. Every other
    transition belongs to payment and fulfillment collaborators.
    """

    PENDING_PAYMENT = "pending_payment"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    def can_transition_to(self, new_status: "OrderStatus") -> bool:
        """Check if transition to new status is valid."""
        return new_status in _ORDER_TRANSITIONS[self]

    def get_valid_transitions(self) -> list["OrderStatus"]:
        """Get list of valid next statuses."""
        return list(_ORDER_TRANSITIONS[self])

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) state."""
        return not _ORDER_TRANSITIONS[self]


class PaymentStatus(StatusEnum):
    """Payment states."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"

    def counts_as_redemption(self) -> bool:
        """Orders in these payment states consume a per-user coupon use."""
        return self in (PaymentStatus.PENDING, PaymentStatus.PAID)


_ORDER_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING_PAYMENT: (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    OrderStatus.PROCESSING: (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (OrderStatus.REFUNDED,),
    OrderStatus.CANCELLED: (OrderStatus.REFUNDED,),
    OrderStatus.REFUNDED: (),
}

# Payment states that count against a coupon's per-user limit
REDEEMING_PAYMENT_STATUSES = tuple(status for status in PaymentStatus if status.counts_as_redemption())
