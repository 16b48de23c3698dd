"""
Pricing Service for E-commerce Domain

Domain service that encapsulates the shipping, tax and total rules of
checkout. Every method is a pure function of its arguments.
"""

from dataclasses import dataclass
from decimal import Decimal

from ..entities.shipping_zone import ShippingZone
from ..value_objects import apply_rate

DIGITAL_METHOD_ID = "digital"
DIGITAL_METHOD_LABEL = "Digital Delivery (Email)"

# Used only when no shipping zone matches the address
LEGACY_FREE_SHIPPING_THRESHOLD = 5000
LEGACY_SHIPPING_COSTS = {
    "standard": 499,
    "express": 999,
    "overnight": 1999,
    "pickup": 0,
}
LEGACY_SHIPPING_LABELS = {
    "standard": "Standard Shipping",
    "express": "Express Shipping (2-3 days)",
    "overnight": "Overnight Shipping",
    "pickup": "Store Pickup",
    DIGITAL_METHOD_ID: DIGITAL_METHOD_LABEL,
}
LEGACY_DEFAULT_COST = 499
LEGACY_DEFAULT_LABEL = "Standard Shipping"


@dataclass(frozen=True)
class ShippingQuote:
    """Resolved shipping method, label and cost in cents."""

    method_id: str
    label: str
    cost: int


class PricingService:
    """
    Domain service for checkout price calculations.

    Handles:
    - Zone based shipping with method fallback
    - Legacy shipping table when no zone applies
    - Digital-only orders shipping for free
    - Flat-rate tax and the final total

    Example:
        ```python
        service = PricingService(tax_rate=Decimal("0.085"))
        quote = service.resolve_shipping(zone, "express", subtotal=10000)
        tax = service.calculate_tax(10000)  # 850
        ```
    """

    def __init__(self, tax_rate: Decimal = Decimal("0.085")):
        """
        Initialize pricing service.

        Args:
            tax_rate: Flat tax rate as a fraction (0.085 = 8.5%)
        """
        self.tax_rate = tax_rate

    def resolve_shipping(
        self,
        zone: ShippingZone | None,
        method_id: str,
        subtotal: int,
        is_all_digital: bool = False,
    ) -> ShippingQuote:
        """
        Decide shipping for an order.

        Args:
            zone: Matched shipping zone, None when no zone applies
            method_id: Method requested by the buyer
            subtotal: Order subtotal in cents
            is_all_digital: Every line is a digital product

        Returns:
            ShippingQuote with the effective method id
        """
        if is_all_digital:
            return ShippingQuote(DIGITAL_METHOD_ID, DIGITAL_METHOD_LABEL, 0)
        if zone is None:
            return self.legacy_shipping(method_id, subtotal)

        method = zone.find_active_method(method_id)
        if method is not None:
            return ShippingQuote(method.method_id, method.label_for(subtotal), method.cost_for(subtotal))

        active = zone.active_methods()
        if not active:
            return ShippingQuote(method_id, LEGACY_DEFAULT_LABEL, LEGACY_DEFAULT_COST)
        # Substituted method keeps its plain label even when the threshold makes it free
        fallback = active[0]
        return ShippingQuote(fallback.method_id, fallback.label, fallback.cost_for(subtotal))

    def legacy_shipping(self, method_id: str, subtotal: int) -> ShippingQuote:
        """Hardcoded rates used when no zone is configured for the address."""
        if method_id == "standard" and subtotal >= LEGACY_FREE_SHIPPING_THRESHOLD:
            return ShippingQuote(method_id, "Free Standard Shipping", 0)
        cost = LEGACY_SHIPPING_COSTS.get(method_id, LEGACY_DEFAULT_COST)
        label = LEGACY_SHIPPING_LABELS.get(method_id, LEGACY_DEFAULT_LABEL)
        return ShippingQuote(method_id, label, cost)

    def calculate_tax(self, subtotal: int) -> int:
        """Tax in cents, rounded half-up."""
        return apply_rate(subtotal, self.tax_rate)

    @staticmethod
    def calculate_total(subtotal: int, shipping_cost: int, tax_amount: int, discount_amount: int) -> int:
        """Grand total, never negative."""
        return max(0, subtotal + shipping_cost + tax_amount - discount_amount)


__all__ = [
    "PricingService",
    "ShippingQuote",
    "DIGITAL_METHOD_ID",
    "DIGITAL_METHOD_LABEL",
    "LEGACY_FREE_SHIPPING_THRESHOLD",
    "LEGACY_SHIPPING_COSTS",
    "LEGACY_SHIPPING_LABELS",
]
