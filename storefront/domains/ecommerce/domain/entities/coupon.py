"""
Coupon Entity for E-commerce Domain

Discount code with a validity window and global / per-user usage limits.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from storefront.core.domain import AggregateRoot, StatusEnum, ValidationException

from ..value_objects import apply_percentage, format_cents


class DiscountType(StatusEnum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass
class Coupon(AggregateRoot[UUID]):
    """
    Coupon aggregate root.

    `discount_value` is a whole percentage for PERCENTAGE coupons and an
    amount in cents for FIXED ones. `usage_count` is only ever increased
    by the coupon repository's atomic redeem.
    """

    code: str = ""
    description: str = ""
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: int = 0
    min_purchase: int = 0
    max_discount: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    usage_limit: int | None = None
    usage_count: int = 0
    user_limit: int | None = 1
    is_active: bool = True

    def __post_init__(self):
        self.code = normalize_code(self.code)
        if self.discount_value < 0:
            raise ValidationException("Discount value cannot be negative", field="discount_value")
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValidationException("Percentage discount cannot exceed 100", field="discount_value")

    def check_validity(self, subtotal: int, now: datetime | None = None) -> str | None:
        """
        Check the coupon's own rules against an order subtotal.

        Args:
            subtotal: Order subtotal in cents
            now: Reference time (defaults to current UTC time)

        Returns:
            None when the coupon applies, otherwise the reason it does not
        """
        now = now or datetime.now(UTC)
        if not self.is_active:
            return "Coupon is not active"
        if self.start_date and now < self.start_date:
            return "Coupon is not yet active"
        if self.end_date and now > self.end_date:
            return "Coupon has expired"
        if not self.has_usage_left():
            return "Coupon usage limit reached"
        if subtotal < self.min_purchase:
            return f"Minimum purchase of {format_cents(self.min_purchase)} required"
        return None

    def is_valid(self, subtotal: int, now: datetime | None = None) -> bool:
        return self.check_validity(subtotal, now) is None

    def has_usage_left(self) -> bool:
        return self.usage_limit is None or self.usage_count < self.usage_limit

    def calculate_discount(self, subtotal: int) -> int:
        """Discount in cents for a subtotal, never more than the subtotal."""
        if self.discount_type == DiscountType.PERCENTAGE:
            discount = apply_percentage(subtotal, self.discount_value)
            if self.max_discount is not None:
                discount = min(discount, self.max_discount)
        else:
            discount = self.discount_value
        return max(0, min(discount, subtotal))

    def discount_details(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "type": self.discount_type.value,
            "value": self.discount_value,
        }


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()
