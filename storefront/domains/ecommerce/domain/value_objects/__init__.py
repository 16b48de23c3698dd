"""
E-commerce Value Objects
"""

from .money import apply_percentage, apply_rate, format_cents, round_to_cents
from .order_status import REDEEMING_PAYMENT_STATUSES, OrderStatus, PaymentStatus
from .product_status import ProductStatus, ProductType
from .variant_attributes import VariantAttributes

__all__ = [
    "OrderStatus",
    "PaymentStatus",
    "REDEEMING_PAYMENT_STATUSES",
    "ProductStatus",
    "ProductType",
    "VariantAttributes",
    "apply_percentage",
    "apply_rate",
    "format_cents",
    "round_to_cents",
]
