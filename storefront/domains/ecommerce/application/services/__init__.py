"""
Ecommerce Application Services
"""

from .cart_snapshot_resolver import CartSnapshotResolver
from .coupon_validator import CouponValidator
from .order_pricing_engine import OrderPricingEngine

__all__ = [
    "CartSnapshotResolver",
    "CouponValidator",
    "OrderPricingEngine",
]
