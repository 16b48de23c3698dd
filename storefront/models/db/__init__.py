"""
Database models
"""

from .base import Base, TimestampMixin
from .carts import Cart, CartItem
from .catalog import Product, ProductVariant
from .coupons import Coupon
from .digital_delivery import DigitalDelivery
from .orders import Order, OrderItem
from .shipping import ShippingZone

__all__ = [
    "Base",
    "TimestampMixin",
    "Cart",
    "CartItem",
    "Product",
    "ProductVariant",
    "Coupon",
    "DigitalDelivery",
    "Order",
    "OrderItem",
    "ShippingZone",
]
