"""
E-commerce Domain Entities
"""

from .cart import MAX_LINE_QUANTITY, Cart, CartItem
from .coupon import Coupon, DiscountType, normalize_code
from .digital_delivery import DeliveryStatus, DigitalDelivery
from .order import Order, OrderItem
from .product import DigitalFile, Product, ProductImage, ProductVariant
from .shipping_zone import ShippingMethod, ShippingZone, ZoneSpecificity

__all__ = [
    "Cart",
    "CartItem",
    "MAX_LINE_QUANTITY",
    "Coupon",
    "DiscountType",
    "normalize_code",
    "DeliveryStatus",
    "DigitalDelivery",
    "Order",
    "OrderItem",
    "DigitalFile",
    "Product",
    "ProductImage",
    "ProductVariant",
    "ShippingMethod",
    "ShippingZone",
    "ZoneSpecificity",
]
