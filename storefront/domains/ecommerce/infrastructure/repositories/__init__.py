"""
Ecommerce Infrastructure Repositories

SQLAlchemy implementations of the checkout ports.
"""

from .cart_repository import SQLAlchemyCartRepository
from .coupon_repository import SQLAlchemyCouponRepository
from .digital_delivery_repository import SQLAlchemyDigitalDeliveryRepository
from .order_repository import SQLAlchemyOrderRepository
from .product_repository import SQLAlchemyProductRepository
from .shipping_zone_repository import SQLAlchemyShippingZoneRepository
from .unit_of_work import SQLAlchemyUnitOfWork

__all__ = [
    "SQLAlchemyCartRepository",
    "SQLAlchemyCouponRepository",
    "SQLAlchemyDigitalDeliveryRepository",
    "SQLAlchemyOrderRepository",
    "SQLAlchemyProductRepository",
    "SQLAlchemyShippingZoneRepository",
    "SQLAlchemyUnitOfWork",
]
