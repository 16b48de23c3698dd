"""
E-commerce Domain Services
"""

from .order_numbers import generate_order_number, generate_tracking_code
from .pricing_service import (
    DIGITAL_METHOD_ID,
    DIGITAL_METHOD_LABEL,
    PricingService,
    ShippingQuote,
)
from .shipping_zone_matcher import ShippingZoneMatcher, ZoneMatch

__all__ = [
    "PricingService",
    "ShippingQuote",
    "DIGITAL_METHOD_ID",
    "DIGITAL_METHOD_LABEL",
    "ShippingZoneMatcher",
    "ZoneMatch",
    "generate_order_number",
    "generate_tracking_code",
]
