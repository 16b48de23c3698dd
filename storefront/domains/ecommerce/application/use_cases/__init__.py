"""
Ecommerce Use Cases
"""

from .checkout import CheckoutPolicy, CheckoutUseCase
from .get_shipping_options import GetShippingOptionsRequest, GetShippingOptionsResponse, GetShippingOptionsUseCase
from .validate_coupon import ValidateCouponRequest, ValidateCouponResponse, ValidateCouponUseCase

__all__ = [
    "CheckoutPolicy",
    "CheckoutUseCase",
    "GetShippingOptionsRequest",
    "GetShippingOptionsResponse",
    "GetShippingOptionsUseCase",
    "ValidateCouponRequest",
    "ValidateCouponResponse",
    "ValidateCouponUseCase",
]
