"""
Checkout-specific domain exceptions.
"""

from storefront.core.domain import BusinessRuleViolationException


class EmptyCartException(BusinessRuleViolationException):
    def __init__(self, message: str = "Cart is empty"):
        super().__init__("cart_not_empty", message)


class CartValidationException(BusinessRuleViolationException):
    """One or more cart lines cannot be purchased. Carries every reason."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("cart_lines_purchasable", "; ".join(self.errors), {"errors": self.errors})


class CouponRedemptionException(BusinessRuleViolationException):
    """The coupon ran out of uses between validation and redemption."""

    def __init__(self, code: str):
        self.coupon_code = code
        super().__init__("coupon_usage_limit", f"Coupon {code} is no longer available", {"code": code})
