"""
Validate Coupon Use Case

Public coupon preview shown in the cart before checkout.
"""

from dataclasses import dataclass
from typing import Any

from storefront.core.domain import BusinessRuleViolationException, EntityNotFoundException
from storefront.domains.ecommerce.application.dto import BuyerIdentity
from storefront.domains.ecommerce.application.services import CouponValidator
from storefront.domains.ecommerce.application.services.coupon_validator import INVALID_CODE_REASON
from storefront.domains.ecommerce.domain.entities import normalize_code


@dataclass
class ValidateCouponRequest:
    code: str
    subtotal: int
    buyer: BuyerIdentity | None = None


@dataclass
class ValidateCouponResponse:
    code: str
    discount_amount: int
    discount_details: dict[str, Any]
    description: str = ""


class ValidateCouponUseCase:
    """
    Use Case: Validate Coupon

    Same rules as checkout, but reports why a coupon does not apply
    instead of silently ignoring it. Does not use up the coupon.
    """

    def __init__(self, coupon_validator: CouponValidator):
        self.coupon_validator = coupon_validator

    async def execute(self, request: ValidateCouponRequest) -> ValidateCouponResponse:
        """
        Raises:
            EntityNotFoundException: Unknown or inactive code
            BusinessRuleViolationException: Coupon exists but does not apply
        """
        code = normalize_code(request.code)
        validation = await self.coupon_validator.validate(code, request.subtotal, request.buyer)

        if not validation.valid:
            if validation.reason == INVALID_CODE_REASON:
                raise EntityNotFoundException("Coupon", code, INVALID_CODE_REASON)
            raise BusinessRuleViolationException("coupon_applicable", validation.reason)

        return ValidateCouponResponse(
            code=code,
            discount_amount=validation.discount_amount,
            discount_details=validation.discount_details,
            description=validation.coupon.description if validation.coupon else "",
        )
