"""
Coupon Validator

Decides whether a coupon applies to a buyer and subtotal, and how much it
takes off. Read-only: the usage counter is only touched when checkout
redeems the coupon inside its transaction.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from storefront.domains.ecommerce.application.dto import BuyerIdentity, CouponValidation
from storefront.domains.ecommerce.application.ports import ICouponRepository
from storefront.domains.ecommerce.domain.entities import normalize_code

logger = logging.getLogger(__name__)

INVALID_CODE_REASON = "Invalid coupon code"
ALREADY_USED_REASON = "You have already used this coupon"


class CouponValidator:
    """
    Validate coupons against their own rules and the buyer's history.

    Checks, in order:
    - the code exists and the coupon is active
    - the coupon's validity window, global usage limit and minimum purchase
    - for registered buyers, the per-user limit counted over their orders
      with payment pending or paid
    """

    def __init__(
        self,
        coupon_repository: ICouponRepository,
        clock: Callable[[], datetime] | None = None,
    ):
        self.coupon_repository = coupon_repository
        self._clock = clock or (lambda: datetime.now(UTC))

    async def validate(self, code: str | None, subtotal: int, buyer: BuyerIdentity | None = None) -> CouponValidation:
        code = normalize_code(code)
        if not code:
            return CouponValidation.rejected(INVALID_CODE_REASON)

        coupon = await self.coupon_repository.find_by_code(code)
        if coupon is None or not coupon.is_active:
            return CouponValidation.rejected(INVALID_CODE_REASON)

        reason = coupon.check_validity(subtotal, self._clock())
        if reason:
            logger.info(f"Coupon {code} rejected: {reason}")
            return CouponValidation.rejected(reason, coupon)

        if buyer is not None and coupon.user_limit:
            used = await self.coupon_repository.count_user_redemptions(code, buyer.user_id)
            if used >= coupon.user_limit:
                logger.info(f"Coupon {code} rejected for user {buyer.user_id}: used {used}/{coupon.user_limit}")
                return CouponValidation.rejected(ALREADY_USED_REASON, coupon)

        return CouponValidation(
            valid=True,
            discount_amount=coupon.calculate_discount(subtotal),
            discount_details=coupon.discount_details(),
            coupon=coupon,
        )
