"""
Order Pricing Engine

Turns a resolved cart into the amounts of an order: subtotal, shipping,
tax, discount and total.
"""

import logging

from storefront.core.domain import Address
from storefront.domains.ecommerce.application.dto import BuyerIdentity, CartSnapshot, PricingResult
from storefront.domains.ecommerce.application.ports import IShippingZoneRepository
from storefront.domains.ecommerce.application.services.coupon_validator import CouponValidator
from storefront.domains.ecommerce.domain.services import PricingService, ShippingZoneMatcher

logger = logging.getLogger(__name__)


class OrderPricingEngine:
    """
    Price an order without changing anything in storage.

    Calling `price` twice with the same inputs and unchanged data yields
    equal results.

    Example:
        ```python
        engine = OrderPricingEngine(zone_repository, coupon_validator, PricingService(), ShippingZoneMatcher())
        result = await engine.price(snapshot, address, "standard", "SAVE10", snapshot.is_all_digital)
        ```
    """

    def __init__(
        self,
        shipping_zone_repository: IShippingZoneRepository,
        coupon_validator: CouponValidator,
        pricing_service: PricingService,
        zone_matcher: ShippingZoneMatcher,
    ):
        self.shipping_zone_repository = shipping_zone_repository
        self.coupon_validator = coupon_validator
        self.pricing_service = pricing_service
        self.zone_matcher = zone_matcher

    async def price(
        self,
        snapshot: CartSnapshot,
        address: Address,
        shipping_method_id: str,
        coupon_code: str | None,
        is_all_digital: bool,
        buyer: BuyerIdentity | None = None,
    ) -> PricingResult:
        subtotal = snapshot.subtotal

        zone = None
        if not is_all_digital:
            zones = await self.shipping_zone_repository.list_active()
            zone = self.zone_matcher.find_zone_for_address(zones, address.country, address.state)
            if zone is None:
                logger.info(f"No shipping zone for {address.country}/{address.state}, using legacy rates")

        quote = self.pricing_service.resolve_shipping(zone, shipping_method_id, subtotal, is_all_digital)
        tax_amount = self.pricing_service.calculate_tax(subtotal)

        discount_amount = 0
        discount_details = None
        coupon = None
        if coupon_code:
            validation = await self.coupon_validator.validate(coupon_code, subtotal, buyer)
            if validation.valid:
                discount_amount = validation.discount_amount
                discount_details = validation.discount_details
                coupon = validation.coupon

        return PricingResult(
            subtotal=subtotal,
            shipping_cost=quote.cost,
            shipping_method_id=quote.method_id,
            shipping_method_label=quote.label,
            tax_amount=tax_amount,
            discount_amount=discount_amount,
            discount_details=discount_details,
            total=self.pricing_service.calculate_total(subtotal, quote.cost, tax_amount, discount_amount),
            coupon=coupon,
        )
