"""
Get Shipping Options Use Case

Shows which shipping methods apply to an address before checkout.
"""

import logging
from dataclasses import dataclass, field

from storefront.domains.ecommerce.application.ports import IShippingZoneRepository
from storefront.domains.ecommerce.domain.entities import ShippingZone
from storefront.domains.ecommerce.domain.services import PricingService
from storefront.domains.ecommerce.domain.services.pricing_service import LEGACY_SHIPPING_COSTS

logger = logging.getLogger(__name__)


@dataclass
class GetShippingOptionsRequest:
    """Request for the shipping options of an address."""

    country: str | None = None
    state: str | None = None
    subtotal: int = 0


@dataclass
class ShippingOption:
    method_id: str
    label: str
    price: int
    cost: int
    free_threshold: int | None = None
    description: str = ""
    estimated_days: str = ""


@dataclass
class GetShippingOptionsResponse:
    """Matched zone (if any) and the methods a buyer can pick."""

    zone_id: str | None = None
    zone_name: str | None = None
    uses_legacy_rates: bool = False
    options: list[ShippingOption] = field(default_factory=list)


class GetShippingOptionsUseCase:
    """
    Use Case: Get Shipping Options

    Lists the active methods of the zone matching the address, priced for
    the given subtotal. Without a zone, lists the legacy rates checkout
    would apply.
    """

    def __init__(self, shipping_zone_repository: IShippingZoneRepository, pricing_service: PricingService):
        self.shipping_zone_repository = shipping_zone_repository
        self.pricing_service = pricing_service

    async def execute(self, request: GetShippingOptionsRequest) -> GetShippingOptionsResponse:
        zone = await self.shipping_zone_repository.find_zone_for_address(request.country, request.state)
        if zone is None:
            logger.debug(f"No shipping zone for {request.country}/{request.state}")
            return GetShippingOptionsResponse(uses_legacy_rates=True, options=self._legacy_options(request.subtotal))
        return GetShippingOptionsResponse(
            zone_id=str(zone.id) if zone.id else None,
            zone_name=zone.name,
            options=self._zone_options(zone, request.subtotal),
        )

    @staticmethod
    def _zone_options(zone: ShippingZone, subtotal: int) -> list[ShippingOption]:
        return [
            ShippingOption(
                method_id=method.method_id,
                label=method.label_for(subtotal),
                price=method.price,
                cost=method.cost_for(subtotal),
                free_threshold=method.free_threshold,
                description=method.description,
                estimated_days=method.estimated_days,
            )
            for method in zone.active_methods()
        ]

    def _legacy_options(self, subtotal: int) -> list[ShippingOption]:
        options = []
        for method_id, price in LEGACY_SHIPPING_COSTS.items():
            quote = self.pricing_service.legacy_shipping(method_id, subtotal)
            options.append(ShippingOption(method_id=method_id, label=quote.label, price=price, cost=quote.cost))
        return options
