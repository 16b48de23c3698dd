"""
Shipping Zone Repository Implementation

SQLAlchemy implementation of IShippingZoneRepository.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domains.ecommerce.application.ports import IShippingZoneRepository
from storefront.domains.ecommerce.domain.entities import ShippingMethod, ShippingZone
from storefront.domains.ecommerce.domain.services import ShippingZoneMatcher
from storefront.models.db.shipping import ShippingZone as ShippingZoneModel

logger = logging.getLogger(__name__)


class SQLAlchemyShippingZoneRepository(IShippingZoneRepository):
    """
    SQLAlchemy implementation of shipping zone repository.

    Zones are few, so matching loads every active zone and ranks them in
    memory with ShippingZoneMatcher.
    """

    def __init__(self, session: AsyncSession, matcher: ShippingZoneMatcher | None = None):
        self.session = session
        self.matcher = matcher or ShippingZoneMatcher()

    async def list_active(self) -> list[ShippingZone]:
        """Active zones ordered by sort_order, then creation."""
        result = await self.session.execute(
            select(ShippingZoneModel)
            .where(ShippingZoneModel.is_active.is_(True))
            .order_by(ShippingZoneModel.sort_order, ShippingZoneModel.created_at)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_zone_for_address(self, country: str | None, state: str | None) -> ShippingZone | None:
        zones = await self.list_active()
        return self.matcher.find_zone_for_address(zones, country, state)

    @staticmethod
    def _to_entity(model: ShippingZoneModel) -> ShippingZone:
        return ShippingZone(
            id=model.id,
            name=model.name,
            countries=list(model.countries or []),
            states=list(model.states or []),
            methods=[ShippingMethod.from_dict(m) for m in (model.methods or [])],
            is_default=model.is_default,
            is_active=model.is_active,
            sort_order=model.sort_order,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
