"""
Digital Delivery Repository Implementation

SQLAlchemy implementation of IDigitalDeliveryRepository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domains.ecommerce.application.ports import IDigitalDeliveryRepository
from storefront.domains.ecommerce.domain.entities import DigitalDelivery
from storefront.models.db.digital_delivery import DigitalDelivery as DigitalDeliveryModel


class SQLAlchemyDigitalDeliveryRepository(IDigitalDeliveryRepository):
    """SQLAlchemy implementation of digital delivery repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, delivery: DigitalDelivery) -> DigitalDelivery:
        model = DigitalDeliveryModel(
            order_id=delivery.order_id,
            user_id=delivery.user_id,
            guest_email=delivery.guest_email,
            product_id=delivery.product_id,
            variant_id=delivery.variant_id,
            download_token=delivery.download_token,
            download_count=delivery.download_count,
            max_downloads=delivery.max_downloads,
            expires_at=delivery.expires_at,
            status=delivery.status.value,
            file_name=delivery.file_name,
            file_url=delivery.file_url,
            created_at=delivery.created_at,
            updated_at=delivery.updated_at,
        )
        self.session.add(model)
        await self.session.flush()
        delivery.id = model.id
        return delivery
