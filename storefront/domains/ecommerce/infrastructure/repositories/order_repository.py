"""
Order Repository Implementation

SQLAlchemy implementation of IOrderRepository.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain import Address
from storefront.domains.ecommerce.application.ports import IOrderRepository
from storefront.domains.ecommerce.domain.entities import Order, OrderItem
from storefront.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus, VariantAttributes
from storefront.models.db.orders import Order as OrderModel
from storefront.models.db.orders import OrderItem as OrderItemModel

logger = logging.getLogger(__name__)


class SQLAlchemyOrderRepository(IOrderRepository):
    """
    SQLAlchemy implementation of order repository.

    Writes are flushed, not committed; the unit of work owns the commit.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create(self, order: Order) -> Order:
        """Create a new order."""
        model = self._to_model(order)
        self.session.add(model)
        try:
            await self.session.flush()
        except Exception as e:
            logger.error(f"Error creating order {order.order_number}: {e}")
            raise
        return self._to_entity(model)

    async def count_orders(self) -> int:
        result = await self.session.execute(select(func.count(OrderModel.id)))
        return result.scalar_one()

    # ==================== MAPPERS ====================

    @staticmethod
    def _to_model(order: Order) -> OrderModel:
        model = OrderModel(
            order_number=order.order_number,
            tracking_code=order.tracking_code,
            user_id=order.user_id,
            guest_email=order.guest_email,
            shipping_address=order.shipping_address.to_dict(),
            billing_address=order.billing_address.to_dict(),
            billing_same_as_shipping=order.billing_same_as_shipping,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            shipping_method=order.shipping_method,
            shipping_method_label=order.shipping_method_label,
            tax_amount=order.tax_amount,
            discount=order.discount,
            discount_code=order.discount_code,
            discount_details=order.discount_details,
            total=order.total,
            status=order.status.value,
            payment_status=order.payment_status.value,
            customer_note=order.customer_note,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemModel(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    name=item.name,
                    slug=item.slug,
                    sku=item.sku,
                    image=item.image,
                    price=item.price,
                    quantity=item.quantity,
                    variant_info=item.variant_info.to_list(),
                    line_total=item.line_total,
                    position=position,
                )
                for position, item in enumerate(order.items)
            ],
        )
        if order.id is not None:
            model.id = order.id
        return model

    @staticmethod
    def _to_entity(model: OrderModel) -> Order:
        return Order(
            id=model.id,
            order_number=model.order_number,
            tracking_code=model.tracking_code,
            user_id=model.user_id,
            guest_email=model.guest_email,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    name=item.name,
                    slug=item.slug,
                    sku=item.sku,
                    image=item.image,
                    price=item.price,
                    quantity=item.quantity,
                    variant_info=VariantAttributes.from_pairs(item.variant_info),
                )
                for item in model.items
            ],
            shipping_address=Address.from_dict(model.shipping_address),
            billing_address=Address.from_dict(model.billing_address),
            billing_same_as_shipping=model.billing_same_as_shipping,
            subtotal=model.subtotal,
            shipping_cost=model.shipping_cost,
            shipping_method=model.shipping_method,
            shipping_method_label=model.shipping_method_label,
            tax_amount=model.tax_amount,
            discount=model.discount,
            discount_details=model.discount_details,
            total=model.total,
            status=OrderStatus(model.status),
            payment_status=PaymentStatus(model.payment_status),
            customer_note=model.customer_note or "",
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
