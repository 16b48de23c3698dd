"""
Cart Repository Implementation

SQLAlchemy implementation of ICartRepository.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.domains.ecommerce.application.ports import ICartRepository
from storefront.domains.ecommerce.domain.entities import Cart, CartItem
from storefront.models.db.carts import Cart as CartModel
from storefront.models.db.carts import CartItem as CartItemModel

logger = logging.getLogger(__name__)


class SQLAlchemyCartRepository(ICartRepository):
    """SQLAlchemy implementation of cart repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_user(self, user_id: str) -> Cart | None:
        """Get the cart of a registered user."""
        return await self._find_one(CartModel.user_id == user_id)

    async def find_by_session(self, session_id: str) -> Cart | None:
        """Get the cart of an anonymous session."""
        return await self._find_one(CartModel.session_id == session_id)

    async def save(self, cart: Cart) -> Cart:
        """Replace the stored items with the cart's current items."""
        model = None
        if cart.id is not None:
            result = await self.session.execute(
                select(CartModel).options(selectinload(CartModel.items)).where(CartModel.id == cart.id)
            )
            model = result.scalar_one_or_none()

        if model is None:
            model = CartModel(user_id=cart.user_id, session_id=cart.session_id)
            if cart.id is not None:
                model.id = cart.id
            self.session.add(model)

        model.items = [
            CartItemModel(
                product_id=item.product_id,
                variant_id=item.variant_id,
                quantity=item.quantity,
                price_snapshot=item.price_snapshot,
                position=position,
            )
            for position, item in enumerate(cart.items)
        ]
        model.updated_at = cart.updated_at
        await self.session.flush()
        cart.id = model.id
        return cart

    async def _find_one(self, condition) -> Cart | None:
        result = await self.session.execute(
            select(CartModel).options(selectinload(CartModel.items)).where(condition)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: CartModel) -> Cart:
        return Cart(
            id=model.id,
            user_id=model.user_id,
            session_id=model.session_id,
            items=[
                CartItem(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    quantity=item.quantity,
                    price_snapshot=item.price_snapshot,
                )
                for item in model.items
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
