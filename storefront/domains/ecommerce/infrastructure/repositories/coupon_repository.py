"""
Coupon Repository Implementation

SQLAlchemy implementation of ICouponRepository.
"""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domains.ecommerce.application.ports import ICouponRepository
from storefront.domains.ecommerce.domain.entities import Coupon, DiscountType, normalize_code
from storefront.domains.ecommerce.domain.value_objects import REDEEMING_PAYMENT_STATUSES
from storefront.models.db.coupons import Coupon as CouponModel
from storefront.models.db.orders import Order as OrderModel

logger = logging.getLogger(__name__)


class SQLAlchemyCouponRepository(ICouponRepository):
    """SQLAlchemy implementation of coupon repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_code(self, code: str) -> Coupon | None:
        """Get an active coupon by code."""
        result = await self.session.execute(
            select(CouponModel).where(
                CouponModel.code == normalize_code(code),
                CouponModel.is_active.is_(True),
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def save(self, coupon: Coupon) -> Coupon:
        """Insert or update a coupon."""
        model = await self.session.get(CouponModel, coupon.id) if coupon.id else None
        if model is None:
            model = CouponModel()
            if coupon.id is not None:
                model.id = coupon.id
            self.session.add(model)
        self._apply(model, coupon)
        await self.session.flush()
        coupon.id = model.id
        return coupon

    async def redeem(self, coupon_id: UUID) -> int | None:
        """
        Use the coupon once.

        The limit check and the increment are one statement, so the global
        usage limit holds under concurrent checkouts.
        """
        try:
            result = await self.session.execute(
                update(CouponModel)
                .where(
                    CouponModel.id == coupon_id,
                    or_(CouponModel.usage_limit.is_(None), CouponModel.usage_count < CouponModel.usage_limit),
                )
                .values(usage_count=CouponModel.usage_count + 1)
                .returning(CouponModel.usage_count)
                .execution_options(synchronize_session=False)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error redeeming coupon {coupon_id}: {e}")
            raise

    async def count_user_redemptions(self, code: str, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count(OrderModel.id)).where(
                OrderModel.user_id == user_id,
                OrderModel.discount_code == normalize_code(code),
                OrderModel.payment_status.in_([status.value for status in REDEEMING_PAYMENT_STATUSES]),
            )
        )
        return result.scalar_one()

    # ==================== MAPPERS ====================

    @staticmethod
    def _apply(model: CouponModel, coupon: Coupon) -> None:
        model.code = coupon.code
        model.description = coupon.description
        model.discount_type = coupon.discount_type.value
        model.discount_value = coupon.discount_value
        model.min_purchase = coupon.min_purchase
        model.max_discount = coupon.max_discount
        model.start_date = coupon.start_date
        model.end_date = coupon.end_date
        model.usage_limit = coupon.usage_limit
        model.usage_count = coupon.usage_count
        model.user_limit = coupon.user_limit
        model.is_active = coupon.is_active

    @staticmethod
    def _to_entity(model: CouponModel) -> Coupon:
        return Coupon(
            id=model.id,
            code=model.code,
            description=model.description or "",
            discount_type=DiscountType(model.discount_type),
            discount_value=model.discount_value,
            min_purchase=model.min_purchase or 0,
            max_discount=model.max_discount,
            start_date=model.start_date,
            end_date=model.end_date,
            usage_limit=model.usage_limit,
            usage_count=model.usage_count or 0,
            user_limit=model.user_limit,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
