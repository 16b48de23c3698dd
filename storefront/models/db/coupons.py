"""
Coupon model
"""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import UUID

from .base import Base, TimestampMixin


class Coupon(Base, TimestampMixin):
    """Discount code with global and per-user usage limits."""

    __tablename__ = "coupons"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(255))
    discount_type = Column(String(20), nullable=False)  # percentage, fixed
    discount_value = Column(Integer, nullable=False)
    min_purchase = Column(Integer, nullable=False, default=0)
    max_discount = Column(Integer)
    start_date = Column(DateTime(timezone=True))
    end_date = Column(DateTime(timezone=True))
    usage_limit = Column(Integer)
    usage_count = Column(Integer, nullable=False, default=0)
    user_limit = Column(Integer, default=1)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "usage_limit IS NULL OR usage_count <= usage_limit",
            name="ck_coupons_usage_within_limit",
        ),
    )

    def __repr__(self):
        return f"<Coupon(code='{self.code}', used={self.usage_count}/{self.usage_limit})>"
