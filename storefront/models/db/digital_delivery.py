"""
Digital delivery grant model
"""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID

from .base import Base, TimestampMixin


class DigitalDelivery(Base, TimestampMixin):
    """Tokenized download access for a purchased digital product."""

    __tablename__ = "digital_deliveries"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64))
    guest_email = Column(String(255))
    product_id = Column(UUID(as_uuid=True), nullable=False)
    variant_id = Column(UUID(as_uuid=True))
    download_token = Column(String(64), unique=True, nullable=False)
    download_count = Column(Integer, nullable=False, default=0)
    max_downloads = Column(Integer)
    expires_at = Column(DateTime(timezone=True))
    status = Column(String(20), nullable=False, default="active")  # active, revoked, expired
    file_name = Column(String(255), nullable=False, default="download")
    file_url = Column(String(500), nullable=False)

    __table_args__ = (
        Index("idx_digital_deliveries_order", order_id),
        CheckConstraint("user_id IS NOT NULL OR guest_email IS NOT NULL", name="ck_digital_deliveries_owner"),
    )
