"""
Shipping zone model
"""

import uuid

from sqlalchemy import Boolean, Column, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID

from .base import Base, TimestampMixin


class ShippingZone(Base, TimestampMixin):
    """Geographic shipping rule with its ordered method price list."""

    __tablename__ = "shipping_zones"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    countries = Column(JSONB, nullable=False, default=list)  # ["US", "CA"]
    states = Column(JSONB, nullable=False, default=list)  # ["CA", "NY"]
    # [{"method_id": "standard", "label": ..., "price": 499, "free_threshold": 5000, ...}]
    methods = Column(JSONB, nullable=False, default=list)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    __table_args__ = (Index("idx_shipping_zones_active_sort", is_active, sort_order),)

    def __repr__(self):
        return f"<ShippingZone(name='{self.name}', sort_order={self.sort_order})>"
