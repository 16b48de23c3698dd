"""
Order models
"""

import uuid
from typing import List

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, relationship

from .base import Base, TimestampMixin


class Order(Base, TimestampMixin):
    """Checkout result. All amounts in cents."""

    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_number = Column(String(50), unique=True, nullable=False, index=True)
    tracking_code = Column(String(32), unique=True)

    # Buyer
    user_id = Column(String(64))
    guest_email = Column(String(255))

    # Addresses
    shipping_address = Column(JSONB, nullable=False)
    billing_address = Column(JSONB, nullable=False)
    billing_same_as_shipping = Column(Boolean, nullable=False, default=True)

    # Totals
    subtotal = Column(Integer, nullable=False)
    shipping_cost = Column(Integer, nullable=False, default=0)
    shipping_method = Column(String(50), nullable=False)
    shipping_method_label = Column(String(100), nullable=False)
    tax_amount = Column(Integer, nullable=False, default=0)
    discount = Column(Integer, nullable=False, default=0)
    discount_code = Column(String(50))
    discount_details = Column(JSONB)  # {"code": ..., "type": ..., "value": ...}
    total = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default="pending_payment")
    payment_status = Column(String(20), nullable=False, default="pending")
    customer_note = Column(Text, nullable=False, default="")

    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.position"
    )

    __table_args__ = (
        Index("idx_orders_user", user_id),
        Index("idx_orders_user_discount_code", user_id, discount_code, payment_status),
        Index("idx_orders_status", status),
    )

    def __repr__(self):
        return f"<Order(number='{self.order_number}', status='{self.status}', total={self.total})>"


class OrderItem(Base):
    """Frozen copy of a purchased line."""

    __tablename__ = "order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(UUID(as_uuid=True), nullable=False)
    variant_id = Column(UUID(as_uuid=True))
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    sku = Column(String(100), nullable=False)
    image = Column(String(500))
    price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    variant_info = Column(JSONB, nullable=False, default=list)
    line_total = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    order: Mapped["Order"] = relationship("Order", back_populates="items")

    __table_args__ = (Index("idx_order_items_order", order_id),)
