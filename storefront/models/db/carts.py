"""
Shopping cart models
"""

import uuid
from typing import List

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, relationship

from .base import Base, TimestampMixin


class Cart(Base, TimestampMixin):
    """Cart owned by a user or by an anonymous session."""

    __tablename__ = "carts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), unique=True)
    session_id = Column(String(128), unique=True)

    items: Mapped[List["CartItem"]] = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.position",
    )

    __table_args__ = (
        CheckConstraint(
            "(user_id IS NOT NULL) <> (session_id IS NOT NULL)",
            name="ck_carts_single_owner",
        ),
    )


class CartItem(Base):
    """Line of a cart."""

    __tablename__ = "cart_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cart_id = Column(UUID(as_uuid=True), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(UUID(as_uuid=True), nullable=False)
    variant_id = Column(UUID(as_uuid=True))
    quantity = Column(Integer, nullable=False)
    price_snapshot = Column(Integer)
    position = Column(Integer, nullable=False, default=0)

    cart: Mapped["Cart"] = relationship("Cart", back_populates="items")

    __table_args__ = (
        Index("idx_cart_items_cart", cart_id),
        CheckConstraint("quantity BETWEEN 1 AND 99", name="ck_cart_items_quantity"),
    )
