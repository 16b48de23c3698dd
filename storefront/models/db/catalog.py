"""
Catalog models: products and their variants
"""

import uuid
from typing import List

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, relationship

from .base import Base, TimestampMixin


class Product(Base, TimestampMixin):
    """Catalog product. Prices are stored in cents."""

    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sku = Column(String(100), unique=True, nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)

    # Pricing
    base_price = Column(Integer, nullable=False)
    sale_price = Column(Integer)

    # Inventory
    stock_quantity = Column(Integer, nullable=False, default=0)
    allow_backorder = Column(Boolean, nullable=False, default=False)
    track_inventory = Column(Boolean, nullable=False, default=True)
    total_sold = Column(Integer, nullable=False, default=0)

    product_type = Column(String(20), nullable=False, default="physical")  # physical, digital, bundle
    status = Column(String(20), nullable=False, default="draft")  # draft, active, archived

    # {"url": ..., "file_name": ..., "download_limit": 5, "expiry_days": 30}
    digital_file = Column(JSONB)
    # [{"url": ..., "alt": ..., "is_primary": true}]
    images = Column(JSONB, nullable=False, default=list)

    variants: Mapped[List["ProductVariant"]] = relationship(
        "ProductVariant", back_populates="product", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_products_status", status),
        CheckConstraint("base_price >= 0", name="ck_products_base_price_non_negative"),
    )

    def __repr__(self):
        return f"<Product(sku='{self.sku}', status='{self.status}', stock={self.stock_quantity})>"


class ProductVariant(Base, TimestampMixin):
    """Priced and stocked option set of a product (Color=Red, Size=M)."""

    __tablename__ = "product_variants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    sku = Column(String(100), unique=True, nullable=False)
    # Ordered [[key, value], ...] pairs
    attributes = Column(JSONB, nullable=False, default=list)
    price = Column(Integer)
    stock_quantity = Column(Integer, nullable=False, default=0)
    image = Column(String(500))
    is_active = Column(Boolean, nullable=False, default=True)

    product: Mapped["Product"] = relationship("Product", back_populates="variants")

    __table_args__ = (Index("idx_product_variants_product", product_id),)

    def __repr__(self):
        return f"<ProductVariant(sku='{self.sku}', stock={self.stock_quantity})>"
