"""
Product Entity for E-commerce Domain

Catalog product with pricing, inventory and digital file metadata, plus
its priced and stocked variants.
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from storefront.core.domain import AggregateRoot, Entity

from ..value_objects import ProductStatus, ProductType, VariantAttributes


@dataclass(frozen=True)
class DigitalFile:
    """Downloadable payload of a digital product."""

    url: str
    file_name: str = "download"
    file_size: int | None = None
    download_limit: int | None = None
    expiry_days: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "DigitalFile | None":
        if not data or not data.get("url"):
            return None
        return cls(
            url=data["url"],
            file_name=data.get("file_name") or "download",
            file_size=data.get("file_size"),
            download_limit=data.get("download_limit"),
            expiry_days=data.get("expiry_days"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "download_limit": self.download_limit,
            "expiry_days": self.expiry_days,
        }


@dataclass(frozen=True)
class ProductImage:
    url: str
    alt: str = ""
    is_primary: bool = False


@dataclass
class ProductVariant(Entity[UUID]):
    """
    Option set of a product with its own price and stock.

    A variant price of None means "inherit from the product".
    """

    product_id: UUID | None = None
    sku: str = ""
    attributes: VariantAttributes = field(default_factory=VariantAttributes)
    price: int | None = None
    stock_quantity: int = 0
    image: str | None = None
    is_active: bool = True


@dataclass
class Product(AggregateRoot[UUID]):
    """
    Product aggregate root.

    Prices are integer cents. Stock can go negative only for products
    that allow backorders.
    """

    sku: str = ""
    slug: str = ""
    name: str = ""
    base_price: int = 0
    sale_price: int | None = None

    stock_quantity: int = 0
    allow_backorder: bool = False
    track_inventory: bool = True
    total_sold: int = 0

    product_type: ProductType = ProductType.PHYSICAL
    status: ProductStatus = ProductStatus.DRAFT
    digital_file: DigitalFile | None = None
    images: list[ProductImage] = field(default_factory=list)

    def is_purchasable(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    def is_digital(self) -> bool:
        return self.product_type == ProductType.DIGITAL

    def unit_price(self, variant: ProductVariant | None = None) -> int:
        """Variant price, else sale price, else base price."""
        if variant is not None and variant.price is not None:
            return variant.price
        if self.sale_price is not None:
            return self.sale_price
        return self.base_price

    def available_stock(self, variant: ProductVariant | None = None) -> int:
        return variant.stock_quantity if variant is not None else self.stock_quantity

    def primary_image(self) -> str | None:
        """Image flagged primary, else the first one."""
        for image in self.images:
            if image.is_primary:
                return image.url
        return self.images[0].url if self.images else None

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"
