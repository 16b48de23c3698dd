"""
Product Repository Implementation

SQLAlchemy implementation of IProductRepository.
"""

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domains.ecommerce.application.ports import IProductRepository
from storefront.domains.ecommerce.domain.entities import DigitalFile, Product, ProductImage, ProductVariant
from storefront.domains.ecommerce.domain.value_objects import ProductStatus, ProductType, VariantAttributes
from storefront.models.db.catalog import Product as ProductModel
from storefront.models.db.catalog import ProductVariant as ProductVariantModel

logger = logging.getLogger(__name__)


class SQLAlchemyProductRepository(IProductRepository):
    """
    SQLAlchemy implementation of product repository.

    Stock changes are single UPDATE ... RETURNING statements. Without
    backorders the WHERE clause refuses to go below zero, so concurrent
    checkouts of the last unit cannot both succeed.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, product_id: UUID) -> Product | None:
        """Get product by ID."""
        result = await self.session.execute(select(ProductModel).where(ProductModel.id == product_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_variant_by_id(self, variant_id: UUID) -> ProductVariant | None:
        """Get variant by ID."""
        result = await self.session.execute(
            select(ProductVariantModel).where(ProductVariantModel.id == variant_id)
        )
        model = result.scalar_one_or_none()
        return self._variant_to_entity(model) if model else None

    async def decrement_stock(self, product_id: UUID, quantity: int, allow_backorder: bool) -> int | None:
        """Take stock from a product; None when the guard refused."""
        stmt = (
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
            .returning(ProductModel.stock_quantity)
        )
        if not allow_backorder:
            stmt = stmt.where(ProductModel.stock_quantity >= quantity)
        try:
            result = await self.session.execute(stmt.execution_options(synchronize_session=False))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error decrementing stock for product {product_id}: {e}")
            raise

    async def decrement_variant_stock(self, variant_id: UUID, quantity: int, allow_backorder: bool) -> int | None:
        """Take stock from a variant; None when the guard refused."""
        stmt = (
            update(ProductVariantModel)
            .where(ProductVariantModel.id == variant_id)
            .values(stock_quantity=ProductVariantModel.stock_quantity - quantity)
            .returning(ProductVariantModel.stock_quantity)
        )
        if not allow_backorder:
            stmt = stmt.where(ProductVariantModel.stock_quantity >= quantity)
        try:
            result = await self.session.execute(stmt.execution_options(synchronize_session=False))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error decrementing stock for variant {variant_id}: {e}")
            raise

    async def increment_total_sold(self, product_id: UUID, quantity: int) -> None:
        await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(total_sold=ProductModel.total_sold + quantity)
            .execution_options(synchronize_session=False)
        )

    # ==================== MAPPERS ====================

    @staticmethod
    def _to_entity(model: ProductModel) -> Product:
        return Product(
            id=model.id,
            sku=model.sku,
            slug=model.slug,
            name=model.name,
            base_price=model.base_price,
            sale_price=model.sale_price,
            stock_quantity=model.stock_quantity,
            allow_backorder=model.allow_backorder,
            track_inventory=model.track_inventory,
            total_sold=model.total_sold or 0,
            product_type=ProductType(model.product_type),
            status=ProductStatus(model.status),
            digital_file=DigitalFile.from_dict(model.digital_file),
            images=[
                ProductImage(url=img["url"], alt=img.get("alt") or "", is_primary=bool(img.get("is_primary")))
                for img in (model.images or [])
                if img.get("url")
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _variant_to_entity(model: ProductVariantModel) -> ProductVariant:
        return ProductVariant(
            id=model.id,
            product_id=model.product_id,
            sku=model.sku,
            attributes=VariantAttributes.from_pairs(model.attributes),
            price=model.price,
            stock_quantity=model.stock_quantity,
            image=model.image,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
