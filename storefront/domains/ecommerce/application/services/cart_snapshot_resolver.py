"""
Cart Snapshot Resolver

Joins cart lines with the current catalog so checkout prices and checks
stock against live data rather than what the cart remembered.
"""

import logging
from uuid import UUID

from storefront.domains.ecommerce.application.dto import CartSnapshot, ResolvedItem
from storefront.domains.ecommerce.application.ports import IProductRepository
from storefront.domains.ecommerce.domain.entities import Cart, CartItem, Product, ProductVariant
from storefront.domains.ecommerce.domain.exceptions import CartValidationException
from storefront.domains.ecommerce.domain.value_objects import VariantAttributes

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT_NAME = "Unknown product"
NO_VALID_ITEMS_MESSAGE = "No valid items in cart"


class CartSnapshotResolver:
    """
    Resolve every cart line, collecting all problems instead of stopping
    at the first one.

    A line is kept when its product exists and is active, its variant (if
    any) exists and is active, and there is enough stock for products that
    do not allow backorders. The stock check here is advisory; the
    repository's conditional decrement is what prevents overselling.
    """

    def __init__(self, product_repository: IProductRepository):
        self.product_repository = product_repository

    async def resolve(self, cart: Cart) -> CartSnapshot:
        snapshot = CartSnapshot()
        products: dict[UUID, Product | None] = {}
        line_types: list[bool] = []

        for line in cart.items:
            if line.product_id not in products:
                products[line.product_id] = await self.product_repository.find_by_id(line.product_id)
            product = products[line.product_id]

            if product is None or not product.is_purchasable():
                name = product.name if product else UNKNOWN_PRODUCT_NAME
                snapshot.errors.append(f"{name} is no longer available")
                continue
            line_types.append(product.is_digital())

            variant = None
            if line.variant_id is not None:
                variant = await self.product_repository.find_variant_by_id(line.variant_id)
                if variant is None or not variant.is_active or variant.product_id != product.id:
                    snapshot.errors.append(f"{product.name} is no longer available")
                    continue

            error = self._check_stock(product, variant, line)
            if error:
                snapshot.errors.append(error)
                continue

            snapshot.items.append(self._to_resolved_item(product, variant, line))

        snapshot.is_all_digital = bool(line_types) and all(line_types)

        if snapshot.errors:
            logger.info(f"Cart {cart.id} has {len(snapshot.errors)} unpurchasable line(s)")
        return snapshot

    @staticmethod
    def raise_for_errors(snapshot: CartSnapshot) -> None:
        """Fail with every collected error, or when nothing is left to buy."""
        if snapshot.errors:
            raise CartValidationException(snapshot.errors)
        if not snapshot.items:
            raise CartValidationException([NO_VALID_ITEMS_MESSAGE])

    @staticmethod
    def _check_stock(product: Product, variant: ProductVariant | None, line: CartItem) -> str | None:
        if product.allow_backorder:
            return None
        available = product.available_stock(variant)
        if line.quantity > available:
            return f"{product.name} only has {available} in stock (requested {line.quantity})"
        return None

    @staticmethod
    def _to_resolved_item(product: Product, variant: ProductVariant | None, line: CartItem) -> ResolvedItem:
        return ResolvedItem(
            product_id=product.id,
            variant_id=variant.id if variant else None,
            name=product.name,
            slug=product.slug,
            sku=variant.sku if variant and variant.sku else product.sku,
            image=(variant.image if variant and variant.image else None) or product.primary_image(),
            price=product.unit_price(variant),
            quantity=line.quantity,
            variant_info=variant.attributes if variant else VariantAttributes(),
            product_type=product.product_type,
            allow_backorder=product.allow_backorder,
            digital_file=product.digital_file,
        )
