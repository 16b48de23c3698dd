"""
Product classification value objects.
"""

from storefront.core.domain import StatusEnum


class ProductStatus(StatusEnum):
    """Publication state. Only ACTIVE products can be purchased."""

    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class ProductType(StatusEnum):
    PHYSICAL = "physical"
    DIGITAL = "digital"
    BUNDLE = "bundle"
