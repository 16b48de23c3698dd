"""
Cart Entity for E-commerce Domain
"""

from dataclasses import dataclass, field
from uuid import UUID

from storefront.core.domain import AggregateRoot, ValidationException

MAX_LINE_QUANTITY = 99


@dataclass
class CartItem:
    """Line of a cart, pointing at a product and optionally one of its variants."""

    product_id: UUID
    quantity: int
    variant_id: UUID | None = None
    price_snapshot: int | None = None

    def __post_init__(self):
        if not 1 <= self.quantity <= MAX_LINE_QUANTITY:
            raise ValidationException(
                f"Quantity must be between 1 and {MAX_LINE_QUANTITY}",
                field="quantity",
            )


@dataclass
class Cart(AggregateRoot[UUID]):
    """
    Shopping cart owned by exactly one of a user or an anonymous session.

    Checkout reads the items and then empties the cart; carts are never
    deleted by checkout.
    """

    user_id: str | None = None
    session_id: str | None = None
    items: list[CartItem] = field(default_factory=list)

    def __post_init__(self):
        if (self.user_id is None) == (self.session_id is None):
            raise ValidationException("A cart belongs to either a user or a session", field="owner")

    def is_empty(self) -> bool:
        return not self.items

    def clear(self) -> None:
        self.items.clear()
        self.touch()
