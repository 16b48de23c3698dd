"""
Shipping Zone Entity for E-commerce Domain

A zone scopes an ordered list of shipping methods to a set of countries
and, optionally, states.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any
from uuid import UUID

from storefront.core.domain import Entity


class ZoneSpecificity(IntEnum):
    """How precisely a zone matched an address. Higher wins."""

    GLOBAL = 0
    COUNTRY = 1
    COUNTRY_STATE = 2


@dataclass(frozen=True)
class ShippingMethod:
    """Priced shipping option offered by a zone."""

    method_id: str
    label: str
    price: int
    free_threshold: int | None = None
    description: str = ""
    estimated_days: str = ""
    is_active: bool = True

    def is_free_for(self, subtotal: int) -> bool:
        # A zero threshold means "no free shipping", not "always free"
        return bool(self.free_threshold) and subtotal >= self.free_threshold

    def cost_for(self, subtotal: int) -> int:
        return 0 if self.is_free_for(subtotal) else self.price

    def label_for(self, subtotal: int) -> str:
        return f"Free {self.label}" if self.is_free_for(subtotal) else self.label

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShippingMethod":
        return cls(
            method_id=data["method_id"],
            label=data["label"],
            price=int(data.get("price", 0)),
            free_threshold=data.get("free_threshold"),
            description=data.get("description") or "",
            estimated_days=data.get("estimated_days") or "",
            is_active=data.get("is_active", True),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "method_id": self.method_id,
            "label": self.label,
            "price": self.price,
            "free_threshold": self.free_threshold,
            "description": self.description,
            "estimated_days": self.estimated_days,
            "is_active": self.is_active,
        }


@dataclass
class ShippingZone(Entity[UUID]):
    """
    Geographic shipping rule.

    An empty country list makes the zone global. States only constrain
    zones that name countries.
    """

    name: str = ""
    countries: list[str] = field(default_factory=list)
    states: list[str] = field(default_factory=list)
    methods: list[ShippingMethod] = field(default_factory=list)
    is_default: bool = False
    is_active: bool = True
    sort_order: int = 0

    def __post_init__(self):
        self.countries = [c.strip().upper() for c in self.countries]
        self.states = [s.strip().upper() for s in self.states]

    def specificity_for(self, country: str, state: str) -> ZoneSpecificity | None:
        """Return how this zone matches the address, or None when it does not."""
        if not self.countries:
            return ZoneSpecificity.GLOBAL
        if country not in self.countries:
            return None
        if not self.states:
            return ZoneSpecificity.COUNTRY
        if state in self.states:
            return ZoneSpecificity.COUNTRY_STATE
        return None

    def active_methods(self) -> list[ShippingMethod]:
        return [m for m in self.methods if m.is_active]

    def find_active_method(self, method_id: str) -> ShippingMethod | None:
        for method in self.active_methods():
            if method.method_id == method_id:
                return method
        return None

    def __str__(self) -> str:
        return self.name
