"""
Base entity classes.

Entities compare by identity; two unsaved entities (id None) are never equal.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar

TId = TypeVar("TId")


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for domain entities.

    Type Parameters:
        TId: Type of the identifier (UUID for every checkout entity)
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity) or self.id is None or other.id is None:
            return False
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)

    def touch(self) -> None:
        self.updated_at = datetime.now(UTC)


@dataclass
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Entry point of an aggregate, loaded and persisted as a whole (a cart
    with its items, an order with its lines).
    """


__all__ = [
    "Entity",
    "AggregateRoot",
]
