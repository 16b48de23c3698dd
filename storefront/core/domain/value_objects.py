"""
Base Value Object Classes for Domain-Driven Design

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

from abc import ABC
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Self

from .exceptions import ValidationException


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


@dataclass(frozen=True)
class Address(ValueObject):
    """
    Postal address used for shipping and billing.

    Instances are always normalized: text fields trimmed, country
    upper-cased, optional fields empty strings instead of None. State is
    kept as typed; zone matching compares it case-insensitively.
    """

    REQUIRED_FIELDS = ("first_name", "last_name", "address1", "city", "state", "zip_code")

    first_name: str
    last_name: str
    address1: str
    city: str
    state: str
    zip_code: str
    country: str = "US"
    company: str = ""
    address2: str = ""
    phone: str = ""

    def _validate(self) -> None:
        for name in self.REQUIRED_FIELDS:
            if not getattr(self, name).strip():
                raise ValidationException(f"{name} is required", field=name)

    @classmethod
    def normalized(cls, default_country: str = "US", **values: str | None) -> Self:
        """Build an address from raw input, trimming and upper-casing as needed."""
        cleaned = {key: (value or "").strip() for key, value in values.items()}
        cleaned["country"] = (cleaned.get("country") or default_country).upper()
        return cls(**cleaned)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for persistence."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(**{key: value or "" for key, value in data.items() if key in cls.__dataclass_fields__})

    def __str__(self) -> str:
        parts = [self.address1, self.address2, self.city, self.state, self.zip_code, self.country]
        return ", ".join(p for p in parts if p)


class StatusEnum(str, Enum):
    """String-valued enum; members compare equal to their stored values."""


__all__ = [
    "ValueObject",
    "Address",
    "StatusEnum",
]
