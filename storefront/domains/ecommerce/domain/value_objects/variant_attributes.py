"""
Variant Attributes Value Object

Option set of a product variant (Color=Red, Size=M) kept as an ordered
list of key/value pairs.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Self

from storefront.core.domain import ValidationException, ValueObject


@dataclass(frozen=True, eq=False)
class VariantAttributes(ValueObject):
    """
    Ordered variant option pairs.

    Display keeps the configured order. Equality and hashing use the
    canonical form, which sorts pairs by key, so two variants with the
    same options compare equal whatever order they were entered in.

    Example:
        ```python
        attrs = VariantAttributes.from_pairs([("Color", "Red"), ("Size", "M")])
        attrs.canonical()      # "Color=Red;Size=M"
        attrs.display_suffix()  # " (Red, M)"
        ```
    """

    pairs: tuple[tuple[str, str], ...] = ()

    def _validate(self) -> None:
        keys = [key for key, _ in self.pairs]
        if len(keys) != len(set(keys)):
            raise ValidationException("Variant attribute keys must be unique", field="attributes")
        if any(not key for key in keys):
            raise ValidationException("Variant attribute keys cannot be empty", field="attributes")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Iterable[Any]] | Mapping[str, Any] | None) -> Self:
        """Build from a list of pairs or a mapping (mapping order is taken as given)."""
        if pairs is None:
            return cls()
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return cls(tuple((str(key), str(value)) for key, value in items))

    def canonical(self) -> str:
        return ";".join(f"{key}={value}" for key, value in sorted(self.pairs))

    def values(self) -> list[str]:
        return [value for _, value in self.pairs]

    def display_suffix(self) -> str:
        """Suffix appended to a product name, empty when there are no options."""
        if not self.pairs:
            return ""
        return f" ({', '.join(self.values())})"

    def to_list(self) -> list[list[str]]:
        """JSON-friendly ordered form."""
        return [[key, value] for key, value in self.pairs]

    def __bool__(self) -> bool:
        return bool(self.pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VariantAttributes):
            return NotImplemented
        return self.canonical() == other.canonical()

    def __hash__(self) -> int:
        return hash(self.canonical())
