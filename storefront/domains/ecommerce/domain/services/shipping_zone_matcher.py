"""
Shipping Zone Matcher

Domain service that picks the shipping zone for an address.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from ..entities.shipping_zone import ShippingZone, ZoneSpecificity


@dataclass(frozen=True)
class ZoneMatch:
    """A zone that matched an address, with its ranking inputs."""

    zone: ShippingZone
    specificity: ZoneSpecificity
    position: int

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (-self.specificity, self.zone.sort_order, self.position)


class ShippingZoneMatcher:
    """
    Resolve the zone for a country/state pair.

    Ranking, best first:
    - zones naming the country and the state
    - zones naming the country without state restrictions
    - global zones (no countries)
    Ties go to the lower `sort_order`, then to the configured position.
    When nothing matches geographically, the active default zone with the
    lowest `sort_order` is the last resort. Inactive zones never match.

    Example:
        ```python
        matcher = ShippingZoneMatcher()
        zone = matcher.find_zone_for_address(zones, "us", "ca")
        ```
    """

    def __init__(self, default_country: str = "US"):
        self._default_country = default_country.upper()

    def normalize(self, country: str | None, state: str | None) -> tuple[str, str]:
        country = (country or "").strip().upper() or self._default_country
        return country, (state or "").strip().upper()

    def rank(self, zones: Sequence[ShippingZone], country: str | None, state: str | None) -> list[ZoneMatch]:
        """All geographic matches, best first."""
        country, state = self.normalize(country, state)
        matches = []
        for position, zone in enumerate(zones):
            if not zone.is_active:
                continue
            specificity = zone.specificity_for(country, state)
            if specificity is not None:
                matches.append(ZoneMatch(zone, specificity, position))
        return sorted(matches, key=lambda match: match.sort_key)

    def find_zone_for_address(
        self,
        zones: Sequence[ShippingZone],
        country: str | None,
        state: str | None,
    ) -> ShippingZone | None:
        matches = self.rank(zones, country, state)
        if matches:
            return matches[0].zone
        return self._default_zone(zones)

    @staticmethod
    def _default_zone(zones: Sequence[ShippingZone]) -> ShippingZone | None:
        defaults = [
            (zone.sort_order, position, zone)
            for position, zone in enumerate(zones)
            if zone.is_active and zone.is_default
        ]
        if not defaults:
            return None
        return min(defaults, key=lambda item: (item[0], item[1]))[2]


__all__ = ["ShippingZoneMatcher", "ZoneMatch"]
