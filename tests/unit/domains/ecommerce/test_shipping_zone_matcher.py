"""
Unit tests for ShippingZoneMatcher.
"""

import pytest

from storefront.domains.ecommerce.domain.entities import ShippingMethod, ShippingZone, ZoneSpecificity
from storefront.domains.ecommerce.domain.services import ShippingZoneMatcher

STANDARD = ShippingMethod("standard", "Standard Shipping", 499)


def make_zone(name: str, countries=(), states=(), sort_order: int = 0, **kwargs) -> ShippingZone:
    return ShippingZone(
        name=name,
        countries=list(countries),
        states=list(states),
        methods=[STANDARD],
        sort_order=sort_order,
        **kwargs,
    )


@pytest.fixture
def matcher() -> ShippingZoneMatcher:
    return ShippingZoneMatcher(default_country="US")


@pytest.mark.unit
class TestZoneSpecificity:
    def test_global_zone_matches_everything(self):
        zone = make_zone("World")
        assert zone.specificity_for("FR", "") == ZoneSpecificity.GLOBAL

    def test_country_zone(self):
        zone = make_zone("US", ["us"])
        assert zone.countries == ["US"]
        assert zone.specificity_for("US", "TX") == ZoneSpecificity.COUNTRY
        assert zone.specificity_for("CA", "") is None

    def test_state_zone_requires_state(self):
        zone = make_zone("West", ["US"], ["ca", "or"])
        assert zone.specificity_for("US", "CA") == ZoneSpecificity.COUNTRY_STATE
        assert zone.specificity_for("US", "TX") is None
        assert zone.specificity_for("US", "") is None


@pytest.mark.unit
class TestShippingZoneMatcher:
    def test_state_zone_beats_country_zone(self, matcher):
        country = make_zone("US", ["US"], sort_order=0)
        state = make_zone("California", ["US"], ["CA"], sort_order=10)

        assert matcher.find_zone_for_address([country, state], "US", "CA") is state

    def test_country_zone_beats_global_zone(self, matcher):
        world = make_zone("World", sort_order=0)
        canada = make_zone("Canada", ["CA"], sort_order=5)

        assert matcher.find_zone_for_address([world, canada], "CA", "ON") is canada

    def test_ties_broken_by_sort_order_then_position(self, matcher):
        first = make_zone("US A", ["US"], sort_order=2)
        second = make_zone("US B", ["US"], sort_order=1)
        third = make_zone("US C", ["US"], sort_order=1)

        assert matcher.find_zone_for_address([first, second, third], "US", "NY") is second

    def test_input_is_normalized(self, matcher):
        zone = make_zone("California", ["US"], ["CA"])
        assert matcher.find_zone_for_address([zone], " us ", " ca ") is zone

    def test_missing_country_uses_default(self, matcher):
        zone = make_zone("US", ["US"])
        assert matcher.find_zone_for_address([zone], None, "NY") is zone

    def test_inactive_zones_never_match(self, matcher):
        zone = make_zone("US", ["US"], is_active=False)
        assert matcher.find_zone_for_address([zone], "US", "NY") is None

    def test_default_zone_is_last_resort(self, matcher):
        europe = make_zone("Europe", ["FR", "DE"])
        fallback = make_zone("Fallback", ["XX"], is_default=True)

        assert matcher.find_zone_for_address([europe, fallback], "JP", "") is fallback

    def test_geographic_match_wins_over_default(self, matcher):
        fallback = make_zone("Fallback", ["XX"], is_default=True)
        japan = make_zone("Japan", ["JP"])

        assert matcher.find_zone_for_address([fallback, japan], "JP", "") is japan

    def test_no_match_and_no_default(self, matcher):
        assert matcher.find_zone_for_address([make_zone("Europe", ["FR"])], "US", "CA") is None

    def test_rank_lists_every_match_best_first(self, matcher):
        world = make_zone("World")
        us = make_zone("US", ["US"])
        west = make_zone("West", ["US"], ["CA"])

        ranked = [match.zone for match in matcher.rank([world, us, west], "US", "CA")]

        assert ranked == [west, us, world]
