"""
Unit tests for the farm location catalog.
"""
import pytest

from bloomtrack.domain.models import LocationType, Zone
from bloomtrack.services.domain.location_catalog import (
    generate_catalog,
    get_location_by_id,
    location_display_name,
    locations_by_type,
    locations_by_zone,
)


class TestCatalogGeneration:
    """Tests for full catalog generation."""

    def test_catalog_size(self):
        """2x4x3x12 greenhouse + 2x4x10 trellis + 2x2x6 double pole = 392."""
        assert len(generate_catalog()) == 392

    def test_identifiers_unique(self):
        ids = [loc.id for loc in generate_catalog()]
        assert len(set(ids)) == len(ids)

    def test_deterministic_and_fresh(self):
        """Each call returns an equal but independent list."""
        first = generate_catalog()
        second = generate_catalog()

        assert first == second
        assert first is not second

    def test_order_starts_with_greenhouses(self):
        catalog = generate_catalog()

        assert catalog[0].id == "N11A"
        assert catalog[-1].id == "SDPL6"

    @pytest.mark.parametrize("location_type,expected", [
        (LocationType.GREENHOUSE, 288),
        (LocationType.TRELLIS, 80),
        (LocationType.DOUBLE_POLE, 24),
    ])
    def test_counts_by_type(self, location_type, expected):
        locations = locations_by_type(location_type)

        assert len(locations) == expected
        assert all(loc.type == location_type for loc in locations)

    @pytest.mark.parametrize("zone", [Zone.NORTH, Zone.SOUTH])
    def test_zones_are_symmetric(self, zone):
        locations = locations_by_zone(zone)

        assert len(locations) == 196
        assert all(loc.id.startswith(zone.value[0]) for loc in locations)


class TestIdentifierFormat:
    """Tests for identifier and name encoding."""

    @pytest.mark.parametrize("location_id,name,location_type", [
        ("N11A", "North GH1 Row1 PoleA", LocationType.GREENHOUSE),
        ("S43L", "South GH4 Row3 PoleL", LocationType.GREENHOUSE),
        ("NT3D", "North Trellis 3 Section D", LocationType.TRELLIS),
        ("ST4J", "South Trellis 4 Section J", LocationType.TRELLIS),
        ("NDPU3", "North Double Pole Upper 3", LocationType.DOUBLE_POLE),
        ("SDPL6", "South Double Pole Lower 6", LocationType.DOUBLE_POLE),
    ])
    def test_known_locations(self, location_id, name, location_type):
        location = get_location_by_id(location_id)

        assert location is not None
        assert location.name == name
        assert location.type == location_type

    @pytest.mark.parametrize("location_id", ["N14A", "N11M", "NT5A", "NT1K", "NDPU7", "NDPX1", ""])
    def test_out_of_range_ids_not_generated(self, location_id):
        assert get_location_by_id(location_id) is None


class TestLookupFallback:
    """Tests for lookups of ids missing from the catalog."""

    def test_display_name_for_known_location(self):
        assert location_display_name("NT3D") == "North Trellis 3 Section D"

    def test_display_name_falls_back_to_raw_id(self):
        assert location_display_name("OLD-ROW-7") == "OLD-ROW-7"
