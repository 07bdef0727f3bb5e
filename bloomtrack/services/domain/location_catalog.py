"""
Domain service: the farm's fixed location catalog.

Every growing location is derived from the structural constants below, so
the catalog is regenerated rather than stored. Identifiers are the zone
letter followed by a structure-specific suffix:

- Greenhouse:  N11A  (zone, greenhouse, row, pole letter)
- Trellis:     NT3D  (zone, 'T', trellis, section letter)
- Double pole: NDPU3 (zone, 'DP', position initial, pole)
"""
from functools import lru_cache
from string import ascii_uppercase
from types import MappingProxyType
from typing import Mapping, Optional

from bloomtrack.domain.models import FarmLocation, LocationType, Zone


ZONES = (Zone.NORTH, Zone.SOUTH)

GREENHOUSES_PER_ZONE = 4
ROWS_PER_GREENHOUSE = 3
POLES_PER_ROW = 12

TRELLISES_PER_ZONE = 4
SECTIONS_PER_TRELLIS = 10

DOUBLE_POLE_POSITIONS = ("Upper", "Lower")
DOUBLE_POLES_PER_POSITION = 6


def _greenhouse_locations() -> list[FarmLocation]:
    locations = []
    for zone in ZONES:
        for gh in range(1, GREENHOUSES_PER_ZONE + 1):
            for row in range(1, ROWS_PER_GREENHOUSE + 1):
                for pole in ascii_uppercase[:POLES_PER_ROW]:
                    locations.append(FarmLocation(
                        id=f"{zone.value[0]}{gh}{row}{pole}",
                        type=LocationType.GREENHOUSE,
                        zone=zone,
                        name=f"{zone.value} GH{gh} Row{row} Pole{pole}",
                    ))
    return locations


def _trellis_locations() -> list[FarmLocation]:
    locations = []
    for zone in ZONES:
        for trellis in range(1, TRELLISES_PER_ZONE + 1):
            for section in ascii_uppercase[:SECTIONS_PER_TRELLIS]:
                locations.append(FarmLocation(
                    id=f"{zone.value[0]}T{trellis}{section}",
                    type=LocationType.TRELLIS,
                    zone=zone,
                    name=f"{zone.value} Trellis {trellis} Section {section}",
                ))
    return locations


def _double_pole_locations() -> list[FarmLocation]:
    locations = []
    for zone in ZONES:
        for position in DOUBLE_POLE_POSITIONS:
            for pole in range(1, DOUBLE_POLES_PER_POSITION + 1):
                locations.append(FarmLocation(
                    id=f"{zone.value[0]}DP{position[0]}{pole}",
                    type=LocationType.DOUBLE_POLE,
                    zone=zone,
                    name=f"{zone.value} Double Pole {position} {pole}",
                ))
    return locations


def generate_catalog() -> list[FarmLocation]:
    """
    Generate every location on the farm.

    Returns a new list on each call, ordered greenhouses, trellises,
    double poles, North before South.

    Returns:
        List of FarmLocation
    """
    return [
        *_greenhouse_locations(),
        *_trellis_locations(),
        *_double_pole_locations(),
    ]


@lru_cache(maxsize=1)
def _catalog_index() -> Mapping[str, FarmLocation]:
    return MappingProxyType({location.id: location for location in generate_catalog()})


def locations_by_type(location_type: LocationType) -> list[FarmLocation]:
    """All locations of one structural type."""
    return [loc for loc in generate_catalog() if loc.type == location_type]


def locations_by_zone(zone: Zone) -> list[FarmLocation]:
    """All locations in one zone."""
    return [loc for loc in generate_catalog() if loc.zone == zone]


def get_location_by_id(location_id: str) -> Optional[FarmLocation]:
    """
    Look up a location by identifier.

    Historical entries may reference ids that are no longer generated, so a
    miss returns None instead of raising.

    Args:
        location_id: Location identifier

    Returns:
        FarmLocation or None if not in the catalog
    """
    return _catalog_index().get(location_id)


def location_display_name(location_id: str) -> str:
    """Catalog name for a location, or the raw id when it is unknown."""
    location = get_location_by_id(location_id)
    return location.name if location else location_id
