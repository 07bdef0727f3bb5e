"""
API router for the farm location catalog.
"""
from typing import Optional
from fastapi import APIRouter, HTTPException, Path, Query
from typing import Annotated

from bloomtrack.api.v1.models.responses import LocationsResponse
from bloomtrack.domain.models import FarmLocation, LocationType, Zone
from bloomtrack.services.domain.location_catalog import (
    generate_catalog,
    get_location_by_id,
    locations_by_type,
    locations_by_zone,
)


router = APIRouter(
    prefix="/locations",
    tags=["locations"],
)


@router.get("", response_model=LocationsResponse, summary="List farm locations")
async def list_locations(
    location_type: Annotated[Optional[LocationType], Query(alias="type")] = None,
    zone: Annotated[Optional[Zone], Query()] = None,
) -> LocationsResponse:
    """Every generated location, optionally filtered by structure type and zone."""
    locations = locations_by_type(location_type) if location_type else generate_catalog()
    if zone is not None:
        in_zone = set(locations_by_zone(zone))
        locations = [loc for loc in locations if loc in in_zone]
    return LocationsResponse(count=len(locations), locations=locations)


@router.get(
    "/{location_id}",
    response_model=FarmLocation,
    summary="Look up a location",
    responses={404: {"description": "Location not in the catalog"}},
)
async def get_location(
    location_id: Annotated[str, Path(description="Location identifier, e.g. N11A")],
) -> FarmLocation:
    location = get_location_by_id(location_id)
    if location is None:
        raise HTTPException(status_code=404, detail=f"Location '{location_id}' not found")
    return location
