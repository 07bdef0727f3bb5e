"""
API router for bloom, abortion and harvest entries.
"""
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Path, Query, status
from typing import Annotated

from bloomtrack.api.dependencies import FarmServiceDep, TodayDep
from bloomtrack.api.v1.models.requests import (
    AbortionCreate,
    BloomCorrection,
    BloomCreate,
    HarvestCreate,
)
from bloomtrack.api.v1.models.responses import HistoryResponse
from bloomtrack.domain.models import (
    AbortionEntry,
    BloomEntry,
    BloomStatus,
    HarvestEntry,
)
from bloomtrack.exceptions import (
    BloomNotFoundError,
    EntryValidationError,
    StorageWriteError,
)


router = APIRouter(tags=["entries"])

_write_responses = {
    400: {"description": "Invalid count or count exceeds remaining"},
    404: {"description": "Referenced bloom not found"},
    503: {"description": "Storage write failed"},
}


def _to_http_error(error: Exception) -> HTTPException:
    if isinstance(error, BloomNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, EntryValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Failed to save entry: {error}",
    )


# ============================================================
# Blooms
# ============================================================

@router.post(
    "/blooms",
    response_model=BloomEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Log a flower bloom",
    responses=_write_responses,
)
async def create_bloom(
    body: BloomCreate,
    farm_service: FarmServiceDep,
    today: TodayDep,
) -> BloomEntry:
    """Record a new bloom. Variety and maturity period default to the stored settings."""
    try:
        return await farm_service.record_bloom(
            location=body.location,
            count=body.count,
            bloom_date=body.bloom_date or today,
            variety=body.variety,
            maturity_period_days=body.maturity_period_days,
            notes=body.notes,
            image_uri=body.image_uri,
        )
    except (EntryValidationError, StorageWriteError) as e:
        raise _to_http_error(e)


@router.get("/blooms", response_model=List[BloomEntry], summary="List all blooms")
async def list_blooms(farm_service: FarmServiceDep) -> List[BloomEntry]:
    return await farm_service.list_blooms()


@router.get(
    "/blooms/remaining",
    response_model=List[BloomStatus],
    summary="Blooms with flowers or fruit remaining",
)
async def list_blooms_with_remaining(farm_service: FarmServiceDep) -> List[BloomStatus]:
    """Blooms that can still receive abortions or harvests, with their totals."""
    return await farm_service.get_blooms_with_remaining()


@router.put(
    "/blooms/{bloom_id}",
    response_model=BloomEntry,
    summary="Correct a bloom entry",
    responses=_write_responses,
)
async def correct_bloom(
    bloom_id: Annotated[str, Path(description="Bloom identifier")],
    body: BloomCorrection,
    farm_service: FarmServiceDep,
) -> BloomEntry:
    """Rewrite a bloom to fix a data-entry mistake. Omitted fields are kept."""
    try:
        return await farm_service.correct_bloom(bloom_id, body.model_dump(exclude_unset=True))
    except (BloomNotFoundError, EntryValidationError, StorageWriteError) as e:
        raise _to_http_error(e)


# ============================================================
# Abortions
# ============================================================

@router.post(
    "/abortions",
    response_model=AbortionEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Log a flower abortion",
    responses=_write_responses,
)
async def create_abortion(
    body: AbortionCreate,
    farm_service: FarmServiceDep,
    today: TodayDep,
) -> AbortionEntry:
    """Record lost flowers for a bloom. The count may not exceed what remains."""
    try:
        return await farm_service.record_abortion(
            bloom_entry_id=body.bloom_entry_id,
            aborted_count=body.aborted_count,
            abortion_date=body.abortion_date or today,
            notes=body.notes,
            image_uri=body.image_uri,
        )
    except (BloomNotFoundError, EntryValidationError, StorageWriteError) as e:
        raise _to_http_error(e)


@router.get("/abortions", response_model=List[AbortionEntry], summary="List all abortions")
async def list_abortions(farm_service: FarmServiceDep) -> List[AbortionEntry]:
    return await farm_service.list_abortions()


# ============================================================
# Harvests
# ============================================================

@router.post(
    "/harvests",
    response_model=HarvestEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Log a harvest",
    responses=_write_responses,
)
async def create_harvest(
    body: HarvestCreate,
    farm_service: FarmServiceDep,
    today: TodayDep,
) -> HarvestEntry:
    """Record harvested fruit for a bloom. The count may not exceed what remains."""
    try:
        return await farm_service.record_harvest(
            bloom_entry_id=body.bloom_entry_id,
            harvested_count=body.harvested_count,
            harvest_date=body.harvest_date or today,
            notes=body.notes,
            image_uri=body.image_uri,
        )
    except (BloomNotFoundError, EntryValidationError, StorageWriteError) as e:
        raise _to_http_error(e)


@router.get("/harvests", response_model=List[HarvestEntry], summary="List all harvests")
async def list_harvests(farm_service: FarmServiceDep) -> List[HarvestEntry]:
    return await farm_service.list_harvests()


# ============================================================
# History
# ============================================================

@router.get("/history", response_model=HistoryResponse, summary="Combined entry history")
async def get_history(
    farm_service: FarmServiceDep,
    entry_type: Annotated[
        Optional[str],
        Query(alias="type", pattern="^(bloom|abortion|harvest)$", description="Entry type filter"),
    ] = None,
    search: Annotated[
        Optional[str],
        Query(description="Match location, location name, variety or display date"),
    ] = None,
    sort_by: Annotated[
        str,
        Query(alias="sortBy", pattern="^(date|location)$", description="Sort order"),
    ] = "date",
) -> HistoryResponse:
    entries = await farm_service.get_history(entry_type=entry_type, search=search, sort_by=sort_by)
    return HistoryResponse(count=len(entries), entries=entries)
