"""
API router for app settings and data management.
"""
from fastapi import APIRouter, HTTPException, status

from bloomtrack.api.dependencies import FarmServiceDep, TodayDep
from bloomtrack.api.v1.models.requests import SettingsUpdate
from bloomtrack.domain.models import AppSettings, ExportSnapshot
from bloomtrack.exceptions import EntryValidationError, StorageWriteError


router = APIRouter(tags=["settings"])


@router.get("/settings", response_model=AppSettings, summary="Current settings")
async def get_settings(farm_service: FarmServiceDep) -> AppSettings:
    return await farm_service.get_settings()


@router.put("/settings", response_model=AppSettings, summary="Update settings")
async def update_settings(body: SettingsUpdate, farm_service: FarmServiceDep) -> AppSettings:
    """Changes apply to new blooms only; existing blooms keep their maturity period."""
    try:
        return await farm_service.update_settings(body.model_dump(exclude_unset=True))
    except EntryValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageWriteError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to save settings: {e}",
        )


@router.post("/data/export", response_model=ExportSnapshot, summary="Export all data")
async def export_data(farm_service: FarmServiceDep, today: TodayDep) -> ExportSnapshot:
    """Snapshot every collection and record today as the last sync date."""
    try:
        return await farm_service.export_data(today)
    except StorageWriteError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to record export: {e}",
        )


@router.delete("/data", status_code=status.HTTP_204_NO_CONTENT, summary="Delete all entries")
async def clear_data(farm_service: FarmServiceDep) -> None:
    """Permanently delete every bloom, abortion and harvest. Settings are kept."""
    try:
        await farm_service.clear_all_data()
    except StorageWriteError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to clear data: {e}",
        )
