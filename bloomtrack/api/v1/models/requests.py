"""
API request models using Pydantic.

Counts are plain ints here; range checks (> 0, within remaining) belong to
the service layer so they surface as 400 validation errors.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from bloomtrack.domain.models import Variety


class BloomCreate(BaseModel):
    """Request body for logging a bloom."""
    bloom_date: Optional[date] = Field(
        default=None,
        alias="date",
        description="Bloom date; defaults to today"
    )
    location: str = Field(description="Location identifier, e.g. N11A")
    variety: Optional[Variety] = Field(
        default=None,
        description="Variety; defaults to the configured default variety"
    )
    count: int = Field(description="Number of flowers")
    maturity_period_days: Optional[int] = Field(
        default=None,
        alias="maturityPeriodDays",
        description="Days to harvest; defaults to the configured maturity period"
    )
    notes: Optional[str] = None
    image_uri: Optional[str] = Field(default=None, alias="imageUri")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "date": "2024-01-01",
                "location": "N11A",
                "variety": "Red",
                "count": 10,
                "maturityPeriodDays": 26,
            }
        }


class BloomCorrection(BaseModel):
    """Request body for correcting a bloom. Omitted fields are unchanged."""
    bloom_date: Optional[date] = Field(default=None, alias="date")
    location: Optional[str] = None
    variety: Optional[Variety] = None
    count: Optional[int] = None
    maturity_period_days: Optional[int] = Field(default=None, alias="maturityPeriodDays")
    notes: Optional[str] = None
    image_uri: Optional[str] = Field(default=None, alias="imageUri")

    class Config:
        populate_by_name = True


class AbortionCreate(BaseModel):
    """Request body for logging an abortion."""
    abortion_date: Optional[date] = Field(default=None, alias="abortionDate")
    bloom_entry_id: str = Field(alias="bloomEntryId")
    aborted_count: int = Field(alias="abortedCount")
    notes: Optional[str] = None
    image_uri: Optional[str] = Field(default=None, alias="imageUri")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "abortionDate": "2024-01-05",
                "bloomEntryId": "3f2a9c1e0b7d4e55a1c2d3e4f5a6b7c8",
                "abortedCount": 3,
            }
        }


class HarvestCreate(BaseModel):
    """Request body for logging a harvest."""
    harvest_date: Optional[date] = Field(default=None, alias="harvestDate")
    bloom_entry_id: str = Field(alias="bloomEntryId")
    harvested_count: int = Field(alias="harvestedCount")
    notes: Optional[str] = None
    image_uri: Optional[str] = Field(default=None, alias="imageUri")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "harvestDate": "2024-01-27",
                "bloomEntryId": "3f2a9c1e0b7d4e55a1c2d3e4f5a6b7c8",
                "harvestedCount": 7,
            }
        }


class SettingsUpdate(BaseModel):
    """Request body for updating settings. Omitted fields are unchanged."""
    default_variety: Optional[Variety] = Field(default=None, alias="defaultVariety")
    maturity_period_days: Optional[int] = Field(default=None, alias="maturityPeriodDays")
    enable_notifications: Optional[bool] = Field(default=None, alias="enableNotifications")

    class Config:
        populate_by_name = True
