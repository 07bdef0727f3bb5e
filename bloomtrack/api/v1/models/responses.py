"""
API response models using Pydantic.
"""
from datetime import date
from typing import List, Literal
from pydantic import BaseModel, Field

from bloomtrack.domain.models import (
    AbortionRate,
    FarmLocation,
    HarvestForecast,
    HistoryEntry,
)


class ForecastsResponse(BaseModel):
    """Response model for the harvest forecast endpoint."""
    today: date = Field(description="Reference date used for the forecast")
    forecast_count: int = Field(
        alias="forecastCount",
        description="Number of blooms with outstanding fruit"
    )
    forecasts: List[HarvestForecast]

    class Config:
        populate_by_name = True


class AbortionRatesResponse(BaseModel):
    """Response model for abortion-rate rankings."""
    group_by: Literal["location", "variety"] = Field(alias="groupBy")
    rates: List[AbortionRate] = Field(description="Groups ranked by abortion rate, highest first")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "groupBy": "variety",
                "rates": [
                    {"key": "Red", "name": "Red", "total": 10, "aborted": 3, "rate": 30.0},
                ]
            }
        }


class LocationsResponse(BaseModel):
    """Response model for the location catalog."""
    count: int
    locations: List[FarmLocation]


class HistoryResponse(BaseModel):
    """Response model for the entry history."""
    count: int
    entries: List[HistoryEntry]
