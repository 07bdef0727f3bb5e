"""
API router for harvest forecasts, analytics and the dashboard.
"""
from typing import List, Optional
from fastapi import APIRouter, Query
from typing import Annotated

from bloomtrack.api.dependencies import FarmServiceDep, TodayDep
from bloomtrack.api.v1.models.responses import AbortionRatesResponse, ForecastsResponse
from bloomtrack.domain.models import (
    DailyHarvestProjection,
    DashboardStats,
    HarvestSections,
)


router = APIRouter()


@router.get(
    "/forecasts",
    response_model=ForecastsResponse,
    tags=["forecasts"],
    summary="Harvest forecasts for blooms with outstanding fruit",
    description="""
    Forecast the harvest date of every bloom that still has fruit.

    - Expected date is the bloom date plus the bloom's own maturity period
    - Ready-today forecasts come first, then ascending days until harvest,
      so the most overdue blooms are listed before upcoming ones
    - Blooms with nothing left to harvest are excluded
    """,
)
async def get_forecasts(farm_service: FarmServiceDep, today: TodayDep) -> ForecastsResponse:
    forecasts = await farm_service.get_harvest_forecasts(today)
    return ForecastsResponse(today=today, forecast_count=len(forecasts), forecasts=forecasts)


@router.get(
    "/forecasts/sections",
    response_model=HarvestSections,
    tags=["forecasts"],
    summary="Forecasts grouped into ready today, overdue and upcoming",
)
async def get_forecast_sections(farm_service: FarmServiceDep, today: TodayDep) -> HarvestSections:
    return await farm_service.get_harvest_sections(today)


@router.get(
    "/forecasts/daily",
    response_model=List[DailyHarvestProjection],
    tags=["forecasts"],
    summary="Expected fruit per day",
)
async def get_daily_projection(
    farm_service: FarmServiceDep,
    today: TodayDep,
    days: Annotated[Optional[int], Query(ge=1, le=90, description="Number of days")] = None,
) -> List[DailyHarvestProjection]:
    return await farm_service.get_daily_projection(today, days)


@router.get(
    "/analytics/abortion-rates/locations",
    response_model=AbortionRatesResponse,
    tags=["analytics"],
    summary="Abortion rate by location",
)
async def get_location_abortion_rates(
    farm_service: FarmServiceDep,
    limit: Annotated[Optional[int], Query(ge=1, le=500, description="Number of locations")] = None,
) -> AbortionRatesResponse:
    rates = await farm_service.get_abortion_rates_by_location(limit)
    return AbortionRatesResponse(group_by="location", rates=rates)


@router.get(
    "/analytics/abortion-rates/varieties",
    response_model=AbortionRatesResponse,
    tags=["analytics"],
    summary="Abortion rate by variety",
)
async def get_variety_abortion_rates(
    farm_service: FarmServiceDep,
    limit: Annotated[Optional[int], Query(ge=1, le=10, description="Number of varieties")] = None,
) -> AbortionRatesResponse:
    rates = await farm_service.get_abortion_rates_by_variety(limit)
    return AbortionRatesResponse(group_by="variety", rates=rates)


@router.get(
    "/dashboard",
    response_model=DashboardStats,
    tags=["dashboard"],
    summary="Day-scoped summary counters",
)
async def get_dashboard(farm_service: FarmServiceDep, today: TodayDep) -> DashboardStats:
    return await farm_service.get_dashboard(today)
