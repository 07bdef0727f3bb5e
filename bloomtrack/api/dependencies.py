"""
Dependency injection for FastAPI.
"""
from datetime import date
from typing import Annotated, Optional
from fastapi import Depends, Query

from bloomtrack.infrastructure.event_store import EventStore, get_event_store
from bloomtrack.services.application.farm_service import FarmService
from bloomtrack.services.domain.abortion_analytics import AbortionAnalytics
from bloomtrack.services.domain.dashboard import DashboardAggregator
from bloomtrack.services.domain.harvest_forecaster import HarvestForecaster
from bloomtrack.utils import dates


def get_harvest_forecaster() -> HarvestForecaster:
    return HarvestForecaster()


def get_abortion_analytics() -> AbortionAnalytics:
    return AbortionAnalytics()


def get_dashboard_aggregator() -> DashboardAggregator:
    return DashboardAggregator()


def get_farm_service(
    store: Annotated[EventStore, Depends(get_event_store)],
    forecaster: Annotated[HarvestForecaster, Depends(get_harvest_forecaster)],
    analytics: Annotated[AbortionAnalytics, Depends(get_abortion_analytics)],
    dashboard: Annotated[DashboardAggregator, Depends(get_dashboard_aggregator)],
) -> FarmService:
    """
    Dependency factory for FarmService.

    Args:
        store: Event store (injected)
        forecaster: Harvest forecaster (injected)
        analytics: Abortion analytics (injected)
        dashboard: Dashboard aggregator (injected)

    Returns:
        FarmService instance
    """
    return FarmService(
        store=store,
        forecaster=forecaster,
        analytics=analytics,
        dashboard=dashboard,
    )


def get_today(
    today: Annotated[
        Optional[date],
        Query(description="Reference date (YYYY-MM-DD); defaults to the server's current date"),
    ] = None,
) -> date:
    """
    Reference calendar date for day-scoped computations.

    Returns:
        The `today` query parameter if given, else the current date
    """
    return today or dates.today()


# Type aliases for cleaner route signatures
FarmServiceDep = Annotated[FarmService, Depends(get_farm_service)]
TodayDep = Annotated[date, Depends(get_today)]
