"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Entry factories (blooms, abortions, harvests)
- The reference bloom used by the end-to-end scenarios
- In-memory event store and farm service
- FastAPI test client wired to the in-memory store
"""
import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import itertools
from datetime import date, datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from bloomtrack.main import app
from bloomtrack.api.dependencies import get_today
from bloomtrack.domain.models import AbortionEntry, BloomEntry, HarvestEntry, Variety
from bloomtrack.infrastructure.event_store import EventStore, get_event_store
from bloomtrack.infrastructure.key_value_store import InMemoryKeyValueStore
from bloomtrack.services.application.farm_service import FarmService
from bloomtrack.services.domain.abortion_analytics import AbortionAnalytics
from bloomtrack.services.domain.dashboard import DashboardAggregator, DashboardConfig
from bloomtrack.services.domain.harvest_forecaster import ForecastConfig, HarvestForecaster


CREATED_AT = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


# ============================================================
# Entry Factories
# ============================================================

@pytest.fixture
def bloom_factory():
    """Build BloomEntry objects with sensible defaults."""
    ids = itertools.count(1)

    def _make(
        bloom_date: date = date(2024, 1, 1),
        count: int = 10,
        location: str = "N11A",
        variety: Variety = Variety.RED,
        maturity_period_days: int = 26,
        bloom_id: str = None,
    ) -> BloomEntry:
        return BloomEntry(
            id=bloom_id or f"bloom-{next(ids)}",
            bloom_date=bloom_date,
            location=location,
            variety=variety,
            count=count,
            maturity_period_days=maturity_period_days,
            created_at=CREATED_AT,
        )

    return _make


@pytest.fixture
def abortion_factory():
    """Build AbortionEntry objects for a bloom id."""
    ids = itertools.count(1)

    def _make(bloom_entry_id: str, aborted_count: int = 1, abortion_date: date = date(2024, 1, 5)) -> AbortionEntry:
        return AbortionEntry(
            id=f"abortion-{next(ids)}",
            abortion_date=abortion_date,
            bloom_entry_id=bloom_entry_id,
            aborted_count=aborted_count,
            created_at=CREATED_AT,
        )

    return _make


@pytest.fixture
def harvest_factory():
    """Build HarvestEntry objects for a bloom id."""
    ids = itertools.count(1)

    def _make(bloom_entry_id: str, harvested_count: int = 1, harvest_date: date = date(2024, 1, 27)) -> HarvestEntry:
        return HarvestEntry(
            id=f"harvest-{next(ids)}",
            harvest_date=harvest_date,
            bloom_entry_id=bloom_entry_id,
            harvested_count=harvested_count,
            created_at=CREATED_AT,
        )

    return _make


@pytest.fixture
def reference_bloom(bloom_factory) -> BloomEntry:
    """Bloom of 10 Red flowers on 2024-01-01 with a 26-day maturity period."""
    return bloom_factory(bloom_id="ref-bloom")


# ============================================================
# Service Fixtures
# ============================================================

@pytest.fixture
def memory_store() -> EventStore:
    """Event store over an empty in-memory backend."""
    return EventStore(InMemoryKeyValueStore())


@pytest.fixture
def forecaster() -> HarvestForecaster:
    return HarvestForecaster(ForecastConfig(upcoming_limit=10, projection_days=7))


@pytest.fixture
def dashboard_aggregator() -> DashboardAggregator:
    return DashboardAggregator(DashboardConfig())


@pytest.fixture
def farm_service(memory_store, forecaster, dashboard_aggregator) -> FarmService:
    return FarmService(
        store=memory_store,
        forecaster=forecaster,
        analytics=AbortionAnalytics(top_n=10),
        dashboard=dashboard_aggregator,
    )


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def fixed_today() -> date:
    return date(2024, 1, 20)


@pytest.fixture
def test_client(memory_store, fixed_today):
    """Test client backed by the in-memory store with a fixed default date."""
    app.dependency_overrides[get_event_store] = lambda: memory_store

    def _today(today: Optional[date] = None) -> date:
        return today or fixed_today

    app.dependency_overrides[get_today] = _today
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
