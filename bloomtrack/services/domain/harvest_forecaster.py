"""
Domain service: harvest forecasting.

Projects every bloom with outstanding fruit onto its expected harvest date
(bloom date + the bloom's own maturity period) and classifies it against an
explicit "today":
- ready today (expected date == today)
- overdue (expected date in the past, negative days)
- upcoming (expected date in the future, positive days)

Ordering puts ready-today forecasts first, then ascending signed days, so
the most overdue blooms surface before the less overdue ones, followed by
upcoming blooms nearest-first. Ties keep their input order.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional
import logging

from bloomtrack.config import settings
from bloomtrack.domain.models import (
    BloomEntry,
    DailyHarvestProjection,
    HarvestForecast,
    HarvestSections,
)
from bloomtrack.services.domain.yield_ledger import BloomYield, YieldLedger
from bloomtrack.utils.dates import add_days, days_between

logger = logging.getLogger(__name__)


@dataclass
class ForecastConfig:
    """Configuration for harvest forecasting."""

    upcoming_limit: int = 10
    """Maximum number of upcoming forecasts in the sectioned view"""

    projection_days: int = 7
    """Number of days covered by the daily projection"""


def expected_harvest_date(bloom: BloomEntry) -> date:
    """
    Bloom date plus the bloom's maturity period, as a calendar date.

    Capped at date.max for blooms whose harvest would fall past the end of
    the calendar.
    """
    expected = add_days(bloom.bloom_date, bloom.maturity_period_days)
    if expected == date.max and (date.max - bloom.bloom_date).days < bloom.maturity_period_days:
        logger.warning(f"Expected harvest date of bloom {bloom.id} is past {date.max}, capping it")
    return expected


def signed_days_until(expected: date, today: date) -> int:
    """
    Signed calendar days from today to the expected date.

    Zero when ready today, positive in the future, negative when overdue.
    """
    if expected == today:
        return 0
    days = days_between(today, expected)
    return days if expected >= today else -days


def forecast_sort_key(forecast: HarvestForecast) -> tuple[bool, int]:
    return (not forecast.is_ready_today, forecast.days_until_harvest)


def sort_forecasts(forecasts: Iterable[HarvestForecast]) -> list[HarvestForecast]:
    """Ready-today first, then ascending signed days. Stable on ties."""
    return sorted(forecasts, key=forecast_sort_key)


class HarvestForecaster:
    """
    Domain service turning ledger entries into harvest forecasts.

    Forecasts are recomputed from the ledger on every call; nothing is
    cached between calls.
    """

    def __init__(self, config: Optional[ForecastConfig] = None):
        """
        Initialize the forecaster.

        Args:
            config: Forecast configuration; defaults come from settings
        """
        self.config = config or ForecastConfig(
            upcoming_limit=settings.forecast_upcoming_limit,
            projection_days=settings.projection_days,
        )

    def forecast_bloom(self, bloom_yield: BloomYield, today: date) -> HarvestForecast:
        """
        Build the forecast for a single bloom.

        Args:
            bloom_yield: Ledger view of the bloom
            today: Reference calendar date

        Returns:
            HarvestForecast
        """
        bloom = bloom_yield.bloom
        expected = expected_harvest_date(bloom)
        return HarvestForecast(
            id=bloom.id,
            bloom_entry=bloom,
            expected_harvest_date=expected,
            expected_count=bloom.count,
            total_aborted=bloom_yield.total_aborted,
            total_harvested=bloom_yield.total_harvested,
            remaining_count=bloom_yield.remaining,
            is_ready_today=expected == today,
            days_until_harvest=signed_days_until(expected, today),
        )

    def build_forecasts(self, ledger: YieldLedger, today: date) -> list[HarvestForecast]:
        """
        Forecast every bloom with outstanding fruit.

        Blooms whose fruit has been fully aborted or harvested are left out.

        Args:
            ledger: Yield ledger over the full history
            today: Reference calendar date

        Returns:
            Sorted list of HarvestForecast
        """
        forecasts = [self.forecast_bloom(y, today) for y in ledger.outstanding()]
        forecasts = sort_forecasts(forecasts)
        logger.info(f"Forecast {len(forecasts)} outstanding blooms out of {len(ledger)} for {today}")
        return forecasts

    def build_sections(self, ledger: YieldLedger, today: date) -> HarvestSections:
        """
        Split forecasts into ready-today, overdue and upcoming groups.

        Args:
            ledger: Yield ledger over the full history
            today: Reference calendar date

        Returns:
            HarvestSections, with upcoming truncated to the configured limit
        """
        forecasts = self.build_forecasts(ledger, today)
        ready_today = [f for f in forecasts if f.is_ready_today]
        overdue = [f for f in forecasts if f.days_until_harvest < 0]
        upcoming = [f for f in forecasts if f.days_until_harvest > 0]

        logger.debug(
            f"Sections: ready={len(ready_today)}, overdue={len(overdue)}, upcoming={len(upcoming)}"
        )
        return HarvestSections(
            ready_today=ready_today,
            overdue=overdue,
            upcoming=upcoming[:self.config.upcoming_limit],
        )

    def daily_projection(
        self,
        ledger: YieldLedger,
        today: date,
        days: Optional[int] = None,
    ) -> list[DailyHarvestProjection]:
        """
        Expected fruit per day for the coming days, starting today.

        Args:
            ledger: Yield ledger over the full history
            today: First day of the projection
            days: Number of days; defaults to the configured span

        Returns:
            One DailyHarvestProjection per day, in date order, ending at
            date.max at the latest
        """
        span = days if days is not None else self.config.projection_days
        if span < 0:
            raise ValueError("Projection span cannot be negative")
        span = min(span, (date.max - today).days + 1)

        per_day: dict[date, int] = {}
        for bloom_yield in ledger:
            expected = expected_harvest_date(bloom_yield.bloom)
            per_day[expected] = per_day.get(expected, 0) + bloom_yield.remaining

        projection_dates = [add_days(today, offset) for offset in range(span)]
        return [
            DailyHarvestProjection(projection_date=day, expected_count=per_day.get(day, 0))
            for day in projection_dates
        ]
