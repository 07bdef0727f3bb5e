"""
Domain service: day-scoped dashboard counters.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional
import logging

from bloomtrack.config import settings
from bloomtrack.domain.models import DashboardStats, UpcomingHarvest
from bloomtrack.services.domain.harvest_forecaster import expected_harvest_date
from bloomtrack.services.domain.yield_ledger import YieldLedger
from bloomtrack.utils.dates import add_days

logger = logging.getLogger(__name__)


@dataclass
class DashboardConfig:
    """Configuration for dashboard aggregation."""

    upcoming_window_days: int = 7
    """Days after today (inclusive) that count as upcoming"""

    upcoming_limit: int = 5
    """Maximum number of upcoming harvests listed"""

    ready_today_includes_depleted: bool = True
    """Whether readyToHarvestToday counts blooms with nothing left to harvest.

    The harvest screen's ready-today section only lists blooms with
    remaining fruit, so with this enabled the two can disagree.
    """


class DashboardAggregator:
    """Computes the dashboard summary for a given day."""

    def __init__(self, config: Optional[DashboardConfig] = None):
        self.config = config or DashboardConfig(
            upcoming_window_days=settings.dashboard_upcoming_window_days,
            upcoming_limit=settings.dashboard_upcoming_limit,
            ready_today_includes_depleted=settings.ready_today_includes_depleted,
        )

    def summarize(self, ledger: YieldLedger, today: date) -> DashboardStats:
        """
        Build the dashboard counters for today.

        Args:
            ledger: Yield ledger over the full history
            today: Reference calendar date

        Returns:
            DashboardStats
        """
        today_blooms = sum(1 for b in ledger.blooms if b.bloom_date == today)
        today_abortions = sum(1 for a in ledger.abortions if a.abortion_date == today)

        ready_today = 0
        upcoming: list[UpcomingHarvest] = []
        window_end = add_days(today, self.config.upcoming_window_days)

        for bloom_yield in ledger:
            expected = expected_harvest_date(bloom_yield.bloom)
            remaining = bloom_yield.remaining

            if expected == today and (remaining > 0 or self.config.ready_today_includes_depleted):
                ready_today += 1

            if today <= expected <= window_end and remaining > 0:
                upcoming.append(UpcomingHarvest(
                    bloom=bloom_yield.bloom,
                    harvest_date=expected,
                    remaining_count=remaining,
                ))

        upcoming.sort(key=lambda u: u.harvest_date)

        stats = DashboardStats(
            today_blooms=today_blooms,
            today_abortions=today_abortions,
            ready_to_harvest_today=ready_today,
            total_active_blooms=ledger.total_remaining(),
            upcoming_harvests=len(upcoming),
            upcoming=upcoming[:self.config.upcoming_limit],
        )
        logger.info(
            f"Dashboard for {today}: blooms={today_blooms}, abortions={today_abortions}, "
            f"ready={ready_today}, active={stats.total_active_blooms}, upcoming={len(upcoming)}"
        )
        return stats
