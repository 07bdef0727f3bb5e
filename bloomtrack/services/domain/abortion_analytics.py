"""
Domain service: abortion-rate analytics.

Groups bloomed and aborted flower counts by location and by variety and
ranks the groups by abortion rate. Totals come from every bloom; aborted
counts come from the ledger's join, so abortions that reference an unknown
bloom never reach a group.
"""
from dataclasses import dataclass
from typing import Callable, Optional
import logging

from bloomtrack.config import settings
from bloomtrack.domain.models import AbortionRate, BloomEntry
from bloomtrack.services.domain.location_catalog import location_display_name
from bloomtrack.services.domain.yield_ledger import YieldLedger

logger = logging.getLogger(__name__)


def abortion_rate(aborted: int, total: int) -> float:
    """
    Aborted share of bloomed flowers, in percent.

    Zero when nothing bloomed. Capped at 100 for over-allocated data.
    """
    if total <= 0:
        return 0.0
    return min(100.0, max(0.0, aborted / total * 100))


@dataclass
class _GroupTotals:
    total: int = 0
    aborted: int = 0


class AbortionAnalytics:
    """Abortion-rate rankings over the yield ledger."""

    def __init__(self, top_n: Optional[int] = None):
        """
        Args:
            top_n: Default number of groups returned; from settings if omitted
        """
        self.top_n = top_n if top_n is not None else settings.analytics_top_locations

    def by_location(self, ledger: YieldLedger, limit: Optional[int] = None) -> list[AbortionRate]:
        """
        Abortion rates per location, highest first.

        Args:
            ledger: Yield ledger over the full history
            limit: Number of rows to keep; defaults to top_n

        Returns:
            List of AbortionRate keyed by location id
        """
        return self._rank(
            ledger,
            group_key=lambda bloom: bloom.location,
            display_name=location_display_name,
            limit=limit,
        )

    def by_variety(self, ledger: YieldLedger, limit: Optional[int] = None) -> list[AbortionRate]:
        """
        Abortion rates per variety, highest first.

        Args:
            ledger: Yield ledger over the full history
            limit: Number of rows to keep; defaults to top_n

        Returns:
            List of AbortionRate keyed by variety name
        """
        return self._rank(
            ledger,
            group_key=lambda bloom: bloom.variety.value,
            display_name=lambda key: key,
            limit=limit,
        )

    def _rank(
        self,
        ledger: YieldLedger,
        group_key: Callable[[BloomEntry], str],
        display_name: Callable[[str], str],
        limit: Optional[int],
    ) -> list[AbortionRate]:
        groups: dict[str, _GroupTotals] = {}

        for bloom_yield in ledger:
            totals = groups.setdefault(group_key(bloom_yield.bloom), _GroupTotals())
            totals.total += bloom_yield.bloom.count
            totals.aborted += bloom_yield.total_aborted

        rates = [
            AbortionRate(
                key=key,
                name=display_name(key),
                total=totals.total,
                aborted=totals.aborted,
                rate=abortion_rate(totals.aborted, totals.total),
            )
            for key, totals in groups.items()
            if totals.total > 0
        ]
        rates.sort(key=lambda r: r.rate, reverse=True)

        keep = limit if limit is not None else self.top_n
        logger.debug(f"Ranked {len(rates)} abortion groups, keeping top {keep}")
        return rates[:keep]
