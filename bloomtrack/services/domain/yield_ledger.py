"""
Domain service: per-bloom yield accounting.

The ledger joins abortions and harvests to their blooms once, through a
grouping index keyed by bloom id, and every downstream aggregation
(forecasts, analytics, dashboard) reads from the same ledger instead of
re-scanning the raw collections.
"""
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence
import logging

from bloomtrack.domain.models import AbortionEntry, BloomEntry, HarvestEntry

logger = logging.getLogger(__name__)


def remaining_count(count: int, total_aborted: int, total_harvested: int) -> int:
    """
    Outstanding fruit for a bloom, floored at zero.

    Stored data may over-allocate a bloom (more aborted plus harvested than
    bloomed); the result is clamped rather than going negative.
    """
    return max(0, count - total_aborted - total_harvested)


@dataclass(frozen=True)
class BloomYield:
    """Accounting view of a single bloom."""
    bloom: BloomEntry
    total_aborted: int = 0
    total_harvested: int = 0

    @property
    def remaining(self) -> int:
        return remaining_count(self.bloom.count, self.total_aborted, self.total_harvested)

    @property
    def is_over_allocated(self) -> bool:
        return self.total_aborted + self.total_harvested > self.bloom.count


class YieldLedger:
    """
    Outstanding-fruit ledger over the full event history.

    Built from the three raw collections in a single pass. Abortions and
    harvests whose bloom id does not resolve are kept aside as orphans and
    contribute nothing to any total.
    """

    def __init__(
        self,
        blooms: Sequence[BloomEntry],
        abortions: Sequence[AbortionEntry] = (),
        harvests: Sequence[HarvestEntry] = (),
    ):
        self.blooms: list[BloomEntry] = []
        self.abortions: list[AbortionEntry] = list(abortions)
        self.harvests: list[HarvestEntry] = list(harvests)
        self._blooms_by_id: dict[str, BloomEntry] = {}

        for bloom in blooms:
            if bloom.id in self._blooms_by_id:
                logger.warning(f"Duplicate bloom id {bloom.id!r}, keeping first entry")
                continue
            self._blooms_by_id[bloom.id] = bloom
            self.blooms.append(bloom)

        aborted: dict[str, int] = defaultdict(int)
        harvested: dict[str, int] = defaultdict(int)
        self.orphaned_abortions: list[AbortionEntry] = []
        self.orphaned_harvests: list[HarvestEntry] = []

        for abortion in self.abortions:
            if abortion.bloom_entry_id in self._blooms_by_id:
                aborted[abortion.bloom_entry_id] += abortion.aborted_count
            else:
                self.orphaned_abortions.append(abortion)

        for harvest in self.harvests:
            if harvest.bloom_entry_id in self._blooms_by_id:
                harvested[harvest.bloom_entry_id] += harvest.harvested_count
            else:
                self.orphaned_harvests.append(harvest)

        self._yields: dict[str, BloomYield] = {
            bloom.id: BloomYield(
                bloom=bloom,
                total_aborted=aborted.get(bloom.id, 0),
                total_harvested=harvested.get(bloom.id, 0),
            )
            for bloom in self.blooms
        }

        if self.orphaned_abortions or self.orphaned_harvests:
            logger.warning(
                f"Ignoring {len(self.orphaned_abortions)} abortion(s) and "
                f"{len(self.orphaned_harvests)} harvest(s) referencing unknown blooms"
            )
        over_allocated = sum(1 for y in self._yields.values() if y.is_over_allocated)
        if over_allocated:
            logger.warning(f"{over_allocated} bloom(s) have more fruit accounted for than bloomed")

        logger.debug(
            f"Built yield ledger: {len(self.blooms)} blooms, "
            f"{len(self.abortions)} abortions, {len(self.harvests)} harvests"
        )

    def __len__(self) -> int:
        return len(self._yields)

    def __iter__(self) -> Iterator[BloomYield]:
        return iter(self._yields.values())

    def get(self, bloom_id: str) -> Optional[BloomYield]:
        """Yield view for a bloom, or None if the id is unknown."""
        return self._yields.get(bloom_id)

    def bloom(self, bloom_id: str) -> Optional[BloomEntry]:
        return self._blooms_by_id.get(bloom_id)

    def total_aborted(self, bloom_id: str) -> int:
        entry = self._yields.get(bloom_id)
        return entry.total_aborted if entry else 0

    def total_harvested(self, bloom_id: str) -> int:
        entry = self._yields.get(bloom_id)
        return entry.total_harvested if entry else 0

    def remaining(self, bloom_id: str) -> int:
        entry = self._yields.get(bloom_id)
        return entry.remaining if entry else 0

    def outstanding(self) -> list[BloomYield]:
        """Blooms that still have fruit remaining, in input order."""
        return [y for y in self._yields.values() if y.remaining > 0]

    def total_remaining(self) -> int:
        """Sum of remaining fruit across all blooms."""
        return sum(y.remaining for y in self._yields.values())
