"""
Unit tests for the yield ledger.

Tests cover:
- Remaining-count arithmetic and clamping
- Grouping of abortions and harvests by bloom
- Orphaned entries
- Duplicate bloom ids
"""
import random

import pytest

from bloomtrack.services.domain.yield_ledger import (
    BloomYield,
    YieldLedger,
    remaining_count,
)


# ============================================================
# Remaining Count Tests
# ============================================================

class TestRemainingCount:
    """Tests for the clamped remaining formula."""

    @pytest.mark.parametrize("count,aborted,harvested,expected", [
        (10, 0, 0, 10),
        (10, 3, 0, 7),
        (10, 3, 7, 0),
        (10, 12, 0, 0),   # over-abortion
        (10, 6, 6, 0),    # over-allocation across both
        (1, 0, 1, 0),
    ])
    def test_remaining_formula(self, count, aborted, harvested, expected):
        assert remaining_count(count, aborted, harvested) == expected

    @pytest.mark.parametrize("seed", range(20))
    def test_random_histories_never_negative(self, seed, bloom_factory, abortion_factory, harvest_factory):
        """Random event histories, including over-abortion, match the clamped formula."""
        rng = random.Random(seed)
        blooms = [bloom_factory(count=rng.randint(1, 30)) for _ in range(5)]
        abortions = []
        harvests = []
        for _ in range(rng.randint(0, 25)):
            bloom = rng.choice(blooms)
            if rng.random() < 0.5:
                abortions.append(abortion_factory(bloom.id, rng.randint(1, 15)))
            else:
                harvests.append(harvest_factory(bloom.id, rng.randint(1, 15)))

        ledger = YieldLedger(blooms, abortions, harvests)

        for bloom in blooms:
            aborted = sum(a.aborted_count for a in abortions if a.bloom_entry_id == bloom.id)
            harvested = sum(h.harvested_count for h in harvests if h.bloom_entry_id == bloom.id)
            assert ledger.total_aborted(bloom.id) == aborted
            assert ledger.total_harvested(bloom.id) == harvested
            assert ledger.remaining(bloom.id) == max(0, bloom.count - aborted - harvested)
            assert ledger.remaining(bloom.id) >= 0


# ============================================================
# Ledger Tests
# ============================================================

class TestYieldLedger:
    """Tests for ledger construction and queries."""

    def test_bloom_without_events(self, reference_bloom):
        ledger = YieldLedger([reference_bloom])

        entry = ledger.get(reference_bloom.id)
        assert isinstance(entry, BloomYield)
        assert entry.total_aborted == 0
        assert entry.total_harvested == 0
        assert entry.remaining == 10

    def test_events_group_by_bloom(self, bloom_factory, abortion_factory, harvest_factory):
        first = bloom_factory(count=10)
        second = bloom_factory(count=8)

        ledger = YieldLedger(
            [first, second],
            [abortion_factory(first.id, 2), abortion_factory(first.id, 1), abortion_factory(second.id, 4)],
            [harvest_factory(first.id, 5)],
        )

        assert ledger.remaining(first.id) == 2
        assert ledger.remaining(second.id) == 4
        assert ledger.total_remaining() == 6

    def test_over_allocated_bloom_flagged(self, reference_bloom, abortion_factory):
        ledger = YieldLedger([reference_bloom], [abortion_factory(reference_bloom.id, 15)])

        entry = ledger.get(reference_bloom.id)
        assert entry.is_over_allocated
        assert entry.remaining == 0

    def test_orphaned_events_are_excluded(self, reference_bloom, abortion_factory, harvest_factory):
        orphan_abortion = abortion_factory("no-such-bloom", 3)
        orphan_harvest = harvest_factory("no-such-bloom", 2)

        ledger = YieldLedger([reference_bloom], [orphan_abortion], [orphan_harvest])

        assert ledger.remaining(reference_bloom.id) == 10
        assert ledger.orphaned_abortions == [orphan_abortion]
        assert ledger.orphaned_harvests == [orphan_harvest]
        assert ledger.get("no-such-bloom") is None
        assert ledger.remaining("no-such-bloom") == 0

    def test_outstanding_keeps_input_order(self, bloom_factory, harvest_factory):
        blooms = [bloom_factory(count=3) for _ in range(4)]
        ledger = YieldLedger(blooms, harvests=[harvest_factory(blooms[1].id, 3)])

        assert [y.bloom.id for y in ledger.outstanding()] == [blooms[0].id, blooms[2].id, blooms[3].id]

    def test_duplicate_bloom_ids_keep_first(self, bloom_factory):
        first = bloom_factory(bloom_id="dup", count=5)
        second = bloom_factory(bloom_id="dup", count=50)

        ledger = YieldLedger([first, second])

        assert len(ledger) == 1
        assert ledger.bloom("dup").count == 5

    def test_empty_ledger(self):
        ledger = YieldLedger([], [], [])

        assert len(ledger) == 0
        assert ledger.total_remaining() == 0
        assert ledger.outstanding() == []
