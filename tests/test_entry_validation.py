"""
Unit tests for entry validation.
"""
import pytest

from bloomtrack.config import settings
from bloomtrack.exceptions import BloomNotFoundError, EntryValidationError
from bloomtrack.services.domain.entry_validation import (
    parse_maturity_period,
    parse_positive_count,
    validate_against_remaining,
    validate_bloom,
)
from bloomtrack.services.domain.yield_ledger import YieldLedger


class TestParsePositiveCount:
    """Tests for count coercion."""

    @pytest.mark.parametrize("value,expected", [(1, 1), (42, 42), ("7", 7), (" 12 ", 12)])
    def test_accepts_whole_numbers(self, value, expected):
        assert parse_positive_count(value, "count") == expected

    @pytest.mark.parametrize("value", [0, -3, "0", "-2", "abc", "", "2.5", 2.5, True, None])
    def test_rejects_invalid_counts(self, value):
        with pytest.raises(EntryValidationError):
            parse_positive_count(value, "count")

    def test_error_names_the_field(self):
        with pytest.raises(EntryValidationError, match="abortedCount"):
            parse_positive_count(0, "abortedCount")

    def test_validation_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_positive_count(-1, "count")


class TestValidateBloom:
    """Tests for new bloom validation."""

    def test_valid_bloom(self):
        assert validate_bloom("10", 26, "N11A") == (10, 26)

    @pytest.mark.parametrize("location", ["", "   "])
    def test_location_required(self, location):
        with pytest.raises(EntryValidationError, match="location"):
            validate_bloom(10, 26, location)

    def test_rejects_zero_maturity(self):
        with pytest.raises(EntryValidationError):
            validate_bloom(10, 0, "N11A")


class TestValidateAgainstRemaining:
    """Tests for abortion and harvest counts against remaining fruit."""

    def test_count_within_remaining(self, reference_bloom, abortion_factory):
        ledger = YieldLedger([reference_bloom], [abortion_factory(reference_bloom.id, 3)])

        assert validate_against_remaining(ledger, reference_bloom.id, 7, "harvestedCount", "fruits") == 7

    def test_count_exceeding_remaining_rejected(self, reference_bloom, abortion_factory):
        ledger = YieldLedger([reference_bloom], [abortion_factory(reference_bloom.id, 3)])

        with pytest.raises(EntryValidationError, match="only 7 remaining"):
            validate_against_remaining(ledger, reference_bloom.id, 8, "abortedCount", "flowers")

    def test_unknown_bloom(self, reference_bloom):
        ledger = YieldLedger([reference_bloom])

        with pytest.raises(BloomNotFoundError) as exc_info:
            validate_against_remaining(ledger, "missing", 1, "abortedCount", "flowers")
        assert exc_info.value.bloom_id == "missing"

    def test_depleted_bloom_rejects_any_count(self, reference_bloom, harvest_factory):
        ledger = YieldLedger([reference_bloom], harvests=[harvest_factory(reference_bloom.id, 10)])

        with pytest.raises(EntryValidationError):
            validate_against_remaining(ledger, reference_bloom.id, 1, "harvestedCount", "fruits")


class TestMaturityPeriodBounds:
    """Tests for the maturity period ceiling on new and corrected entries."""

    def test_maximum_is_inclusive(self):
        assert parse_positive_count(365, "maturityPeriodDays", maximum=365) == 365

    def test_above_maximum_rejected(self):
        with pytest.raises(EntryValidationError, match="cannot be more than 365"):
            parse_positive_count(366, "maturityPeriodDays", maximum=365)

    def test_configured_ceiling_applies(self, monkeypatch):
        monkeypatch.setattr(settings, "max_maturity_period_days", 60)

        assert parse_maturity_period("60") == 60
        with pytest.raises(EntryValidationError):
            parse_maturity_period(61)

    @pytest.mark.parametrize("maturity", [366, 3_000_000])
    def test_bloom_with_excessive_maturity_rejected(self, maturity):
        with pytest.raises(EntryValidationError, match="maturityPeriodDays"):
            validate_bloom(10, maturity, "N11A")
