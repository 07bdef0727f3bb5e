"""
Domain service: validation of new entries before they are persisted.

Nothing is clamped here. Bad input is rejected so that the read-side
clamping in the ledger only ever has to deal with legacy data.
"""
from typing import Any, Optional

from bloomtrack.config import settings
from bloomtrack.exceptions import BloomNotFoundError, EntryValidationError
from bloomtrack.services.domain.yield_ledger import YieldLedger


def parse_positive_count(value: Any, field: str, maximum: Optional[int] = None) -> int:
    """
    Coerce a caller-supplied count to a positive integer.

    Args:
        value: Raw value (int or numeric string)
        field: Field name used in the error message
        maximum: Largest accepted value, if bounded

    Returns:
        The count as int

    Raises:
        EntryValidationError: If the value is not a whole number > 0 or above maximum
    """
    if isinstance(value, bool):
        raise EntryValidationError(f"{field} must be a whole number")
    if isinstance(value, str):
        value = value.strip()
        if not value.lstrip("-").isdigit():
            raise EntryValidationError(f"{field} must be a whole number")
        value = int(value)
    if not isinstance(value, int):
        raise EntryValidationError(f"{field} must be a whole number")
    if value <= 0:
        raise EntryValidationError(f"{field} must be greater than zero")
    if maximum is not None and value > maximum:
        raise EntryValidationError(f"{field} cannot be more than {maximum}")
    return value


def parse_maturity_period(value: Any) -> int:
    """Maturity period in days, bounded by settings.max_maturity_period_days."""
    return parse_positive_count(value, "maturityPeriodDays", maximum=settings.max_maturity_period_days)


def validate_bloom(count: Any, maturity_period_days: Any, location: str) -> tuple[int, int]:
    """
    Validate the numeric fields of a new bloom.

    Returns:
        (count, maturity_period_days) as ints

    Raises:
        EntryValidationError: On a missing location or bad numbers
    """
    if not location or not location.strip():
        raise EntryValidationError("A location is required")
    return (
        parse_positive_count(count, "count"),
        parse_maturity_period(maturity_period_days),
    )


def validate_against_remaining(
    ledger: YieldLedger,
    bloom_id: str,
    count: Any,
    field: str,
    noun: str,
) -> int:
    """
    Check that a loss or harvest fits within the bloom's remaining fruit.

    Args:
        ledger: Ledger built from the current history
        bloom_id: Referenced bloom
        count: Requested count
        field: Field name for error messages
        noun: What is being removed ("flowers", "fruits")

    Returns:
        The validated count

    Raises:
        BloomNotFoundError: If the bloom does not exist
        EntryValidationError: If the count is invalid or exceeds remaining
    """
    bloom_yield = ledger.get(bloom_id)
    if bloom_yield is None:
        raise BloomNotFoundError(bloom_id)

    parsed = parse_positive_count(count, field)
    if parsed > bloom_yield.remaining:
        raise EntryValidationError(
            f"Cannot remove {parsed} {noun}; only {bloom_yield.remaining} remaining"
        )
    return parsed
