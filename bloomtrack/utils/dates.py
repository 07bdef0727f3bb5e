"""
Calendar date helpers.

All arithmetic is on plain calendar dates; no timezone conversion happens
anywhere in the forecasting code.
"""
from datetime import date, timedelta


def add_days(start: date, days: int) -> date:
    """
    Add a number of calendar days to a date.

    Results outside the supported calendar range are clamped to date.min or
    date.max, so stored entries near either end never break a computation.

    Args:
        start: Starting date
        days: Number of days (may be negative)

    Returns:
        Shifted date
    """
    try:
        return start + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def days_between(first: date, second: date) -> int:
    """
    Absolute number of calendar days between two dates.

    Args:
        first: One date
        second: Another date

    Returns:
        Non-negative day difference
    """
    return abs((second - first).days)


def format_display_date(value: date) -> str:
    """Format a date for display, e.g. 'Jan 27, 2024'."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def today() -> date:
    """Current local calendar date."""
    return date.today()
