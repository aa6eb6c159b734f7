"""
Calendar-date helpers shared by every stage of the pipeline.

All arithmetic works on whole calendar days (``datetime.date``); time of day
and time zones are discarded at parse time. Year arithmetic goes through
``dateutil.relativedelta`` so that 29 February clamps to 28 February in
non-leap years.
"""

from datetime import date, timedelta
from typing import Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta


DISPLAY_FORMAT = "%d/%m/%Y"

DateLike = Union[date, str, None]


def parse_iso_date(value: DateLike) -> Optional[date]:
    """
    Parse an ISO-8601 date (or datetime) string into a calendar date.

    Args:
        value: ISO string, ``date`` instance, or None

    Returns:
        The calendar date, or None if the value is empty or unparsable
    """
    if value is None:
        return None
    if isinstance(value, date):
        # datetime is a date subclass; keep only the calendar part
        return date(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        return None


def is_valid_date(value: DateLike) -> bool:
    """Check whether a value parses as a calendar date."""
    return parse_iso_date(value) is not None


def days_between(later: date, earlier: date) -> int:
    """Signed number of days from ``earlier`` to ``later``."""
    return (later - earlier).days


def add_days(day: date, days: int) -> date:
    """
    Shift by whole days, clamped to the range ``date`` can represent.

    Clamping is exact for absence counting: no day exists outside
    ``[date.min, date.max]``, so nothing can be absent there.
    """
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def add_years(day: date, years: int) -> Optional[date]:
    """
    Calendar-year shift; negative values count backwards.

    Returns:
        The shifted date, or None when the target year is out of range
    """
    try:
        return day + relativedelta(years=years)
    except (ValueError, OverflowError):
        return None


def to_iso(day: Optional[date]) -> Optional[str]:
    if day is None:
        return None
    return day.isoformat()


def format_display(day: date) -> str:
    """Format a date the way charts label it (dd/mm/yyyy)."""
    return day.strftime(DISPLAY_FORMAT)
