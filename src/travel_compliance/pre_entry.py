"""
Pre-Entry Period Resolver.

Decides whether the gap between visa issuance and first entry counts toward
the qualifying period, and which date the qualifying period starts on.
"""

from datetime import date
from typing import Optional

from .dates import DateLike, add_days, days_between, parse_iso_date, to_iso
from .enums import AbsenceSource
from .models import AbsenceInterval, EligibilityConfig, PreEntryPeriod


DEFAULT_MAX_PRE_ENTRY_DAYS = 180


def resolve_pre_entry(
    issued_date: DateLike,
    entered_date: DateLike,
    max_allowed_delay_days: int = DEFAULT_MAX_PRE_ENTRY_DAYS,
) -> Optional[PreEntryPeriod]:
    """
    Resolve the pre-entry period between issuance and entry.

    The delay is plain elapsed days between two events; neither endpoint is
    excluded.

    Args:
        issued_date: Visa issuance / start date
        entered_date: Date of first entry
        max_allowed_delay_days: Longest delay that may still count

    Returns:
        PreEntryPeriod, or None when a date is missing or unparsable, or
        when entry precedes issuance. None means the dates need correcting,
        not that there is no pre-entry period.
    """
    issued = parse_iso_date(issued_date)
    entered = parse_iso_date(entered_date)
    if issued is None or entered is None:
        return None

    delay_days = days_between(entered, issued)
    if delay_days < 0:
        return None

    can_count = delay_days <= max_allowed_delay_days
    return PreEntryPeriod(
        has_pre_entry=delay_days > 0,
        delay_days=delay_days,
        can_count=can_count,
        qualifying_start_date=to_iso(issued if can_count else entered),
    )


def pre_entry_absence_interval(
    period: Optional[PreEntryPeriod],
    issued_date: DateLike,
    entered_date: DateLike,
) -> Optional[AbsenceInterval]:
    """
    Countable pre-entry span as an absence interval.

    Covers every day from issuance up to (not including) entry, matching
    ``delay_days``. Returns None when the period is unresolved, empty, or
    not countable.
    """
    if period is None or not period.can_count or not period.has_pre_entry:
        return None

    issued = parse_iso_date(issued_date)
    entered = parse_iso_date(entered_date)
    if issued is None or entered is None:
        return None

    return AbsenceInterval(
        first_day=issued,
        last_day=add_days(entered, -1),
        source=AbsenceSource.PRE_ENTRY,
    )


def resolve_qualifying_start(
    eligibility: EligibilityConfig,
    pre_entry: Optional[PreEntryPeriod],
) -> Optional[date]:
    """
    Date on which the qualifying period starts.

    Uses the resolved pre-entry start when available, otherwise the entry
    date, otherwise the visa start date.
    """
    if pre_entry is not None:
        return parse_iso_date(pre_entry.qualifying_start_date)

    return parse_iso_date(eligibility.entry_date) or parse_iso_date(
        eligibility.visa_start_date
    )
