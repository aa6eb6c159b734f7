"""
Rolling Window Aggregator.

Computes the largest cumulative absence inside any window of
``window_length_days`` consecutive days between two boundary dates.

A window anchored at day ``a`` covers ``[a, a + L)`` clipped to the upper
boundary. Instead of sliding the window over every day, only a small set of
candidate anchors is evaluated:

- the lower boundary itself,
- the first absent day of every interval,
- the anchor whose window ends on the last absent day of every interval,
- the anchor whose window ends on the upper boundary.

The windowed sum is piecewise linear in the anchor and can only turn from
rising to falling at one of those points, so the maximum over the candidates
equals the maximum over all days. The last two kinds only matter when
absence intervals overlap each other.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from .dates import add_days
from .exceptions import ConfigurationError
from .models import AbsenceInterval


DEFAULT_WINDOW_DAYS = 365
DEFAULT_ABSENCE_CEILING = 180


@dataclass(frozen=True)
class RollingWindow:
    """The window that holds the largest absence total."""

    window_start: date
    window_end: date
    absence_days: int


def _non_empty(intervals: Iterable[AbsenceInterval]) -> list[AbsenceInterval]:
    return [iv for iv in intervals if not iv.is_empty]


def _window_end(anchor: date, boundary_end: date, window_length_days: int) -> date:
    return min(add_days(anchor, window_length_days - 1), boundary_end)


def absence_days_in_range(
    intervals: Iterable[AbsenceInterval],
    start: date,
    end: date,
) -> int:
    """Total absent days of all intervals inside ``[start, end]``."""
    if end < start:
        return 0
    return sum(iv.overlap_days(start, end) for iv in intervals)


def candidate_anchors(
    intervals: Sequence[AbsenceInterval],
    window_start: date,
    window_end: date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> list[date]:
    """
    Anchor dates that are sufficient to find the maximum window.

    Returns:
        Sorted, de-duplicated anchors within ``[window_start, window_end]``
    """
    if window_end < window_start:
        return []

    back = window_length_days - 1
    anchors = {window_start, add_days(window_end, -back)}
    for iv in intervals:
        anchors.add(iv.first_day)
        anchors.add(add_days(iv.last_day, -back))

    return sorted(a for a in anchors if window_start <= a <= window_end)


def find_worst_window(
    absence_intervals: Iterable[AbsenceInterval],
    window_start: date,
    window_end: date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[RollingWindow]:
    """
    Locate the window with the most absent days.

    Ties resolve to the earliest anchor.

    Returns:
        The worst window, or None when the boundaries are reversed

    Raises:
        ConfigurationError: If ``window_length_days`` is not positive
    """
    if window_length_days <= 0:
        raise ConfigurationError(
            code="invalid_rule",
            message="'rolling_window_days' must be positive",
            details={"field": "rolling_window_days", "value": window_length_days},
        )
    if window_end < window_start:
        return None

    intervals = _non_empty(absence_intervals)
    best: Optional[RollingWindow] = None

    for anchor in candidate_anchors(intervals, window_start, window_end, window_length_days):
        end = _window_end(anchor, window_end, window_length_days)
        total = absence_days_in_range(intervals, anchor, end)
        if best is None or total > best.absence_days:
            best = RollingWindow(window_start=anchor, window_end=end, absence_days=total)

    return best


def max_absence_in_rolling_window(
    absence_intervals: Iterable[AbsenceInterval],
    window_start: date,
    window_end: date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> int:
    """
    Largest number of absent days in any rolling window.

    Args:
        absence_intervals: Absence intervals (trips and countable pre-entry)
        window_start: First day that may be covered by a window
        window_end: Last day that may be covered by a window
        window_length_days: Window length, 365 for a rolling 12 months

    Returns:
        The maximum total, 0 when there are no intervals in range
    """
    worst = find_worst_window(
        absence_intervals, window_start, window_end, window_length_days
    )
    return worst.absence_days if worst is not None else 0


def has_exceeded(max_absence: Optional[int], ceiling: int = DEFAULT_ABSENCE_CEILING) -> bool:
    """True when the absence total is strictly above the ceiling."""
    if max_absence is None:
        return False
    return max_absence > ceiling


def rolling_absence_ending_on(
    absence_intervals: Iterable[AbsenceInterval],
    day: date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> int:
    """Absent days in the ``window_length_days``-day window ending on ``day``."""
    start = add_days(day, -(window_length_days - 1))
    return absence_days_in_range(absence_intervals, start, day)
