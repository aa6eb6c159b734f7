"""
Backward-Counting Assessment Search.

Eligibility is assessed by counting back a full qualifying period from an
assessment date. The rules allow the assessment to fall on the application
date or on any of the following ``search_window_days`` days, and the
applicant gets whichever of those dates is most favourable.
"""

from datetime import date
from typing import Iterable, Optional

from .dates import add_days, add_years, days_between
from .models import AbsenceInterval, AssessmentResult
from .rolling_window import (
    DEFAULT_ABSENCE_CEILING,
    DEFAULT_WINDOW_DAYS,
    absence_days_in_range,
    max_absence_in_rolling_window,
)


DEFAULT_SEARCH_WINDOW_DAYS = 28
DEFAULT_EARLY_SUBMISSION_DAYS = 28
DEFAULT_APPLICATION_SEARCH_DAYS = 365


def assess_candidate(
    assessment_date: date,
    qualifying_start_date: date,
    qualifying_years: int,
    absence_intervals: list[AbsenceInterval],
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[AssessmentResult]:
    """
    Evaluate one candidate assessment date.

    Returns:
        AssessmentResult, or None if counting back ``qualifying_years``
        lands before the qualifying start or before the first representable
        year
    """
    period_start = add_years(assessment_date, -qualifying_years)
    if period_start is None or period_start < qualifying_start_date:
        return None

    max_absence = max_absence_in_rolling_window(
        absence_intervals, period_start, assessment_date, window_length_days
    )
    absent = absence_days_in_range(absence_intervals, period_start, assessment_date)

    return AssessmentResult(
        assessment_date=assessment_date,
        qualifying_period_start=period_start,
        max_absence=max_absence,
        continuous_days=days_between(assessment_date, period_start) - absent,
    )


def find_best_assessment_date(
    qualifying_start_date: date,
    qualifying_years: int,
    application_date: date,
    absence_intervals: Iterable[AbsenceInterval],
    search_window_days: int = DEFAULT_SEARCH_WINDOW_DAYS,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[AssessmentResult]:
    """
    Find the assessment date with the lowest rolling-window absence.

    Candidates run from ``application_date`` to ``application_date +
    search_window_days`` inclusive. Candidates whose qualifying period would
    start before ``qualifying_start_date`` are skipped. Ties keep the
    earliest candidate.

    Returns:
        The most favourable AssessmentResult, or None when no candidate
        covers a full qualifying period
    """
    intervals = [iv for iv in absence_intervals if not iv.is_empty]
    best: Optional[AssessmentResult] = None

    for offset in range(search_window_days + 1):
        candidate = assess_candidate(
            add_days(application_date, offset),
            qualifying_start_date,
            qualifying_years,
            intervals,
            window_length_days,
        )
        if candidate is None:
            continue
        if best is None or candidate.max_absence < best.max_absence:
            best = candidate

    return best


def default_application_date(
    qualifying_start_date: date,
    qualifying_years: int,
    early_submission_days: int = DEFAULT_EARLY_SUBMISSION_DAYS,
) -> Optional[date]:
    """
    Earliest date an application may be submitted: period end minus the
    early window. None when the period end is past the last representable
    year.
    """
    period_end = add_years(qualifying_start_date, qualifying_years)
    if period_end is None:
        return None
    return add_days(period_end, -early_submission_days)


def find_earliest_compliant_application_date(
    qualifying_start_date: date,
    qualifying_years: int,
    absence_intervals: Iterable[AbsenceInterval],
    absence_ceiling: int = DEFAULT_ABSENCE_CEILING,
    early_submission_days: int = DEFAULT_EARLY_SUBMISSION_DAYS,
    max_search_days: int = DEFAULT_APPLICATION_SEARCH_DAYS,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[date]:
    """
    Earliest application date whose qualifying period stays within the ceiling.

    Starts from the default application date and, if that one breaches the
    ceiling, binary searches up to ``max_search_days`` later. The search
    assumes that once a date complies, later dates comply too.

    Returns:
        The compliant date, or None if none is found in range
    """
    intervals = [iv for iv in absence_intervals if not iv.is_empty]
    baseline = default_application_date(
        qualifying_start_date, qualifying_years, early_submission_days
    )
    if baseline is None:
        return None

    def is_compliant(candidate: date) -> bool:
        period_start = add_years(candidate, -qualifying_years)
        if period_start is None or period_start < qualifying_start_date:
            period_start = qualifying_start_date
        max_absence = max_absence_in_rolling_window(
            intervals, period_start, candidate, window_length_days
        )
        return max_absence <= absence_ceiling

    if is_compliant(baseline):
        return baseline

    left, right = 0, max_search_days
    result: Optional[date] = None
    while left <= right:
        mid = (left + right) // 2
        candidate = add_days(baseline, mid)
        if is_compliant(candidate):
            result = candidate
            right = mid - 1
        else:
            left = mid + 1

    return result
