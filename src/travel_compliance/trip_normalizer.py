"""
Trip normalization.

Turns caller-supplied trip records into records with derived day counts.
Malformed dates never raise; they mark the trip as incomplete so it can
still be shown and edited.
"""

from typing import Iterable, Optional

from .dates import add_days, days_between, parse_iso_date
from .enums import AbsenceSource
from .models import AbsenceInterval, TripRecord, TripWithCalculation


def normalize_trip(trip: TripRecord) -> TripWithCalculation:
    """
    Derive calendar and full-day counts for a single trip.

    ``calendar_days`` is signed (negative when the dates are reversed);
    ``full_days`` excludes departure and return days and floors at zero.
    """
    departure = parse_iso_date(trip.departure_date)
    returned = parse_iso_date(trip.return_date)

    if departure is None or returned is None:
        return TripWithCalculation(
            trip=trip,
            calendar_days=None,
            full_days=None,
            is_incomplete=True,
        )

    calendar_days = days_between(returned, departure)
    return TripWithCalculation(
        trip=trip,
        calendar_days=calendar_days,
        full_days=max(0, calendar_days - 1),
        is_incomplete=False,
    )


def normalize_trips(trips: Iterable[TripRecord]) -> list[TripWithCalculation]:
    """Normalize every trip, preserving input order."""
    return [normalize_trip(trip) for trip in trips]


def complete_trips(trips: Iterable[TripWithCalculation]) -> list[TripWithCalculation]:
    return [t for t in trips if not t.is_incomplete]


def trip_absence_interval(trip: TripWithCalculation) -> Optional[AbsenceInterval]:
    """
    Absence interval for a trip: the days strictly between departure and return.

    Returns None for incomplete trips. Same-day, next-day and reversed trips
    yield an empty interval.
    """
    if trip.is_incomplete:
        return None

    departure = parse_iso_date(trip.departure_date)
    returned = parse_iso_date(trip.return_date)
    return AbsenceInterval(
        first_day=add_days(departure, 1),
        last_day=add_days(returned, -1),
        source=AbsenceSource.TRIP,
    )


def trip_absence_intervals(trips: Iterable[TripWithCalculation]) -> list[AbsenceInterval]:
    """Non-empty absence intervals of all complete trips."""
    intervals = []
    for trip in trips:
        interval = trip_absence_interval(trip)
        if interval is not None and not interval.is_empty:
            intervals.append(interval)
    return intervals
