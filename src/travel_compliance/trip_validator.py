"""
Boundary validation for raw trip input.

Raw records coming from import formatters are converted into TripRecord
instances here, so the calculation pipeline only ever sees typed data.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from .dates import parse_iso_date
from .exceptions import ValidationError
from .models import TripRecord, TripWithCalculation


@dataclass
class TripParseResult:
    """Outcome of converting a batch of raw trip records."""

    trips: list[TripRecord] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def parse_trips(raw_trips: Iterable[Any]) -> TripParseResult:
    """
    Convert raw mappings into TripRecord instances.

    Records with the wrong shape are collected as errors (with their index)
    instead of aborting the whole batch.
    """
    result = TripParseResult()
    for index, raw in enumerate(raw_trips):
        try:
            result.trips.append(TripRecord.from_dict(raw))
        except ValidationError as e:
            e.details["index"] = index
            result.errors.append(e)
    return result


def has_overlapping_trips(trips: Iterable[TripWithCalculation]) -> bool:
    """
    Return True if any two complete trips overlap.

    Touching trips (one returns the day the next departs) count as
    overlapping.
    """
    ranges = sorted(
        (parse_iso_date(t.departure_date), parse_iso_date(t.return_date))
        for t in trips
        if not t.is_incomplete
    )

    for previous, current in zip(ranges, ranges[1:]):
        if current[0] <= previous[1]:
            return True
    return False


def reversed_trips(trips: Iterable[TripWithCalculation]) -> list[TripWithCalculation]:
    """Complete trips whose return date precedes their departure date."""
    return [
        t for t in trips
        if not t.is_incomplete and t.calendar_days is not None and t.calendar_days < 0
    ]
