"""
Data models for the travel compliance engine.

This module defines the trip records supplied by callers, the derived
per-trip and per-period values, and the complete calculation result.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional

from .enums import (
    AbsenceSource,
    GoalStatus,
    RequirementStatus,
    RiskLevel,
    WarningSeverity,
)
from .exceptions import ValidationError


# Accepted wire names for each TripRecord field, snake_case first
_TRIP_FIELD_ALIASES = {
    "id": ("id",),
    "departure_date": ("departure_date", "departureDate", "outDate", "out_date"),
    "return_date": ("return_date", "returnDate", "inDate", "in_date"),
    "origin_label": ("origin_label", "originLabel", "outRoute", "out_route"),
    "destination_label": (
        "destination_label",
        "destinationLabel",
        "inRoute",
        "in_route",
    ),
}


def _serialize(value: Any) -> Any:
    """Convert dataclasses, enums and dates into JSON-safe values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _serialize(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    return value


@dataclass(frozen=True)
class TripRecord:
    """A single trip as entered by the user."""

    id: str
    departure_date: str  # ISO-8601, may be empty while being edited
    return_date: str
    origin_label: str = ""
    destination_label: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "TripRecord":
        """
        Build a TripRecord from a raw mapping.

        Accepts snake_case keys as well as the camelCase and outDate/inDate
        shapes produced by the import formatters. Missing or empty dates are
        allowed; they mark the trip as incomplete later on.

        Raises:
            ValidationError: If ``data`` is not a mapping or a field has
                the wrong type
        """
        if not isinstance(data, dict):
            raise ValidationError(
                code="invalid_trip_shape",
                message="Trip record must be a mapping",
                details={"received_type": type(data).__name__},
            )

        values: dict[str, str] = {}
        for name, aliases in _TRIP_FIELD_ALIASES.items():
            raw = None
            for alias in aliases:
                if data.get(alias) is not None:
                    raw = data[alias]
                    break

            if raw is None:
                raw = ""
            elif name == "id" and isinstance(raw, int) and not isinstance(raw, bool):
                raw = str(raw)
            elif not isinstance(raw, str):
                raise ValidationError(
                    code="invalid_trip_field",
                    message=f"Trip field '{name}' must be a string",
                    details={"field": name, "received_type": type(raw).__name__},
                )
            values[name] = raw

        return cls(**values)


@dataclass(frozen=True)
class TripWithCalculation:
    """A trip record plus its derived day counts."""

    trip: TripRecord
    calendar_days: Optional[int]
    full_days: Optional[int]
    is_incomplete: bool

    @property
    def id(self) -> str:
        return self.trip.id

    @property
    def departure_date(self) -> str:
        return self.trip.departure_date

    @property
    def return_date(self) -> str:
        return self.trip.return_date


@dataclass(frozen=True)
class AbsenceInterval:
    """
    Inclusive run of absent days.

    For a trip this is the open interval between departure and return, so
    ``first_day`` is the day after departure and ``last_day`` the day before
    return. An interval with ``last_day < first_day`` is empty.
    """

    first_day: date
    last_day: date
    source: AbsenceSource = AbsenceSource.TRIP

    @property
    def is_empty(self) -> bool:
        return self.last_day < self.first_day

    @property
    def length(self) -> int:
        if self.is_empty:
            return 0
        return (self.last_day - self.first_day).days + 1

    def overlap_days(self, start: date, end: date) -> int:
        """Number of absent days falling inside ``[start, end]``."""
        lo = max(self.first_day, start)
        hi = min(self.last_day, end)
        if hi < lo:
            return 0
        return (hi - lo).days + 1


@dataclass
class EligibilityConfig:
    """Visa metadata and the chosen settlement track."""

    qualifying_years: Optional[int] = None  # one of RuleConfig.allowed_tracks
    visa_start_date: str = ""  # issuance / visa start
    entry_date: str = ""  # vignette entry, first arrival
    manual_application_date: str = ""


@dataclass
class PreEntryPeriod:
    """Gap between visa issuance and first entry."""

    has_pre_entry: bool
    delay_days: int
    can_count: bool
    qualifying_start_date: str


@dataclass
class AssessmentResult:
    """Most favourable assessment date found by the backward-counting search."""

    assessment_date: date
    qualifying_period_start: date
    max_absence: int
    continuous_days: int


@dataclass
class RollingDataPoint:
    """Rolling 12-month absence total ending on ``date``."""

    date: str
    rolling_days: int
    risk_level: RiskLevel
    formatted_date: str


@dataclass
class TimelinePoint:
    """Number of trips in progress on a given day."""

    date: str
    days_since_start: int
    trip_count: int
    formatted_date: str


@dataclass
class TripBar:
    """A complete trip expressed as day offsets from the qualifying start."""

    date: str
    trip_start: int
    trip_end: int
    trip_duration: int
    trip_label: str
    formatted_date: str
    departure_date: str
    return_date: str


@dataclass
class GoalWarning:
    """A user-facing warning derived from the calculation."""

    severity: WarningSeverity
    code: str
    title: str
    message: str


@dataclass
class GoalRequirement:
    """One settlement requirement and whether it is satisfied."""

    key: str
    label: str
    status: RequirementStatus
    detail: str


@dataclass
class ILRSummary:
    """Aggregated totals and eligibility figures."""

    total_trips: int
    complete_trips: int
    incomplete_trips: int
    total_full_days: int
    continuous_leave_days: Optional[int] = None
    max_absence_in_any_12_months: Optional[int] = None
    has_exceeded_limit: bool = False
    absence_limit: int = 180
    ilr_eligibility_date: Optional[str] = None
    days_until_eligible: Optional[int] = None
    assessment_date: Optional[str] = None
    qualifying_start_date: Optional[str] = None
    calculated_application_date: Optional[str] = None
    current_rolling_absence_today: Optional[int] = None
    remaining_allowance_today: Optional[int] = None
    progress_percent: Optional[int] = None


@dataclass
class CalculationResult:
    """Complete, JSON-serializable output of one engine call."""

    trips: list[TripWithCalculation]
    pre_entry_period: Optional[PreEntryPeriod]
    effective_application_date: Optional[str]
    summary: ILRSummary
    status: GoalStatus
    warnings: list[GoalWarning] = field(default_factory=list)
    requirements: list[GoalRequirement] = field(default_factory=list)
    rolling_absence_data: list[RollingDataPoint] = field(default_factory=list)
    timeline_points: list[TimelinePoint] = field(default_factory=list)
    trip_bars: list[TripBar] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert the result into plain dicts, lists and primitives."""
        data = _serialize(self)
        # Flatten each trip so consumers see one object per trip
        data["trips"] = [
            {
                **_serialize(item.trip),
                "calendar_days": item.calendar_days,
                "full_days": item.full_days,
                "is_incomplete": item.is_incomplete,
            }
            for item in self.trips
        ]
        return data
