"""
Summary/Chart Projector.

Derives display-ready values from the normalized trips and the aggregates
computed earlier in the pipeline: totals, eligibility figures, status,
warnings, requirements and the three chart series. Missing configuration
degrades outputs to None or empty lists; nothing here raises.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .config import RuleConfig
from .dates import (
    add_days,
    days_between,
    format_display,
    parse_iso_date,
    to_iso,
)
from .enums import GoalStatus, RequirementStatus, RiskLevel, WarningSeverity
from .i18n import get_message
from .models import (
    AbsenceInterval,
    AssessmentResult,
    CalculationResult,
    EligibilityConfig,
    GoalRequirement,
    GoalWarning,
    ILRSummary,
    PreEntryPeriod,
    RollingDataPoint,
    TimelinePoint,
    TripBar,
    TripWithCalculation,
)
from .rolling_window import has_exceeded, rolling_absence_ending_on
from .trip_normalizer import complete_trips
from .trip_validator import has_overlapping_trips, reversed_trips


@dataclass
class Aggregates:
    """Values computed by the earlier pipeline stages."""

    qualifying_start: Optional[date]
    absence_intervals: list[AbsenceInterval] = field(default_factory=list)
    pre_entry: Optional[PreEntryPeriod] = None
    pre_entry_invalid: bool = False
    effective_application_date: Optional[date] = None
    assessment: Optional[AssessmentResult] = None
    calculated_application_date: Optional[date] = None


def risk_level(days: int, rules: RuleConfig) -> RiskLevel:
    if days >= rules.absence_ceiling_days:
        return RiskLevel.CRITICAL
    if days >= rules.caution_threshold_days:
        return RiskLevel.CAUTION
    return RiskLevel.LOW


def _rolling_point(
    intervals: list[AbsenceInterval],
    day: date,
    rules: RuleConfig,
) -> RollingDataPoint:
    days = rolling_absence_ending_on(intervals, day, rules.rolling_window_days)
    return RollingDataPoint(
        date=day.isoformat(),
        rolling_days=days,
        risk_level=risk_level(days, rules),
        formatted_date=format_display(day),
    )


def build_rolling_absence_data(
    absence_intervals: list[AbsenceInterval],
    start: Optional[date],
    as_of: date,
    rules: RuleConfig,
) -> list[RollingDataPoint]:
    """
    Rolling absence curve from ``start`` to ``as_of``.

    Sampled every ``span // target_chart_points`` days (at least daily). The
    ``as_of`` point is always the last point, even when it is off the grid.
    """
    if start is None:
        return []

    total_days = days_between(as_of, start)
    if total_days < 0:
        return []

    interval = max(1, total_days // rules.target_chart_points)
    points = [
        _rolling_point(absence_intervals, add_days(start, offset), rules)
        for offset in range(0, total_days + 1, interval)
    ]

    if total_days % interval != 0:
        points.append(_rolling_point(absence_intervals, as_of, rules))

    return points


def build_timeline_points(
    trips: list[TripWithCalculation],
    start: Optional[date],
    as_of: date,
    rules: RuleConfig,
) -> list[TimelinePoint]:
    """
    One point per day from ``start`` to ``as_of`` with the number of trips
    in progress (departure and return days included).

    Empty when the span is negative or longer than ``max_timeline_days``.
    """
    if start is None:
        return []

    total_days = days_between(as_of, start)
    if total_days < 0 or total_days > rules.max_timeline_days:
        return []

    # Difference array over day offsets; index total_days + 1 absorbs ends
    deltas = [0] * (total_days + 2)
    for trip in complete_trips(trips):
        first = days_between(parse_iso_date(trip.departure_date), start)
        last = days_between(parse_iso_date(trip.return_date), start)
        first = max(first, 0)
        last = min(last, total_days)
        if last < first:
            continue
        deltas[first] += 1
        deltas[last + 1] -= 1

    points = []
    active = 0
    for offset in range(total_days + 1):
        active += deltas[offset]
        day = add_days(start, offset)
        points.append(TimelinePoint(
            date=day.isoformat(),
            days_since_start=offset,
            trip_count=active,
            formatted_date=format_display(day),
        ))

    return points


def build_trip_bars(
    trips: list[TripWithCalculation],
    start: Optional[date],
    language: Optional[str] = None,
) -> list[TripBar]:
    """Gantt-style bars for every complete trip, offsets counted from ``start``."""
    if start is None:
        return []

    unknown = get_message("chart.unknown_location", language)
    bars = []
    for trip in complete_trips(trips):
        departure = parse_iso_date(trip.departure_date)
        returned = parse_iso_date(trip.return_date)
        origin = trip.trip.origin_label or unknown
        destination = trip.trip.destination_label or unknown
        bars.append(TripBar(
            date=trip.departure_date,
            trip_start=days_between(departure, start),
            trip_end=days_between(returned, start),
            trip_duration=trip.full_days or 0,
            trip_label=f"{origin} -> {destination}",
            formatted_date=format_display(departure),
            departure_date=trip.departure_date,
            return_date=trip.return_date,
        ))
    return bars


def build_summary(
    trips: list[TripWithCalculation],
    aggregates: Aggregates,
    eligibility: EligibilityConfig,
    rules: RuleConfig,
    as_of: date,
) -> ILRSummary:
    complete = complete_trips(trips)
    limit = rules.ceiling_for(eligibility.qualifying_years)

    summary = ILRSummary(
        total_trips=len(trips),
        complete_trips=len(complete),
        incomplete_trips=len(trips) - len(complete),
        total_full_days=sum(t.full_days or 0 for t in complete),
        absence_limit=limit,
        qualifying_start_date=to_iso(aggregates.qualifying_start),
        calculated_application_date=to_iso(aggregates.calculated_application_date),
    )

    assessment = aggregates.assessment
    if assessment is not None and aggregates.effective_application_date is not None:
        summary.continuous_leave_days = assessment.continuous_days
        summary.max_absence_in_any_12_months = assessment.max_absence
        summary.has_exceeded_limit = has_exceeded(assessment.max_absence, limit)
        summary.assessment_date = to_iso(assessment.assessment_date)
        summary.ilr_eligibility_date = to_iso(aggregates.effective_application_date)
        summary.days_until_eligible = days_between(
            aggregates.effective_application_date, as_of
        )

    if aggregates.qualifying_start is not None:
        current = rolling_absence_ending_on(
            aggregates.absence_intervals, as_of, rules.rolling_window_days
        )
        summary.current_rolling_absence_today = current
        summary.remaining_allowance_today = max(0, limit - current)

        if rules.is_allowed_track(eligibility.qualifying_years):
            total = eligibility.qualifying_years * 365
            elapsed = days_between(as_of, aggregates.qualifying_start)
            summary.progress_percent = min(100, max(0, round(elapsed * 100 / total)))

    return summary


def determine_status(summary: ILRSummary, rules: RuleConfig) -> GoalStatus:
    """
    Overall status, checked in order: unavailable, limit exceeded, eligible,
    at risk, in progress.
    """
    if summary.max_absence_in_any_12_months is None:
        return GoalStatus.UNAVAILABLE
    if summary.has_exceeded_limit:
        return GoalStatus.LIMIT_EXCEEDED
    if summary.days_until_eligible is not None and summary.days_until_eligible <= 0:
        return GoalStatus.ELIGIBLE
    if summary.max_absence_in_any_12_months >= rules.caution_threshold_days:
        return GoalStatus.AT_RISK
    return GoalStatus.IN_PROGRESS


def _warning(
    severity: WarningSeverity,
    code: str,
    language: Optional[str],
    **kwargs,
) -> GoalWarning:
    return GoalWarning(
        severity=severity,
        code=code,
        title=get_message(f"warning.{code}.title", language),
        message=get_message(f"warning.{code}.message", language, **kwargs),
    )


def build_warnings(
    trips: list[TripWithCalculation],
    aggregates: Aggregates,
    summary: ILRSummary,
    eligibility: EligibilityConfig,
    rules: RuleConfig,
    language: Optional[str] = None,
) -> list[GoalWarning]:
    warnings: list[GoalWarning] = []

    configured = aggregates.qualifying_start is not None and rules.is_allowed_track(
        eligibility.qualifying_years
    )
    if not configured:
        warnings.append(_warning(WarningSeverity.INFO, "missing_configuration", language))

    if aggregates.pre_entry_invalid:
        warnings.append(_warning(WarningSeverity.ERROR, "invalid_pre_entry", language))
    elif aggregates.pre_entry is not None and not aggregates.pre_entry.can_count:
        warnings.append(_warning(
            WarningSeverity.INFO,
            "pre_entry_not_counted",
            language,
            delay=aggregates.pre_entry.delay_days,
        ))

    if summary.incomplete_trips:
        warnings.append(_warning(
            WarningSeverity.WARNING,
            "incomplete_trips",
            language,
            count=summary.incomplete_trips,
        ))

    reversed_count = len(reversed_trips(trips))
    if reversed_count:
        warnings.append(_warning(
            WarningSeverity.WARNING,
            "reversed_trip",
            language,
            count=reversed_count,
        ))

    if has_overlapping_trips(trips):
        warnings.append(_warning(WarningSeverity.WARNING, "overlapping_trips", language))

    if (
        configured
        and aggregates.assessment is None
        and aggregates.effective_application_date is not None
    ):
        warnings.append(_warning(
            WarningSeverity.WARNING,
            "no_assessment_date",
            language,
            date=format_display(aggregates.effective_application_date),
        ))

    if summary.has_exceeded_limit:
        warnings.append(_warning(
            WarningSeverity.ERROR,
            "limit_exceeded",
            language,
            limit=summary.absence_limit,
        ))
    elif (
        summary.remaining_allowance_today is not None
        and summary.remaining_allowance_today < rules.low_allowance_days
    ):
        warnings.append(_warning(
            WarningSeverity.WARNING,
            "low_allowance",
            language,
            days=summary.remaining_allowance_today,
        ))

    return warnings


def build_requirements(
    summary: ILRSummary,
    language: Optional[str] = None,
) -> list[GoalRequirement]:
    eligibility_date = parse_iso_date(summary.ilr_eligibility_date)
    if eligibility_date is not None:
        period_detail = get_message(
            "requirement.qualifying_period.met",
            language,
            date=format_display(eligibility_date),
        )
    else:
        period_detail = get_message("requirement.qualifying_period.pending", language)

    period_met = (
        summary.days_until_eligible is not None and summary.days_until_eligible <= 0
    )

    if summary.max_absence_in_any_12_months is None:
        absence_status = RequirementStatus.PENDING
        absence_detail = get_message("requirement.absence_limit.pending", language)
    elif summary.has_exceeded_limit:
        absence_status = RequirementStatus.NOT_MET
        absence_detail = get_message(
            "requirement.absence_limit.not_met", language, limit=summary.absence_limit
        )
    else:
        absence_status = RequirementStatus.MET
        absence_detail = get_message("requirement.absence_limit.met", language)

    return [
        GoalRequirement(
            key="qualifying_period",
            label=get_message("requirement.qualifying_period.label", language),
            status=RequirementStatus.MET if period_met else RequirementStatus.PENDING,
            detail=period_detail,
        ),
        GoalRequirement(
            key="absence_limit",
            label=get_message("requirement.absence_limit.label", language),
            status=absence_status,
            detail=absence_detail,
        ),
    ]


def project(
    trips: list[TripWithCalculation],
    aggregates: Aggregates,
    eligibility: EligibilityConfig,
    rules: RuleConfig,
    as_of: date,
    language: Optional[str] = None,
) -> CalculationResult:
    """
    Assemble the complete CalculationResult.

    Args:
        trips: Normalized trips, in caller order
        aggregates: Outputs of the aggregation and search stages
        eligibility: The eligibility configuration used for the run
        rules: Rule parameters
        as_of: The date treated as "today"
        language: Language for warnings and labels
    """
    summary = build_summary(trips, aggregates, eligibility, rules, as_of)
    start = aggregates.qualifying_start

    return CalculationResult(
        trips=list(trips),
        pre_entry_period=aggregates.pre_entry,
        effective_application_date=to_iso(aggregates.effective_application_date),
        summary=summary,
        status=determine_status(summary, rules),
        warnings=build_warnings(trips, aggregates, summary, eligibility, rules, language),
        requirements=build_requirements(summary, language),
        rolling_absence_data=build_rolling_absence_data(
            aggregates.absence_intervals, start, as_of, rules
        ),
        timeline_points=build_timeline_points(trips, start, as_of, rules),
        trip_bars=build_trip_bars(trips, start, language),
    )
