"""
Property-based tests for the Calculation Engine.
"""

import io
import json
from datetime import date, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from travel_compliance.audit_logger import AuditLogger
from travel_compliance.config import EngineConfig
from travel_compliance.engine import TravelComplianceEngine, calculate_travel_data
from travel_compliance.enums import GoalStatus, LogLevel, RequirementStatus
from travel_compliance.exceptions import ConfigurationError, ValidationError
from travel_compliance.models import EligibilityConfig, TripRecord


AS_OF = date(2026, 10, 18)


def _codes(result) -> set:
    return {w.code for w in result.warnings}


@st.composite
def trip_records(draw):
    """Generate a short list of trips in 2020-2025, some incomplete."""
    count = draw(st.integers(min_value=0, max_value=6))
    records = []
    for i in range(count):
        out = date(2020, 1, 1) + timedelta(days=draw(st.integers(0, 2000)))
        length = draw(st.integers(min_value=-3, max_value=120))
        back = (out + timedelta(days=length)).isoformat()
        if draw(st.booleans()) and draw(st.booleans()):
            back = ""
        records.append(TripRecord(str(i), out.isoformat(), back, "A", "B"))
    return records


class TestIdempotenceProperty:
    """
    Property 14: identical input gives identical output.
    """

    @given(
        trips=trip_records(),
        years=st.sampled_from([None, 2, 3, 5, 10]),
        offset=st.integers(min_value=-30, max_value=400),
    )
    @settings(max_examples=40, deadline=None)
    def test_repeated_calls_match(self, trips, years, offset) -> None:
        """
        *For any* trips and configuration, two calculations with the same
        as_of date serialize to the same data.
        """
        eligibility = EligibilityConfig(
            qualifying_years=years,
            visa_start_date="2019-06-01",
            entry_date=(date(2019, 6, 1) + timedelta(days=offset)).isoformat(),
        )

        first = calculate_travel_data(trips, eligibility, AS_OF).to_dict()
        second = calculate_travel_data(trips, eligibility, AS_OF).to_dict()

        assert first == second
        json.dumps(first)

    @given(trips=trip_records())
    @settings(max_examples=40, deadline=None)
    def test_trip_order_is_preserved(self, trips) -> None:
        """
        *For any* trips, the result lists them in caller order with the
        full-day invariant applied.
        """
        result = calculate_travel_data(trips, EligibilityConfig(), AS_OF)

        assert [t.id for t in result.trips] == [t.id for t in trips]
        for item in result.trips:
            if not item.is_incomplete:
                assert item.full_days == max(0, item.calendar_days - 1)


class TestMissingConfiguration:
    """Calculations without visa details degrade instead of raising."""

    def test_no_configuration_is_unavailable(self) -> None:
        trips = [TripRecord("1", "2024-01-01", "2024-01-05")]

        result = calculate_travel_data(trips, EligibilityConfig(), AS_OF)

        assert result.status == GoalStatus.UNAVAILABLE
        assert result.trips[0].full_days == 3
        assert result.summary.total_full_days == 3
        assert result.summary.ilr_eligibility_date is None
        assert result.summary.max_absence_in_any_12_months is None
        assert result.rolling_absence_data == []
        assert result.timeline_points == []
        assert result.trip_bars == []
        assert "missing_configuration" in _codes(result)
        assert all(r.status == RequirementStatus.PENDING for r in result.requirements)

    def test_start_without_track_still_draws_charts(self) -> None:
        eligibility = EligibilityConfig(visa_start_date="2026-01-01")

        result = calculate_travel_data([], eligibility, AS_OF)

        assert result.status == GoalStatus.UNAVAILABLE
        assert result.summary.progress_percent is None
        assert result.rolling_absence_data[-1].date == AS_OF.isoformat()
        assert len(result.timeline_points) == (AS_OF - date(2026, 1, 1)).days + 1
        assert "missing_configuration" in _codes(result)

    def test_unsupported_track_raises(self) -> None:
        eligibility = EligibilityConfig(qualifying_years=4, visa_start_date="2020-01-01")

        with pytest.raises(ConfigurationError) as exc_info:
            calculate_travel_data([], eligibility, AS_OF)

        assert exc_info.value.code == "invalid_track"


class TestPreEntryScenarios:
    """Pre-entry handling end to end."""

    def test_counted_pre_entry_is_absence(self) -> None:
        eligibility = EligibilityConfig(
            qualifying_years=5,
            visa_start_date="2020-01-01",
            entry_date="2020-03-01",
        )

        result = calculate_travel_data([], eligibility, AS_OF)
        summary = result.summary

        assert result.pre_entry_period.delay_days == 60
        assert result.pre_entry_period.can_count
        assert summary.qualifying_start_date == "2020-01-01"
        assert summary.ilr_eligibility_date == "2024-12-04"
        assert summary.assessment_date == "2025-01-01"
        assert summary.max_absence_in_any_12_months == 60
        assert summary.continuous_leave_days == 1827 - 60
        assert result.status == GoalStatus.ELIGIBLE

    def test_long_pre_entry_moves_start_to_entry(self) -> None:
        eligibility = EligibilityConfig(
            qualifying_years=5,
            visa_start_date="2020-01-01",
            entry_date="2020-07-01",
        )

        result = calculate_travel_data([], eligibility, AS_OF)

        assert not result.pre_entry_period.can_count
        assert result.summary.qualifying_start_date == "2020-07-01"
        assert result.summary.max_absence_in_any_12_months == 0
        assert "pre_entry_not_counted" in _codes(result)

    def test_entry_before_visa_start_is_flagged(self) -> None:
        eligibility = EligibilityConfig(
            qualifying_years=5,
            visa_start_date="2023-06-01",
            entry_date="2023-05-01",
        )

        result = calculate_travel_data([], eligibility, AS_OF)

        assert result.pre_entry_period is None
        assert result.summary.qualifying_start_date == "2023-05-01"
        assert "invalid_pre_entry" in _codes(result)


class TestAssessmentScenarios:
    """Scenarios driving the backward-counting search through the engine."""

    def test_manual_date_too_early_has_no_assessment(self) -> None:
        eligibility = EligibilityConfig(
            qualifying_years=5,
            visa_start_date="2020-01-01",
            manual_application_date="2023-01-01",
        )

        result = calculate_travel_data([], eligibility, AS_OF)

        assert result.effective_application_date == "2023-01-01"
        assert result.summary.assessment_date is None
        assert result.summary.ilr_eligibility_date is None
        assert result.status == GoalStatus.UNAVAILABLE
        assert "no_assessment_date" in _codes(result)

    def test_ceiling_exceeded_by_three_trips(self) -> None:
        trips = [
            TripRecord("1", "2023-01-01", "2023-03-03"),
            TripRecord("2", "2023-04-01", "2023-06-01"),
            TripRecord("3", "2023-07-01", "2023-09-02"),
        ]
        eligibility = EligibilityConfig(qualifying_years=2, visa_start_date="2022-01-01")

        result = calculate_travel_data(trips, eligibility, AS_OF)

        assert [t.full_days for t in result.trips] == [60, 60, 62]
        assert result.summary.assessment_date == "2024-01-01"
        assert result.summary.max_absence_in_any_12_months == 182
        assert result.summary.has_exceeded_limit
        assert result.status == GoalStatus.LIMIT_EXCEEDED
        assert "limit_exceeded" in _codes(result)
        assert result.requirements[1].status == RequirementStatus.NOT_MET

    def test_ten_year_track_uses_higher_ceiling(self) -> None:
        trips = [TripRecord("1", "2015-01-01", "2015-07-04")]
        eligibility = EligibilityConfig(
            qualifying_years=10,
            visa_start_date="2013-01-01",
            manual_application_date="2024-01-01",
        )

        result = calculate_travel_data(trips, eligibility, AS_OF)

        assert result.trips[0].full_days == 183
        assert result.summary.absence_limit == 184
        assert result.summary.max_absence_in_any_12_months == 183
        assert not result.summary.has_exceeded_limit
        assert result.status == GoalStatus.ELIGIBLE

    def test_in_progress_before_eligibility(self) -> None:
        trips = [TripRecord("1", "2025-03-01", "2025-03-12", "London", "Rome")]
        eligibility = EligibilityConfig(qualifying_years=5, visa_start_date="2024-01-01")

        result = calculate_travel_data(trips, eligibility, AS_OF)

        assert result.summary.ilr_eligibility_date == "2028-12-04"
        assert result.summary.days_until_eligible > 0
        assert result.summary.max_absence_in_any_12_months == 10
        assert result.status == GoalStatus.IN_PROGRESS
        assert result.trip_bars[0].trip_label == "London -> Rome"

    def test_overlapping_trips_are_warned(self) -> None:
        trips = [
            TripRecord("1", "2025-03-01", "2025-03-12"),
            TripRecord("2", "2025-03-10", "2025-03-20"),
        ]
        eligibility = EligibilityConfig(qualifying_years=5, visa_start_date="2024-01-01")

        result = calculate_travel_data(trips, eligibility, AS_OF)

        assert "overlapping_trips" in _codes(result)


class TestRawInputAndLogging:
    """Raw input validation and audit logging around a calculation."""

    def test_calculate_from_raw_accepts_camel_case(self) -> None:
        raw = [{
            "id": 7,
            "outDate": "2024-01-01",
            "inDate": "2024-01-05",
            "outRoute": "London",
            "inRoute": "Paris",
        }]

        result = TravelComplianceEngine().calculate_from_raw(raw, EligibilityConfig(), AS_OF)

        assert result.trips[0].id == "7"
        assert result.trips[0].full_days == 3
        assert result.trips[0].trip.destination_label == "Paris"

    def test_calculate_from_raw_rejects_bad_records(self) -> None:
        stream = io.StringIO()
        logger = AuditLogger(output_format="json", output_stream=stream)
        engine = TravelComplianceEngine(logger=logger)

        with pytest.raises(ValidationError) as exc_info:
            engine.calculate_from_raw(
                [{"id": "1"}, "not a trip", {"outDate": 5}],
                EligibilityConfig(),
                AS_OF,
            )

        errors = exc_info.value.details["errors"]
        assert [e["details"]["index"] for e in errors] == [1, 2]
        assert logger.entries[-1].level == LogLevel.ERROR
        assert logger.entries[-1].data["error_code"] == "invalid_trips"

    def test_calculation_is_logged_without_labels(self) -> None:
        stream = io.StringIO()
        logger = AuditLogger(output_format="json", output_stream=stream, min_level=LogLevel.DEBUG)
        engine = TravelComplianceEngine(logger=logger)
        trips = [TripRecord("1", "2024-01-01", "2024-01-05", "London", "Paris")]

        engine.calculate(trips, EligibilityConfig(), AS_OF)

        messages = [e.message for e in logger.entries]
        assert messages[0] == "Calculation started"
        assert messages[-1] == "Calculation completed"
        assert logger.entries[-1].data["status"] == "unavailable"
        assert "London" not in stream.getvalue()
        for line in stream.getvalue().splitlines():
            json.loads(line)

    def test_invalid_rules_are_rejected_up_front(self) -> None:
        config = EngineConfig()
        config.rules.rolling_window_days = 0

        with pytest.raises(ConfigurationError):
            TravelComplianceEngine(config)

    def test_german_warnings(self) -> None:
        engine = TravelComplianceEngine(EngineConfig(language="de"))

        result = engine.calculate([], EligibilityConfig(), AS_OF)

        assert result.warnings[0].title == "Fehlende Visumsangaben"


class TestCalendarEdgeScenarios:
    """Valid dates at the calendar limits and on 29 February."""

    def test_trip_on_last_representable_day(self) -> None:
        trips = [TripRecord("1", "9999-12-31", "9999-12-31")]
        eligibility = EligibilityConfig(qualifying_years=5, visa_start_date="2020-01-01")

        result = calculate_travel_data(trips, eligibility, AS_OF)

        assert result.trips[0].full_days == 0
        assert result.summary.max_absence_in_any_12_months == 0
        assert result.status == GoalStatus.ELIGIBLE

    def test_trip_in_year_one(self) -> None:
        trips = [TripRecord("1", "0001-01-01", "0001-01-10")]
        eligibility = EligibilityConfig(qualifying_years=5, visa_start_date="2020-01-01")

        result = calculate_travel_data(trips, eligibility, AS_OF)

        assert result.trips[0].full_days == 8
        assert result.summary.max_absence_in_any_12_months == 0
        assert result.status == GoalStatus.ELIGIBLE

    def test_period_ending_beyond_year_9999(self) -> None:
        eligibility = EligibilityConfig(qualifying_years=5, visa_start_date="9998-01-01")

        result = calculate_travel_data([], eligibility, AS_OF)

        assert result.effective_application_date is None
        assert result.summary.assessment_date is None
        assert result.summary.calculated_application_date is None
        assert result.status == GoalStatus.UNAVAILABLE
        assert result.rolling_absence_data == []
        json.dumps(result.to_dict())

    def test_leap_day_start_has_no_assessment_date(self) -> None:
        eligibility = EligibilityConfig(qualifying_years=5, visa_start_date="2020-02-29")

        result = calculate_travel_data([], eligibility, AS_OF)

        assert result.effective_application_date == "2025-01-31"
        assert result.summary.assessment_date is None
        assert result.status == GoalStatus.UNAVAILABLE
        assert "no_assessment_date" in _codes(result)

    def test_leap_day_start_with_manual_date_after_anniversary(self) -> None:
        eligibility = EligibilityConfig(
            qualifying_years=5,
            visa_start_date="2020-02-29",
            manual_application_date="2025-03-01",
        )

        result = calculate_travel_data([], eligibility, AS_OF)

        assert result.summary.assessment_date == "2025-03-01"
        assert result.summary.max_absence_in_any_12_months == 0
        assert result.status == GoalStatus.ELIGIBLE
        assert "no_assessment_date" not in _codes(result)
