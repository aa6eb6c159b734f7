"""
Property-based tests for the calendar-date helpers.
"""

from datetime import date, datetime

from hypothesis import given, settings
from hypothesis import strategies as st

from travel_compliance.dates import (
    add_days,
    add_years,
    days_between,
    format_display,
    parse_iso_date,
)


class TestAddDaysProperty:
    """
    Property 23: day shifts stay inside the representable range.
    """

    @given(day=st.dates(), days=st.integers(min_value=-10**7, max_value=10**7))
    @settings(max_examples=200)
    def test_shift_is_exact_or_clamped(self, day: date, days: int) -> None:
        """
        *For any* date and shift, the result is the exact shift when it is
        representable and the nearest limit otherwise.
        """
        shifted = add_days(day, days)

        if date.min.toordinal() <= day.toordinal() + days <= date.max.toordinal():
            assert days_between(shifted, day) == days
        elif days > 0:
            assert shifted == date.max
        else:
            assert shifted == date.min

    def test_limits(self) -> None:
        assert add_days(date.max, 1) == date.max
        assert add_days(date.min, -364) == date.min


class TestAddYears:
    """Calendar-year arithmetic."""

    def test_leap_day_clamps_to_february_28(self) -> None:
        assert add_years(date(2020, 2, 29), 5) == date(2025, 2, 28)
        assert add_years(date(2020, 2, 29), 4) == date(2024, 2, 29)
        assert add_years(date(2025, 2, 28), -5) == date(2020, 2, 28)

    def test_out_of_range_years(self) -> None:
        assert add_years(date(9998, 1, 1), 5) is None
        assert add_years(date(3, 1, 1), -5) is None


class TestParseIsoDate:
    """Tolerant ISO parsing."""

    def test_accepts_dates_datetimes_and_strings(self) -> None:
        assert parse_iso_date("2024-01-05") == date(2024, 1, 5)
        assert parse_iso_date("2024-01-05T23:30:00+02:00") == date(2024, 1, 5)
        assert parse_iso_date(datetime(2024, 1, 5, 12)) == date(2024, 1, 5)
        assert parse_iso_date("9999-12-31") == date.max

    def test_rejects_junk(self) -> None:
        assert parse_iso_date("") is None
        assert parse_iso_date("   ") is None
        assert parse_iso_date("2024-02-30") is None
        assert parse_iso_date("not a date") is None
        assert parse_iso_date(None) is None

    def test_display_format(self) -> None:
        assert format_display(date(2024, 1, 5)) == "05/01/2024"
