"""
Calculation Engine for the travel compliance system.

Composes the pipeline stages into one call:

    trips + eligibility -> normalizer -> pre-entry resolver / aggregator
        -> backward-counting search -> projector -> CalculationResult

The engine keeps no state between calls. The date treated as "today" is an
explicit argument so identical input always produces identical output.
"""

from datetime import date
from typing import Any, Iterable, Optional

from .assessment_search import (
    default_application_date,
    find_best_assessment_date,
    find_earliest_compliant_application_date,
)
from .audit_logger import AuditLogger
from .config import EngineConfig, RuleConfig
from .dates import parse_iso_date, to_iso
from .enums import LogLevel
from .exceptions import ConfigurationError, ValidationError
from .models import CalculationResult, EligibilityConfig, TripRecord
from .pre_entry import (
    pre_entry_absence_interval,
    resolve_pre_entry,
    resolve_qualifying_start,
)
from .projector import Aggregates, project
from .trip_normalizer import normalize_trips, trip_absence_intervals
from .trip_validator import parse_trips


COMPONENT = "engine"


class TravelComplianceEngine:
    """
    Stateless travel compliance calculator.

    Holds only configuration and an optional logger; every call to
    ``calculate`` builds its result from scratch.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            config: Engine configuration, defaults to the standard rules
            logger: Optional audit logger

        Raises:
            ConfigurationError: If the rule parameters are invalid
        """
        self._config = config or EngineConfig()
        self._config.rules.validate()
        self._logger = logger

    @property
    def rules(self) -> RuleConfig:
        return self._config.rules

    def calculate(
        self,
        trips: Iterable[TripRecord],
        eligibility: EligibilityConfig,
        as_of: Optional[date] = None,
    ) -> CalculationResult:
        """
        Run the full calculation.

        Args:
            trips: Trip records in display order
            eligibility: Visa dates, track and optional manual application date
            as_of: Date treated as today, defaults to ``date.today()``

        Returns:
            CalculationResult describing everything that could be computed

        Raises:
            ConfigurationError: If ``qualifying_years`` is set but not one
                of the allowed tracks
        """
        rules = self._config.rules
        today = as_of or date.today()
        self._check_eligibility(eligibility)

        normalized = normalize_trips(trips)
        self._log(LogLevel.DEBUG, "Calculation started", {
            "trip_count": len(normalized),
            "qualifying_years": eligibility.qualifying_years,
            "as_of": today.isoformat(),
        })

        pre_entry = resolve_pre_entry(
            eligibility.visa_start_date,
            eligibility.entry_date,
            rules.max_pre_entry_days,
        )
        pre_entry_invalid = (
            pre_entry is None
            and parse_iso_date(eligibility.visa_start_date) is not None
            and parse_iso_date(eligibility.entry_date) is not None
        )
        if pre_entry_invalid:
            self._log(LogLevel.WARN, "Entry date precedes visa start date", {
                "visa_start_date": eligibility.visa_start_date,
                "entry_date": eligibility.entry_date,
            })

        qualifying_start = resolve_qualifying_start(eligibility, pre_entry)

        intervals = trip_absence_intervals(normalized)
        pre_entry_interval = pre_entry_absence_interval(
            pre_entry, eligibility.visa_start_date, eligibility.entry_date
        )
        if pre_entry_interval is not None:
            intervals.append(pre_entry_interval)

        aggregates = Aggregates(
            qualifying_start=qualifying_start,
            absence_intervals=intervals,
            pre_entry=pre_entry,
            pre_entry_invalid=pre_entry_invalid,
            effective_application_date=self._effective_application_date(
                eligibility, qualifying_start
            ),
        )

        years = eligibility.qualifying_years
        if qualifying_start is not None and years is not None:
            if aggregates.effective_application_date is not None:
                aggregates.assessment = find_best_assessment_date(
                    qualifying_start,
                    years,
                    aggregates.effective_application_date,
                    intervals,
                    search_window_days=rules.assessment_search_days,
                    window_length_days=rules.rolling_window_days,
                )
            aggregates.calculated_application_date = find_earliest_compliant_application_date(
                qualifying_start,
                years,
                intervals,
                absence_ceiling=rules.ceiling_for(years),
                early_submission_days=rules.early_submission_days,
                max_search_days=rules.application_search_days,
                window_length_days=rules.rolling_window_days,
            )

            if aggregates.assessment is None:
                self._log(LogLevel.WARN, "No eligible assessment date found", {
                    "application_date": to_iso(aggregates.effective_application_date),
                    "qualifying_start": to_iso(qualifying_start),
                })

        result = project(
            normalized,
            aggregates,
            eligibility,
            rules,
            today,
            self._config.language,
        )

        self._log(LogLevel.INFO, "Calculation completed", {
            "status": result.status.value,
            "trip_count": result.summary.total_trips,
            "incomplete_trips": result.summary.incomplete_trips,
            "max_absence": result.summary.max_absence_in_any_12_months,
            "assessment_date": result.summary.assessment_date,
        })
        return result

    def calculate_from_raw(
        self,
        raw_trips: Iterable[Any],
        eligibility: EligibilityConfig,
        as_of: Optional[date] = None,
    ) -> CalculationResult:
        """
        Validate raw trip mappings, then calculate.

        Raises:
            ValidationError: If any raw record has the wrong shape; details
                list every rejected record
        """
        parsed = parse_trips(raw_trips)
        if not parsed.valid:
            error = ValidationError(
                code="invalid_trips",
                message=f"{len(parsed.errors)} trip record(s) could not be parsed",
                details={"errors": [e.to_dict() for e in parsed.errors]},
            )
            if self._logger:
                self._logger.log_error(COMPONENT, "Rejected raw trip input", error)
            raise error

        return self.calculate(parsed.trips, eligibility, as_of)

    def _check_eligibility(self, eligibility: EligibilityConfig) -> None:
        years = eligibility.qualifying_years
        if years is not None and not self._config.rules.is_allowed_track(years):
            raise ConfigurationError(
                code="invalid_track",
                message=f"Qualifying period of {years} years is not supported",
                details={
                    "qualifying_years": years,
                    "allowed_tracks": list(self._config.rules.allowed_tracks),
                },
            )

    def _effective_application_date(
        self,
        eligibility: EligibilityConfig,
        qualifying_start: Optional[date],
    ) -> Optional[date]:
        """Manual application date if set, else the default early-submission date."""
        manual = parse_iso_date(eligibility.manual_application_date)
        if manual is not None:
            return manual
        if qualifying_start is None or eligibility.qualifying_years is None:
            return None
        return default_application_date(
            qualifying_start,
            eligibility.qualifying_years,
            self._config.rules.early_submission_days,
        )

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, COMPONENT, message, data)


def calculate_travel_data(
    trips: Iterable[TripRecord],
    eligibility: EligibilityConfig,
    as_of: Optional[date] = None,
    config: Optional[EngineConfig] = None,
) -> CalculationResult:
    """Convenience wrapper: run one calculation with a throwaway engine."""
    return TravelComplianceEngine(config).calculate(trips, eligibility, as_of)
