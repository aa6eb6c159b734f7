"""
Travel Compliance - residence absence and settlement eligibility engine.

This package turns travel history and visa details into per-trip absence
counts, the worst rolling 12-month absence, the most favourable
backward-counted assessment date, and chart-ready series.
"""

__version__ = "0.1.0"
__author__ = "Travel Compliance Team"

from travel_compliance.exceptions import (
    TravelComplianceError,
    ValidationError,
    ConfigurationError,
)
from travel_compliance.enums import (
    RiskLevel,
    GoalStatus,
    WarningSeverity,
    RequirementStatus,
    AbsenceSource,
    LogLevel,
)
from travel_compliance.config import (
    RuleConfig,
    LoggingConfig,
    EngineConfig,
    config_from_dict,
    config_to_dict,
    load_config_from_file,
    load_config_from_env,
)
from travel_compliance.models import (
    TripRecord,
    TripWithCalculation,
    AbsenceInterval,
    EligibilityConfig,
    PreEntryPeriod,
    AssessmentResult,
    RollingDataPoint,
    TimelinePoint,
    TripBar,
    GoalWarning,
    GoalRequirement,
    ILRSummary,
    CalculationResult,
)
from travel_compliance.trip_normalizer import (
    normalize_trip,
    normalize_trips,
    trip_absence_interval,
    trip_absence_intervals,
)
from travel_compliance.trip_validator import (
    TripParseResult,
    parse_trips,
    has_overlapping_trips,
    reversed_trips,
)
from travel_compliance.rolling_window import (
    RollingWindow,
    absence_days_in_range,
    candidate_anchors,
    find_worst_window,
    max_absence_in_rolling_window,
    has_exceeded,
    rolling_absence_ending_on,
)
from travel_compliance.pre_entry import (
    resolve_pre_entry,
    pre_entry_absence_interval,
    resolve_qualifying_start,
)
from travel_compliance.assessment_search import (
    assess_candidate,
    find_best_assessment_date,
    default_application_date,
    find_earliest_compliant_application_date,
)
from travel_compliance.projector import (
    Aggregates,
    risk_level,
    build_rolling_absence_data,
    build_timeline_points,
    build_trip_bars,
    build_summary,
    determine_status,
    build_warnings,
    build_requirements,
    project,
)
from travel_compliance.engine import (
    TravelComplianceEngine,
    calculate_travel_data,
)
from travel_compliance.audit_logger import (
    AuditLogger,
    LogEntry,
)
from travel_compliance.i18n import (
    get_message,
    get_all_message_keys,
    has_translation,
    get_missing_translations,
    validate_translations,
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)

__all__ = [
    # Exceptions
    "TravelComplianceError",
    "ValidationError",
    "ConfigurationError",
    # Enums
    "RiskLevel",
    "GoalStatus",
    "WarningSeverity",
    "RequirementStatus",
    "AbsenceSource",
    "LogLevel",
    # Configuration
    "RuleConfig",
    "LoggingConfig",
    "EngineConfig",
    "config_from_dict",
    "config_to_dict",
    "load_config_from_file",
    "load_config_from_env",
    # Models
    "TripRecord",
    "TripWithCalculation",
    "AbsenceInterval",
    "EligibilityConfig",
    "PreEntryPeriod",
    "AssessmentResult",
    "RollingDataPoint",
    "TimelinePoint",
    "TripBar",
    "GoalWarning",
    "GoalRequirement",
    "ILRSummary",
    "CalculationResult",
    # Trip Normalizer
    "normalize_trip",
    "normalize_trips",
    "trip_absence_interval",
    "trip_absence_intervals",
    # Trip Validator
    "TripParseResult",
    "parse_trips",
    "has_overlapping_trips",
    "reversed_trips",
    # Rolling Window Aggregator
    "RollingWindow",
    "absence_days_in_range",
    "candidate_anchors",
    "find_worst_window",
    "max_absence_in_rolling_window",
    "has_exceeded",
    "rolling_absence_ending_on",
    # Pre-Entry Resolver
    "resolve_pre_entry",
    "pre_entry_absence_interval",
    "resolve_qualifying_start",
    # Assessment Search
    "assess_candidate",
    "find_best_assessment_date",
    "default_application_date",
    "find_earliest_compliant_application_date",
    # Projector
    "Aggregates",
    "risk_level",
    "build_rolling_absence_data",
    "build_timeline_points",
    "build_trip_bars",
    "build_summary",
    "determine_status",
    "build_warnings",
    "build_requirements",
    "project",
    # Engine
    "TravelComplianceEngine",
    "calculate_travel_data",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # I18n
    "get_message",
    "get_all_message_keys",
    "has_translation",
    "get_missing_translations",
    "validate_translations",
    "TRANSLATIONS",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
]
