"""
Enumeration types for the travel compliance engine.

These enums provide type-safe constants for risk buckets, goal status,
warning severities, and logging levels throughout the system.
"""

from enum import Enum


class RiskLevel(Enum):
    """Risk bucket of a rolling 12-month absence total."""

    LOW = "low"
    CAUTION = "caution"
    CRITICAL = "critical"


class GoalStatus(Enum):
    """Overall settlement status derived from a calculation."""

    ELIGIBLE = "eligible"
    IN_PROGRESS = "in_progress"
    AT_RISK = "at_risk"
    LIMIT_EXCEEDED = "limit_exceeded"
    UNAVAILABLE = "unavailable"


class WarningSeverity(Enum):
    """Severity of a warning attached to a calculation result."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class RequirementStatus(Enum):
    """Whether a settlement requirement is currently satisfied."""

    MET = "met"
    NOT_MET = "not_met"
    PENDING = "pending"


class AbsenceSource(Enum):
    """Origin of an absence interval."""

    TRIP = "trip"
    PRE_ENTRY = "pre_entry"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
