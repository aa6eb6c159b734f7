"""
Configuration dataclasses for the travel compliance engine.

Rule parameters (absence ceilings, thresholds, search windows) are
configuration rather than hard-coded law. This module defines them along
with logging settings and helpers that load everything from a JSON file or
from environment variables.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError


DEFAULT_ALLOWED_TRACKS = (2, 3, 5, 10)
SUPPORTED_OUTPUT_FORMATS = ("json", "text", "both")


@dataclass
class RuleConfig:
    """Residency rule parameters."""

    absence_ceiling_days: int = 180
    caution_threshold_days: int = 150
    rolling_window_days: int = 365
    max_pre_entry_days: int = 180
    assessment_search_days: int = 28
    early_submission_days: int = 28
    application_search_days: int = 365
    max_timeline_days: int = 3650
    target_chart_points: int = 200
    low_allowance_days: int = 30
    allowed_tracks: tuple[int, ...] = DEFAULT_ALLOWED_TRACKS
    # Per-track overrides of the absence ceiling
    track_absence_ceilings: dict[int, int] = field(
        default_factory=lambda: {10: 184}
    )

    def ceiling_for(self, qualifying_years: Optional[int]) -> int:
        """Absence ceiling that applies to a qualifying track."""
        if qualifying_years is None:
            return self.absence_ceiling_days
        return self.track_absence_ceilings.get(
            qualifying_years, self.absence_ceiling_days
        )

    def is_allowed_track(self, qualifying_years: Optional[int]) -> bool:
        return qualifying_years in self.allowed_tracks

    def validate(self) -> None:
        """
        Check that every parameter is usable.

        Raises:
            ConfigurationError: If a parameter is out of range
        """
        positive = {
            "absence_ceiling_days": self.absence_ceiling_days,
            "rolling_window_days": self.rolling_window_days,
            "max_timeline_days": self.max_timeline_days,
            "target_chart_points": self.target_chart_points,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ConfigurationError(
                    code="invalid_rule",
                    message=f"'{name}' must be positive",
                    details={"field": name, "value": value},
                )

        non_negative = {
            "caution_threshold_days": self.caution_threshold_days,
            "low_allowance_days": self.low_allowance_days,
            "max_pre_entry_days": self.max_pre_entry_days,
            "assessment_search_days": self.assessment_search_days,
            "early_submission_days": self.early_submission_days,
            "application_search_days": self.application_search_days,
        }
        for name, value in non_negative.items():
            if value < 0:
                raise ConfigurationError(
                    code="invalid_rule",
                    message=f"'{name}' must not be negative",
                    details={"field": name, "value": value},
                )

        if self.caution_threshold_days > self.absence_ceiling_days:
            raise ConfigurationError(
                code="invalid_rule",
                message="Caution threshold cannot exceed the absence ceiling",
                details={
                    "caution_threshold_days": self.caution_threshold_days,
                    "absence_ceiling_days": self.absence_ceiling_days,
                },
            )

        if not self.allowed_tracks or any(y <= 0 for y in self.allowed_tracks):
            raise ConfigurationError(
                code="invalid_rule",
                message="Allowed tracks must be positive year counts",
                details={"allowed_tracks": list(self.allowed_tracks)},
            )


@dataclass
class LoggingConfig:
    """Logging and audit configuration."""

    level: str = "info"
    audit_mode: bool = False
    audit_signing_key: Optional[str] = None
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class EngineConfig:
    """Main configuration combining all sub-configurations."""

    rules: RuleConfig = field(default_factory=RuleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    language: str = "en"  # 'en' or 'de'


def _parse_rules(data: dict) -> RuleConfig:
    defaults = RuleConfig()
    tracks = data.get("allowed_tracks")
    ceilings = data.get("track_absence_ceilings")

    rules = RuleConfig(
        absence_ceiling_days=int(data.get("absence_ceiling_days", defaults.absence_ceiling_days)),
        caution_threshold_days=int(data.get("caution_threshold_days", defaults.caution_threshold_days)),
        rolling_window_days=int(data.get("rolling_window_days", defaults.rolling_window_days)),
        max_pre_entry_days=int(data.get("max_pre_entry_days", defaults.max_pre_entry_days)),
        assessment_search_days=int(data.get("assessment_search_days", defaults.assessment_search_days)),
        early_submission_days=int(data.get("early_submission_days", defaults.early_submission_days)),
        application_search_days=int(data.get("application_search_days", defaults.application_search_days)),
        max_timeline_days=int(data.get("max_timeline_days", defaults.max_timeline_days)),
        target_chart_points=int(data.get("target_chart_points", defaults.target_chart_points)),
        low_allowance_days=int(data.get("low_allowance_days", defaults.low_allowance_days)),
        allowed_tracks=tuple(int(y) for y in tracks) if tracks else defaults.allowed_tracks,
        # JSON object keys are always strings
        track_absence_ceilings=(
            {int(k): int(v) for k, v in ceilings.items()}
            if ceilings is not None
            else defaults.track_absence_ceilings
        ),
    )
    rules.validate()
    return rules


def _parse_logging(data: dict) -> LoggingConfig:
    logging_config = LoggingConfig(
        level=data.get("level", "info"),
        audit_mode=bool(data.get("audit_mode", False)),
        audit_signing_key=data.get("audit_signing_key"),
        output_format=data.get("output_format", "text"),
    )
    if logging_config.output_format not in SUPPORTED_OUTPUT_FORMATS:
        raise ConfigurationError(
            code="invalid_logging",
            message=f"Invalid output_format: {logging_config.output_format}",
            details={"supported": list(SUPPORTED_OUTPUT_FORMATS)},
        )
    return logging_config


def config_from_dict(data: dict) -> EngineConfig:
    """
    Build an EngineConfig from a plain dictionary.

    Raises:
        ConfigurationError: If any section holds invalid values
    """
    try:
        return EngineConfig(
            rules=_parse_rules(data.get("rules", {})),
            logging=_parse_logging(data.get("logging", {})),
            language=data.get("language", "en"),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(
            code="invalid_config",
            message=f"Configuration could not be parsed: {e}",
            details={"error": str(e)},
        ) from e


def load_config_from_file(config_path: Path) -> Optional[EngineConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        EngineConfig if the file exists, None otherwise

    Raises:
        ConfigurationError: If the file is not valid JSON or holds invalid values
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            code="invalid_config",
            message=f"Configuration file is not valid JSON: {e}",
            details={"path": str(config_path)},
        ) from e

    return config_from_dict(data)


def config_to_dict(config: EngineConfig) -> dict:
    """Convert an EngineConfig into a JSON-compatible dictionary."""
    return {
        "rules": {
            "absence_ceiling_days": config.rules.absence_ceiling_days,
            "caution_threshold_days": config.rules.caution_threshold_days,
            "rolling_window_days": config.rules.rolling_window_days,
            "max_pre_entry_days": config.rules.max_pre_entry_days,
            "assessment_search_days": config.rules.assessment_search_days,
            "early_submission_days": config.rules.early_submission_days,
            "application_search_days": config.rules.application_search_days,
            "max_timeline_days": config.rules.max_timeline_days,
            "target_chart_points": config.rules.target_chart_points,
            "low_allowance_days": config.rules.low_allowance_days,
            "allowed_tracks": list(config.rules.allowed_tracks),
            "track_absence_ceilings": {
                str(k): v for k, v in config.rules.track_absence_ceilings.items()
            },
        },
        "logging": {
            "level": config.logging.level,
            "audit_mode": config.logging.audit_mode,
            "audit_signing_key": config.logging.audit_signing_key,
            "output_format": config.logging.output_format,
        },
        "language": config.language,
    }


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            code="invalid_env",
            message=f"Environment variable {name} must be an integer",
            details={"name": name, "value": raw},
        ) from e


def load_config_from_env(dotenv_path: Optional[Path] = None) -> EngineConfig:
    """
    Build configuration from environment variables.

    A ``.env`` file is read first (without overriding variables that are
    already set). Recognised variables are prefixed with ``TRAVEL_``.
    """
    load_dotenv(dotenv_path=dotenv_path, override=False)

    defaults = RuleConfig()
    rules = RuleConfig(
        absence_ceiling_days=_int_env("TRAVEL_ABSENCE_CEILING_DAYS", defaults.absence_ceiling_days),
        caution_threshold_days=_int_env("TRAVEL_CAUTION_THRESHOLD_DAYS", defaults.caution_threshold_days),
        rolling_window_days=_int_env("TRAVEL_ROLLING_WINDOW_DAYS", defaults.rolling_window_days),
        max_pre_entry_days=_int_env("TRAVEL_MAX_PRE_ENTRY_DAYS", defaults.max_pre_entry_days),
        assessment_search_days=_int_env("TRAVEL_ASSESSMENT_SEARCH_DAYS", defaults.assessment_search_days),
        early_submission_days=_int_env("TRAVEL_EARLY_SUBMISSION_DAYS", defaults.early_submission_days),
    )
    rules.validate()

    language = (os.getenv("TRAVEL_LANG", "en") or "en").lower()

    logging_config = _parse_logging({
        "level": (os.getenv("TRAVEL_LOG_LEVEL", "info") or "info").lower(),
        "output_format": (os.getenv("TRAVEL_LOG_FORMAT", "text") or "text").lower(),
        "audit_mode": os.getenv("TRAVEL_AUDIT_MODE", "0") == "1",
        "audit_signing_key": os.getenv("TRAVEL_AUDIT_SIGNING_KEY") or None,
    })

    return EngineConfig(rules=rules, logging=logging_config, language=language)
