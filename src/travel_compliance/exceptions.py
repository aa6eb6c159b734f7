"""
Exception classes for the travel compliance engine.

The calculation pipeline itself never raises for bad trip data; these
exceptions guard the boundaries where raw input and configuration enter.
"""

from typing import Optional


class TravelComplianceError(Exception):
    """Base exception for all travel compliance errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(TravelComplianceError):
    """Raised when raw trip input does not have the expected shape."""

    pass


class ConfigurationError(TravelComplianceError):
    """Raised when rule or eligibility configuration is invalid."""

    pass
