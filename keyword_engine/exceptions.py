"""Exception hierarchy for the keyword research engine."""

from typing import Optional


class KeywordEngineError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInputError(KeywordEngineError, ValueError):
    """Input rejected at the call boundary before any computation ran."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        if field:
            message = field + ": " + message
        super().__init__(message)


class InsufficientDataError(KeywordEngineError):
    """Too few cleaned data points for a trend analysis."""

    def __init__(self, required: int, received: int):
        self.required = required
        self.received = received
        super().__init__(
            "Insufficient data points for trend analysis (minimum "
            + str(required) + " required, got " + str(received) + ")"
        )


class ConfigurationError(KeywordEngineError):
    """Settings file could not be interpreted."""
