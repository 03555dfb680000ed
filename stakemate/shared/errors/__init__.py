"""Unified error hierarchy for StakeMate.

All domain errors inherit from StakemateError. The dialogue engine itself
raises nothing for string input; these errors belong to table construction,
configuration and the host-facing session layer.
"""

from __future__ import annotations


class StakemateError(Exception):
    """Base error for all StakeMate exceptions."""

    def __init__(self, message: str, code: str = "STAKEMATE_ERROR") -> None:
        self.code = code
        super().__init__(message)


# -- Construction / configuration errors --


class PatternTableError(StakemateError):
    """A pattern table cannot guarantee a response for every input."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="PATTERN_TABLE")


class ConfigurationError(StakemateError):
    """An environment setting is missing or malformed."""

    def __init__(self, setting: str, message: str = "") -> None:
        self.setting = setting
        super().__init__(
            message or f"Invalid configuration value for {setting}",
            code="CONFIG",
        )


# -- Domain errors --


class NotFoundError(StakemateError):
    """Requested resource not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            code="NOT_FOUND",
        )


class ValidationError(StakemateError):
    """Input validation failed."""

    def __init__(self, message: str, field: str = "") -> None:
        self.field = field
        super().__init__(message, code="VALIDATION")


class SessionLimitError(StakemateError):
    """No more conversation sessions can be opened."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"Session limit reached: {limit}",
            code="SESSION_LIMIT",
        )


__all__ = [
    "ConfigurationError",
    "NotFoundError",
    "PatternTableError",
    "SessionLimitError",
    "StakemateError",
    "ValidationError",
]
