"""Exception hierarchy for the progression engine."""

from __future__ import annotations


class ProgressionError(Exception):
    """Base exception for all progression_engine errors."""


class CurveConfigurationError(ProgressionError):
    """The level curve is misconfigured: the search hit its cap or a threshold overflowed."""

    def __init__(self, message: str, level_cap: int | None = None) -> None:
        super().__init__(message)
        self.level_cap = level_cap


class InvalidTimestampError(ProgressionError, ValueError):
    """A stored timestamp could not be normalized to a datetime."""

    def __init__(self, message: str, raw: object = None) -> None:
        super().__init__(message)
        self.raw = raw
