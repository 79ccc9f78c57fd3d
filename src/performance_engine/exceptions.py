"""Custom exception hierarchy for the performance engine."""

from __future__ import annotations


class PerformanceEngineError(Exception):
    """Base exception for all performance_engine errors."""


class MissingInputError(PerformanceEngineError, ValueError):
    """A required input was not provided or could not be parsed.

    Also raised when the elapsed time totals zero, since the average speed
    would be undefined.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidInputError(PerformanceEngineError, ValueError):
    """An input was provided but lies outside its valid range."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
