"""Custom exception hierarchy for the tempo engine."""

from __future__ import annotations


class TempoEngineError(Exception):
    """Base exception for all tempo_engine errors."""


class PlanValidationError(TempoEngineError):
    """A plan or block failed validation (missing field, bad count, etc.)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class PlanLoadError(TempoEngineError):
    """A plan file could not be read or is not valid JSON."""
