"""Domain layer exceptions.

All domain-specific exceptions inherit from DomainError.
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, value: Any = None) -> None:
        full_message = f"Validation error for '{field}': {message}"
        details = {"field": field, "value": value}
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class AnalysisError(DomainError):
    pass


class EmptyAnalysisSetError(AnalysisError):
    """No per-file analyses were supplied to project assembly."""

    def __init__(self) -> None:
        super().__init__("No IFC analyses supplied for WBS project assembly")


class InvalidStepFileError(AnalysisError):
    def __init__(self, file_name: str, reason: str) -> None:
        super().__init__(f"Not a valid IFC/STEP file: {file_name}", {"reason": reason})
        self.file_name = file_name
        self.reason = reason


class BatchLimitError(AnalysisError):
    def __init__(self, limit: str, actual: int, maximum: int) -> None:
        super().__init__(
            f"Batch limit exceeded: {limit}",
            {"actual": actual, "maximum": maximum},
        )
        self.limit = limit
        self.actual = actual
        self.maximum = maximum
