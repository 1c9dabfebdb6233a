"""Result pattern for explicit error handling.

Operations with a validated precondition return a Failure holding the
domain exception instead of raising it; callers decide whether to unwrap.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful result."""

    value: T

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T | None) -> T | None:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Failed result holding the exception."""

    error: E

    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise the wrapped exception."""
        raise self.error

    def unwrap_or(self, default: T | None) -> T | None:
        return default


Result = Success[T] | Failure[E]


def ok(value: T) -> Success[T]:
    """Create a Success result."""
    return Success(value)


def err(error: E) -> Failure[E]:
    """Create a Failure result."""
    return Failure(error)
