"""Explicit success-or-failure container returned by orchestrated workflows.

Workflows that span several entities never let validation exceptions escape.
They return either a `Success` wrapping the produced value, or a `Failure`
carrying a message and the complete list of violated rules. The `origin`
field records which kind of domain object raised the underlying error; it is
informational only and callers do not need to branch on it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Literal, NoReturn, TypeAlias, TypeVar

from .errors import OrchestrationError, ValidationError

T = TypeVar("T")


class FailureKind(Enum):
    """Enumeration of failure categories."""

    VALIDATION = "validation"
    BUSINESS = "business"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """A successful outcome carrying its payload."""

    value: T

    @property
    def is_success(self) -> Literal[True]:
        """Always True."""
        return True

    def unwrap(self) -> T:
        """Return the payload."""
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    """A failed outcome with a message and every violated rule."""

    message: str
    violations: tuple[str, ...] = field(default_factory=tuple)
    kind: FailureKind = FailureKind.BUSINESS
    origin: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "violations", tuple(self.violations))

    @property
    def is_success(self) -> Literal[False]:
        """Always False."""
        return False

    def unwrap(self) -> NoReturn:
        """Raise the failure as an `OrchestrationError`."""
        raise OrchestrationError(self.message, self.violations)

    @classmethod
    def business(cls, message: str, violations: Iterable[str] = ()) -> Failure:
        """Build a failure for a violated business precondition."""
        return cls(message, tuple(violations), FailureKind.BUSINESS)

    @classmethod
    def from_error(cls, error: ValidationError) -> Failure:
        """Build a failure from a typed validation error."""
        return cls(
            error.message,
            error.violations,
            FailureKind.VALIDATION,
            error.subject,
        )

    @classmethod
    def unexpected(cls, message: str, error: Exception) -> Failure:
        """Wrap an exception nobody anticipated as an unknown failure."""
        return cls(message, (str(error),), FailureKind.UNKNOWN, type(error).__name__)


Result: TypeAlias = Success[T] | Failure
