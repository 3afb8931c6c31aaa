"""Uniform result type returned by external-service ports.

Adapters for remote collaborators (identity provider, payment gateway) never
raise for expected failures; they return a `ServiceResult` whose
`error_type` tells the caller whether the problem is transient (network,
service unavailable) or permanent (validation, business, not found).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class ServiceErrorType(Enum):
    """Category of a failed service call."""

    NETWORK = "network"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    BUSINESS = "business"
    CONFIGURATION = "configuration"
    SERVICE_UNAVAILABLE = "serviceUnavailable"
    NOT_FOUND = "notFound"
    UNKNOWN = "unknown"

    @property
    def is_transient(self) -> bool:
        """True for failures a caller could reasonably retry later."""
        return self in (ServiceErrorType.NETWORK, ServiceErrorType.SERVICE_UNAVAILABLE)


@dataclass(frozen=True, slots=True)
class ServiceResult(Generic[T]):
    """Success with an optional payload, or failure with a typed error."""

    is_success: bool
    data: T | None = None
    error_message: str | None = None
    error_type: ServiceErrorType | None = None

    @classmethod
    def success(cls, data: T | None = None) -> ServiceResult[T]:
        """Successful call, with `data` when the operation returns something."""
        return cls(True, data)

    @classmethod
    def failure(
        cls, message: str, error_type: ServiceErrorType = ServiceErrorType.UNKNOWN
    ) -> ServiceResult[T]:
        """Failed call."""
        return cls(False, None, message, error_type)

    @property
    def is_failure(self) -> bool:
        """Negation of `is_success`."""
        return not self.is_success

    def message(self) -> str:
        """Error message, with a generic fallback."""
        return self.error_message or UNKNOWN_ERROR_MESSAGE

    def map(self, mapper: Callable[[T], R]) -> ServiceResult[R]:
        """Transform the payload of a success; propagate a failure unchanged."""
        if self.is_failure:
            return ServiceResult(False, None, self.error_message, self.error_type)
        return ServiceResult(True, mapper(self.data))  # type: ignore[arg-type]

    def then(self, step: Callable[[T], ServiceResult[R]]) -> ServiceResult[R]:
        """Chain another service call on success."""
        if self.is_failure:
            return ServiceResult(False, None, self.error_message, self.error_type)
        return step(self.data)  # type: ignore[arg-type]
