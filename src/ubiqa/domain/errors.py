"""Domain-layer error definitions."""

from __future__ import annotations

from collections.abc import Iterable
from typing import ClassVar

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class ValidationError(DomainError):
    """Raised when a value object or entity cannot be built in a valid state.

    Carries a human-readable message together with the complete list of
    violated rules, so callers can report every problem at once.
    """

    subject: ClassVar[str] = "domain object"

    def __init__(self, message: str, violations: Iterable[str] = ()) -> None:
        self.message = message
        self.violations = tuple(violations)
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.violations:
            return self.message
        return f"{self.message}: {'; '.join(self.violations)}"


class InvalidTransitionError(DomainError):
    """Raised when an entity is in an invalid state for the attempted action."""

    def __init__(self, entity: str, entity_id: str, status: str, action: str) -> None:
        super().__init__(
            f"Cannot {action} {entity} {entity_id} while in status '{status}'."
        )
        self.entity = entity
        self.entity_id = entity_id
        self.status = status
        self.action = action


class InvalidIdentifierError(DomainError, ValueError):
    """Raised when an entity identifier is empty."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} cannot be empty")
        self.kind = kind


# ============================================================================
#                           Money related errors
# ============================================================================


class UnsupportedCurrencyError(DomainError, ValueError):
    """Raised when a currency code is not one of the supported currencies."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Unsupported currency code: {code}")
        self.code = code


class CurrencyMismatchError(DomainError):
    """Raised when two prices in different currencies are compared.

    There is no exchange-rate service in the domain, so this is always a
    programming error on the caller's side.
    """

    def __init__(self, left: str, right: str) -> None:
        super().__init__(
            "Cannot compare prices in different currencies without exchange rate "
            f"({left} vs {right})"
        )
        self.left = left
        self.right = right


# ============================================================================
#                   Value object validation errors
# ============================================================================


class PriceValidationError(ValidationError):
    """Raised when a price amount or currency is invalid."""

    subject = "price"


class LocationValidationError(ValidationError):
    """Raised when a location is malformed or outside the service area."""

    subject = "location"


class MediaValidationError(ValidationError):
    """Raised when a photo list is invalid."""

    subject = "media"


class PhoneNumberValidationError(ValidationError):
    """Raised when a phone number is not in a supported international format."""

    subject = "phone number"


class ContactInfoValidationError(ValidationError):
    """Raised when contact information is invalid."""

    subject = "contact info"


class PropertySpecsValidationError(ValidationError):
    """Raised when physical specifications are implausible."""

    subject = "property specs"


class PricingValidationError(ValidationError):
    """Raised when a pricing configuration is invalid."""

    subject = "pricing"


# ============================================================================
#                       Entity validation errors
# ============================================================================


class AccountValidationError(ValidationError):
    """Raised when an account violates its invariants."""

    subject = "account"


class PropertyValidationError(ValidationError):
    """Raised when a property violates its invariants."""

    subject = "property"


class ListingValidationError(ValidationError):
    """Raised when a listing violates its invariants or cannot transition."""

    subject = "listing"


class PaymentValidationError(ValidationError):
    """Raised when a payment violates its invariants or cannot transition."""

    subject = "payment"


class OrchestrationError(ValidationError):
    """Raised when a cross-entity workflow precondition fails."""

    subject = "orchestration"


# ============================================================================
#                           Record mapping errors
# ============================================================================


class MalformedRecordError(DomainError, ValueError):
    """Raised when a stored record cannot be mapped back to an entity."""

    def __init__(self, kind: str, record_id: str, detail: str) -> None:
        super().__init__(f"Malformed {kind} record {record_id!r}: {detail}")
        self.kind = kind
        self.record_id = record_id
        self.detail = detail
