"""Payment entity and its lifecycle state machine.

States::

    pending -> processing -> completed -> refunded
       |           |
       +-----------+--> failed | cancelled | expired

`completed`, `failed`, `cancelled`, `refunded` and `expired` are final for
the normal flow; only a completed payment can still be refunded.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import assert_never

from ubiqa.domain.errors import InvalidTransitionError, PaymentValidationError
from ubiqa.domain.pricing import DEFAULT_PAYMENT_EXPIRY
from ubiqa.domain.utils import ensure_utc, resolve_now
from ubiqa.domain.value_objects.price import Price

from .ids import PaymentId

# pylint: disable=magic-value-comparison,too-many-instance-attributes

REFERENCE_PREFIX = "UBQ"
MIN_REFERENCE_LENGTH = 6
MAX_REFERENCE_LENGTH = 20
MIN_DESCRIPTION_LENGTH = 5
MAX_DESCRIPTION_LENGTH = 200
MAX_PAYMENT_AMOUNT = 100_000
EXPIRING_SOON = timedelta(minutes=30)


class PaymentStatus(Enum):
    """Lifecycle status of a payment."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    EXPIRED = "expired"

    @property
    def label(self) -> str:
        """Spanish label."""
        match self:
            case PaymentStatus.PENDING:
                return "Pendiente"
            case PaymentStatus.PROCESSING:
                return "Procesando"
            case PaymentStatus.COMPLETED:
                return "Completado"
            case PaymentStatus.FAILED:
                return "Fallido"
            case PaymentStatus.CANCELLED:
                return "Cancelado"
            case PaymentStatus.REFUNDED:
                return "Reembolsado"
            case PaymentStatus.EXPIRED:
                return "Expirado"
            case _:
                assert_never(self)

    @property
    def is_success(self) -> bool:
        """Only completed payments count as paid."""
        return self is PaymentStatus.COMPLETED

    @property
    def is_final(self) -> bool:
        """True for every status other than pending and processing."""
        return self not in (PaymentStatus.PENDING, PaymentStatus.PROCESSING)

    @property
    def can_retry(self) -> bool:
        """A new payment may be attempted after failure, cancellation or expiry."""
        return self in (
            PaymentStatus.FAILED,
            PaymentStatus.CANCELLED,
            PaymentStatus.EXPIRED,
        )


class PaymentMethod(Enum):
    """How the buyer pays."""

    CARD = "card"
    YAPE = "yape"
    PLIN = "plin"
    BANK_TRANSFER = "bankTransfer"

    @property
    def label(self) -> str:
        """Spanish label."""
        match self:
            case PaymentMethod.CARD:
                return "Tarjeta de Crédito/Débito"
            case PaymentMethod.YAPE:
                return "Yape"
            case PaymentMethod.PLIN:
                return "Plin"
            case PaymentMethod.BANK_TRANSFER:
                return "Transferencia Bancaria"
            case _:
                assert_never(self)

    @property
    def is_instant(self) -> bool:
        """Cards and mobile wallets settle immediately."""
        return self is not PaymentMethod.BANK_TRANSFER

    @property
    def estimated_processing_time(self) -> timedelta:
        """Typical time until the provider confirms the payment."""
        match self:
            case PaymentMethod.CARD:
                return timedelta(seconds=30)
            case PaymentMethod.YAPE | PaymentMethod.PLIN:
                return timedelta(minutes=2)
            case PaymentMethod.BANK_TRANSFER:
                return timedelta(hours=24)
            case _:
                assert_never(self)


class PaymentProvider(Enum):
    """Payment gateway."""

    CULQI = "culqi"

    @property
    def label(self) -> str:
        """Display name."""
        match self:
            case PaymentProvider.CULQI:
                return "Culqi"
            case _:
                assert_never(self)

    @property
    def supported_methods(self) -> tuple[PaymentMethod, ...]:
        """Methods the gateway accepts."""
        match self:
            case PaymentProvider.CULQI:
                return (PaymentMethod.CARD, PaymentMethod.YAPE, PaymentMethod.PLIN)
            case _:
                assert_never(self)

    def supports(self, method: PaymentMethod) -> bool:
        """True if the gateway accepts `method`."""
        return method in self.supported_methods


def generate_reference_code(now: datetime | None = None) -> str:
    """Human reference such as ``"UBQ04821937"``: prefix, 4 random and 4 clock digits."""
    millis = str(int(resolve_now(now).timestamp() * 1000))
    return f"{REFERENCE_PREFIX}{secrets.randbelow(10_000):04d}{millis[-4:]}"


@dataclass(frozen=True, slots=True)
class Payment:
    """A charge made through the payment provider."""

    id: PaymentId
    price: Price
    provider: PaymentProvider
    method: PaymentMethod
    reference_code: str
    description: str
    created_at: datetime
    updated_at: datetime
    status: PaymentStatus = PaymentStatus.PENDING
    provider_transaction_id: str | None = None
    completed_at: datetime | None = None
    expires_at: datetime | None = None
    provider_response: str | None = None
    error_message: str | None = None
    receipt_data: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "description", self.description.strip())
        object.__setattr__(self, "reference_code", self.reference_code.strip())
        for name in ("created_at", "updated_at", "completed_at", "expires_at"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, ensure_utc(value))

        if violations := self._violations():
            raise PaymentValidationError("Invalid payment data", violations)

    def _violations(self) -> list[str]:
        violations: list[str] = []
        if self.price.amount > MAX_PAYMENT_AMOUNT:
            violations.append("Payment amount cannot exceed 100,000")
        if not MIN_REFERENCE_LENGTH <= len(self.reference_code) <= MAX_REFERENCE_LENGTH:
            violations.append("Reference code must be between 6 and 20 characters")
        if len(self.description) < MIN_DESCRIPTION_LENGTH:
            violations.append("Description must be at least 5 characters")
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            violations.append("Description cannot exceed 200 characters")
        if not self.provider.supports(self.method):
            violations.append("Payment method not supported by provider")
        if self.status is PaymentStatus.COMPLETED and self.completed_at is None:
            violations.append("Completed payments must have completion timestamp")
        if self.status is PaymentStatus.FAILED and self.error_message is None:
            violations.append("Failed payments must have error message")
        if self.expires_at is not None and self.expires_at < self.created_at:
            violations.append("Expiration date cannot be before creation date")
        return violations

    # --- Construction Paths ---

    @classmethod
    def create(
        cls,
        payment_id: PaymentId,
        price: Price,
        provider: PaymentProvider,
        method: PaymentMethod,
        description: str,
        reference_code: str | None = None,
        expires_at: datetime | None = None,
        now: datetime | None = None,
        expiry: timedelta = DEFAULT_PAYMENT_EXPIRY,
    ) -> Payment:
        """Create a pending payment that expires after `expiry`.

        Raises:
            PaymentValidationError: With every violated rule.
        """
        now = resolve_now(now)
        return cls(
            id=payment_id,
            price=price,
            provider=provider,
            method=method,
            reference_code=reference_code or generate_reference_code(now),
            description=description,
            created_at=now,
            updated_at=now,
            expires_at=expires_at or now + expiry,
        )

    # --- State Transitions ---

    def mark_processing(
        self, provider_transaction_id: str, now: datetime | None = None
    ) -> Payment:
        """The provider accepted the charge and is processing it.

        Raises:
            InvalidTransitionError: Unless the payment is pending.
        """
        self._require("process", PaymentStatus.PENDING)
        return replace(
            self,
            status=PaymentStatus.PROCESSING,
            provider_transaction_id=provider_transaction_id,
            updated_at=resolve_now(now),
        )

    def complete(
        self,
        receipt_data: str | None = None,
        provider_response: str | None = None,
        now: datetime | None = None,
    ) -> Payment:
        """Record a successful charge.

        Raises:
            InvalidTransitionError: Unless the payment is processing.
        """
        self._require("complete", PaymentStatus.PROCESSING)
        now = resolve_now(now)
        return replace(
            self,
            status=PaymentStatus.COMPLETED,
            completed_at=now,
            updated_at=now,
            receipt_data=receipt_data or self.receipt_data,
            provider_response=provider_response or self.provider_response,
        )

    def fail(
        self,
        error_message: str,
        provider_response: str | None = None,
        now: datetime | None = None,
    ) -> Payment:
        """Record a rejected charge.

        Raises:
            InvalidTransitionError: If the payment is already final.
        """
        self._require_open("fail")
        return replace(
            self,
            status=PaymentStatus.FAILED,
            error_message=error_message,
            provider_response=provider_response or self.provider_response,
            updated_at=resolve_now(now),
        )

    def cancel(self, now: datetime | None = None) -> Payment:
        """The buyer abandoned the payment."""
        self._require_open("cancel")
        return replace(self, status=PaymentStatus.CANCELLED, updated_at=resolve_now(now))

    def expire(self, now: datetime | None = None) -> Payment:
        """The payment window closed without completion."""
        self._require_open("expire")
        return replace(self, status=PaymentStatus.EXPIRED, updated_at=resolve_now(now))

    def refund(
        self,
        provider_transaction_id: str,
        provider_response: str | None = None,
        now: datetime | None = None,
    ) -> Payment:
        """Return a completed charge.

        Raises:
            InvalidTransitionError: Unless the payment is completed.
        """
        self._require("refund", PaymentStatus.COMPLETED)
        return replace(
            self,
            status=PaymentStatus.REFUNDED,
            provider_transaction_id=provider_transaction_id,
            provider_response=provider_response or self.provider_response,
            updated_at=resolve_now(now),
        )

    # --- Queries ---

    def is_completed(self) -> bool:
        """True once the charge succeeded."""
        return self.status is PaymentStatus.COMPLETED

    def is_failed(self) -> bool:
        """True if the charge was rejected."""
        return self.status is PaymentStatus.FAILED

    def is_pending(self) -> bool:
        """True while pending or processing."""
        return not self.status.is_final

    def is_final(self) -> bool:
        """True once the payment reached a final status."""
        return self.status.is_final

    def can_retry(self) -> bool:
        """True if a new payment may be attempted."""
        return self.status.can_retry

    def is_expired(self, now: datetime | None = None) -> bool:
        """True if the window has passed and the payment is still open."""
        if self.expires_at is None:
            return False
        return resolve_now(now) > self.expires_at and not self.is_final()

    def formatted_amount(self) -> str:
        """Amount with two decimals, e.g. ``"S/ 19.00"``."""
        return f"{self.price.currency.symbol} {self.price.amount:.2f}"

    def processing_time(self) -> timedelta | None:
        """Time from creation to completion, if completed."""
        if self.completed_at is None:
            return None
        return self.completed_at - self.created_at

    def time_until_expiry(self, now: datetime | None = None) -> timedelta | None:
        """Remaining window for open payments, never negative."""
        if self.expires_at is None or self.is_final():
            return None
        return max(self.expires_at - resolve_now(now), timedelta(0))

    def is_expiring_soon(self, now: datetime | None = None) -> bool:
        """True when at most 30 minutes are left."""
        remaining = self.time_until_expiry(now)
        return remaining is not None and remaining <= EXPIRING_SOON

    # --- Internal Helpers ---

    def _require(self, action: str, *allowed: PaymentStatus) -> None:
        if self.status not in allowed:
            raise InvalidTransitionError("payment", str(self.id), self.status.value, action)

    def _require_open(self, action: str) -> None:
        if self.status.is_final:
            raise InvalidTransitionError("payment", str(self.id), self.status.value, action)

    def __str__(self) -> str:
        return (
            f"Payment(id: {self.id}, amount: {self.formatted_amount()}, "
            f"status: {self.status.value})"
        )
