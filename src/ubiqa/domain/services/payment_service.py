"""Payment factories and lifecycle helpers."""

from __future__ import annotations

from datetime import datetime, timedelta

from ubiqa.domain.entities.ids import PaymentId
from ubiqa.domain.entities.payment import (
    Payment,
    PaymentMethod,
    PaymentProvider,
    PaymentStatus,
)
from ubiqa.domain.errors import PaymentValidationError
from ubiqa.domain.pricing import DEFAULT_PAYMENT_EXPIRY, PricingConfig
from ubiqa.domain.value_objects.price import Price

# pylint: disable=too-many-arguments


def create_payment(
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
    """Create a validated pending payment.

    Raises:
        PaymentValidationError: With every violated rule.
    """
    return Payment.create(
        payment_id,
        price,
        provider,
        method,
        description,
        reference_code=reference_code,
        expires_at=expires_at,
        now=now,
        expiry=expiry,
    )


def create_listing_payment(
    payment_id: PaymentId,
    provider: PaymentProvider,
    method: PaymentMethod,
    config: PricingConfig,
    reference_code: str | None = None,
    now: datetime | None = None,
) -> Payment:
    """Create the payment for publishing one listing at the configured fee."""
    return create_payment(
        payment_id,
        config.listing_fee,
        provider,
        method,
        f"Publicación de propiedad ({config.listing_duration_days} días)",
        reference_code=reference_code,
        now=now,
        expiry=config.payment_expiry,
    )


def mark_processing(
    payment: Payment, provider_transaction_id: str, now: datetime | None = None
) -> Payment:
    """Record that the provider started processing the charge.

    Raises:
        PaymentValidationError: Unless the payment is pending.
    """
    if payment.status is not PaymentStatus.PENDING:
        raise PaymentValidationError(
            "Cannot process payment", ["Payment must be pending to start processing"]
        )
    return payment.mark_processing(provider_transaction_id, now)


def process_completion(
    payment: Payment,
    receipt_data: str | None = None,
    provider_response: str | None = None,
    now: datetime | None = None,
) -> Payment:
    """Complete a processing payment that has not expired.

    Raises:
        PaymentValidationError: If the payment is not processing or expired.
    """
    if payment.status is not PaymentStatus.PROCESSING:
        raise PaymentValidationError(
            "Cannot complete payment", ["Payment must be in processing status"]
        )
    if payment.is_expired(now):
        raise PaymentValidationError(
            "Cannot complete expired payment",
            ["Payment has expired and cannot be completed"],
        )
    return payment.complete(receipt_data, provider_response, now)


def process_failure(
    payment: Payment,
    error_message: str,
    provider_response: str | None = None,
    now: datetime | None = None,
) -> Payment:
    """Fail an open payment.

    Raises:
        PaymentValidationError: If the payment is already final.
    """
    if payment.is_final():
        raise PaymentValidationError(
            "Cannot fail completed payment", ["Payment is already in final status"]
        )
    return payment.fail(error_message, provider_response, now)


def process_expiry(payment: Payment, now: datetime | None = None) -> Payment | None:
    """Expire an open payment whose window has passed; None otherwise."""
    if payment.is_final() or not payment.is_expired(now):
        return None
    return payment.expire(now)


def refund(
    payment: Payment,
    provider_transaction_id: str,
    provider_response: str | None = None,
    now: datetime | None = None,
) -> Payment:
    """Refund a completed payment.

    Raises:
        PaymentValidationError: Unless the payment is completed.
    """
    if payment.status is not PaymentStatus.COMPLETED:
        raise PaymentValidationError(
            "Cannot refund payment", ["Payment must be completed to process refund"]
        )
    return payment.refund(provider_transaction_id, provider_response, now)


def is_provider_configured(provider: PaymentProvider) -> bool:
    """True if the gateway can take payments. Culqi is the only one."""
    return provider is PaymentProvider.CULQI


def estimated_processing_time(method: PaymentMethod) -> timedelta:
    """Typical time until the provider confirms a payment made with `method`."""
    return method.estimated_processing_time
