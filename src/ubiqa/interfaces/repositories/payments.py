"""Interface for the payment repository."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ubiqa.domain.entities.ids import AccountId, ListingId, PaymentId
    from ubiqa.domain.entities.payment import Payment, PaymentStatus


class PaymentRepository(abc.ABC):
    """Contract for storing and loading payments.

    Each payment pays for one listing on behalf of one account; both links
    are stored next to the payment record.
    """

    @abc.abstractmethod
    def add(self, payment: Payment, listing_id: ListingId, payer_id: AccountId) -> None:
        """Store a new payment.

        Raises:
            DuplicateIdError: If the id is already stored.
        """

    @abc.abstractmethod
    def update(
        self, payment: Payment, expected_status: PaymentStatus | None = None
    ) -> None:
        """Replace a stored payment.

        Args:
            payment: The new state.
            expected_status: When given, the write only happens if the stored
                payment is still in this status.

        Raises:
            PaymentNotFoundError: If the payment does not exist.
            StaleStatusError: If the stored status differs from `expected_status`.
        """

    @abc.abstractmethod
    def get(self, payment_id: PaymentId) -> Payment:
        """Load a payment.

        Raises:
            PaymentNotFoundError: If the payment does not exist.
        """

    @abc.abstractmethod
    def listing_of(self, payment_id: PaymentId) -> ListingId:
        """Return the listing a payment pays for.

        Raises:
            PaymentNotFoundError: If the payment does not exist.
        """

    @abc.abstractmethod
    def list_for_listing(self, listing_id: ListingId) -> list[Payment]:
        """Every payment made for `listing_id`, oldest first."""
