"""Workflows that coordinate accounts, properties, listings and payments.

`DomainOrchestrator` is the only domain component that reasons about more
than one entity type at once. Its operations are pure with respect to their
inputs: they read the entities they are given (and `now`) and return new
entities inside a `Result`. Validation problems become a `Failure` with the
complete violation list; only unanticipated exceptions become an
`UNKNOWN` failure. Persisting the returned entities, atomically where two
change together, is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ubiqa.domain import cross_entity
from ubiqa.domain.entities.account import Account
from ubiqa.domain.entities.ids import ListingId, PaymentId
from ubiqa.domain.entities.listing import Listing
from ubiqa.domain.entities.payment import Payment, PaymentMethod, PaymentProvider
from ubiqa.domain.entities.property import Property
from ubiqa.domain.errors import InvalidTransitionError, ValidationError
from ubiqa.domain.pricing import PricingConfig
from ubiqa.domain.result import Failure, Result, Success
from ubiqa.domain.services import listing_service, payment_service
from ubiqa.domain.value_objects.contact_info import ContactInfo
from ubiqa.domain.value_objects.media import Media
from ubiqa.domain.value_objects.price import Price

# pylint: disable=too-many-arguments,broad-exception-caught


class ListingRequirement(Enum):
    """What an account still has to provide before it may publish."""

    PHONE_NUMBER = "phoneNumber"
    PHONE_VERIFICATION = "phoneVerification"


@dataclass(frozen=True, slots=True)
class ListingEligibility:
    """Outcome of the listing eligibility check."""

    is_eligible: bool
    reason: str | None = None
    requirement: ListingRequirement | None = None

    @classmethod
    def eligible(cls) -> ListingEligibility:
        """The account may list the property."""
        return cls(True)

    @classmethod
    def requires_phone(cls) -> ListingEligibility:
        """The account has no contact phone yet."""
        return cls(
            False,
            "Phone number required for listing creation",
            ListingRequirement.PHONE_NUMBER,
        )

    @classmethod
    def requires_verification(cls) -> ListingEligibility:
        """The account has a phone that is not verified."""
        return cls(
            False,
            "Phone verification required for listing creation",
            ListingRequirement.PHONE_VERIFICATION,
        )

    @classmethod
    def ineligible(cls, reason: str) -> ListingEligibility:
        """Any other blocking reason."""
        return cls(False, reason)


@dataclass(frozen=True, slots=True)
class PaymentInitiation:
    """A fresh pending payment and the listing now waiting for it."""

    payment: Payment
    listing: Listing


@dataclass(frozen=True, slots=True)
class PaymentOutcome:
    """A payment in its final state and the listing updated accordingly."""

    payment: Payment
    listing: Listing


@dataclass(frozen=True, slots=True)
class UserCapabilities:
    """What an account may do; every UI surface gates actions on this."""

    can_search: bool
    can_contact: bool
    can_create_listings: bool
    can_make_payments: bool
    can_edit_profile: bool
    needs_phone_verification: bool
    has_complete_profile: bool
    is_new_user: bool


class DomainOrchestrator:
    """Cross-entity workflows parameterized by the pricing configuration."""

    def __init__(self, config: PricingConfig | None = None) -> None:
        self.config = config or PricingConfig()

    # --- Eligibility ---

    def check_listing_eligibility(
        self, account: Account, prop: Property
    ) -> ListingEligibility:
        """Decide whether `account` may list `prop`; the first failing check wins.

        Order: account active, account verified (phone missing vs. not
        verified), property available, property business rules.
        """
        if not account.is_active:
            return ListingEligibility.ineligible("User account is deactivated")
        if not account.is_verified:
            if account.contact is None:
                return ListingEligibility.requires_phone()
            return ListingEligibility.requires_verification()
        if not prop.is_available:
            return ListingEligibility.ineligible("Property is not available for listing")
        if violations := prop.business_violations():
            return ListingEligibility.ineligible(
                f"Property data is invalid: {violations[0]}"
            )
        return ListingEligibility.eligible()

    # --- Listing creation ---

    def create_listing(
        self,
        account: Account,
        prop: Property,
        listing_id: ListingId,
        title: str,
        description: str,
        price: Price,
        contact: ContactInfo | None = None,
        media: Media | None = None,
        now: datetime | None = None,
    ) -> Result[Listing]:
        """Build a draft listing for `prop` owned by `account`.

        The listing contact defaults to the account's contact channel.
        """
        eligibility = self.check_listing_eligibility(account, prop)
        if not eligibility.is_eligible:
            return Failure.business(
                "Cannot create listing",
                [f"User eligibility failed: {eligibility.reason}"],
            )
        try:
            listing = listing_service.create_listing(
                listing_id,
                title,
                description,
                price,
                contact or account.contact,
                media,
                now,
            )
        except ValidationError as e:
            return Failure.from_error(e)
        except Exception as e:
            return Failure.unexpected("Listing creation failed", e)

        if violations := cross_entity.listing_violations(account, prop, listing):
            return Failure.business("Cross-entity validation failed", violations)
        return Success(listing)

    # --- Payments ---

    def initiate_listing_payment(
        self,
        account: Account,
        listing: Listing,
        payment_id: PaymentId,
        provider: PaymentProvider,
        method: PaymentMethod,
        reference_code: str | None = None,
        now: datetime | None = None,
    ) -> Result[PaymentInitiation]:
        """Create a payment at the configured fee and mark the listing pending."""
        if not account.is_verified:
            return Failure.business(
                "Cannot initiate payment", ["User must be verified to make payments"]
            )
        if not listing.needs_payment():
            return Failure.business(
                "Cannot initiate payment",
                [
                    "Listing does not require payment in current status: "
                    f"{listing.status.value}"
                ],
            )
        try:
            payment = payment_service.create_listing_payment(
                payment_id, provider, method, self.config, reference_code, now
            )
            pending = listing.mark_payment_pending(now)
        except ValidationError as e:
            return Failure.from_error(e)
        except Exception as e:
            return Failure.unexpected("Payment initiation failed", e)
        return Success(PaymentInitiation(payment, pending))

    def complete_listing_payment(
        self,
        payment: Payment,
        listing: Listing,
        receipt_data: str | None = None,
        provider_response: str | None = None,
        now: datetime | None = None,
    ) -> Result[PaymentOutcome]:
        """Complete the payment and activate the listing as one step.

        Not idempotent: once the listing is active it is no longer payment
        pending, so a second call fails.
        """
        if violations := cross_entity.payment_listing_violations(
            payment, listing, self.config, now
        ):
            return Failure.business("Payment-Listing validation failed", violations)
        try:
            completed = payment_service.process_completion(
                payment, receipt_data, provider_response, now
            )
            activated = listing_service.confirm_payment(listing, now)
        except ValidationError as e:
            return Failure.from_error(e)
        except InvalidTransitionError as e:
            return Failure.business("Payment processing failed", [str(e)])
        except Exception as e:
            return Failure.unexpected("Payment processing failed", e)
        return Success(PaymentOutcome(completed, activated))

    def fail_listing_payment(
        self,
        payment: Payment,
        listing: Listing,
        error_message: str,
        provider_response: str | None = None,
        now: datetime | None = None,
    ) -> Result[PaymentOutcome]:
        """Fail the payment and return the listing to draft.

        Every content field of the listing is preserved so the owner can
        retry the payment without re-entering anything.
        """
        try:
            failed = payment_service.process_failure(
                payment, error_message, provider_response, now
            )
            reverted = listing.revert_to_draft(now)
        except ValidationError as e:
            return Failure.from_error(e)
        except InvalidTransitionError as e:
            return Failure.business("Payment failure processing failed", [str(e)])
        except Exception as e:
            return Failure.unexpected("Payment failure processing failed", e)
        return Success(PaymentOutcome(failed, reverted))

    # --- Capabilities and edits ---

    def capabilities(
        self, account: Account, now: datetime | None = None
    ) -> UserCapabilities:
        """Project the account flags into what the user may do."""
        trusted = account.is_active and account.is_verified
        return UserCapabilities(
            can_search=account.is_active,
            can_contact=trusted,
            can_create_listings=trusted,
            can_make_payments=trusted,
            can_edit_profile=account.is_active,
            needs_phone_verification=(
                account.contact is not None and not account.is_verified
            ),
            has_complete_profile=account.has_complete_profile,
            is_new_user=account.is_new(now, self.config.new_account_window),
        )

    @staticmethod
    def can_edit_listing(account: Account, listing: Listing, owns_listing: bool) -> bool:
        """Edits need an active verified owner and an editable listing.

        Ownership is resolved by the caller, which has access to storage.
        """
        if not (account.is_active and account.is_verified):
            return False
        if not owns_listing:
            return False
        return listing.can_be_edited()

    def update_listing_content(
        self,
        account: Account,
        listing: Listing,
        owns_listing: bool,
        *,
        title: str | None = None,
        description: str | None = None,
        price: Price | None = None,
        contact: ContactInfo | None = None,
        media: Media | None = None,
        now: datetime | None = None,
    ) -> Result[Listing]:
        """Apply owner edits to a listing."""
        if not self.can_edit_listing(account, listing, owns_listing):
            return Failure.business("User cannot edit this listing")
        try:
            updated = listing_service.update_content(
                listing,
                title=title,
                description=description,
                price=price,
                contact=contact or account.contact,
                media=media,
                now=now,
            )
        except ValidationError as e:
            return Failure.from_error(e)
        except Exception as e:
            return Failure.unexpected("Listing update failed", e)
        return Success(updated)
