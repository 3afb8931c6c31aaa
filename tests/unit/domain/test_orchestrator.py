"""Unit tests for the cross-entity workflows in DomainOrchestrator."""

from datetime import timedelta
from decimal import Decimal

import pytest

from tests.fixtures.datagen import (
    DESCRIPTION,
    NOW,
    OTHER_PERU_PHONE,
    TITLE,
    build_account,
    build_listing,
    build_payment,
    build_property,
)
from ubiqa.domain.entities.ids import ListingId, PaymentId
from ubiqa.domain.entities.listing import ListingStatus
from ubiqa.domain.entities.payment import PaymentMethod, PaymentProvider, PaymentStatus
from ubiqa.domain.entities.property import PropertyType
from ubiqa.domain.errors import OrchestrationError
from ubiqa.domain.orchestrator import DomainOrchestrator, ListingRequirement
from ubiqa.domain.pricing import PricingConfig
from ubiqa.domain.result import Failure, FailureKind, Success
from ubiqa.domain.value_objects.contact_info import ContactInfo
from ubiqa.domain.value_objects.price import Price
from ubiqa.domain.value_objects.property_specs import PropertySpecs

# pylint: disable=magic-value-comparison,redefined-outer-name

DAY = timedelta(days=1)


@pytest.fixture
def orchestrator() -> DomainOrchestrator:
    """Orchestrator with the default pricing."""
    return DomainOrchestrator(PricingConfig())


def create(orchestrator: DomainOrchestrator, **overrides):
    """Call create_listing with valid defaults."""
    kwargs = {
        "account": build_account(),
        "prop": build_property(),
        "listing_id": ListingId("lst-1"),
        "title": TITLE,
        "description": DESCRIPTION,
        "price": Price.dollars(150_000),
        "now": NOW,
    }
    kwargs.update(overrides)
    return orchestrator.create_listing(**kwargs)


def pending_pair():
    """A processing payment and a payment-pending listing, both at NOW."""
    payment = build_payment().mark_processing("chr_1", now=NOW)
    listing = build_listing().mark_payment_pending(now=NOW)
    return payment, listing


class TestEligibility:
    """Tests for check_listing_eligibility; the first failing check wins."""

    @staticmethod
    def test_verified_owner_and_valid_property(orchestrator) -> None:
        """Test the eligible case."""
        result = orchestrator.check_listing_eligibility(build_account(), build_property())
        assert result.is_eligible
        assert result.reason is None

    @staticmethod
    def test_deactivated_account_wins_over_missing_phone(orchestrator) -> None:
        """Test check order."""
        account = build_account(verified=False, is_active=False)
        result = orchestrator.check_listing_eligibility(account, build_property())
        assert result.reason == "User account is deactivated"

    @staticmethod
    def test_missing_phone(orchestrator) -> None:
        """Test that an account without a phone must add one."""
        result = orchestrator.check_listing_eligibility(
            build_account(verified=False), build_property()
        )
        assert not result.is_eligible
        assert result.reason == "Phone number required for listing creation"
        assert result.requirement is ListingRequirement.PHONE_NUMBER

    @staticmethod
    def test_unavailable_property(orchestrator) -> None:
        """Test that withdrawn properties cannot be listed."""
        result = orchestrator.check_listing_eligibility(
            build_account(), build_property(is_available=False)
        )
        assert result.reason == "Property is not available for listing"

    @staticmethod
    def test_property_business_rules(orchestrator) -> None:
        """Test that residential properties need room counts."""
        result = orchestrator.check_listing_eligibility(
            build_account(), build_property(specs=PropertySpecs.land(120))
        )
        assert result.reason == (
            "Property data is invalid: "
            "Residential properties must specify bedroom and bathroom counts"
        )


class TestCreateListing:
    """Tests for create_listing."""

    @staticmethod
    def test_success_defaults_contact_to_account(orchestrator) -> None:
        """Test that the listing contact falls back to the account's."""
        result = create(orchestrator, contact=None)
        assert isinstance(result, Success)
        listing = result.unwrap()
        assert listing.status is ListingStatus.DRAFT
        assert listing.contact == build_account().contact

    @staticmethod
    def test_ineligible_user(orchestrator) -> None:
        """Test the eligibility failure message."""
        result = create(orchestrator, account=build_account(verified=False))
        assert result == Failure.business(
            "Cannot create listing",
            [
                "User eligibility failed: "
                "Phone number required for listing creation"
            ],
        )

    @staticmethod
    def test_invalid_fields_become_validation_failure(orchestrator) -> None:
        """Test that listing validation errors are not raised."""
        result = create(orchestrator, title="Corta", description="Muy corta")
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.VALIDATION
        assert result.origin == "listing"
        assert result.message == "Invalid listing data"
        assert result.violations == (
            "Title must be at least 10 characters",
            "Description must be at least 20 characters",
        )

    @staticmethod
    def test_cross_entity_problems(orchestrator) -> None:
        """Test that contact and price sanity problems are reported together."""
        result = create(
            orchestrator,
            contact=ContactInfo.create(OTHER_PERU_PHONE),
            price=Price.soles(6_000),
        )
        assert isinstance(result, Failure)
        assert result.message == "Cross-entity validation failed"
        assert result.violations == (
            "Contact phone should match user verified phone number",
            "Price per square meter seems unusually low",
        )

    @staticmethod
    def test_cheap_land_fails_price_sanity(orchestrator) -> None:
        """Test that available land priced at 8,000 is rejected for a verified owner."""
        land = build_property(
            property_type=PropertyType.TERRENO, specs=PropertySpecs.land(500)
        )
        assert land.is_available
        result = create(orchestrator, prop=land, price=Price.soles(8_000))
        assert result == Failure.business(
            "Cross-entity validation failed", ["Terreno price seems unusually low"]
        )

    @staticmethod
    def test_land_at_the_floor_is_accepted(orchestrator) -> None:
        """Test that exactly 10,000 is not below the land floor."""
        land = build_property(
            property_type=PropertyType.TERRENO, specs=PropertySpecs.land(500)
        )
        result = create(orchestrator, prop=land, price=Price.soles(10_000))
        assert isinstance(result, Success)
        assert result.unwrap().price == Price.soles(10_000)

    @staticmethod
    def test_unwrap_failure_raises(orchestrator) -> None:
        """Test that unwrapping a failure raises OrchestrationError."""
        result = create(orchestrator, account=build_account(is_active=False))
        with pytest.raises(OrchestrationError, match="Cannot create listing"):
            result.unwrap()


class TestInitiatePayment:
    """Tests for initiate_listing_payment."""

    @staticmethod
    def test_success(orchestrator) -> None:
        """Test that a pending payment is created and the listing waits for it."""
        result = orchestrator.initiate_listing_payment(
            build_account(),
            build_listing(),
            PaymentId("pay-1"),
            PaymentProvider.CULQI,
            PaymentMethod.YAPE,
            now=NOW,
        )
        initiation = result.unwrap()
        assert initiation.payment.status is PaymentStatus.PENDING
        assert initiation.payment.price == Price.soles(Decimal("19.00"))
        assert initiation.listing.status is ListingStatus.PAYMENT_PENDING

    @staticmethod
    def test_unverified_account(orchestrator) -> None:
        """Test that only verified accounts pay."""
        result = orchestrator.initiate_listing_payment(
            build_account(verified=False),
            build_listing(),
            PaymentId("pay-1"),
            PaymentProvider.CULQI,
            PaymentMethod.CARD,
            now=NOW,
        )
        assert isinstance(result, Failure)
        assert result.violations == ("User must be verified to make payments",)

    @staticmethod
    def test_active_listing_needs_no_payment(orchestrator) -> None:
        """Test that paid listings are rejected."""
        result = orchestrator.initiate_listing_payment(
            build_account(),
            build_listing().activate(now=NOW),
            PaymentId("pay-1"),
            PaymentProvider.CULQI,
            PaymentMethod.CARD,
            now=NOW,
        )
        assert isinstance(result, Failure)
        assert result.violations == (
            "Listing does not require payment in current status: active",
        )

    @staticmethod
    def test_unsupported_method_is_a_validation_failure(orchestrator) -> None:
        """Test that payment validation errors are wrapped."""
        result = orchestrator.initiate_listing_payment(
            build_account(),
            build_listing(),
            PaymentId("pay-1"),
            PaymentProvider.CULQI,
            PaymentMethod.BANK_TRANSFER,
            now=NOW,
        )
        assert isinstance(result, Failure)
        assert result.origin == "payment"
        assert "Payment method not supported by provider" in result.violations


class TestCompletePayment:
    """Tests for complete_listing_payment."""

    @staticmethod
    def test_completes_and_activates_for_thirty_days(orchestrator) -> None:
        """Test the success path."""
        payment, listing = pending_pair()
        later = NOW + timedelta(minutes=10)
        outcome = orchestrator.complete_listing_payment(
            payment, listing, "receipt", now=later
        ).unwrap()
        assert outcome.payment.status is PaymentStatus.COMPLETED
        assert outcome.listing.status is ListingStatus.ACTIVE
        assert outcome.listing.published_at == later
        assert outcome.listing.expires_at == later + 30 * DAY

    @staticmethod
    def test_fee_mismatch_by_one_cent(orchestrator) -> None:
        """Test that S/ 18.99 does not pay a S/ 19.00 fee."""
        payment = build_payment(price=Price.soles(Decimal("18.99"))).mark_processing(
            "chr_1", now=NOW
        )
        listing = build_listing().mark_payment_pending(now=NOW)
        result = orchestrator.complete_listing_payment(payment, listing, now=NOW)
        assert isinstance(result, Failure)
        assert result.message == "Payment-Listing validation failed"
        assert result.violations == ("Payment amount does not match listing fee",)

    @staticmethod
    def test_not_idempotent(orchestrator) -> None:
        """Test that completing twice fails the second time."""
        payment, listing = pending_pair()
        outcome = orchestrator.complete_listing_payment(
            payment, listing, now=NOW
        ).unwrap()
        again = orchestrator.complete_listing_payment(
            outcome.payment, outcome.listing, now=NOW
        )
        assert isinstance(again, Failure)
        assert again.violations == (
            "Payment must be in processing state",
            "Listing must be in payment pending state",
        )

    @staticmethod
    def test_expired_payment(orchestrator) -> None:
        """Test that a payment past its window cannot activate the listing."""
        payment, listing = pending_pair()
        result = orchestrator.complete_listing_payment(
            payment, listing, now=NOW + timedelta(hours=2, minutes=1)
        )
        assert isinstance(result, Failure)
        assert result.violations == ("Payment has expired",)

    @staticmethod
    def test_custom_fee_configuration() -> None:
        """Test that the injected configuration defines the expected fee."""
        orchestrator = DomainOrchestrator(PricingConfig(listing_fee=Price.soles(25)))
        payment, listing = pending_pair()
        result = orchestrator.complete_listing_payment(payment, listing, now=NOW)
        assert isinstance(result, Failure)
        assert result.violations == ("Payment amount does not match listing fee",)


class TestFailPayment:
    """Tests for fail_listing_payment."""

    @staticmethod
    def test_revert_preserves_listing_content(orchestrator) -> None:
        """Test that the owner can retry without re-entering anything."""
        payment, listing = pending_pair()
        outcome = orchestrator.fail_listing_payment(
            payment, listing, "Tarjeta rechazada", now=NOW
        ).unwrap()
        assert outcome.payment.status is PaymentStatus.FAILED
        assert outcome.payment.error_message == "Tarjeta rechazada"
        reverted = outcome.listing
        assert reverted.status is ListingStatus.DRAFT
        assert (reverted.title, reverted.description, reverted.price) == (
            listing.title,
            listing.description,
            listing.price,
        )
        assert reverted.media == listing.media
        assert reverted.contact == listing.contact

    @staticmethod
    def test_final_payment_cannot_fail(orchestrator) -> None:
        """Test that completed payments are not failed."""
        payment, listing = pending_pair()
        completed = payment.complete(now=NOW)
        result = orchestrator.fail_listing_payment(completed, listing, "x", now=NOW)
        assert isinstance(result, Failure)
        assert result.violations == ("Payment is already in final status",)

    @staticmethod
    def test_draft_listing_cannot_revert(orchestrator) -> None:
        """Test that an invalid listing transition becomes a business failure."""
        payment = build_payment()
        result = orchestrator.fail_listing_payment(payment, build_listing(), "x", now=NOW)
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.BUSINESS
        assert result.message == "Payment failure processing failed"


class TestCapabilities:
    """Tests for capabilities and listing edits."""

    @staticmethod
    def test_verified_account(orchestrator) -> None:
        """Test the capabilities of a verified new account."""
        caps = orchestrator.capabilities(build_account(), now=NOW + DAY)
        assert caps.can_create_listings
        assert caps.can_make_payments
        assert caps.can_contact
        assert not caps.needs_phone_verification
        assert caps.is_new_user

    @staticmethod
    def test_unverified_account(orchestrator) -> None:
        """Test that unverified accounts can only search and edit their profile."""
        caps = orchestrator.capabilities(build_account(verified=False), now=NOW)
        assert caps.can_search
        assert caps.can_edit_profile
        assert not caps.can_create_listings
        assert not caps.can_make_payments

    @staticmethod
    def test_two_day_old_account_without_contact(orchestrator) -> None:
        """Test a new account that has no phone yet, two days after sign-up."""
        caps = orchestrator.capabilities(build_account(verified=False), now=NOW + 2 * DAY)
        assert caps.is_new_user
        assert not caps.can_create_listings
        assert not caps.needs_phone_verification

    @staticmethod
    def test_deactivated_account(orchestrator) -> None:
        """Test that deactivated accounts lose every capability."""
        caps = orchestrator.capabilities(build_account(is_active=False), now=NOW)
        assert not caps.can_search
        assert not caps.can_edit_profile
        assert not caps.can_create_listings

    @staticmethod
    def test_new_user_window_comes_from_config() -> None:
        """Test the configurable new-account window."""
        orchestrator = DomainOrchestrator(
            PricingConfig(new_account_window=timedelta(days=1))
        )
        assert not orchestrator.capabilities(build_account(), now=NOW + 2 * DAY).is_new_user

    @staticmethod
    def test_can_edit_listing() -> None:
        """Test the edit gate."""
        owner = build_account()
        assert DomainOrchestrator.can_edit_listing(owner, build_listing(), True)
        assert not DomainOrchestrator.can_edit_listing(owner, build_listing(), False)
        pending = build_listing().mark_payment_pending(now=NOW)
        assert not DomainOrchestrator.can_edit_listing(owner, pending, True)

    @staticmethod
    def test_update_listing_content(orchestrator) -> None:
        """Test owner edits through the orchestrator."""
        result = orchestrator.update_listing_content(
            build_account(),
            build_listing(),
            True,
            price=Price.dollars(140_000),
            now=NOW,
        )
        assert result.unwrap().price == Price.dollars(140_000)

    @staticmethod
    def test_update_listing_content_by_stranger(orchestrator) -> None:
        """Test that non-owners are refused."""
        result = orchestrator.update_listing_content(
            build_account(), build_listing(), False, title="Nuevo título largo"
        )
        assert result == Failure.business("User cannot edit this listing")
