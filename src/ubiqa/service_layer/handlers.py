"""Service layer handlers.

Every handler runs inside one unit of work and returns the domain `Result`
it produced. Business refusals come back as a `Failure` and leave storage
untouched; missing entities raise the repository `NotFoundError`s, and a
concurrent change to the same listing or payment raises `StaleStatusError`
before anything is committed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ubiqa.domain.entities.account import Account
from ubiqa.domain.entities.ids import AccountId, ListingId, PaymentId, PropertyId
from ubiqa.domain.entities.listing import Listing, ListingStatus
from ubiqa.domain.entities.payment import Payment
from ubiqa.domain.entities.property import Property
from ubiqa.domain.errors import ValidationError
from ubiqa.domain.orchestrator import DomainOrchestrator, PaymentInitiation, PaymentOutcome
from ubiqa.domain.pricing import PricingConfig
from ubiqa.domain.result import Failure, Result, Success
from ubiqa.domain.services import listing_service, payment_service, property_service
from ubiqa.domain.value_objects.contact_info import ContactInfo
from ubiqa.domain.value_objects.location import Location
from ubiqa.domain.value_objects.media import Media
from ubiqa.domain.value_objects.price import Price
from ubiqa.domain.value_objects.property_specs import PropertySpecs
from ubiqa.interfaces.clock import Clock
from ubiqa.interfaces.id_generator import IdGenerator
from ubiqa.interfaces.repositories import AccountNotFoundError
from ubiqa.interfaces.unit_of_work import AbstractUnitOfWork

from . import commands

logger = logging.getLogger(__name__)

# ============================================================================
#                           Accounts and properties
# ============================================================================


def store_account(cmd: commands.StoreAccount, uow: AbstractUnitOfWork) -> Result[Account]:
    """Insert or replace the account snapshot (create-or-update)."""
    account = cmd.account
    with uow:
        try:
            uow.accounts.get(account.id)
        except AccountNotFoundError:
            uow.accounts.add(account)
            logger.info("Stored new account %s", account.id)
        else:
            uow.accounts.update(account)
            logger.debug("Updated account %s", account.id)
        uow.commit()
    return Success(account)


def register_property(
    cmd: commands.RegisterProperty,
    uow: AbstractUnitOfWork,
    id_generator: IdGenerator,
    clock: Clock,
) -> Result[Property]:
    """Validate and store a new available property."""
    owner_id = AccountId(cmd.owner_id)
    try:
        prop = property_service.create_property(
            PropertyId(id_generator.new_id()),
            cmd.property_type,
            cmd.operation_type,
            PropertySpecs(
                area_m2=cmd.area_m2,
                bedrooms=cmd.bedrooms,
                bathrooms=cmd.bathrooms,
                parking=cmd.parking,
                amenities=cmd.amenities,
            ),
            Location(cmd.lat, cmd.lon, cmd.address, cmd.district),
            Media.of(cmd.photo_urls),
            clock.now(),
        )
    except ValidationError as e:
        return Failure.from_error(e)

    with uow:
        uow.accounts.get(owner_id)
        uow.properties.add(prop, owner_id)
        uow.commit()
    logger.info("Registered property %s for account %s", prop.id, owner_id)
    return Success(prop)


# ============================================================================
#                               Listings
# ============================================================================


def create_listing(
    cmd: commands.CreateListing,
    uow: AbstractUnitOfWork,
    id_generator: IdGenerator,
    clock: Clock,
    pricing: PricingConfig,
) -> Result[Listing]:
    """Draft a listing for a property the account owns."""
    owner_id = AccountId(cmd.owner_id)
    property_id = PropertyId(cmd.property_id)
    try:
        price = Price(cmd.amount, cmd.currency)
        media = Media.of(cmd.photo_urls)
        contact = (
            ContactInfo.create(cmd.contact_phone, cmd.contact_slot, cmd.contact_note)
            if cmd.contact_phone
            else None
        )
    except ValidationError as e:
        return Failure.from_error(e)

    with uow:
        account = uow.accounts.get(owner_id)
        prop = uow.properties.get(property_id)
        if uow.properties.owner_of(property_id) != owner_id:
            return Failure.business(
                "Cannot create listing", ["Property does not belong to user"]
            )
        result = DomainOrchestrator(pricing).create_listing(
            account,
            prop,
            ListingId(id_generator.new_id()),
            cmd.title,
            cmd.description,
            price,
            contact=contact,
            media=media,
            now=clock.now(),
        )
        if isinstance(result, Success):
            uow.listings.add(result.value, owner_id, property_id)
            uow.commit()
            logger.info("Created draft listing %s", result.value.id)
        else:
            logger.info("Listing creation refused: %s", result.message)
    return result


def update_listing_content(
    cmd: commands.UpdateListingContent,
    uow: AbstractUnitOfWork,
    clock: Clock,
    pricing: PricingConfig,
) -> Result[Listing]:
    """Apply an owner's edits to a draft or active listing."""
    listing_id = ListingId(cmd.listing_id)
    with uow:
        editor = uow.accounts.get(AccountId(cmd.editor_id))
        listing = uow.listings.get(listing_id)
        try:
            price = (
                Price(cmd.amount, cmd.currency or listing.price.currency)
                if cmd.amount is not None
                else None
            )
            media = Media.of(cmd.photo_urls) if cmd.photo_urls is not None else None
        except ValidationError as e:
            return Failure.from_error(e)

        result = DomainOrchestrator(pricing).update_listing_content(
            editor,
            listing,
            uow.listings.owner_of(listing_id) == editor.id,
            title=cmd.title,
            description=cmd.description,
            price=price,
            media=media,
            now=clock.now(),
        )
        if isinstance(result, Success):
            uow.listings.update(result.value, expected_status=listing.status)
            uow.commit()
    return result


def deactivate_listing(
    cmd: commands.DeactivateListing, uow: AbstractUnitOfWork, clock: Clock
) -> Result[Listing]:
    """Take a listing down at its owner's request."""
    listing_id = ListingId(cmd.listing_id)
    with uow:
        listing = uow.listings.get(listing_id)
        if uow.listings.owner_of(listing_id) != AccountId(cmd.owner_id):
            return Failure.business(
                "Cannot deactivate listing", ["Only the owner can deactivate a listing"]
            )
        deactivated = listing.deactivate(clock.now())
        uow.listings.update(deactivated, expected_status=listing.status)
        uow.commit()
    logger.info("Deactivated listing %s", listing_id)
    return Success(deactivated)


def expire_listings(
    cmd: commands.ExpireListings,  # pylint: disable=unused-argument
    uow: AbstractUnitOfWork,
    clock: Clock,
) -> Result[list[Listing]]:
    """Expire every active listing whose window has closed."""
    now = clock.now()
    with uow:
        expired = listing_service.sweep_expired(uow.listings.due_for_expiry(now), now)
        for listing in expired:
            uow.listings.update(listing, expected_status=ListingStatus.ACTIVE)
        uow.commit()
    logger.info("Expired %d listing(s)", len(expired))
    return Success(expired)


# ============================================================================
#                               Payments
# ============================================================================


def initiate_listing_payment(
    cmd: commands.InitiateListingPayment,
    uow: AbstractUnitOfWork,
    id_generator: IdGenerator,
    clock: Clock,
    pricing: PricingConfig,
) -> Result[PaymentInitiation]:
    """Open a payment for a listing and move the listing to payment pending.

    A listing has at most one open payment. Stale pending payments whose
    window has closed are expired first so the owner can try again.
    """
    payer_id = AccountId(cmd.payer_id)
    listing_id = ListingId(cmd.listing_id)
    now = clock.now()
    if not cmd.provider.supports(cmd.method):
        return Failure.business(
            "Cannot initiate payment",
            [f"{cmd.provider.label} does not support {cmd.method.label}"],
        )

    with uow:
        account = uow.accounts.get(payer_id)
        listing = uow.listings.get(listing_id)
        if uow.listings.owner_of(listing_id) != payer_id:
            return Failure.business(
                "Cannot initiate payment", ["Only the listing owner can pay for it"]
            )
        for payment in uow.payments.list_for_listing(listing_id):
            if (expired := payment_service.process_expiry(payment, now)) is not None:
                uow.payments.update(expired, expected_status=payment.status)
            elif not payment.is_final():
                return Failure.business(
                    "Cannot initiate payment",
                    ["Listing already has a payment in progress"],
                )

        result = DomainOrchestrator(pricing).initiate_listing_payment(
            account,
            listing,
            PaymentId(id_generator.new_id()),
            cmd.provider,
            cmd.method,
            cmd.reference_code,
            now,
        )
        if isinstance(result, Success):
            uow.payments.add(result.value.payment, listing_id, payer_id)
            uow.listings.update(result.value.listing, expected_status=listing.status)
            uow.commit()
            logger.info(
                "Payment %s opened for listing %s", result.value.payment.id, listing_id
            )
    return result


def mark_payment_processing(
    cmd: commands.MarkPaymentProcessing, uow: AbstractUnitOfWork, clock: Clock
) -> Result[Payment]:
    """Record the provider's transaction id on a pending payment."""
    with uow:
        payment = uow.payments.get(PaymentId(cmd.payment_id))
        try:
            processing = payment_service.mark_processing(
                payment, cmd.provider_transaction_id, clock.now()
            )
        except ValidationError as e:
            return Failure.from_error(e)
        uow.payments.update(processing, expected_status=payment.status)
        uow.commit()
    return Success(processing)


def complete_listing_payment(
    cmd: commands.CompleteListingPayment,
    uow: AbstractUnitOfWork,
    clock: Clock,
    pricing: PricingConfig,
) -> Result[PaymentOutcome]:
    """Complete the payment and activate its listing in one transaction."""
    payment_id = PaymentId(cmd.payment_id)
    with uow:
        payment = uow.payments.get(payment_id)
        listing = uow.listings.get(uow.payments.listing_of(payment_id))
        result = DomainOrchestrator(pricing).complete_listing_payment(
            payment, listing, cmd.receipt_data, cmd.provider_response, clock.now()
        )
        if isinstance(result, Success):
            _save_outcome(uow, result.value, payment, listing)
            logger.info(
                "Payment %s completed; listing %s active until %s",
                payment_id,
                listing.id,
                result.value.listing.expires_at,
            )
        else:
            logger.warning("Payment %s not completed: %s", payment_id, result.message)
    return result


def fail_listing_payment(
    cmd: commands.FailListingPayment,
    uow: AbstractUnitOfWork,
    clock: Clock,
    pricing: PricingConfig,
) -> Result[PaymentOutcome]:
    """Fail the payment and put its listing back in draft."""
    payment_id = PaymentId(cmd.payment_id)
    with uow:
        payment = uow.payments.get(payment_id)
        listing = uow.listings.get(uow.payments.listing_of(payment_id))
        result = DomainOrchestrator(pricing).fail_listing_payment(
            payment, listing, cmd.error_message, cmd.provider_response, clock.now()
        )
        if isinstance(result, Success):
            _save_outcome(uow, result.value, payment, listing)
            logger.info("Payment %s failed: %s", payment_id, cmd.error_message)
    return result


def _save_outcome(
    uow: AbstractUnitOfWork, outcome: PaymentOutcome, payment: Payment, listing: Listing
) -> None:
    uow.payments.update(outcome.payment, expected_status=payment.status)
    uow.listings.update(outcome.listing, expected_status=listing.status)
    uow.commit()


COMMAND_HANDLERS: dict[type[commands.Command], Callable[..., Any]] = {
    commands.StoreAccount: store_account,
    commands.RegisterProperty: register_property,
    commands.CreateListing: create_listing,
    commands.UpdateListingContent: update_listing_content,
    commands.DeactivateListing: deactivate_listing,
    commands.ExpireListings: expire_listings,
    commands.InitiateListingPayment: initiate_listing_payment,
    commands.MarkPaymentProcessing: mark_payment_processing,
    commands.CompleteListingPayment: complete_listing_payment,
    commands.FailListingPayment: fail_listing_payment,
}
