"""Module defining Commands.

Identifiers travel as plain strings; enumerations and money travel as their
domain types so that a command can only name values the domain knows about.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from ubiqa.domain.entities.payment import PaymentProvider
from ubiqa.domain.value_objects.contact_info import ContactHours
from ubiqa.domain.value_objects.price import Currency

if TYPE_CHECKING:
    from ubiqa.domain.entities.account import Account
    from ubiqa.domain.entities.payment import PaymentMethod
    from ubiqa.domain.entities.property import OperationType, PropertyType

# pylint: disable=too-many-instance-attributes


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class StoreAccount(Command):
    """Command to save the account snapshot returned by the identity provider."""

    account: Account


@dataclass(frozen=True)
class RegisterProperty(Command):
    """Command to register a property owned by an account."""

    owner_id: str
    property_type: PropertyType
    operation_type: OperationType
    area_m2: float
    lat: float
    lon: float
    address: str
    district: str
    bedrooms: int | None = None
    bathrooms: int | None = None
    parking: int = 0
    amenities: tuple[str, ...] = ()
    photo_urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class CreateListing(Command):
    """Command to draft a listing for one of the owner's properties.

    Without `contact_phone` the listing uses the owner's contact channel.
    """

    owner_id: str
    property_id: str
    title: str
    description: str
    amount: Decimal
    currency: Currency = Currency.PEN
    photo_urls: tuple[str, ...] = ()
    contact_phone: str | None = None
    contact_slot: ContactHours = ContactHours.ANYTIME
    contact_note: str | None = None


@dataclass(frozen=True)
class InitiateListingPayment(Command):
    """Command to start paying the publication fee for a listing."""

    payer_id: str
    listing_id: str
    method: PaymentMethod
    provider: PaymentProvider = PaymentProvider.CULQI
    reference_code: str | None = None


@dataclass(frozen=True)
class MarkPaymentProcessing(Command):
    """Command recording that the provider accepted the charge for processing."""

    payment_id: str
    provider_transaction_id: str


@dataclass(frozen=True)
class CompleteListingPayment(Command):
    """Command to complete a processing payment and publish its listing."""

    payment_id: str
    receipt_data: str | None = None
    provider_response: str | None = None


@dataclass(frozen=True)
class FailListingPayment(Command):
    """Command to fail a payment and return its listing to draft."""

    payment_id: str
    error_message: str
    provider_response: str | None = None


@dataclass(frozen=True)
class UpdateListingContent(Command):
    """Command to edit a listing; unset fields keep their current value.

    A new `amount` keeps the listing's currency unless `currency` is given.
    """

    editor_id: str
    listing_id: str
    title: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    currency: Currency | None = None
    photo_urls: tuple[str, ...] | None = None


@dataclass(frozen=True)
class DeactivateListing(Command):
    """Command for an owner to take a listing down."""

    owner_id: str
    listing_id: str


@dataclass(frozen=True)
class ExpireListings(Command):
    """Command to expire every active listing past its expiration time."""
