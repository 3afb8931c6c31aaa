"""In-memory repositories.

All entities live in a shared `InMemoryData` and are lost when it is
discarded. Use for unit tests, demos, or anywhere durability is not needed.
Entities are immutable, so they are stored as-is; links between them
(owner, property, listing, payer) are stored beside the entity, as the
relational adapters do.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING

from ubiqa.domain.entities.ids import AccountId, ListingId, PropertyId
from ubiqa.domain.entities.listing import ListingStatus
from ubiqa.interfaces.repositories import (
    AccountNotFoundError,
    AccountRepository,
    DuplicateIdError,
    ListingFilter,
    ListingNotFoundError,
    ListingRepository,
    ListingWithDetails,
    PaymentNotFoundError,
    PaymentRepository,
    PropertyNotFoundError,
    PropertyRepository,
    StaleStatusError,
)

if TYPE_CHECKING:
    from ubiqa.domain.entities.account import Account
    from ubiqa.domain.entities.ids import PaymentId
    from ubiqa.domain.entities.listing import Listing
    from ubiqa.domain.entities.payment import Payment, PaymentStatus
    from ubiqa.domain.entities.property import Property


@dataclass(frozen=True, slots=True)
class StoredProperty:
    """A property and its owner."""

    prop: Property
    owner_id: AccountId


@dataclass(frozen=True, slots=True)
class StoredListing:
    """A listing with its owner and the property it advertises."""

    listing: Listing
    owner_id: AccountId
    property_id: PropertyId


@dataclass(frozen=True, slots=True)
class StoredPayment:
    """A payment with the listing it pays for and the paying account."""

    payment: Payment
    listing_id: ListingId
    payer_id: AccountId


@dataclass(slots=True)
class InMemoryData:
    """Shared backing store for the in-memory repositories.

    One instance is shared by all four repositories so they resolve each
    other's references. Every mapping is keyed by the entity id string.
    """

    accounts: dict[str, Account] = field(default_factory=dict)
    properties: dict[str, StoredProperty] = field(default_factory=dict)
    listings: dict[str, StoredListing] = field(default_factory=dict)
    payments: dict[str, StoredPayment] = field(default_factory=dict)

    def copy(self) -> InMemoryData:
        """Independent copy; stored values are immutable so a shallow copy suffices."""
        return InMemoryData(
            dict(self.accounts),
            dict(self.properties),
            dict(self.listings),
            dict(self.payments),
        )

    def load(self, other: InMemoryData) -> None:
        """Replace this store's contents with `other`'s."""
        self.accounts = dict(other.accounts)
        self.properties = dict(other.properties)
        self.listings = dict(other.listings)
        self.payments = dict(other.payments)


# ============================================================================
#                               Accounts
# ============================================================================


class InMemoryAccountRepository(AccountRepository):
    """In-memory account repository."""

    def __init__(self, data: InMemoryData) -> None:
        self._data = data

    def add(self, account: Account) -> None:
        key = account.id.value
        if key in self._data.accounts:
            raise DuplicateIdError("account", key)
        if self.find_by_email(account.email) is not None:
            raise DuplicateIdError("account", account.email)
        self._data.accounts[key] = account

    def update(self, account: Account) -> None:
        key = account.id.value
        if key not in self._data.accounts:
            raise AccountNotFoundError(key)
        self._data.accounts[key] = account

    def get(self, account_id: AccountId) -> Account:
        if (account := self._data.accounts.get(account_id.value)) is None:
            raise AccountNotFoundError(account_id.value)
        return account

    def find_by_email(self, email: str) -> Account | None:
        wanted = email.strip().lower()
        return next(
            (a for a in self._data.accounts.values() if a.email == wanted), None
        )


# ============================================================================
#                               Properties
# ============================================================================


class InMemoryPropertyRepository(PropertyRepository):
    """In-memory property repository."""

    def __init__(self, data: InMemoryData) -> None:
        self._data = data

    def add(self, prop: Property, owner_id: AccountId) -> None:
        key = prop.id.value
        if key in self._data.properties:
            raise DuplicateIdError("property", key)
        if owner_id.value not in self._data.accounts:
            raise AccountNotFoundError(owner_id.value)
        self._data.properties[key] = StoredProperty(prop, owner_id)

    def update(self, prop: Property) -> None:
        stored = self._stored(prop.id)
        self._data.properties[prop.id.value] = replace(stored, prop=prop)

    def get(self, property_id: PropertyId) -> Property:
        return self._stored(property_id).prop

    def owner_of(self, property_id: PropertyId) -> AccountId:
        return self._stored(property_id).owner_id

    def list_for_owner(self, owner_id: AccountId) -> list[Property]:
        owned = [s.prop for s in self._data.properties.values() if s.owner_id == owner_id]
        return sorted(owned, key=lambda p: p.created_at)

    def _stored(self, property_id: PropertyId) -> StoredProperty:
        if (stored := self._data.properties.get(property_id.value)) is None:
            raise PropertyNotFoundError(property_id.value)
        return stored


# ============================================================================
#                               Listings
# ============================================================================


class InMemoryListingRepository(ListingRepository):
    """In-memory listing repository; searches scan every stored listing."""

    def __init__(self, data: InMemoryData) -> None:
        self._data = data

    def add(self, listing: Listing, owner_id: AccountId, property_id: PropertyId) -> None:
        key = listing.id.value
        if key in self._data.listings:
            raise DuplicateIdError("listing", key)
        if owner_id.value not in self._data.accounts:
            raise AccountNotFoundError(owner_id.value)
        if property_id.value not in self._data.properties:
            raise PropertyNotFoundError(property_id.value)
        self._data.listings[key] = StoredListing(listing, owner_id, property_id)

    def update(
        self, listing: Listing, expected_status: ListingStatus | None = None
    ) -> None:
        stored = self._stored(listing.id)
        current = stored.listing.status
        if expected_status is not None and current is not expected_status:
            raise StaleStatusError(
                "listing", listing.id.value, current.value, expected_status.value
            )
        self._data.listings[listing.id.value] = replace(stored, listing=listing)

    def get(self, listing_id: ListingId) -> Listing:
        return self._stored(listing_id).listing

    def get_details(self, listing_id: ListingId) -> ListingWithDetails:
        return self._details(self._stored(listing_id))

    def owner_of(self, listing_id: ListingId) -> AccountId:
        return self._stored(listing_id).owner_id

    def list_for_owner(self, owner_id: AccountId) -> list[Listing]:
        owned = [s.listing for s in self._data.listings.values() if s.owner_id == owner_id]
        return sorted(owned, key=lambda item: item.created_at, reverse=True)

    def search(self, criteria: ListingFilter, now: datetime) -> list[ListingWithDetails]:
        found = [
            details
            for details in map(self._details, self._data.listings.values())
            if details.listing.is_searchable(now)
            and details.property.is_available
            and criteria.matches(details)
        ]
        return sorted(found, key=lambda d: d.listing.published_at, reverse=True)

    def due_for_expiry(self, now: datetime) -> list[Listing]:
        due = [
            s.listing
            for s in self._data.listings.values()
            if s.listing.is_due_for_expiry(now)
        ]
        return sorted(due, key=lambda item: item.expires_at)

    def _stored(self, listing_id: ListingId) -> StoredListing:
        if (stored := self._data.listings.get(listing_id.value)) is None:
            raise ListingNotFoundError(listing_id.value)
        return stored

    def _details(self, stored: StoredListing) -> ListingWithDetails:
        if (prop := self._data.properties.get(stored.property_id.value)) is None:
            raise PropertyNotFoundError(stored.property_id.value)
        return ListingWithDetails(stored.listing, prop.prop, stored.owner_id)


# ============================================================================
#                               Payments
# ============================================================================


class InMemoryPaymentRepository(PaymentRepository):
    """In-memory payment repository."""

    def __init__(self, data: InMemoryData) -> None:
        self._data = data

    def add(self, payment: Payment, listing_id: ListingId, payer_id: AccountId) -> None:
        key = payment.id.value
        if key in self._data.payments:
            raise DuplicateIdError("payment", key)
        if listing_id.value not in self._data.listings:
            raise ListingNotFoundError(listing_id.value)
        if payer_id.value not in self._data.accounts:
            raise AccountNotFoundError(payer_id.value)
        self._data.payments[key] = StoredPayment(payment, listing_id, payer_id)

    def update(
        self, payment: Payment, expected_status: PaymentStatus | None = None
    ) -> None:
        stored = self._stored(payment.id)
        current = stored.payment.status
        if expected_status is not None and current is not expected_status:
            raise StaleStatusError(
                "payment", payment.id.value, current.value, expected_status.value
            )
        self._data.payments[payment.id.value] = replace(stored, payment=payment)

    def get(self, payment_id: PaymentId) -> Payment:
        return self._stored(payment_id).payment

    def listing_of(self, payment_id: PaymentId) -> ListingId:
        return self._stored(payment_id).listing_id

    def list_for_listing(self, listing_id: ListingId) -> list[Payment]:
        paid = [
            s.payment for s in self._data.payments.values() if s.listing_id == listing_id
        ]
        return sorted(paid, key=lambda p: p.created_at)

    def _stored(self, payment_id: PaymentId) -> StoredPayment:
        if (stored := self._data.payments.get(payment_id.value)) is None:
            raise PaymentNotFoundError(payment_id.value)
        return stored
