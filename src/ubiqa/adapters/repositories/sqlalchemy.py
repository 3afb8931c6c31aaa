"""SQLAlchemy Core repositories.

Each repository works on a `Connection` owned by the unit of work and never
commits. Rows hold the entity record in ``document`` plus indexed query
columns (see `ubiqa.adapters.db.schema`); loading always rebuilds the entity
from the document, so a record that no longer validates surfaces as a
`MalformedRecordError` instead of a half-built entity.

Driver failures are mapped onto the repository error types:

| SQLAlchemy error          | Raised as              |
|---------------------------|------------------------|
| IntegrityError on insert  | DuplicateIdError       |
| any other DBAPIError      | StoreUnavailableError  |
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError

from ubiqa.adapters.db.schema import accounts, listings, payments, properties
from ubiqa.domain import records
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
    StoreUnavailableError,
)

if TYPE_CHECKING:
    from sqlalchemy import CursorResult, Row, Table
    from sqlalchemy.engine import Connection
    from sqlalchemy.sql.base import Executable

    from ubiqa.domain.entities.account import Account
    from ubiqa.domain.entities.ids import PaymentId
    from ubiqa.domain.entities.listing import Listing
    from ubiqa.domain.entities.payment import Payment, PaymentStatus
    from ubiqa.domain.entities.property import Property


class _SqlAlchemyRepository:
    """Shared connection handling and error mapping."""

    KIND: str

    def __init__(self, connection: Connection) -> None:
        self.connection = connection

    def _execute(self, stmt: Executable, key: str) -> CursorResult[Any]:
        try:
            return self.connection.execute(stmt)
        except DBAPIError as e:
            raise StoreUnavailableError(self.KIND, key, str(e.orig or e)) from e

    def _insert(self, table: Table, key: str, values: dict[str, Any]) -> None:
        try:
            self.connection.execute(insert(table).values(**values))
        except IntegrityError as e:
            raise DuplicateIdError(self.KIND, key) from e
        except DBAPIError as e:
            raise StoreUnavailableError(self.KIND, key, str(e.orig or e)) from e

    def _exists(self, table: Table, key: str) -> bool:
        stmt = select(table.c.id).where(table.c.id == key)
        return self._execute(stmt, key).first() is not None


# ============================================================================
#                               Accounts
# ============================================================================


class SqlAlchemyAccountRepository(_SqlAlchemyRepository, AccountRepository):
    """Accounts in the ``accounts`` table."""

    KIND = "account"

    def add(self, account: Account) -> None:
        key = account.id.value
        if self._exists(accounts, key):
            raise DuplicateIdError(self.KIND, key)
        self._insert(accounts, key, {"id": key, **self._columns(account)})

    def update(self, account: Account) -> None:
        key = account.id.value
        stmt = update(accounts).where(accounts.c.id == key).values(**self._columns(account))
        if self._execute(stmt, key).rowcount == 0:
            raise AccountNotFoundError(key)

    def get(self, account_id: AccountId) -> Account:
        key = account_id.value
        stmt = select(accounts.c.document).where(accounts.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise AccountNotFoundError(key)
        return records.account_from_record(key, row.document)

    def find_by_email(self, email: str) -> Account | None:
        wanted = email.strip().lower()
        stmt = select(accounts.c.id, accounts.c.document).where(accounts.c.email == wanted)
        if (row := self._execute(stmt, wanted).first()) is None:
            return None
        return records.account_from_record(row.id, row.document)

    @staticmethod
    def _columns(account: Account) -> dict[str, Any]:
        return {
            "email": account.email,
            "is_active": account.is_active,
            "created_at": account.created_at,
            "updated_at": account.updated_at,
            "document": records.account_to_record(account),
        }


# ============================================================================
#                               Properties
# ============================================================================


class SqlAlchemyPropertyRepository(_SqlAlchemyRepository, PropertyRepository):
    """Properties in the ``properties`` table."""

    KIND = "property"

    def add(self, prop: Property, owner_id: AccountId) -> None:
        key = prop.id.value
        if self._exists(properties, key):
            raise DuplicateIdError(self.KIND, key)
        if not self._exists(accounts, owner_id.value):
            raise AccountNotFoundError(owner_id.value)
        self._insert(
            properties,
            key,
            {
                "id": key,
                "owner_id": owner_id.value,
                "created_at": prop.created_at,
                **self._columns(prop),
            },
        )

    def update(self, prop: Property) -> None:
        key = prop.id.value
        stmt = (
            update(properties).where(properties.c.id == key).values(**self._columns(prop))
        )
        if self._execute(stmt, key).rowcount == 0:
            raise PropertyNotFoundError(key)

    def get(self, property_id: PropertyId) -> Property:
        key = property_id.value
        stmt = select(properties).where(properties.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise PropertyNotFoundError(key)
        return property_from_row(row)

    def owner_of(self, property_id: PropertyId) -> AccountId:
        key = property_id.value
        stmt = select(properties.c.owner_id).where(properties.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise PropertyNotFoundError(key)
        return AccountId(row.owner_id)

    def list_for_owner(self, owner_id: AccountId) -> list[Property]:
        stmt = (
            select(properties)
            .where(properties.c.owner_id == owner_id.value)
            .order_by(properties.c.created_at.asc(), properties.c.id.asc())
        )
        return [property_from_row(row) for row in self._execute(stmt, owner_id.value)]

    @staticmethod
    def _columns(prop: Property) -> dict[str, Any]:
        return {
            "property_type": prop.property_type.value,
            "operation_type": prop.operation_type.value,
            "is_available": prop.is_available,
            "lat": prop.location.lat,
            "lon": prop.location.lon,
            "updated_at": prop.updated_at,
            "document": records.property_to_record(prop),
        }


def property_from_row(row: Row[Any]) -> Property:
    """Rebuild a property; its creation time comes from the row, not the record."""
    record = {**row.document, "createdAt": records.format_timestamp(row.created_at)}
    return records.property_from_record(row.id, record)


# ============================================================================
#                               Listings
# ============================================================================


class SqlAlchemyListingRepository(_SqlAlchemyRepository, ListingRepository):
    """Listings in the ``listings`` table, joined to ``properties`` for search."""

    KIND = "listing"

    def add(self, listing: Listing, owner_id: AccountId, property_id: PropertyId) -> None:
        key = listing.id.value
        if self._exists(listings, key):
            raise DuplicateIdError(self.KIND, key)
        if not self._exists(accounts, owner_id.value):
            raise AccountNotFoundError(owner_id.value)
        if not self._exists(properties, property_id.value):
            raise PropertyNotFoundError(property_id.value)
        self._insert(
            listings,
            key,
            {
                "id": key,
                "owner_id": owner_id.value,
                "property_id": property_id.value,
                "created_at": listing.created_at,
                **self._columns(listing),
            },
        )

    def update(
        self, listing: Listing, expected_status: ListingStatus | None = None
    ) -> None:
        key = listing.id.value
        stmt = update(listings).where(listings.c.id == key)
        if expected_status is not None:
            stmt = stmt.where(listings.c.status == expected_status.value)
        result = self._execute(stmt.values(**self._columns(listing)), key)
        if result.rowcount == 0:
            self._raise_update_miss(key, expected_status)

    def get(self, listing_id: ListingId) -> Listing:
        key = listing_id.value
        stmt = select(listings.c.document).where(listings.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise ListingNotFoundError(key)
        return records.listing_from_record(key, row.document)

    def get_details(self, listing_id: ListingId) -> ListingWithDetails:
        key = listing_id.value
        stmt = select(listings.c.property_id).where(listings.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise ListingNotFoundError(key)
        details = self._select_details().where(listings.c.id == key)
        if (joined := self._execute(details, key).first()) is None:
            raise PropertyNotFoundError(row.property_id)
        return self._details_from_row(joined)

    def owner_of(self, listing_id: ListingId) -> AccountId:
        key = listing_id.value
        stmt = select(listings.c.owner_id).where(listings.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise ListingNotFoundError(key)
        return AccountId(row.owner_id)

    def list_for_owner(self, owner_id: AccountId) -> list[Listing]:
        stmt = (
            select(listings.c.id, listings.c.document)
            .where(listings.c.owner_id == owner_id.value)
            .order_by(listings.c.created_at.desc(), listings.c.id.desc())
        )
        return [
            records.listing_from_record(row.id, row.document)
            for row in self._execute(stmt, owner_id.value)
        ]

    def search(self, criteria: ListingFilter, now: datetime) -> list[ListingWithDetails]:
        stmt = self._select_details().where(
            listings.c.status == ListingStatus.ACTIVE.value,
            listings.c.expires_at >= now,
            properties.c.is_available.is_(True),
        )
        if criteria.operation_type is not None:
            stmt = stmt.where(properties.c.operation_type == criteria.operation_type.value)
        if criteria.property_type is not None:
            stmt = stmt.where(properties.c.property_type == criteria.property_type.value)
        if criteria.currency is not None:
            stmt = stmt.where(listings.c.currency_code == criteria.currency.code)
        if criteria.min_price is not None:
            stmt = stmt.where(
                listings.c.currency_code == criteria.min_price.currency.code,
                listings.c.price_amount >= criteria.min_price.amount,
            )
        if criteria.max_price is not None:
            stmt = stmt.where(
                listings.c.currency_code == criteria.max_price.currency.code,
                listings.c.price_amount <= criteria.max_price.amount,
            )
        stmt = stmt.order_by(listings.c.published_at.desc(), listings.c.id.desc())

        # the radius check runs on the decoded entities
        found = (self._details_from_row(row) for row in self._execute(stmt, "search"))
        return [
            details
            for details in found
            if details.listing.is_searchable(now) and criteria.matches(details)
        ]

    def due_for_expiry(self, now: datetime) -> list[Listing]:
        stmt = (
            select(listings.c.id, listings.c.document)
            .where(
                listings.c.status == ListingStatus.ACTIVE.value,
                listings.c.expires_at < now,
            )
            .order_by(listings.c.expires_at.asc(), listings.c.id.asc())
        )
        return [
            records.listing_from_record(row.id, row.document)
            for row in self._execute(stmt, "expiry")
        ]

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    @staticmethod
    def _columns(listing: Listing) -> dict[str, Any]:
        return {
            "status": listing.status.value,
            "currency_code": listing.price.currency.code,
            "price_amount": listing.price.amount,
            "updated_at": listing.updated_at,
            "published_at": listing.published_at,
            "expires_at": listing.expires_at,
            "document": records.listing_to_record(listing),
        }

    @staticmethod
    def _select_details():
        return select(
            listings.c.id,
            listings.c.owner_id,
            listings.c.document,
            properties.c.id.label("property_id"),
            properties.c.created_at.label("property_created_at"),
            properties.c.document.label("property_document"),
        ).join(properties, listings.c.property_id == properties.c.id)

    @staticmethod
    def _details_from_row(row: Row[Any]) -> ListingWithDetails:
        property_record = {
            **row.property_document,
            "createdAt": records.format_timestamp(row.property_created_at),
        }
        return ListingWithDetails(
            listing=records.listing_from_record(row.id, row.document),
            property=records.property_from_record(row.property_id, property_record),
            owner_id=AccountId(row.owner_id),
        )

    def _raise_update_miss(self, key: str, expected: ListingStatus | None) -> None:
        stmt = select(listings.c.status).where(listings.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise ListingNotFoundError(key)
        raise StaleStatusError(
            self.KIND, key, row.status, expected.value if expected else row.status
        )


# ============================================================================
#                               Payments
# ============================================================================


class SqlAlchemyPaymentRepository(_SqlAlchemyRepository, PaymentRepository):
    """Payments in the ``payments`` table."""

    KIND = "payment"

    def add(self, payment: Payment, listing_id: ListingId, payer_id: AccountId) -> None:
        key = payment.id.value
        if self._exists(payments, key):
            raise DuplicateIdError(self.KIND, key)
        if not self._exists(listings, listing_id.value):
            raise ListingNotFoundError(listing_id.value)
        if not self._exists(accounts, payer_id.value):
            raise AccountNotFoundError(payer_id.value)
        self._insert(
            payments,
            key,
            {
                "id": key,
                "listing_id": listing_id.value,
                "payer_id": payer_id.value,
                "created_at": payment.created_at,
                **self._columns(payment),
            },
        )

    def update(
        self, payment: Payment, expected_status: PaymentStatus | None = None
    ) -> None:
        key = payment.id.value
        stmt = update(payments).where(payments.c.id == key)
        if expected_status is not None:
            stmt = stmt.where(payments.c.status == expected_status.value)
        if self._execute(stmt.values(**self._columns(payment)), key).rowcount == 1:
            return

        lookup = select(payments.c.status).where(payments.c.id == key)
        if (row := self._execute(lookup, key).first()) is None:
            raise PaymentNotFoundError(key)
        raise StaleStatusError(
            self.KIND,
            key,
            row.status,
            expected_status.value if expected_status else row.status,
        )

    def get(self, payment_id: PaymentId) -> Payment:
        key = payment_id.value
        stmt = select(payments.c.document).where(payments.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise PaymentNotFoundError(key)
        return records.payment_from_record(key, row.document)

    def listing_of(self, payment_id: PaymentId) -> ListingId:
        key = payment_id.value
        stmt = select(payments.c.listing_id).where(payments.c.id == key)
        if (row := self._execute(stmt, key).first()) is None:
            raise PaymentNotFoundError(key)
        return ListingId(row.listing_id)

    def list_for_listing(self, listing_id: ListingId) -> list[Payment]:
        stmt = (
            select(payments.c.id, payments.c.document)
            .where(payments.c.listing_id == listing_id.value)
            .order_by(payments.c.created_at.asc(), payments.c.id.asc())
        )
        return [
            records.payment_from_record(row.id, row.document)
            for row in self._execute(stmt, listing_id.value)
        ]

    @staticmethod
    def _columns(payment: Payment) -> dict[str, Any]:
        return {
            "status": payment.status.value,
            "updated_at": payment.updated_at,
            "expires_at": payment.expires_at,
            "document": records.payment_to_record(payment),
        }
