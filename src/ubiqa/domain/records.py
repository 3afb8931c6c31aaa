"""Conversions between entities and their persisted record shapes.

Record keys are camelCase and must match the document store exactly.
Timestamps are ISO-8601 UTC strings ending in ``Z``; money amounts are JSON
numbers. Optional keys are omitted when the value is absent. Identifiers are
not part of the record; stores keep them as the document key.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, TypeAlias, TypeVar

from ubiqa.domain.entities.account import Account
from ubiqa.domain.entities.ids import AccountId, ListingId, PaymentId, PropertyId
from ubiqa.domain.entities.listing import Listing, ListingStatus
from ubiqa.domain.entities.payment import (
    Payment,
    PaymentMethod,
    PaymentProvider,
    PaymentStatus,
)
from ubiqa.domain.entities.property import OperationType, Property, PropertyType
from ubiqa.domain.errors import DomainError, MalformedRecordError
from ubiqa.domain.utils import ensure_utc, to_decimal
from ubiqa.domain.value_objects.contact_info import ContactHours, ContactInfo
from ubiqa.domain.value_objects.location import Location
from ubiqa.domain.value_objects.media import Media
from ubiqa.domain.value_objects.phone import PhoneNumber
from ubiqa.domain.value_objects.price import Currency, Price
from ubiqa.domain.value_objects.property_specs import PropertySpecs

Record: TypeAlias = dict[str, Any]
T = TypeVar("T")


# ============================================================================
#                           Scalar helpers
# ============================================================================


def format_timestamp(value: datetime) -> str:
    """Render an aware datetime as ``YYYY-MM-DDTHH:MM:SS[.ffffff]Z``."""
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    return ensure_utc(datetime.fromisoformat(value))


def _optional_timestamp(record: Mapping[str, Any], key: str) -> datetime | None:
    value = record.get(key)
    return parse_timestamp(value) if value is not None else None


def _put(record: Record, key: str, value: Any) -> None:
    if value is not None:
        record[key] = value


def _decode(kind: str, record_id: str, build: Callable[[], T]) -> T:
    try:
        return build()
    except MalformedRecordError:
        raise
    except (KeyError, TypeError, ValueError, DomainError) as e:
        raise MalformedRecordError(kind, record_id, f"{type(e).__name__}: {e}") from e


# ============================================================================
#                           Value objects
# ============================================================================


def contact_to_record(contact: ContactInfo) -> Record:
    """ContactInfo -> ``{phoneE164, countryCode, preferredSlot, note?}``."""
    record: Record = {
        "phoneE164": contact.phone.e164,
        "countryCode": contact.phone.country.value,
        "preferredSlot": contact.preferred_slot.value,
    }
    _put(record, "note", contact.note)
    return record


def contact_from_record(record: Mapping[str, Any]) -> ContactInfo:
    """Inverse of `contact_to_record`; the country is derived from the phone."""
    return ContactInfo(
        phone=PhoneNumber(record["phoneE164"]),
        preferred_slot=ContactHours(record.get("preferredSlot", "anytime")),
        note=record.get("note"),
    )


def price_to_record(price: Price) -> Record:
    """Price -> ``{amount, currencyCode}``."""
    return {"amount": float(price.amount), "currencyCode": price.currency.code}


def price_from_record(record: Mapping[str, Any]) -> Price:
    """Inverse of `price_to_record`."""
    return Price(to_decimal(record["amount"]), Currency.from_code(record["currencyCode"]))


def specs_to_record(specs: PropertySpecs) -> Record:
    """PropertySpecs -> ``{area, bedrooms?, bathrooms?, parking, amenities}``."""
    record: Record = {"area": specs.area_m2}
    _put(record, "bedrooms", specs.bedrooms)
    _put(record, "bathrooms", specs.bathrooms)
    record["parking"] = specs.parking
    record["amenities"] = list(specs.amenities)
    return record


def specs_from_record(record: Mapping[str, Any]) -> PropertySpecs:
    """Inverse of `specs_to_record`."""
    return PropertySpecs(
        area_m2=float(record["area"]),
        bedrooms=record.get("bedrooms"),
        bathrooms=record.get("bathrooms"),
        parking=int(record.get("parking", 0)),
        amenities=tuple(record.get("amenities", ())),
    )


def location_to_record(location: Location) -> Record:
    """Location -> ``{lat, lon, address, district, countryCode}``."""
    return {
        "lat": location.lat,
        "lon": location.lon,
        "address": location.address,
        "district": location.district,
        "countryCode": location.country_code,
    }


def location_from_record(record: Mapping[str, Any]) -> Location:
    """Inverse of `location_to_record`."""
    return Location(
        lat=float(record["lat"]),
        lon=float(record["lon"]),
        address=record["address"],
        district=record["district"],
        country_code=record.get("countryCode", "PE"),
    )


def media_to_record(media: Media) -> Record:
    """Media -> ``{photoUrls}``."""
    return {"photoUrls": list(media.photo_urls)}


def media_from_record(record: Mapping[str, Any] | None) -> Media:
    """Inverse of `media_to_record`; a missing record means no photos."""
    if not record:
        return Media.empty()
    return Media.of(record.get("photoUrls", ()))


# ============================================================================
#                           Entities
# ============================================================================


def account_to_record(account: Account) -> Record:
    """Account -> account record."""
    record: Record = {"email": account.email}
    _put(record, "name", account.name)
    record["createdAt"] = format_timestamp(account.created_at)
    record["updatedAt"] = format_timestamp(account.updated_at)
    record["isActive"] = account.is_active
    if account.contact is not None:
        record["contactInfo"] = contact_to_record(account.contact)
    return record


def account_from_record(account_id: str, record: Mapping[str, Any]) -> Account:
    """Rebuild an account stored under `account_id`.

    Raises:
        MalformedRecordError: If the record is missing keys or holds invalid data.
    """

    def build() -> Account:
        contact = record.get("contactInfo")
        return Account(
            id=AccountId(account_id),
            email=record["email"],
            name=record.get("name"),
            contact=contact_from_record(contact) if contact else None,
            created_at=parse_timestamp(record["createdAt"]),
            updated_at=parse_timestamp(record["updatedAt"]),
            is_active=bool(record.get("isActive", True)),
        )

    return _decode("account", account_id, build)


def property_to_record(prop: Property) -> Record:
    """Property -> property record (no ``createdAt``; stores keep it alongside)."""
    return {
        "propertyType": prop.property_type.value,
        "operationType": prop.operation_type.value,
        "specs": specs_to_record(prop.specs),
        "location": location_to_record(prop.location),
        "media": media_to_record(prop.media),
        "updatedAt": format_timestamp(prop.updated_at),
        "isAvailable": prop.is_available,
    }


def property_from_record(property_id: str, record: Mapping[str, Any]) -> Property:
    """Rebuild a property stored under `property_id`.

    The property record has no ``createdAt`` key. A store that needs the
    creation time keeps it beside the record and passes it back in as
    ``createdAt`` (see `property_from_row` in the SQLAlchemy adapter).
    Without it the creation time falls back to ``updatedAt``, so
    ``property_from_record(property_to_record(p))`` equals `p` only while
    ``p.created_at == p.updated_at``.

    Raises:
        MalformedRecordError: If the record is missing keys or holds invalid data.
    """

    def build() -> Property:
        updated_at = parse_timestamp(record["updatedAt"])
        created_at = _optional_timestamp(record, "createdAt") or updated_at
        return Property(
            id=PropertyId(property_id),
            property_type=PropertyType(record["propertyType"]),
            operation_type=OperationType(record["operationType"]),
            specs=specs_from_record(record["specs"]),
            location=location_from_record(record["location"]),
            media=media_from_record(record.get("media")),
            created_at=created_at,
            updated_at=updated_at,
            is_available=bool(record.get("isAvailable", True)),
        )

    return _decode("property", property_id, build)


def listing_to_record(listing: Listing) -> Record:
    """Listing -> listing record."""
    record: Record = {
        "title": listing.title,
        "description": listing.description,
        "price": price_to_record(listing.price),
        "status": listing.status.value,
    }
    if listing.contact is not None:
        record["contactInfo"] = contact_to_record(listing.contact)
    record["media"] = media_to_record(listing.media)
    record["createdAt"] = format_timestamp(listing.created_at)
    record["updatedAt"] = format_timestamp(listing.updated_at)
    if listing.published_at is not None:
        record["publishedAt"] = format_timestamp(listing.published_at)
    if listing.expires_at is not None:
        record["expiresAt"] = format_timestamp(listing.expires_at)
    return record


def listing_from_record(listing_id: str, record: Mapping[str, Any]) -> Listing:
    """Rebuild a listing stored under `listing_id`.

    Raises:
        MalformedRecordError: If the record is missing keys or holds invalid data.
    """

    def build() -> Listing:
        contact = record.get("contactInfo")
        return Listing(
            id=ListingId(listing_id),
            title=record["title"],
            description=record["description"],
            price=price_from_record(record["price"]),
            status=ListingStatus(record["status"]),
            contact=contact_from_record(contact) if contact else None,
            media=media_from_record(record.get("media")),
            created_at=parse_timestamp(record["createdAt"]),
            updated_at=parse_timestamp(record["updatedAt"]),
            published_at=_optional_timestamp(record, "publishedAt"),
            expires_at=_optional_timestamp(record, "expiresAt"),
        )

    return _decode("listing", listing_id, build)


def payment_to_record(payment: Payment) -> Record:
    """Payment -> payment record (flat ``amount`` and ``currencyCode``)."""
    record: Record = {
        "amount": float(payment.price.amount),
        "currencyCode": payment.price.currency.code,
        "status": payment.status.value,
        "provider": payment.provider.value,
        "method": payment.method.value,
    }
    _put(record, "providerTransactionId", payment.provider_transaction_id)
    record["referenceCode"] = payment.reference_code
    record["description"] = payment.description
    record["createdAt"] = format_timestamp(payment.created_at)
    record["updatedAt"] = format_timestamp(payment.updated_at)
    if payment.completed_at is not None:
        record["completedAt"] = format_timestamp(payment.completed_at)
    if payment.expires_at is not None:
        record["expiresAt"] = format_timestamp(payment.expires_at)
    _put(record, "providerResponse", payment.provider_response)
    _put(record, "errorMessage", payment.error_message)
    _put(record, "receiptData", payment.receipt_data)
    return record


def payment_from_record(payment_id: str, record: Mapping[str, Any]) -> Payment:
    """Rebuild a payment stored under `payment_id`.

    Raises:
        MalformedRecordError: If the record is missing keys or holds invalid data.
    """

    def build() -> Payment:
        return Payment(
            id=PaymentId(payment_id),
            price=price_from_record(record),
            status=PaymentStatus(record["status"]),
            provider=PaymentProvider(record["provider"]),
            method=PaymentMethod(record["method"]),
            provider_transaction_id=record.get("providerTransactionId"),
            reference_code=record["referenceCode"],
            description=record["description"],
            created_at=parse_timestamp(record["createdAt"]),
            updated_at=parse_timestamp(record["updatedAt"]),
            completed_at=_optional_timestamp(record, "completedAt"),
            expires_at=_optional_timestamp(record, "expiresAt"),
            provider_response=record.get("providerResponse"),
            error_message=record.get("errorMessage"),
            receipt_data=record.get("receiptData"),
        )

    return _decode("payment", payment_id, build)
