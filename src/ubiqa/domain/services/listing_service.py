"""Listing factories and lifecycle helpers.

These functions wrap the `Listing` transitions and translate illegal moves
into `ListingValidationError` with a user-facing violation.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from ubiqa.domain.entities.ids import ListingId
from ubiqa.domain.entities.listing import Listing, ListingStatus
from ubiqa.domain.errors import ListingValidationError
from ubiqa.domain.pricing import PricingConfig
from ubiqa.domain.value_objects.contact_info import ContactInfo
from ubiqa.domain.value_objects.media import Media
from ubiqa.domain.value_objects.price import Price

# pylint: disable=too-many-arguments


def create_listing(
    listing_id: ListingId,
    title: str,
    description: str,
    price: Price,
    contact: ContactInfo | None = None,
    media: Media | None = None,
    now: datetime | None = None,
) -> Listing:
    """Create a validated draft listing.

    Raises:
        ListingValidationError: With every violated rule.
    """
    return Listing.create_draft(
        listing_id, title, description, price, contact, media, now
    )


def confirm_payment(listing: Listing, now: datetime | None = None) -> Listing:
    """Activate a paid listing for its 30-day window.

    Raises:
        ListingValidationError: If the listing is not waiting for payment.
    """
    if listing.status is not ListingStatus.PAYMENT_PENDING:
        raise ListingValidationError(
            "Cannot confirm payment", ["Listing must be in payment pending status"]
        )
    return listing.activate(now)


def process_expiration(listing: Listing, now: datetime | None = None) -> Listing | None:
    """Expire an active listing whose window has passed; None otherwise."""
    if not listing.is_due_for_expiry(now):
        return None
    return listing.expire(now)


def sweep_expired(
    listings: Iterable[Listing], now: datetime | None = None
) -> list[Listing]:
    """Expire every listing in `listings` that is due; skip the rest."""
    expired: list[Listing] = []
    for listing in listings:
        if (updated := process_expiration(listing, now)) is not None:
            expired.append(updated)
    return expired


def update_content(
    listing: Listing,
    *,
    title: str | None = None,
    description: str | None = None,
    price: Price | None = None,
    contact: ContactInfo | None = None,
    media: Media | None = None,
    now: datetime | None = None,
) -> Listing:
    """Edit the content of a draft or active listing.

    Raises:
        ListingValidationError: If the status forbids edits or an edited
            field is invalid.
    """
    if not listing.can_be_edited():
        raise ListingValidationError(
            "Cannot edit listing", ["Listing status does not allow editing"]
        )
    try:
        return listing.with_content(
            title=title,
            description=description,
            price=price,
            contact=contact,
            media=media,
            now=now,
        )
    except ListingValidationError as e:
        raise ListingValidationError("Invalid listing updates", e.violations) from e


def listing_fee(config: PricingConfig) -> Price:
    """Fee charged to publish one listing."""
    return config.listing_fee
