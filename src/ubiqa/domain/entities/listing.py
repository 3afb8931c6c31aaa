"""Listing entity and its lifecycle state machine.

States::

    draft -> paymentPending -> active -> expired
      ^            |             |
      +------------+-------------+   (payment failure revert)
    any -> deactivated

Every transition returns a new instance; `dataclasses.replace` re-runs the
structural checks in `__post_init__`, so an invalid listing can never be
produced by a transition either.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import assert_never

from ubiqa.domain.errors import InvalidTransitionError, ListingValidationError
from ubiqa.domain.pricing import (
    DEFAULT_EXPIRING_SOON_WINDOW,
    LISTING_DURATION,
)
from ubiqa.domain.utils import ensure_utc, resolve_now
from ubiqa.domain.value_objects.contact_info import ContactInfo
from ubiqa.domain.value_objects.media import MAX_LISTING_PHOTOS, Media
from ubiqa.domain.value_objects.price import Price

from .ids import ListingId

# pylint: disable=magic-value-comparison,too-many-instance-attributes

MIN_TITLE_LENGTH = 10
MAX_TITLE_LENGTH = 120
MIN_DESCRIPTION_LENGTH = 20
MAX_DESCRIPTION_LENGTH = 2000
DESCRIPTION_PREVIEW_LENGTH = 150

_SLUG_STRIP = re.compile(r"[^\w\s-]", re.ASCII)
_SLUG_SPACES = re.compile(r"\s+")
_SLUG_DASHES = re.compile(r"-+")


class ListingStatus(Enum):
    """Lifecycle status of a listing."""

    DRAFT = "draft"
    PAYMENT_PENDING = "paymentPending"
    ACTIVE = "active"
    EXPIRED = "expired"
    DEACTIVATED = "deactivated"

    @property
    def label(self) -> str:
        """Spanish label."""
        match self:
            case ListingStatus.DRAFT:
                return "Borrador"
            case ListingStatus.PAYMENT_PENDING:
                return "Pago Pendiente"
            case ListingStatus.ACTIVE:
                return "Activo"
            case ListingStatus.EXPIRED:
                return "Vencido"
            case ListingStatus.DEACTIVATED:
                return "Desactivado"
            case _:
                assert_never(self)

    @property
    def needs_payment(self) -> bool:
        """Draft and payment-pending listings still have to be paid for."""
        return self in (ListingStatus.DRAFT, ListingStatus.PAYMENT_PENDING)

    @property
    def is_editable(self) -> bool:
        """Owners may edit content only in draft or active."""
        return self in (ListingStatus.DRAFT, ListingStatus.ACTIVE)

    @property
    def is_live(self) -> bool:
        """Only active listings are shown to buyers."""
        return self is ListingStatus.ACTIVE


@dataclass(frozen=True, slots=True)
class Listing:
    """A time-bound advertisement for a property.

    Conventions:
      - `title` and `description` are stripped.
      - The price must be inside the market bounds of its currency.
      - An active listing always carries both `published_at` and
        `expires_at`, exactly 30 days apart.
    """

    id: ListingId
    title: str
    description: str
    price: Price
    created_at: datetime
    updated_at: datetime
    status: ListingStatus = ListingStatus.DRAFT
    contact: ContactInfo | None = None
    media: Media = field(default_factory=Media.empty)
    published_at: datetime | None = None
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "title", self.title.strip())
        object.__setattr__(self, "description", self.description.strip())
        for name in ("created_at", "updated_at", "published_at", "expires_at"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, ensure_utc(value))

        if violations := self._violations():
            raise ListingValidationError("Invalid listing data", violations)

    def _violations(self) -> list[str]:
        violations: list[str] = []
        if len(self.title) < MIN_TITLE_LENGTH:
            violations.append("Title must be at least 10 characters")
        if len(self.title) > MAX_TITLE_LENGTH:
            violations.append("Title cannot exceed 120 characters")
        if len(self.description) < MIN_DESCRIPTION_LENGTH:
            violations.append("Description must be at least 20 characters")
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            violations.append("Description cannot exceed 2000 characters")
        if isinstance(self.price, Price):
            violations.extend(self.price.market_violations())
        else:
            violations.append("Price is required")
        if not isinstance(self.status, ListingStatus):
            violations.append("Listing status is not recognized")
        if self.status is ListingStatus.ACTIVE:
            if self.published_at is None:
                violations.append("Active listings must have published date")
            if self.expires_at is None:
                violations.append("Active listings must have expiration date")
            if (
                self.published_at is not None
                and self.expires_at is not None
                and self.expires_at - self.published_at != LISTING_DURATION
            ):
                violations.append("Listing duration must be exactly 30 days")
        if (
            self.published_at is not None
            and self.expires_at is not None
            and self.expires_at <= self.published_at
        ):
            violations.append("Expiration date must be after publication date")
        if self.media.count > MAX_LISTING_PHOTOS:
            violations.append("Cannot have more than 20 photos")
        return violations

    # --- Construction Paths ---

    @classmethod
    def create_draft(
        cls,
        listing_id: ListingId,
        title: str,
        description: str,
        price: Price,
        contact: ContactInfo | None = None,
        media: Media | None = None,
        now: datetime | None = None,
    ) -> Listing:
        """Create a new draft listing.

        Raises:
            ListingValidationError: With every violated rule.
        """
        now = resolve_now(now)
        return cls(
            id=listing_id,
            title=title,
            description=description,
            price=price,
            contact=contact,
            media=media or Media.empty(),
            created_at=now,
            updated_at=now,
        )

    # --- State Transitions ---

    def activate(self, now: datetime | None = None) -> Listing:
        """Publish the listing for 30 days starting at `now`.

        Raises:
            InvalidTransitionError: Unless the listing is draft or payment pending.
        """
        self._require(
            "activate", ListingStatus.DRAFT, ListingStatus.PAYMENT_PENDING
        )
        now = resolve_now(now)
        return replace(
            self,
            status=ListingStatus.ACTIVE,
            published_at=now,
            expires_at=now + LISTING_DURATION,
            updated_at=now,
        )

    def mark_payment_pending(self, now: datetime | None = None) -> Listing:
        """Flag the listing as waiting for its payment."""
        return replace(
            self, status=ListingStatus.PAYMENT_PENDING, updated_at=resolve_now(now)
        )

    def expire(self, now: datetime | None = None) -> Listing:
        """Move an active listing to expired.

        Raises:
            InvalidTransitionError: Unless the listing is active.
        """
        self._require("expire", ListingStatus.ACTIVE)
        return replace(self, status=ListingStatus.EXPIRED, updated_at=resolve_now(now))

    def deactivate(self, now: datetime | None = None) -> Listing:
        """Take the listing down at the owner's request."""
        return replace(
            self, status=ListingStatus.DEACTIVATED, updated_at=resolve_now(now)
        )

    def revert_to_draft(self, now: datetime | None = None) -> Listing:
        """Return to draft after a failed payment, keeping every content field.

        Publication timestamps are cleared because a draft is not published.

        Raises:
            InvalidTransitionError: Unless the listing is payment pending or active.
        """
        self._require("revert", ListingStatus.PAYMENT_PENDING, ListingStatus.ACTIVE)
        return replace(
            self,
            status=ListingStatus.DRAFT,
            published_at=None,
            expires_at=None,
            updated_at=resolve_now(now),
        )

    def with_content(
        self,
        *,
        title: str | None = None,
        description: str | None = None,
        price: Price | None = None,
        contact: ContactInfo | None = None,
        media: Media | None = None,
        now: datetime | None = None,
    ) -> Listing:
        """Return a copy with the given content fields replaced."""
        return replace(
            self,
            title=title if title is not None else self.title,
            description=description if description is not None else self.description,
            price=price or self.price,
            contact=contact or self.contact,
            media=media if media is not None else self.media,
            updated_at=resolve_now(now),
        )

    # --- Queries ---

    def needs_payment(self) -> bool:
        """True while the listing has not been paid for."""
        return self.status.needs_payment

    def can_be_edited(self) -> bool:
        """True in draft or active."""
        return self.status.is_editable

    def is_expired(self, now: datetime | None = None) -> bool:
        """True once `now` is past the expiration timestamp."""
        if self.expires_at is None:
            return False
        return resolve_now(now) > self.expires_at

    def is_live(self, now: datetime | None = None) -> bool:
        """True if active and not yet past expiration."""
        return self.status.is_live and not self.is_expired(now)

    def is_searchable(self, now: datetime | None = None) -> bool:
        """Buyers can find the listing only while it is live."""
        return self.is_live(now)

    def is_due_for_expiry(self, now: datetime | None = None) -> bool:
        """True if the listing is still active but already past expiration."""
        return self.status is ListingStatus.ACTIVE and self.is_expired(now)

    def time_until_expiry(self, now: datetime | None = None) -> timedelta | None:
        """Remaining time for live listings, otherwise None."""
        if not self.is_live(now) or self.expires_at is None:
            return None
        return max(self.expires_at - resolve_now(now), timedelta(0))

    def days_until_expiry(self, now: datetime | None = None) -> int | None:
        """Whole days left for live listings."""
        remaining = self.time_until_expiry(now)
        return None if remaining is None else remaining.days

    def hours_until_expiry(self, now: datetime | None = None) -> int | None:
        """Whole hours left for live listings."""
        remaining = self.time_until_expiry(now)
        return None if remaining is None else int(remaining.total_seconds() // 3600)

    def is_expiring_soon(
        self,
        now: datetime | None = None,
        window: timedelta = DEFAULT_EXPIRING_SOON_WINDOW,
    ) -> bool:
        """True if a live listing has at most `window` (whole days) left."""
        days = self.days_until_expiry(now)
        return days is not None and days <= window.days

    def is_expiring_today(self, now: datetime | None = None) -> bool:
        """True if a live listing has at most 24 hours left."""
        hours = self.hours_until_expiry(now)
        return hours is not None and hours <= 24

    def age(self, now: datetime | None = None) -> timedelta:
        """Time since the listing was created."""
        return resolve_now(now) - self.created_at

    def active_time(self, now: datetime | None = None) -> timedelta | None:
        """Time since publication, if published."""
        if self.published_at is None:
            return None
        return resolve_now(now) - self.published_at

    def formatted_price(self) -> str:
        """Compact price for cards and map markers."""
        return self.price.format_compact()

    def slug(self) -> str:
        """URL slug derived from the title."""
        text = _SLUG_STRIP.sub("", self.title.lower())
        text = _SLUG_SPACES.sub("-", text)
        text = _SLUG_DASHES.sub("-", text)
        return text.strip("-")

    def description_preview(self, max_length: int = DESCRIPTION_PREVIEW_LENGTH) -> str:
        """Description cut at a word boundary with an ellipsis."""
        if len(self.description) <= max_length:
            return self.description
        cutoff = self.description.rfind(" ", 0, max_length + 1)
        end = cutoff if cutoff > 0 else max_length
        return f"{self.description[:end]}..."

    def primary_photo(self) -> str | None:
        """Cover photo URL, if any."""
        return self.media.primary_photo

    def has_photos(self) -> bool:
        """True if at least one photo is attached."""
        return self.media.has_photos()

    def whatsapp_url(self) -> str | None:
        """Inquiry link to the listing contact, or None without a contact."""
        if self.contact is None:
            return None
        return self.contact.inquiry_url(self.title)

    # --- Internal Helpers ---

    def _require(self, action: str, *allowed: ListingStatus) -> None:
        if self.status not in allowed:
            raise InvalidTransitionError("listing", str(self.id), self.status.value, action)

    def __str__(self) -> str:
        return f'Listing(id: {self.id}, status: {self.status.value}, title: "{self.title}")'
