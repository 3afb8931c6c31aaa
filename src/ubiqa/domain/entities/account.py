"""Account entity: a registered marketplace user."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from ubiqa.domain.errors import AccountValidationError
from ubiqa.domain.pricing import DEFAULT_NEW_ACCOUNT_WINDOW
from ubiqa.domain.utils import ensure_utc, resolve_now
from ubiqa.domain.value_objects.contact_info import ContactInfo

from .ids import AccountId

# pylint: disable=magic-value-comparison

DISPLAY_NAME_EMAIL_PREFIX = 12
MIN_NAME_LENGTH = 2


@dataclass(frozen=True, slots=True)
class Account:
    """A marketplace user.

    An account is *verified* when it is active and has a contact channel.
    Only verified accounts may publish listings or pay for them.
    """

    id: AccountId
    email: str
    created_at: datetime
    updated_at: datetime
    is_active: bool = True
    name: str | None = None
    contact: ContactInfo | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "email", self.email.strip().lower())
        if self.name is not None:
            object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "created_at", ensure_utc(self.created_at))
        object.__setattr__(self, "updated_at", ensure_utc(self.updated_at))

        violations: list[str] = []
        if not self.email:
            violations.append("Email cannot be empty")
        elif "@" not in self.email:
            violations.append("Email must be a valid address")
        if self.updated_at < self.created_at:
            violations.append("Update timestamp cannot be before creation timestamp")
        if violations:
            raise AccountValidationError("Invalid account data", violations)

    # --- Construction Paths ---

    @classmethod
    def register(
        cls,
        account_id: AccountId,
        email: str,
        display_name: str | None = None,
        now: datetime | None = None,
    ) -> Account:
        """Create an active account right after sign-up.

        Raises:
            AccountValidationError: If the email is not usable.
        """
        now = resolve_now(now)
        return cls(
            id=account_id,
            email=email,
            name=display_name,
            created_at=now,
            updated_at=now,
        )

    # --- State Transitions ---

    def with_contact(self, contact: ContactInfo, now: datetime | None = None) -> Account:
        """Attach or replace the contact channel."""
        return replace(self, contact=contact, updated_at=resolve_now(now))

    def update_profile(
        self,
        name: str | None = None,
        contact: ContactInfo | None = None,
        now: datetime | None = None,
    ) -> Account:
        """Apply profile edits.

        Names shorter than two characters are ignored rather than rejected.
        """
        updated = self
        if name is not None and len(name.strip()) >= MIN_NAME_LENGTH:
            updated = replace(updated, name=name.strip())
        if contact is not None:
            updated = replace(updated, contact=contact)
        if updated is self:
            return self
        return replace(updated, updated_at=resolve_now(now))

    def deactivate(self, now: datetime | None = None) -> Account:
        """Disable the account; it keeps its data but loses capabilities."""
        return replace(self, is_active=False, updated_at=resolve_now(now))

    def reactivate(self, now: datetime | None = None) -> Account:
        """Re-enable a deactivated account."""
        return replace(self, is_active=True, updated_at=resolve_now(now))

    # --- Queries ---

    @property
    def is_verified(self) -> bool:
        """True when the account is active and has a contact channel."""
        return self.contact is not None and self.is_active

    @property
    def has_complete_profile(self) -> bool:
        """True when both a name and a contact channel are present."""
        return bool(self.name) and self.contact is not None

    def display_name(self) -> str:
        """Name to show; falls back to the e-mail prefix."""
        if self.name:
            return self.name
        prefix = self.email.split("@", 1)[0]
        if len(prefix) > DISPLAY_NAME_EMAIL_PREFIX:
            return f"{prefix[:DISPLAY_NAME_EMAIL_PREFIX]}..."
        return prefix

    def whatsapp_url(self, message: str | None = None) -> str | None:
        """Click-to-chat link for verified accounts, else None."""
        if not self.is_verified or self.contact is None:
            return None
        return self.contact.whatsapp_url(message)

    def formatted_phone(self) -> str | None:
        """Contact phone formatted for display, if any."""
        return self.contact.format_phone() if self.contact else None

    def age(self, now: datetime | None = None) -> timedelta:
        """Time since the account was created."""
        return resolve_now(now) - self.created_at

    def is_new(
        self,
        now: datetime | None = None,
        window: timedelta = DEFAULT_NEW_ACCOUNT_WINDOW,
    ) -> bool:
        """True if the account is younger than `window` (whole days)."""
        return self.age(now).days < window.days

    def __str__(self) -> str:
        return f"Account(id: {self.id}, email: {self.email}, verified: {self.is_verified})"
