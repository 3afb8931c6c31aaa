"""Account factories and profile helpers."""

from __future__ import annotations

from datetime import datetime

from ubiqa.domain.entities.account import Account
from ubiqa.domain.entities.ids import AccountId
from ubiqa.domain.value_objects.contact_info import ContactHours, ContactInfo


def register_account(
    account_id: AccountId,
    email: str,
    display_name: str | None = None,
    now: datetime | None = None,
) -> Account:
    """Create an account from identity-provider data.

    Raises:
        AccountValidationError: If the email is not usable.
    """
    return Account.register(account_id, email, display_name, now)


def set_contact(
    account: Account,
    phone: str,
    preferred_slot: ContactHours = ContactHours.ANYTIME,
    note: str | None = None,
    now: datetime | None = None,
) -> Account:
    """Attach a contact channel built from a raw phone number.

    Raises:
        ContactInfoValidationError: If the phone or note is invalid.
    """
    contact = ContactInfo.create(phone, preferred_slot, note)
    return account.with_contact(contact, now)


def update_profile(
    account: Account,
    name: str | None = None,
    phone: str | None = None,
    preferred_slot: ContactHours | None = None,
    note: str | None = None,
    now: datetime | None = None,
) -> Account:
    """Apply a profile form.

    A name shorter than two characters is ignored. When `phone` is given the
    contact channel is rebuilt, defaulting to any contact hour.

    Raises:
        ContactInfoValidationError: If the phone or note is invalid.
    """
    contact = None
    if phone is not None:
        contact = ContactInfo.create(
            phone, preferred_slot or ContactHours.ANYTIME, note
        )
    return account.update_profile(name=name, contact=contact, now=now)
