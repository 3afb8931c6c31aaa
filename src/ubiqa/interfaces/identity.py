"""Interface for the identity (authentication) provider.

The provider owns credentials and phone verification. It returns domain
`Account` entities built from its user data; every operation reports
expected failures as a `ServiceResult` rather than raising.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ubiqa.domain.entities.account import Account
    from ubiqa.domain.value_objects.contact_info import ContactHours

    from .service_result import ServiceResult


class IdentityProvider(abc.ABC):
    """Contract for registering, authenticating and verifying accounts."""

    @abc.abstractmethod
    def register(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
        phone: str | None = None,
    ) -> ServiceResult[Account]:
        """Create credentials and the matching account.

        Args:
            email: Login e-mail.
            password: Plain password; never stored by the core.
            display_name: Optional full name.
            phone: Optional phone in E.164 form. It only becomes the account
                contact after `verify_phone_code` succeeds.
        """

    @abc.abstractmethod
    def sign_in(self, email: str, password: str) -> ServiceResult[Account]:
        """Authenticate with e-mail and password."""

    @abc.abstractmethod
    def sign_out(self) -> ServiceResult[None]:
        """End the current session."""

    @abc.abstractmethod
    def current_account(self) -> ServiceResult[Account | None]:
        """Return the signed-in account, or a success with None."""

    @abc.abstractmethod
    def is_email_registered(self, email: str) -> ServiceResult[bool]:
        """Check whether `email` already has credentials."""

    @abc.abstractmethod
    def is_phone_registered(self, phone: str) -> ServiceResult[bool]:
        """Check whether `phone` is already attached to an account."""

    @abc.abstractmethod
    def send_phone_code(self, phone: str) -> ServiceResult[None]:
        """Send a one-time verification code to `phone`."""

    @abc.abstractmethod
    def verify_phone_code(self, phone: str, code: str) -> ServiceResult[Account]:
        """Confirm `phone` with the code sent to it and attach it as contact."""

    @abc.abstractmethod
    def update_profile(
        self,
        account: Account,
        name: str | None = None,
        phone: str | None = None,
        preferred_slot: ContactHours | None = None,
    ) -> ServiceResult[Account]:
        """Persist profile edits and return the updated account."""

    @abc.abstractmethod
    def delete_account(self, account: Account) -> ServiceResult[None]:
        """Delete credentials and the account."""

    @abc.abstractmethod
    def request_password_reset(self, email: str) -> ServiceResult[None]:
        """Send a password reset message to `email`."""
