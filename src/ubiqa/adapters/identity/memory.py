"""In-memory identity provider.

Keeps credentials, pending phone codes and the signed-in account in process
memory. It stands in for the hosted authentication service in tests, demos
and the CLI; every expected failure is returned as a `ServiceResult`.

Phone verification follows the hosted flow: a code is "sent" (recorded in
`sent_codes`), and only a matching code attaches the phone as the account's
contact channel, which is what makes the account verified.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, replace

from ubiqa.domain.entities.account import Account
from ubiqa.domain.entities.ids import AccountId
from ubiqa.domain.errors import ValidationError
from ubiqa.domain.services import account_service
from ubiqa.domain.value_objects.contact_info import ContactHours
from ubiqa.domain.value_objects.phone import PhoneNumber, phone_violations
from ubiqa.interfaces.clock import Clock
from ubiqa.interfaces.id_generator import IdGenerator
from ubiqa.interfaces.identity import IdentityProvider
from ubiqa.interfaces.service_result import ServiceErrorType, ServiceResult

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2
HASH_ITERATIONS = 100_000
CODE_DIGITS = 6


def random_code() -> str:
    """Six random digits."""
    return f"{secrets.randbelow(10**CODE_DIGITS):0{CODE_DIGITS}d}"


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, HASH_ITERATIONS)


@dataclass(frozen=True, slots=True)
class _Credentials:
    account: Account
    salt: bytes
    password_hash: bytes

    def matches(self, password: str) -> bool:
        return hmac.compare_digest(
            self.password_hash, _hash_password(password, self.salt)
        )


class InMemoryIdentityProvider(IdentityProvider):
    """Process-local `IdentityProvider`.

    Args:
        id_generator: Source of new account ids.
        clock: Source of timestamps for account changes.
        code_factory: Produces phone verification codes; tests pass a
            constant to know the code in advance.
    """

    def __init__(
        self,
        id_generator: IdGenerator,
        clock: Clock,
        code_factory: Callable[[], str] = random_code,
    ) -> None:
        self._ids = id_generator
        self._clock = clock
        self._code_factory = code_factory
        self._credentials: dict[str, _Credentials] = {}
        self._current: str | None = None
        self.sent_codes: dict[str, str] = {}
        self.password_resets: list[str] = []

    # --- Registration and sessions ---

    def register(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
        phone: str | None = None,
    ) -> ServiceResult[Account]:
        if problem := self._registration_problem(password, display_name, phone):
            return ServiceResult.failure(problem, ServiceErrorType.VALIDATION)
        key = email.strip().lower()
        if key in self._credentials:
            return ServiceResult.failure(
                "This email is already in use", ServiceErrorType.AUTHENTICATION
            )
        try:
            account = account_service.register_account(
                AccountId(self._ids.new_id()), key, display_name, self._clock.now()
            )
        except ValidationError as e:
            return ServiceResult.failure(str(e), ServiceErrorType.VALIDATION)

        salt = secrets.token_bytes(16)
        self._credentials[key] = _Credentials(
            account, salt, _hash_password(password, salt)
        )
        self._current = key
        logger.info("Registered account %s", account.id)
        if phone:
            self.send_phone_code(phone)
        return ServiceResult.success(account)

    def sign_in(self, email: str, password: str) -> ServiceResult[Account]:
        key = email.strip().lower()
        if (creds := self._credentials.get(key)) is None:
            return ServiceResult.failure(
                "No account exists for this email", ServiceErrorType.AUTHENTICATION
            )
        if not creds.matches(password):
            return ServiceResult.failure(
                "Incorrect password", ServiceErrorType.AUTHENTICATION
            )
        if not creds.account.is_active:
            return ServiceResult.failure(
                "This account has been disabled", ServiceErrorType.AUTHENTICATION
            )
        self._current = key
        return ServiceResult.success(creds.account)

    def sign_out(self) -> ServiceResult[None]:
        self._current = None
        return ServiceResult.success()

    def current_account(self) -> ServiceResult[Account | None]:
        if self._current is None:
            return ServiceResult.success(None)
        return ServiceResult.success(self._credentials[self._current].account)

    def is_email_registered(self, email: str) -> ServiceResult[bool]:
        return ServiceResult.success(email.strip().lower() in self._credentials)

    def is_phone_registered(self, phone: str) -> ServiceResult[bool]:
        wanted = phone.strip()
        return ServiceResult.success(
            any(
                c.account.contact is not None and c.account.contact.phone.e164 == wanted
                for c in self._credentials.values()
            )
        )

    # --- Phone verification ---

    def send_phone_code(self, phone: str) -> ServiceResult[None]:
        if violations := phone_violations(phone):
            return ServiceResult.failure(violations[0], ServiceErrorType.VALIDATION)
        e164 = PhoneNumber(phone).e164
        self.sent_codes[e164] = self._code_factory()
        logger.debug("Verification code issued for %s", e164)
        return ServiceResult.success()

    def verify_phone_code(self, phone: str, code: str) -> ServiceResult[Account]:
        if self._current is None:
            return ServiceResult.failure(
                "No user signed in", ServiceErrorType.AUTHENTICATION
            )
        if violations := phone_violations(phone):
            return ServiceResult.failure(violations[0], ServiceErrorType.VALIDATION)
        e164 = PhoneNumber(phone).e164
        expected = self.sent_codes.get(e164)
        if expected is None or not hmac.compare_digest(expected, code.strip()):
            return ServiceResult.failure(
                "Invalid verification code", ServiceErrorType.VALIDATION
            )
        del self.sent_codes[e164]

        creds = self._credentials[self._current]
        slot = (
            creds.account.contact.preferred_slot
            if creds.account.contact is not None
            else ContactHours.ANYTIME
        )
        account = account_service.set_contact(
            creds.account, e164, slot, now=self._clock.now()
        )
        self._store(account)
        return ServiceResult.success(account)

    # --- Profile ---

    def update_profile(
        self,
        account: Account,
        name: str | None = None,
        phone: str | None = None,
        preferred_slot: ContactHours | None = None,
    ) -> ServiceResult[Account]:
        if (creds := self._credentials.get(account.email)) is None:
            return ServiceResult.failure(
                "Account not found", ServiceErrorType.NOT_FOUND
            )
        current = creds.account
        if phone is not None and not self._is_current_phone(current, phone):
            return ServiceResult.failure(
                "Phone number must be verified before use", ServiceErrorType.BUSINESS
            )
        if phone is None and preferred_slot is not None and current.contact:
            phone = current.contact.phone.e164
        try:
            updated = account_service.update_profile(
                current,
                name=name,
                phone=phone,
                preferred_slot=preferred_slot,
                now=self._clock.now(),
            )
        except ValidationError as e:
            return ServiceResult.failure(str(e), ServiceErrorType.VALIDATION)
        self._store(updated)
        return ServiceResult.success(updated)

    def delete_account(self, account: Account) -> ServiceResult[None]:
        if self._credentials.pop(account.email, None) is None:
            return ServiceResult.failure(
                "Account not found", ServiceErrorType.NOT_FOUND
            )
        if self._current == account.email:
            self._current = None
        logger.info("Deleted account %s", account.id)
        return ServiceResult.success()

    def request_password_reset(self, email: str) -> ServiceResult[None]:
        key = email.strip().lower()
        if key not in self._credentials:
            return ServiceResult.failure(
                "No account exists for this email", ServiceErrorType.NOT_FOUND
            )
        self.password_resets.append(key)
        return ServiceResult.success()

    # --- Internals ---

    def _store(self, account: Account) -> None:
        creds = self._credentials[account.email]
        self._credentials[account.email] = replace(creds, account=account)

    @staticmethod
    def _is_current_phone(account: Account, phone: str) -> bool:
        return account.contact is not None and account.contact.phone.e164 == phone.strip()

    @staticmethod
    def _registration_problem(
        password: str, display_name: str | None, phone: str | None
    ) -> str | None:
        if not password.strip():
            return "Password cannot be empty"
        if len(password) < MIN_PASSWORD_LENGTH:
            return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        if display_name is not None and len(display_name.strip()) < MIN_NAME_LENGTH:
            return f"Name must be at least {MIN_NAME_LENGTH} characters long"
        if phone:
            if violations := phone_violations(phone):
                return violations[0]
        return None
