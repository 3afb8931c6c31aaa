"""Regex-based redactor for secrets and personal contact data.

Masks credentials found in database URLs, ODBC/DSN-style strings, bearer
tokens and "key: value" fragments, and masks the phone numbers and e-mail
addresses that listings and accounts carry before they reach logs or the
console. Strict mode also hides usernames and every digit of a phone.
"""

import re

from ubiqa.interfaces import redactor
from ubiqa.interfaces.redactor import RedactorMode

# pylint: disable=too-few-public-methods

PLACEHOLDER = "***"
VISIBLE_PHONE_DIGITS = 3
SECRET_KEYWORDS = [
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "api_key",
    "apikey",
    "access_token",
    "refresh_token",
    "id_token",
    "authorization",
    "sig",
    "signature",
]
STRICT_MODE_SECRET_KEYWORDS = SECRET_KEYWORDS + ["user", "username", "uid"]


def _keyword_pattern(keywords: list[str]) -> str:
    return "|".join(kw.replace("_", "[-_]?") for kw in keywords)


QUERY_STRING_PATTERNS = {
    RedactorMode.LENIENT: re.compile(
        rf"([?&](?:{_keyword_pattern(SECRET_KEYWORDS)})=)[^&#\s;]*", re.IGNORECASE
    ),
    RedactorMode.STRICT: re.compile(
        rf"([?&](?:{_keyword_pattern(STRICT_MODE_SECRET_KEYWORDS)})=)[^&#\s;]*",
        re.IGNORECASE,
    ),
}
KEY_VALUE_PATTERNS = {
    RedactorMode.LENIENT: re.compile(
        rf"(\b(?:{_keyword_pattern(SECRET_KEYWORDS)})\s*:\s*)\S+", re.IGNORECASE
    ),
    RedactorMode.STRICT: re.compile(
        rf"(\b(?:{_keyword_pattern(STRICT_MODE_SECRET_KEYWORDS)})\s*:\s*)\S+",
        re.IGNORECASE,
    ),
}
BEARER_PATTERN = re.compile(r"Bearer\s[0-9a-zA-Z\.\-_]*", re.IGNORECASE)
PWD_PATTERN = re.compile(r"\bpwd=[^;\s]+", re.IGNORECASE)
UID_PATTERN = re.compile(r"\buid=[^;]+", re.IGNORECASE)
URL_PASSWORD_PATTERN = re.compile(r"(?<=://)([^:@/]+):([^@/]+)@")
URL_USER_PATTERN = re.compile(r"(?<=://)([^:@/]+)(?=:(?:\*\*\*|[^@/]*)@)")

EMAIL_PATTERN = re.compile(r"\b([A-Za-z0-9._%+-]+)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")
# +51 987 654 321, 987654321, +1 (555) 123-4567 ...
PHONE_PATTERN = re.compile(
    r"(?<![\w+])(?:\+\d{1,3}[\s-]?)?(?:\(\d{3}\)|\d{3})[\s-]?\d{3}[\s-]?\d{3,4}(?!\w)"
)
NON_DIGITS = re.compile(r"\D")


class Redactor(redactor.Redactor):
    """Redactor implementation using regex-based sanitization."""

    def __init__(self, mode: RedactorMode = RedactorMode.LENIENT) -> None:
        self._mode = mode

    def sanitize_db_url(self, raw_url: str) -> str:
        sanitized = str(raw_url)

        # user:pass@ -> user:***@
        sanitized = URL_PASSWORD_PATTERN.sub(rf"\1:{PLACEHOLDER}@", sanitized)
        if self._mode is RedactorMode.STRICT:
            sanitized = URL_USER_PATTERN.sub(PLACEHOLDER, sanitized)

        sanitized = BEARER_PATTERN.sub(PLACEHOLDER, sanitized)
        sanitized = QUERY_STRING_PATTERNS[self._mode].sub(
            rf"\1{PLACEHOLDER}", sanitized
        )

        # ODBC-ish pairs: Pwd=... (Uid only in strict mode)
        sanitized = PWD_PATTERN.sub(f"Pwd={PLACEHOLDER}", sanitized)
        if self._mode is RedactorMode.STRICT:
            sanitized = UID_PATTERN.sub(f"Uid={PLACEHOLDER}", sanitized)

        return KEY_VALUE_PATTERNS[self._mode].sub(rf"\1{PLACEHOLDER}", sanitized)

    def mask_contact_data(self, text: str) -> str:
        # e-mails first so their digits are not read as phone numbers
        masked = EMAIL_PATTERN.sub(self._mask_email, str(text))
        return PHONE_PATTERN.sub(self._mask_phone, masked)

    def _mask_email(self, match: re.Match[str]) -> str:
        if self._mode is RedactorMode.STRICT:
            return PLACEHOLDER
        return f"{PLACEHOLDER}@{match.group(2)}"

    def _mask_phone(self, match: re.Match[str]) -> str:
        if self._mode is RedactorMode.STRICT:
            return PLACEHOLDER
        digits = NON_DIGITS.sub("", match.group(0))
        return f"{PLACEHOLDER}{digits[-VISIBLE_PHONE_DIGITS:]}"
