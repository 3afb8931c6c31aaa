"""Interfaces for redacting sensitive values.

This module defines the Redactor interface and the RedactorMode enumeration
used by adapters to sanitize secrets (passwords, tokens, API keys) from
database URLs and to mask personal contact data (phone numbers, e-mail
addresses) before it reaches logs or console output.
"""

import abc
from enum import Enum


class RedactorMode(Enum):
    """Enumeration for redactor modes.

    Modes:
    - LENIENT: redact passwords/tokens but keep usernames visible; keep the
      last digits of phone numbers and the domain of e-mail addresses.
    - STRICT: redact passwords/tokens and usernames; mask phone numbers and
      e-mail addresses completely.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class Redactor(abc.ABC):
    """Interface for sanitizing sensitive information from strings."""

    _mode: RedactorMode

    @abc.abstractmethod
    def sanitize_db_url(self, raw_url: str) -> str:
        """Return a display-safe DB URL.

        Args:
            raw_url: Raw database connection URL.

        Returns:
            A sanitized database URL with sensitive information redacted.
        """

    @abc.abstractmethod
    def mask_contact_data(self, text: str) -> str:
        """Return `text` with phone numbers and e-mail addresses masked.

        Args:
            text: Free-form text such as a log message.

        Returns:
            The text with personal contact data masked according to the mode.
        """

    @property
    def mode(self) -> RedactorMode:
        """Return the redaction mode."""
        return self._mode
