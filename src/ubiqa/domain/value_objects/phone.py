"""International phone number value object (Peru and United States)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import assert_never

from ubiqa.domain.errors import PhoneNumberValidationError

# pylint: disable=magic-value-comparison

PERU_PATTERN = re.compile(r"^\+51[0-9]{9}$")
US_PATTERN = re.compile(r"^\+1[0-9]{10}$")
TYPED_INPUT_NOISE = re.compile(r"[^\d+]")


class CountryCode(Enum):
    """Countries whose phone numbers are accepted."""

    PERU = "peru"
    UNITED_STATES = "unitedStates"

    @property
    def dialing_code(self) -> str:
        """International dialing prefix including the plus sign."""
        match self:
            case CountryCode.PERU:
                return "+51"
            case CountryCode.UNITED_STATES:
                return "+1"
            case _:
                assert_never(self)

    @property
    def display_name(self) -> str:
        """Spanish country name."""
        match self:
            case CountryCode.PERU:
                return "Perú"
            case CountryCode.UNITED_STATES:
                return "Estados Unidos"
            case _:
                assert_never(self)

    @property
    def digit_count(self) -> int:
        """Number of national digits after the dialing code."""
        match self:
            case CountryCode.PERU:
                return 9
            case CountryCode.UNITED_STATES:
                return 10
            case _:
                assert_never(self)

    @property
    def example(self) -> str:
        """Example number in E.164 form."""
        match self:
            case CountryCode.PERU:
                return "+51987654321"
            case CountryCode.UNITED_STATES:
                return "+15551234567"
            case _:
                assert_never(self)


def phone_violations(raw: str) -> list[str]:
    """Return the rules broken by `raw`; the first failing check wins."""
    cleaned = raw.strip()
    if not cleaned:
        return ["Phone number cannot be empty"]
    if not cleaned.startswith("+"):
        return ["Phone number must include country code starting with +"]
    if not (PERU_PATTERN.match(cleaned) or US_PATTERN.match(cleaned)):
        return [
            "Phone number format not supported. Must be US (+1) or Peru (+51) format"
        ]
    return []


@dataclass(frozen=True, slots=True)
class PhoneNumber:
    """A validated phone number stored in E.164 form (``+51987654321``)."""

    e164: str
    country: CountryCode = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if violations := phone_violations(self.e164):
            raise PhoneNumberValidationError(
                "Invalid international phone number format", violations
            )
        cleaned = self.e164.strip()
        object.__setattr__(self, "e164", cleaned)
        country = (
            CountryCode.UNITED_STATES if cleaned.startswith("+1") else CountryCode.PERU
        )
        object.__setattr__(self, "country", country)

    @property
    def local_number(self) -> str:
        """National digits without the dialing code."""
        return self.e164.removeprefix(self.country.dialing_code)

    @property
    def digits(self) -> str:
        """All digits, dialing code included, without the plus sign."""
        return self.e164[1:]

    def format(self) -> str:
        """Display form: ``+51 987 654 321`` or ``+1 (555) 123-4567``."""
        local = self.local_number
        match self.country:
            case CountryCode.PERU:
                return f"+51 {local[:3]} {local[3:6]} {local[6:]}"
            case CountryCode.UNITED_STATES:
                return f"+1 ({local[:3]}) {local[3:6]}-{local[6:]}"
            case _:
                assert_never(self.country)

    def __str__(self) -> str:
        return self.e164


# ============================================================================
#                           Phone domain helpers
# ============================================================================

SUPPORTED_COUNTRIES = (CountryCode.PERU, CountryCode.UNITED_STATES)


def parse_phone(raw: str) -> PhoneNumber | None:
    """Build a phone number from user input, or None if it is not valid."""
    if phone_violations(raw):
        return None
    return PhoneNumber(raw)


def is_valid_phone(raw: str) -> bool:
    """True if `raw` is a supported international phone number."""
    return not phone_violations(raw)


def format_as_typed(partial: str, expected: CountryCode | None = None) -> str:
    """Progressively format a US number while the user types it.

    Other inputs are returned with everything except digits and ``+`` removed.
    """
    cleaned = TYPED_INPUT_NOISE.sub("", partial)
    if expected is CountryCode.UNITED_STATES and cleaned.startswith("+1"):
        digits = cleaned[2:]
        if len(digits) <= 3:
            return f"+1 ({digits}"
        if len(digits) <= 6:
            return f"+1 ({digits[:3]}) {digits[3:]}"
        if len(digits) <= 10:
            return f"+1 ({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return cleaned
