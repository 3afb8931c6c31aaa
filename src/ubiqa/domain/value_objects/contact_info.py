"""Contact channel value object: WhatsApp phone, preferred hours and a note."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import assert_never
from urllib.parse import quote

from ubiqa.domain.errors import ContactInfoValidationError
from ubiqa.domain.utils import resolve_now, truncate

from .phone import PhoneNumber, phone_violations

# pylint: disable=magic-value-comparison

MAX_NOTE_LENGTH = 200
INQUIRY_TITLE_LIMIT = 50
PERU_TIME = timezone(timedelta(hours=-5), "PET")
UNPROFESSIONAL_PHRASES = ("no llamar", "no molestar", "urgente")
COMMON_NOTES = (
    "Llamar antes de enviar WhatsApp",
    "Preferible por las mañanas",
    "Solo mensajes de WhatsApp",
    "Respondo después del trabajo",
    "Disponible fines de semana",
)


def note_violations(note: str | None) -> list[str]:
    """Rules broken by an optional contact note."""
    if note is None:
        return []
    cleaned = note.strip()
    if not cleaned:
        return ["Contact instructions cannot be empty if provided"]
    if len(cleaned) > MAX_NOTE_LENGTH:
        return ["Contact instructions cannot exceed 200 characters"]
    return []


class ContactHours(Enum):
    """Time slot in which the owner prefers to be contacted."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANYTIME = "anytime"

    @property
    def label(self) -> str:
        """Spanish label with the hour window."""
        match self:
            case ContactHours.MORNING:
                return "Mañana (8AM - 12PM)"
            case ContactHours.AFTERNOON:
                return "Tarde (12PM - 6PM)"
            case ContactHours.EVENING:
                return "Noche (6PM - 10PM)"
            case ContactHours.ANYTIME:
                return "Cualquier hora"
            case _:
                assert_never(self)

    @property
    def time_range(self) -> str:
        """Spanish phrase used inside sentences ("en la mañana")."""
        match self:
            case ContactHours.MORNING:
                return "en la mañana"
            case ContactHours.AFTERNOON:
                return "en la tarde"
            case ContactHours.EVENING:
                return "en la noche"
            case ContactHours.ANYTIME:
                return "a cualquier hora"
            case _:
                assert_never(self)

    @property
    def hour_window(self) -> tuple[int, int]:
        """Local hours [start, end) considered a good time to reach out."""
        match self:
            case ContactHours.MORNING:
                return (8, 12)
            case ContactHours.AFTERNOON:
                return (12, 18)
            case ContactHours.EVENING:
                return (18, 22)
            case ContactHours.ANYTIME:
                return (7, 23)
            case _:
                assert_never(self)


@dataclass(frozen=True, slots=True)
class ContactInfo:
    """How buyers reach an owner over WhatsApp."""

    phone: PhoneNumber
    preferred_slot: ContactHours = ContactHours.ANYTIME
    note: str | None = None

    def __post_init__(self) -> None:
        violations: list[str] = []
        if not isinstance(self.phone, PhoneNumber):
            violations.append("WhatsApp number must be a valid international number")
        if self.note is not None:
            object.__setattr__(self, "note", self.note.strip())
        violations.extend(note_violations(self.note))
        if violations:
            raise ContactInfoValidationError("Invalid contact information", violations)

    @classmethod
    def create(
        cls,
        phone: str,
        preferred_slot: ContactHours = ContactHours.ANYTIME,
        note: str | None = None,
    ) -> ContactInfo:
        """Build contact info from a raw phone string.

        Phone and note problems are reported together.

        Raises:
            ContactInfoValidationError: If the phone or note is invalid.
        """
        violations = phone_violations(phone)
        violations.extend(note_violations(note))
        if violations:
            raise ContactInfoValidationError("Invalid contact information", violations)
        return cls(PhoneNumber(phone), preferred_slot, note)

    def with_preferences(
        self, preferred_slot: ContactHours | None = None, note: str | None = None
    ) -> ContactInfo:
        """Return a copy with new contact hours and/or note."""
        return replace(
            self,
            preferred_slot=preferred_slot or self.preferred_slot,
            note=note if note is not None else self.note,
        )

    @property
    def phone_e164(self) -> str:
        """Phone in E.164 form."""
        return self.phone.e164

    def format_phone(self) -> str:
        """Phone formatted for display."""
        return self.phone.format()

    def whatsapp_url(self, message: str | None = None) -> str:
        """Click-to-chat link, optionally prefilled with `message`."""
        base = f"https://wa.me/{self.phone.digits}"
        if message:
            return f"{base}?text={quote(message, safe='')}"
        return base

    def inquiry_url(self, property_title: str, property_address: str | None = None) -> str:
        """Click-to-chat link prefilled with a property inquiry."""
        message = (
            "Hola! Me interesa tu propiedad: "
            f"{truncate(property_title, INQUIRY_TITLE_LIMIT)}"
        )
        if property_address is not None:
            message += f" en {property_address}"
        if self.preferred_slot is not ContactHours.ANYTIME:
            message += f". Prefiero contacto {self.preferred_slot.time_range}."
        if self.note:
            message += f" {self.note}"
        return self.whatsapp_url(message)

    def summary(self) -> str:
        """One-line summary, e.g. ``"WhatsApp: +51 987 654 321 • Tarde (12PM - 6PM)"``."""
        text = f"WhatsApp: {self.format_phone()}"
        if self.preferred_slot is not ContactHours.ANYTIME:
            text += f" • {self.preferred_slot.label}"
        return text

    def same_phone_as(self, other: ContactInfo) -> bool:
        """True if both contacts use the same number (digit comparison)."""
        return self.phone.digits == other.phone.digits

    def __str__(self) -> str:
        return f"ContactInfo({self.format_phone()}, {self.preferred_slot.value})"


# ============================================================================
#                           Contact domain helpers
# ============================================================================


def listing_contact_advisories(contact: ContactInfo) -> list[str]:
    """Soft warnings about contact details shown on a public listing."""
    advisories: list[str] = []
    if contact.note is not None:
        lowered = contact.note.lower()
        if any(phrase in lowered for phrase in UNPROFESSIONAL_PHRASES):
            advisories.append(
                "Contact instructions should be professional and welcoming"
            )
    return advisories


def estimated_response_time(contact: ContactInfo) -> str:
    """Spanish hint about when the owner usually replies."""
    match contact.preferred_slot:
        case ContactHours.MORNING:
            return "Responde generalmente en la mañana"
        case ContactHours.AFTERNOON:
            return "Responde generalmente en la tarde"
        case ContactHours.EVENING:
            return "Responde generalmente en la noche"
        case ContactHours.ANYTIME:
            return "Responde durante el día"
        case _:
            assert_never(contact.preferred_slot)


def is_good_time_to_contact(contact: ContactInfo, now: datetime | None = None) -> bool:
    """True if `now`, in Peru local time, falls in the preferred window."""
    hour = resolve_now(now).astimezone(PERU_TIME).hour
    start, end = contact.preferred_slot.hour_window
    return start <= hour < end
