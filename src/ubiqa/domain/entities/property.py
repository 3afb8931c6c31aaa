"""Property entity: the physical real estate behind a listing."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import assert_never

from ubiqa.domain.errors import PropertyValidationError
from ubiqa.domain.utils import ensure_utc, resolve_now
from ubiqa.domain.value_objects.location import Location
from ubiqa.domain.value_objects.media import Media
from ubiqa.domain.value_objects.price import Currency
from ubiqa.domain.value_objects.property_specs import PropertySpecs

from .ids import PropertyId

# pylint: disable=too-many-arguments


class PropertyType(Enum):
    """Kind of real estate."""

    CASA = "casa"
    DEPARTAMENTO = "departamento"
    TERRENO = "terreno"
    OFICINA = "oficina"
    LOCAL = "local"

    @property
    def label(self) -> str:
        """Spanish label."""
        match self:
            case PropertyType.CASA:
                return "Casa"
            case PropertyType.DEPARTAMENTO:
                return "Departamento"
            case PropertyType.TERRENO:
                return "Terreno"
            case PropertyType.OFICINA:
                return "Oficina"
            case PropertyType.LOCAL:
                return "Local Comercial"
            case _:
                assert_never(self)

    @property
    def is_residential(self) -> bool:
        """Houses and apartments; they must declare room counts."""
        return self in (PropertyType.CASA, PropertyType.DEPARTAMENTO)


class OperationType(Enum):
    """Whether the property is offered for sale or for rent."""

    VENTA = "venta"
    ALQUILER = "alquiler"

    @property
    def label(self) -> str:
        """Spanish label."""
        match self:
            case OperationType.VENTA:
                return "Venta"
            case OperationType.ALQUILER:
                return "Alquiler"
            case _:
                assert_never(self)

    @property
    def typical_currency(self) -> Currency:
        """Sales are usually quoted in dollars, rentals in soles."""
        match self:
            case OperationType.VENTA:
                return Currency.USD
            case OperationType.ALQUILER:
                return Currency.PEN
            case _:
                assert_never(self)


@dataclass(frozen=True, slots=True)
class Property:
    """A property with its specification, location and photos.

    Residential room counts are a business rule checked by
    `business_violations()` at listing time, not at construction, so drafts
    can be saved before every detail is known.
    """

    id: PropertyId
    property_type: PropertyType
    operation_type: OperationType
    specs: PropertySpecs
    location: Location
    created_at: datetime
    updated_at: datetime
    media: Media = field(default_factory=Media.empty)
    is_available: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_at", ensure_utc(self.created_at))
        object.__setattr__(self, "updated_at", ensure_utc(self.updated_at))
        violations: list[str] = []
        if not isinstance(self.property_type, PropertyType):
            violations.append("Property type is not supported")
        if not isinstance(self.operation_type, OperationType):
            violations.append("Operation type must be venta or alquiler")
        if self.updated_at < self.created_at:
            violations.append("Update timestamp cannot be before creation timestamp")
        if violations:
            raise PropertyValidationError("Invalid property data", violations)

    # --- Construction Paths ---

    @classmethod
    def create(
        cls,
        property_id: PropertyId,
        property_type: PropertyType,
        operation_type: OperationType,
        specs: PropertySpecs,
        location: Location,
        media: Media | None = None,
        now: datetime | None = None,
    ) -> Property:
        """Create an available property."""
        now = resolve_now(now)
        return cls(
            id=property_id,
            property_type=property_type,
            operation_type=operation_type,
            specs=specs,
            location=location,
            media=media or Media.empty(),
            created_at=now,
            updated_at=now,
        )

    # --- State Transitions ---

    def with_content(
        self,
        specs: PropertySpecs | None = None,
        location: Location | None = None,
        media: Media | None = None,
        now: datetime | None = None,
    ) -> Property:
        """Replace any of specs, location or media."""
        return replace(
            self,
            specs=specs or self.specs,
            location=location or self.location,
            media=media if media is not None else self.media,
            updated_at=resolve_now(now),
        )

    def mark_unavailable(self, now: datetime | None = None) -> Property:
        """Withdraw the property from new listings."""
        return replace(self, is_available=False, updated_at=resolve_now(now))

    def mark_available(self, now: datetime | None = None) -> Property:
        """Offer the property for new listings again."""
        return replace(self, is_available=True, updated_at=resolve_now(now))

    # --- Queries ---

    def has_complete_room_info(self) -> bool:
        """True unless a residential property is missing a room count."""
        if not self.property_type.is_residential:
            return True
        return self.specs.has_room_structure()

    def business_violations(self) -> list[str]:
        """Rules that must hold before the property can be listed."""
        violations: list[str] = []
        if not self.has_complete_room_info():
            violations.append(
                "Residential properties must specify bedroom and bathroom counts"
            )
        return violations

    def has_coordinates(self) -> bool:
        """True unless the location sits on a zero coordinate."""
        return self.location.lat != 0.0 and self.location.lon != 0.0

    def summary(self) -> str:
        """Card summary of the specification."""
        return self.specs.card_summary()

    def formatted_address(self) -> str:
        """Address followed by district."""
        return self.location.format_address()

    def primary_photo(self) -> str | None:
        """Cover photo URL, if any."""
        return self.media.primary_photo

    def matches(
        self,
        *,
        property_type: PropertyType | None = None,
        operation_type: OperationType | None = None,
        district: str | None = None,
        min_bedrooms: int | None = None,
        max_bedrooms: int | None = None,
        min_area: float | None = None,
        max_area: float | None = None,
        required_amenities: Sequence[str] = (),
    ) -> bool:
        """True if the property satisfies every given search filter."""
        if property_type is not None and self.property_type is not property_type:
            return False
        if operation_type is not None and self.operation_type is not operation_type:
            return False
        if district is not None and district.lower() not in self.location.district.lower():
            return False
        return self.specs.matches(
            min_bedrooms=min_bedrooms,
            max_bedrooms=max_bedrooms,
            min_area=min_area,
            max_area=max_area,
            required_amenities=required_amenities,
        )

    def __str__(self) -> str:
        return (
            f"Property(id: {self.id}, type: {self.property_type.value}, "
            f"{self.summary()})"
        )
