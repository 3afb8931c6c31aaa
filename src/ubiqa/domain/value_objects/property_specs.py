"""Physical specification of a property: area, rooms, parking and amenities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import assert_never

from ubiqa.domain.errors import PropertySpecsValidationError

from .price import Currency

# pylint: disable=magic-value-comparison,too-many-branches

MAX_AREA_M2 = 50_000.0
MAX_BEDROOMS = 20
MAX_BATHROOMS = 15
MAX_PARKING = 50
MAX_AMENITIES = 30
MAX_AMENITY_LENGTH = 50
MIN_AREA_PER_BEDROOM = 8.0
MAX_AREA_PER_BEDROOM = 200.0

STANDARD_AMENITIES = (
    "Piscina",
    "Jardín",
    "Balcón",
    "Terraza",
    "Aire Acondicionado",
    "Calefacción",
    "Amoblado",
    "Semi Amoblado",
    "Cocina Equipada",
    "Lavandería",
    "Portón Eléctrico",
    "Seguridad 24h",
    "Gimnasio",
    "Ascensor",
    "Intercomunicador",
    "Vista al Mar",
    "Vista a la Ciudad",
    "Cerca al Centro",
    "Transporte Público",
)


class SizeCategory(Enum):
    """Coarse size bucket used by search filters."""

    COMPACT = "compact"
    STANDARD = "standard"
    SPACIOUS = "spacious"
    EXPANSIVE = "expansive"

    @property
    def label(self) -> str:
        """Spanish label with the area range."""
        match self:
            case SizeCategory.COMPACT:
                return "Compacto (< 50 m²)"
            case SizeCategory.STANDARD:
                return "Estándar (50-100 m²)"
            case SizeCategory.SPACIOUS:
                return "Espacioso (100-200 m²)"
            case SizeCategory.EXPANSIVE:
                return "Amplio (> 200 m²)"
            case _:
                assert_never(self)


class MarketValueCategory(Enum):
    """Market segment estimated from the specification alone."""

    ECONOMIC = "economic"
    MID_RANGE = "midRange"
    PREMIUM = "premium"

    @property
    def label(self) -> str:
        """Spanish segment label."""
        match self:
            case MarketValueCategory.ECONOMIC:
                return "Económico"
            case MarketValueCategory.MID_RANGE:
                return "Rango Medio"
            case MarketValueCategory.PREMIUM:
                return "Premium"
            case _:
                assert_never(self)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


def _contains_ci(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


@dataclass(frozen=True, slots=True)
class PropertySpecs:
    """Area, room counts, parking and amenities of a property.

    Room counts are optional so land and commercial units can omit them.
    Amenities are stripped on construction.
    """

    area_m2: float
    bedrooms: int | None = None
    bathrooms: int | None = None
    parking: int = 0
    amenities: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "area_m2", float(self.area_m2))
        object.__setattr__(
            self, "amenities", tuple(amenity.strip() for amenity in self.amenities)
        )
        if violations := self._violations():
            raise PropertySpecsValidationError(
                "Invalid property specifications", violations
            )

    def _violations(self) -> list[str]:
        violations: list[str] = []
        if self.area_m2 <= 0:
            violations.append("Total area must be greater than 0 square meters")
        if self.area_m2 > MAX_AREA_M2:
            violations.append(
                "Total area cannot exceed 50,000 square meters "
                "(unrealistic for individual properties)"
            )
        if self.bedrooms is not None:
            if self.bedrooms < 1:
                violations.append("Bedroom count must be at least 1 if specified")
            if self.bedrooms > MAX_BEDROOMS:
                violations.append(
                    "Bedroom count cannot exceed 20 "
                    "(unrealistic for residential properties)"
                )
        if self.bathrooms is not None:
            if self.bathrooms < 1:
                violations.append("Bathroom count must be at least 1 if specified")
            if self.bathrooms > MAX_BATHROOMS:
                violations.append(
                    "Bathroom count cannot exceed 15 "
                    "(unrealistic for residential properties)"
                )
        if (
            self.bedrooms is not None
            and self.bathrooms is not None
            and self.bathrooms > self.bedrooms + 2
        ):
            violations.append(
                "Bathroom count cannot exceed bedroom count by more than 2 "
                "(unusual property configuration)"
            )
        if self.parking < 0:
            violations.append("Available parking spaces cannot be negative")
        if self.parking > MAX_PARKING:
            violations.append(
                "Available parking spaces cannot exceed 50 "
                "(unrealistic for individual properties)"
            )
        if len(self.amenities) > MAX_AMENITIES:
            violations.append(
                "Cannot have more than 30 amenities (excessive for property listings)"
            )
        for amenity in self.amenities:
            if not amenity:
                violations.append("Property amenities cannot be empty strings")
            if len(amenity) > MAX_AMENITY_LENGTH:
                violations.append("Amenity descriptions cannot exceed 50 characters")
        if self.has_room_structure() and self.bedrooms and self.area_m2 > 0:
            per_bedroom = self.area_m2 / self.bedrooms
            if per_bedroom < MIN_AREA_PER_BEDROOM:
                violations.append(
                    "Area per bedroom is unrealistically small "
                    "(less than 8 m² per bedroom)"
                )
            if per_bedroom > MAX_AREA_PER_BEDROOM:
                violations.append(
                    "Area per bedroom is unrealistically large "
                    "(more than 200 m² per bedroom)"
                )
        return violations

    @classmethod
    def residential(
        cls,
        area_m2: float,
        bedrooms: int,
        bathrooms: int,
        parking: int = 0,
        amenities: Iterable[str] = (),
    ) -> PropertySpecs:
        """Specs for a house or apartment; both room counts are required."""
        return cls(area_m2, bedrooms, bathrooms, parking, tuple(amenities))

    @classmethod
    def land(
        cls, area_m2: float, parking: int = 0, amenities: Iterable[str] = ()
    ) -> PropertySpecs:
        """Specs for land or a commercial unit, without room counts."""
        return cls(area_m2, None, None, parking, tuple(amenities))

    # --- Queries ---

    def has_room_structure(self) -> bool:
        """True if both bedroom and bathroom counts are set."""
        return self.bedrooms is not None and self.bathrooms is not None

    def has_parking(self) -> bool:
        """True if at least one parking space is available."""
        return self.parking > 0

    def has_amenity(self, amenity: str) -> bool:
        """Case-insensitive substring match against the amenity list."""
        return any(_contains_ci(existing, amenity) for existing in self.amenities)

    def size_category(self) -> SizeCategory:
        """Bucket the area into a size category."""
        if self.area_m2 < 50:
            return SizeCategory.COMPACT
        if self.area_m2 < 100:
            return SizeCategory.STANDARD
        if self.area_m2 < 200:
            return SizeCategory.SPACIOUS
        return SizeCategory.EXPANSIVE

    def price_per_square_meter(self, total_price: float) -> float:
        """Divide `total_price` by the area.

        Raises:
            ValueError: If the area is not positive.
        """
        if self.area_m2 <= 0:
            raise ValueError("Cannot calculate price per m² with zero or negative area")
        return total_price / self.area_m2

    def format_price_per_square_meter(
        self, total_price: float, currency: Currency
    ) -> str:
        """Display price per m², e.g. ``"S/ 1.2K/m²"`` or ``"US$ 850/m²"``."""
        per_m2 = self.price_per_square_meter(total_price)
        if per_m2 >= 1000:
            return f"{currency.symbol} {per_m2 / 1000:.1f}K/m²"
        return f"{currency.symbol} {int(per_m2)}/m²"

    # --- Display ---

    def card_summary(self) -> str:
        """Compact summary for listing cards: ``"3 hab • 2 baños • 120 m²"``."""
        parts: list[str] = []
        if self.bedrooms is not None:
            parts.append(f"{self.bedrooms} hab")
        if self.bathrooms is not None:
            parts.append(_plural(self.bathrooms, "baño"))
        parts.append(f"{int(self.area_m2)} m²")
        if self.parking > 0:
            parts.append(_plural(self.parking, "cochera"))
        return " • ".join(parts)

    def detailed_list(self) -> list[str]:
        """One Spanish line per known attribute, for the detail page."""
        lines = [f"Área Total: {int(self.area_m2)} m²"]
        if self.bedrooms is not None:
            lines.append(f"Dormitorios: {self.bedrooms}")
        if self.bathrooms is not None:
            lines.append(f"Baños: {self.bathrooms}")
        if self.parking > 0:
            lines.append(f"Estacionamientos: {self.parking}")
        if self.amenities:
            lines.append(f"Características Adicionales: {', '.join(self.amenities)}")
        return lines

    def format_area(self) -> str:
        """Area for display; thousands are shown as ``"1.5 mil m²"``."""
        if self.area_m2 >= 1000:
            return f"{self.area_m2 / 1000:.1f} mil m²"
        return f"{int(self.area_m2)} m²"

    def room_summary(self) -> str | None:
        """``"bedrooms/bathrooms"`` or None when either count is missing."""
        if self.bedrooms is None or self.bathrooms is None:
            return None
        return f"{self.bedrooms}/{self.bathrooms}"

    # --- Filters ---

    def matches(
        self,
        *,
        min_bedrooms: int | None = None,
        max_bedrooms: int | None = None,
        min_bathrooms: int | None = None,
        max_bathrooms: int | None = None,
        min_area: float | None = None,
        max_area: float | None = None,
        min_parking: int | None = None,
        required_amenities: Sequence[str] = (),
    ) -> bool:
        """True if the specs satisfy every given filter.

        A room filter never matches specs that lack that room count.
        """
        if min_bedrooms is not None and (
            self.bedrooms is None or self.bedrooms < min_bedrooms
        ):
            return False
        if max_bedrooms is not None and (
            self.bedrooms is None or self.bedrooms > max_bedrooms
        ):
            return False
        if min_bathrooms is not None and (
            self.bathrooms is None or self.bathrooms < min_bathrooms
        ):
            return False
        if max_bathrooms is not None and (
            self.bathrooms is None or self.bathrooms > max_bathrooms
        ):
            return False
        if min_area is not None and self.area_m2 < min_area:
            return False
        if max_area is not None and self.area_m2 > max_area:
            return False
        if min_parking is not None and self.parking < min_parking:
            return False
        return all(self.has_amenity(amenity) for amenity in required_amenities)

    # --- Edits ---

    def with_amenity(self, amenity: str) -> PropertySpecs:
        """Add an amenity unless a matching one is already listed."""
        cleaned = amenity.strip()
        if self.has_amenity(cleaned):
            return self
        return replace(self, amenities=(*self.amenities, cleaned))

    def without_amenity(self, amenity: str) -> PropertySpecs:
        """Drop every amenity that contains `amenity` (case-insensitive)."""
        return replace(
            self,
            amenities=tuple(a for a in self.amenities if not _contains_ci(a, amenity)),
        )

    def __str__(self) -> str:
        return f"PropertySpecs({self.card_summary()})"


# ============================================================================
#                           Specs domain helpers
# ============================================================================


def publication_advisories(specs: PropertySpecs) -> list[str]:
    """Soft warnings about a specification before listing publication."""
    advisories: list[str] = []
    if specs.has_room_structure():
        if specs.area_m2 < 20:
            advisories.append(
                "Residential property area seems unrealistically small (< 20 m²)"
            )
        if specs.area_m2 / (specs.bedrooms or 1) < MIN_AREA_PER_BEDROOM:
            advisories.append(
                "Property appears too small for the specified number of bedrooms"
            )
    elif specs.area_m2 < 50:
        advisories.append("Commercial property or land area seems unusually small")
    if specs.parking > specs.area_m2 / 20:
        advisories.append(
            "Parking space count seems excessive relative to property size"
        )
    return advisories


def market_value_score(specs: PropertySpecs) -> int:
    """Points awarded for area, rooms, parking and amenities (0 to 11)."""
    score = 0
    if specs.area_m2 > 200:
        score += 3
    elif specs.area_m2 > 100:
        score += 2
    elif specs.area_m2 > 50:
        score += 1

    if specs.bedrooms is not None and specs.bedrooms >= 4:
        score += 2
    elif specs.bedrooms is not None and specs.bedrooms >= 3:
        score += 1

    if specs.bathrooms is not None and specs.bathrooms >= 3:
        score += 2
    elif specs.bathrooms is not None and specs.bathrooms >= 2:
        score += 1

    if specs.parking >= 2:
        score += 2
    elif specs.parking >= 1:
        score += 1

    if len(specs.amenities) >= 5:
        score += 2
    elif len(specs.amenities) >= 3:
        score += 1
    return score


def market_value_category(specs: PropertySpecs) -> MarketValueCategory:
    """Estimate the market segment from `market_value_score`."""
    score = market_value_score(specs)
    if score >= 8:
        return MarketValueCategory.PREMIUM
    if score >= 5:
        return MarketValueCategory.MID_RANGE
    return MarketValueCategory.ECONOMIC


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def similarity(first: PropertySpecs, second: PropertySpecs) -> float:
    """Similarity in [0, 1] weighted 40% area, 20% each room count,
    10% parking and 10% shared amenities."""
    score = 0.0
    mean_area = (first.area_m2 + second.area_m2) / 2
    area_diff = abs(first.area_m2 - second.area_m2) / mean_area
    score += (1 - _clamp01(area_diff)) * 0.4

    if first.bedrooms is not None and second.bedrooms is not None:
        score += (1 - _clamp01(abs(first.bedrooms - second.bedrooms) / 5)) * 0.2
    if first.bathrooms is not None and second.bathrooms is not None:
        score += (1 - _clamp01(abs(first.bathrooms - second.bathrooms) / 3)) * 0.2

    score += (1 - _clamp01(abs(first.parking - second.parking) / 3)) * 0.1

    shared = sum(
        1
        for a in first.amenities
        if any(_contains_ci(a, b) or _contains_ci(b, a) for b in second.amenities)
    )
    score += shared / max(len(first.amenities), len(second.amenities), 1) * 0.1
    return _clamp01(score)
