"""Geographic location value object and distance helpers."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from urllib.parse import urlencode

from ubiqa.domain.errors import LocationValidationError

# pylint: disable=magic-value-comparison

EARTH_RADIUS_KM = 6371.0
DEFAULT_SEARCH_RADIUS_KM = 5.0
MAX_SEARCH_RADIUS_KM = 25.0
MAX_ADDRESS_LENGTH = 200
MAX_DISTRICT_LENGTH = 100
SUPPORTED_COUNTRY = "PE"


@dataclass(frozen=True, slots=True)
class ServiceArea:
    """Rectangular latitude/longitude box the marketplace currently serves."""

    name: str
    south: float
    north: float
    west: float
    east: float

    def contains(self, lat: float, lon: float) -> bool:
        """True if the coordinates fall inside the box (edges included)."""
        return self.south <= lat <= self.north and self.west <= lon <= self.east


PIURA = ServiceArea(name="Piura", south=-5.3, north=-5.1, west=-80.8, east=-80.5)


@dataclass(frozen=True, slots=True)
class Location:
    """A street address with coordinates inside the service area.

    Conventions:
      - `lat` and `lon` are decimal degrees (WGS84).
      - `address` and `district` are stripped of surrounding whitespace.
      - `country_code` is an upper-case ISO 3166-1 alpha-2 code.
    """

    lat: float
    lon: float
    address: str
    district: str
    country_code: str = SUPPORTED_COUNTRY

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", self.address.strip())
        object.__setattr__(self, "district", self.district.strip())
        object.__setattr__(self, "country_code", self.country_code.strip().upper())

        violations: list[str] = []
        if not -90.0 <= self.lat <= 90.0:
            violations.append(
                "Latitude must be between -90 and 90 degrees "
                "(valid Earth coordinate range)"
            )
        if not -180.0 <= self.lon <= 180.0:
            violations.append(
                "Longitude must be between -180 and 180 degrees "
                "(valid Earth coordinate range)"
            )
        if not PIURA.contains(self.lat, self.lon):
            violations.append(
                "Coordinates must be within Piura metropolitan area "
                "(current service boundary)"
            )
        if not self.address:
            violations.append(
                "Street address cannot be empty (required for property identification)"
            )
        if len(self.address) > MAX_ADDRESS_LENGTH:
            violations.append(
                "Street address cannot exceed 200 characters (database constraint)"
            )
        if not self.district:
            violations.append(
                "Administrative district cannot be empty (required for market analysis)"
            )
        if len(self.district) > MAX_DISTRICT_LENGTH:
            violations.append(
                "Administrative district cannot exceed 100 characters "
                "(database constraint)"
            )
        if self.country_code != SUPPORTED_COUNTRY:
            violations.append(
                "Only Peru locations are supported (Piura metropolitan area in V1)"
            )
        if self.lat == 0.0 and self.lon == 0.0:
            violations.append(
                "Coordinates cannot both be zero (likely indicates failed geocoding)"
            )
        if violations:
            raise LocationValidationError("Invalid location data", violations)

    def distance_km(self, other: Location) -> float:
        """Great-circle distance to `other` in kilometers (haversine)."""
        lat1 = math.radians(self.lat)
        lat2 = math.radians(other.lat)
        dlat = math.radians(other.lat - self.lat)
        dlon = math.radians(other.lon - self.lon)
        a = (
            math.sin(dlat / 2) ** 2
            + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        )
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return EARTH_RADIUS_KM * c

    def is_within_radius(self, center: Location, radius_km: float) -> bool:
        """True if this location is at most `radius_km` from `center`."""
        return self.distance_km(center) <= radius_km

    def format_address(self) -> str:
        """Address followed by district, e.g. ``"Av. Grau 123, Castilla"``."""
        return f"{self.address}, {self.district}"

    def format_coordinates(self) -> str:
        """Coordinates with six decimals, e.g. ``"-5.194490, -80.632820"``."""
        return f"{self.lat:.6f}, {self.lon:.6f}"

    def google_maps_url(self) -> str:
        """Navigation link for Google Maps."""
        return f"https://www.google.com/maps?q={self.lat},{self.lon}"

    def static_map_url(
        self, api_key: str, width: int = 400, height: int = 300, zoom: int = 15
    ) -> str:
        """Static map image URL centered on this location with a red marker."""
        query = urlencode(
            {
                "center": f"{self.lat},{self.lon}",
                "zoom": zoom,
                "size": f"{width}x{height}",
                "markers": f"color:red|{self.lat},{self.lon}",
                "key": api_key,
            }
        )
        return f"https://maps.googleapis.com/maps/api/staticmap?{query}"

    def __str__(self) -> str:
        return f"Location({self.format_coordinates()}, {self.district})"


# ============================================================================
#                           Location domain helpers
# ============================================================================


def check_search_radius(radius_km: float) -> None:
    """Raise ValueError if `radius_km` exceeds the supported search radius."""
    if radius_km > MAX_SEARCH_RADIUS_KM:
        raise ValueError(
            f"Search radius cannot exceed {MAX_SEARCH_RADIUS_KM} km "
            "(performance limitation)"
        )


def within_radius(
    candidates: Iterable[Location],
    center: Location,
    radius_km: float = DEFAULT_SEARCH_RADIUS_KM,
) -> list[Location]:
    """Locations from `candidates` at most `radius_km` from `center`.

    Raises:
        ValueError: If `radius_km` exceeds the maximum search radius.
    """
    check_search_radius(radius_km)
    return [loc for loc in candidates if loc.is_within_radius(center, radius_km)]


def sort_by_distance(locations: Sequence[Location], center: Location) -> list[Location]:
    """Return `locations` ordered from nearest to farthest from `center`."""
    return sorted(locations, key=lambda loc: loc.distance_km(center))


def format_distance(distance_km: float) -> str:
    """Human distance: meters below one kilometer, else one decimal km."""
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m"
    return f"{distance_km:.1f}km"


def listing_location_advisories(location: Location) -> list[str]:
    """Soft warnings about a property location before publication."""
    advisories: list[str] = []
    coordinates = location.format_coordinates()
    if ".000000" in coordinates or ".111111" in coordinates:
        advisories.append(
            "Coordinates appear to be placeholder values rather than actual "
            "geocoded location"
        )
    if len(location.address) < 10:
        advisories.append(
            "Street address appears too brief for accurate property identification"
        )
    return advisories
