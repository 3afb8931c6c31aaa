"""Ordered photo list value object."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import urlparse

from ubiqa.domain.errors import MediaValidationError

# pylint: disable=magic-value-comparison

MAX_PHOTOS = 25
MAX_LISTING_PHOTOS = 20
MAX_URL_LENGTH = 2000
MIN_RECOMMENDED_PHOTOS = 3
OPTIMAL_PHOTOS = 6
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")
IMAGE_HOST_MARKERS = ("firebase", "googleapis")


def is_image_url(url: str) -> bool:
    """True if `url` is an http(s) URL that points at an image.

    Accepts paths ending in a common image extension, plus storage URLs
    (Firebase/Google Cloud Storage) whose paths carry no extension.
    """
    if not url.strip():
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme.lower() not in {"http", "https"}:
        return False
    path = parsed.path.lower()
    return (
        path.endswith(IMAGE_EXTENSIONS)
        or "/image/" in path
        or any(marker in url for marker in IMAGE_HOST_MARKERS)
    )


@dataclass(frozen=True, slots=True)
class Media:
    """Ordered, de-duplicated list of property photo URLs.

    The first photo is the primary (cover) photo. Every editing method
    returns a new instance; positional edits with out-of-range indexes
    return the instance unchanged.
    """

    photo_urls: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        urls = tuple(url.strip() for url in self.photo_urls)
        object.__setattr__(self, "photo_urls", urls)

        violations: list[str] = []
        if len(urls) > MAX_PHOTOS:
            violations.append(
                "Cannot exceed 25 photos per property "
                "(performance and storage limitations)"
            )
        for i, url in enumerate(urls):
            if not url:
                violations.append(
                    f"Photo URL at position {i} cannot be empty "
                    "(would cause display errors)"
                )
            elif len(url) > MAX_URL_LENGTH:
                violations.append(
                    f"Photo URL at position {i} exceeds maximum length "
                    "(browser limitation)"
                )
            elif not is_image_url(url):
                violations.append(
                    f"Invalid image URL format at position {i} "
                    "(would fail to display)"
                )
        if len(set(urls)) != len(urls):
            violations.append(
                "Duplicate photo URLs not allowed (wastes storage and confuses users)"
            )
        if violations:
            raise MediaValidationError("Invalid media content", violations)

    @classmethod
    def of(cls, urls: Iterable[str]) -> Media:
        """Build media from any iterable of URLs."""
        return cls(tuple(urls))

    @classmethod
    def empty(cls) -> Media:
        """Media without photos."""
        return cls()

    # --- Queries ---

    @property
    def primary_photo(self) -> str | None:
        """Cover photo URL, if any."""
        return self.photo_urls[0] if self.photo_urls else None

    @property
    def secondary_photos(self) -> tuple[str, ...]:
        """Every photo after the cover photo."""
        return self.photo_urls[1:]

    @property
    def count(self) -> int:
        """Number of photos."""
        return len(self.photo_urls)

    def has_photos(self) -> bool:
        """True if there is at least one photo."""
        return bool(self.photo_urls)

    def photo_at(self, index: int) -> str | None:
        """Photo URL at `index`, or None when out of range."""
        if 0 <= index < len(self.photo_urls):
            return self.photo_urls[index]
        return None

    def gallery(self, limit: int = 10) -> tuple[str, ...]:
        """Photos shown in the detail gallery."""
        return self.photo_urls[:limit]

    def preview(self, limit: int = 3) -> tuple[str, ...]:
        """Photos shown on a listing card."""
        return self.photo_urls[:limit]

    # --- Edits ---

    def add(self, url: str) -> Media:
        """Append a photo."""
        return Media((*self.photo_urls, url.strip()))

    def insert(self, index: int, url: str) -> Media:
        """Insert a photo at `index` (list.insert semantics)."""
        urls = list(self.photo_urls)
        urls.insert(index, url.strip())
        return Media(tuple(urls))

    def remove_at(self, index: int) -> Media:
        """Remove the photo at `index`."""
        if not 0 <= index < len(self.photo_urls):
            return self
        urls = list(self.photo_urls)
        del urls[index]
        return Media(tuple(urls))

    def remove(self, url: str) -> Media:
        """Remove a specific photo URL."""
        return Media(tuple(u for u in self.photo_urls if u != url))

    def reposition(self, from_index: int, to_index: int) -> Media:
        """Move a photo from one position to another."""
        size = len(self.photo_urls)
        if not (0 <= from_index < size and 0 <= to_index < size):
            return self
        urls = list(self.photo_urls)
        url = urls.pop(from_index)
        urls.insert(to_index, url)
        return Media(tuple(urls))

    def set_primary(self, url: str) -> Media:
        """Move an existing photo to the cover position."""
        if url not in self.photo_urls:
            return self
        return Media((url, *(u for u in self.photo_urls if u != url)))

    # --- Quality ---

    def quality_score(self) -> float:
        """Score in [0, 1] rewarding more photos and a cover photo."""
        if not self.photo_urls:
            return 0.0
        score = min(len(self.photo_urls) / 8.0, 0.6)
        score += 0.2  # has a cover photo
        if len(self.photo_urls) > 1:
            score += 0.2
        return min(score, 1.0)

    def meets_minimum_quality(self) -> bool:
        """True when at least one photo is present."""
        return self.has_photos()

    def recommendations(self) -> list[str]:
        """Spanish suggestions to improve the photo set."""
        tips: list[str] = []
        if not self.photo_urls:
            tips.append("Agrega al menos una foto de la propiedad para atraer compradores")
        elif len(self.photo_urls) == 1:
            tips.append(
                "Agrega más fotos para mostrar mejor los espacios de la propiedad"
            )
        if len(self.photo_urls) < MIN_RECOMMENDED_PHOTOS:
            tips.append("Las propiedades con 3+ fotos reciben 40% más contactos")
        return tips

    def __str__(self) -> str:
        return f"Media({len(self.photo_urls)} property photos)"


# ============================================================================
#                           Media domain helpers
# ============================================================================


@dataclass(frozen=True, slots=True)
class MediaAnalytics:
    """Summary numbers about a photo set."""

    total_photos: int
    has_photos: bool
    quality_score: float
    meets_quality_standards: bool


def publication_advisories(media: Media) -> list[str]:
    """Soft warnings about the photos of a listing about to be published."""
    advisories: list[str] = []
    if not media.has_photos():
        advisories.append(
            "Property listing must include at least one photo (required for user trust)"
        )
    if media.count < MIN_RECOMMENDED_PHOTOS:
        advisories.append(
            f"Listings with fewer than {MIN_RECOMMENDED_PHOTOS} photos receive "
            "60% fewer inquiries"
        )
    primary = media.primary_photo
    if primary is not None and len(primary) < 20:
        advisories.append(
            "Primary photo URL appears incomplete (may cause display failures)"
        )
    return advisories


def analytics(media: Media) -> MediaAnalytics:
    """Compute analytics for `media`."""
    return MediaAnalytics(
        total_photos=media.count,
        has_photos=media.has_photos(),
        quality_score=media.quality_score(),
        meets_quality_standards=media.meets_minimum_quality(),
    )


def is_storage_photo_url(url: str) -> bool:
    """True for Firebase/Google storage URLs that end in an image extension."""
    return (
        "firebase" in url
        and "googleapis.com" in url
        and url.endswith(IMAGE_EXTENSIONS)
    )
