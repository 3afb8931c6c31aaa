"""Property factories and listing readiness checks."""

from __future__ import annotations

from datetime import datetime

from ubiqa.domain.entities.ids import PropertyId
from ubiqa.domain.entities.property import OperationType, Property, PropertyType
from ubiqa.domain.errors import PropertyValidationError
from ubiqa.domain.value_objects.location import Location, listing_location_advisories
from ubiqa.domain.value_objects.media import Media
from ubiqa.domain.value_objects.media import publication_advisories as media_advisories
from ubiqa.domain.value_objects.property_specs import PropertySpecs
from ubiqa.domain.value_objects.property_specs import (
    publication_advisories as specs_advisories,
)

# pylint: disable=too-many-arguments


def create_property(
    property_id: PropertyId,
    property_type: PropertyType,
    operation_type: OperationType,
    specs: PropertySpecs,
    location: Location,
    media: Media | None = None,
    now: datetime | None = None,
) -> Property:
    """Create an available property.

    Raises:
        PropertyValidationError: If the type, operation or timestamps are invalid.
    """
    return Property.create(
        property_id, property_type, operation_type, specs, location, media, now
    )


def update_property_content(
    prop: Property,
    specs: PropertySpecs | None = None,
    location: Location | None = None,
    media: Media | None = None,
    now: datetime | None = None,
) -> Property:
    """Replace any of specs, location or media."""
    return prop.with_content(specs=specs, location=location, media=media, now=now)


def ensure_listable(prop: Property) -> Property:
    """Return `prop` unchanged if it satisfies its business rules.

    Raises:
        PropertyValidationError: With every violated rule.
    """
    if violations := prop.business_violations():
        raise PropertyValidationError("Property data is invalid", violations)
    return prop


def publication_advisories(prop: Property) -> list[str]:
    """Soft warnings shown to the owner before publishing; never blocking."""
    return [
        *specs_advisories(prop.specs),
        *listing_location_advisories(prop.location),
        *media_advisories(prop.media),
    ]
