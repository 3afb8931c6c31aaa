"""Value objects package.

Immutable, self-validating value types shared by the entities. They are
re-exported here to provide a single, convenient import path. Value objects
never reference entities.
"""

from .contact_info import ContactHours, ContactInfo
from .location import Location, ServiceArea
from .media import Media
from .phone import CountryCode, PhoneNumber
from .price import Currency, MarketCategory, Price
from .property_specs import MarketValueCategory, PropertySpecs, SizeCategory

__all__ = [
    "ContactHours",
    "ContactInfo",
    "CountryCode",
    "Currency",
    "Location",
    "MarketCategory",
    "MarketValueCategory",
    "Media",
    "PhoneNumber",
    "Price",
    "PropertySpecs",
    "ServiceArea",
    "SizeCategory",
]
