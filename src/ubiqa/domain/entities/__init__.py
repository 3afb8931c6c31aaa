"""Entities package.

The four business entities and their identifiers. Every entity is an
immutable dataclass; lifecycle transitions return new instances. They are
re-exported here to provide a single, convenient import path.
"""

from .account import Account
from .ids import AccountId, ListingId, PaymentId, PropertyId
from .listing import Listing, ListingStatus
from .payment import Payment, PaymentMethod, PaymentProvider, PaymentStatus
from .property import OperationType, Property, PropertyType

__all__ = [
    "Account",
    "AccountId",
    "Listing",
    "ListingId",
    "ListingStatus",
    "OperationType",
    "Payment",
    "PaymentId",
    "PaymentMethod",
    "PaymentProvider",
    "PaymentStatus",
    "Property",
    "PropertyId",
    "PropertyType",
]
