"""Repository ports and their error types."""

from .accounts import AccountRepository
from .errors import (
    AccountNotFoundError,
    DuplicateIdError,
    ListingNotFoundError,
    NotFoundError,
    PaymentNotFoundError,
    PropertyNotFoundError,
    RepositoryError,
    StaleStatusError,
    StoreUnavailableError,
)
from .listings import ListingFilter, ListingRepository, ListingWithDetails
from .payments import PaymentRepository
from .properties import PropertyRepository

__all__ = [
    "AccountNotFoundError",
    "AccountRepository",
    "DuplicateIdError",
    "ListingFilter",
    "ListingNotFoundError",
    "ListingRepository",
    "ListingWithDetails",
    "NotFoundError",
    "PaymentNotFoundError",
    "PaymentRepository",
    "PropertyNotFoundError",
    "PropertyRepository",
    "RepositoryError",
    "StaleStatusError",
    "StoreUnavailableError",
]
