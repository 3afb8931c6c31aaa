"""Repository adapters: in-memory and SQLAlchemy Core implementations."""

from .memory import (
    InMemoryAccountRepository,
    InMemoryData,
    InMemoryListingRepository,
    InMemoryPaymentRepository,
    InMemoryPropertyRepository,
)
from .sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyListingRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyPropertyRepository,
)

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryData",
    "InMemoryListingRepository",
    "InMemoryPaymentRepository",
    "InMemoryPropertyRepository",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyListingRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyPropertyRepository",
]
