"""Unit of Work interface for UBIQA.

Defines the AbstractUnitOfWork contract: a context-managed unit of work
exposing the four repositories and abstract commit/rollback methods.
Changes to several entities made inside one unit become visible together
on commit, or not at all.
"""

from __future__ import annotations

import abc

from .repositories import (
    AccountRepository,
    ListingRepository,
    PaymentRepository,
    PropertyRepository,
)


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work."""

    accounts: AccountRepository
    properties: PropertyRepository
    listings: ListingRepository
    payments: PaymentRepository

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit; committed work is unaffected.
        """
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
