"""Unit of Work implementations for UBIQA.

`SqlAlchemyUnitOfWork` runs every repository on one Connection, so a
listing and its payment change in the same database transaction.
`InMemoryUnitOfWork` stages changes on a copy of an `InMemoryData` and
publishes the copy on commit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ubiqa.adapters.repositories.memory import (
    InMemoryAccountRepository,
    InMemoryData,
    InMemoryListingRepository,
    InMemoryPaymentRepository,
    InMemoryPropertyRepository,
)
from ubiqa.adapters.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyListingRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyPropertyRepository,
)
from ubiqa.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.connection: Connection

    def __enter__(self):
        self.connection = self.engine.connect()
        self.accounts = SqlAlchemyAccountRepository(self.connection)
        self.properties = SqlAlchemyPropertyRepository(self.connection)
        self.listings = SqlAlchemyListingRepository(self.connection)
        self.payments = SqlAlchemyPaymentRepository(self.connection)
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.connection.close()

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Unit of Work over an `InMemoryData` store.

    Repositories are usable outside a ``with`` block (handy in tests); such
    writes still need a `commit` to reach `data`.
    """

    def __init__(self, data: InMemoryData | None = None) -> None:
        self.data = data if data is not None else InMemoryData()
        self.committed = False
        self._begin()

    def __enter__(self):
        self._begin()
        return super().__enter__()

    def commit(self):
        self.data.load(self._working)
        self.committed = True

    def rollback(self):
        self._begin()

    def _begin(self) -> None:
        self._working = self.data.copy()
        self.accounts = InMemoryAccountRepository(self._working)
        self.properties = InMemoryPropertyRepository(self._working)
        self.listings = InMemoryListingRepository(self._working)
        self.payments = InMemoryPaymentRepository(self._working)
