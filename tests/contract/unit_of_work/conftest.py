"""Fixtures for unit of work contract tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ubiqa.adapters.repositories.memory import InMemoryData
from ubiqa.adapters.unit_of_work import InMemoryUnitOfWork, SqlAlchemyUnitOfWork
from ubiqa.interfaces.unit_of_work import AbstractUnitOfWork


@pytest.fixture(params=["memory", "sqlite"])
def uow_factory(request: pytest.FixtureRequest) -> Callable[[], AbstractUnitOfWork]:
    """Return a callable building fresh units of work over one shared store.

    Supported params:
      - `"memory"` → InMemoryUnitOfWork sharing one InMemoryData
      - `"sqlite"` → SqlAlchemyUnitOfWork on one in-memory SQLite engine
    """
    match request.param:
        case "memory":
            data = InMemoryData()
            return lambda: InMemoryUnitOfWork(data)
        case "sqlite":
            engine = request.getfixturevalue("sqlite_engine_memory")
            return lambda: SqlAlchemyUnitOfWork(engine)
        case _:
            raise ValueError(f"unknown unit of work backend: {request.param}")
