"""Fixtures for repository contract tests.

Every test gets an open unit of work for each backend and talks to the
repositories it exposes. Nothing is committed; the unit rolls back when the
test ends.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import pytest

from tests.fixtures.datagen import build_account, build_listing, build_property
from ubiqa.adapters.unit_of_work import InMemoryUnitOfWork, SqlAlchemyUnitOfWork

if TYPE_CHECKING:
    from ubiqa.domain.entities.listing import Listing
    from ubiqa.interfaces.unit_of_work import AbstractUnitOfWork

# pylint: disable=redefined-outer-name


@pytest.fixture(params=["memory", "sqlite"])
def uow(request: pytest.FixtureRequest) -> Iterator[AbstractUnitOfWork]:
    """Yield an entered unit of work for the requested backend.

    Supported params:
      - `"memory"` → InMemoryUnitOfWork
      - `"sqlite"` → SqlAlchemyUnitOfWork on an in-memory SQLite engine
    """
    match request.param:
        case "memory":
            unit: AbstractUnitOfWork = InMemoryUnitOfWork()
        case "sqlite":
            unit = SqlAlchemyUnitOfWork(request.getfixturevalue("sqlite_engine_memory"))
        case _:
            raise ValueError(f"unknown repository backend: {request.param}")
    with unit:
        yield unit


@pytest.fixture
def seeded(uow: AbstractUnitOfWork) -> AbstractUnitOfWork:
    """A unit of work holding the default owner and house."""
    owner = build_account()
    uow.accounts.add(owner)
    uow.properties.add(build_property(), owner.id)
    return uow


@pytest.fixture
def add_listing(seeded: AbstractUnitOfWork) -> Callable[..., Listing]:
    """Store a listing for the default owner and house; returns the listing."""

    def _add(**overrides) -> Listing:
        listing = build_listing(**overrides)
        owner_id = build_account().id
        seeded.listings.add(listing, owner_id, build_property().id)
        return listing

    return _add
