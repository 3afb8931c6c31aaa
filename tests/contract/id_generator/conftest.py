"""Fixtures for id_generator contract tests."""

from collections.abc import Iterable

import pytest

from ubiqa.adapters.id_generators import (
    SequentialIdGenerator,
    ULIDGenerator,
    UUIDv4Generator,
)
from ubiqa.interfaces.id_generator import IdGenerator


@pytest.fixture(params=["ulid", "uuid4", "sequential"])
def id_generator(
    request: pytest.FixtureRequest,
) -> Iterable[IdGenerator]:
    """Return a fresh IdGenerator instance for the requested backend.

    Supported params:
      - `"ulid"` → ULIDGenerator
      - `"uuid4"` → UUIDv4Generator
      - `"sequential"` → SequentialIdGenerator
    """

    match request.param:
        case "ulid":
            yield ULIDGenerator()
        case "uuid4":
            yield UUIDv4Generator()
        case "sequential":
            yield SequentialIdGenerator()
        case _:
            raise ValueError(f"unknown id generator type: {request.param}")


@pytest.fixture(params=["ulid", "sequential"])
def ordered_id_generator(request: pytest.FixtureRequest) -> Iterable[IdGenerator]:
    """Yield IdGenerators whose ids sort in creation order."""
    match request.param:
        case "ulid":
            yield ULIDGenerator()
        case "sequential":
            yield SequentialIdGenerator(prefix="listing", width=6)
        case _:
            raise ValueError(f"unknown ordered id generator type: {request.param}")
