"""Pytest fixtures for service layer handler unit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from tests.fixtures.datagen import NOW
from ubiqa.adapters.clock import FixedClock
from ubiqa.adapters.id_generators import SequentialIdGenerator
from ubiqa.adapters.unit_of_work import InMemoryUnitOfWork
from ubiqa.bootstrap import AppContainer, bootstrap
from ubiqa.domain.pricing import PricingConfig

# pylint: disable=redefined-outer-name


@pytest.fixture
def bus_params() -> dict[str, Any]:
    """Default bootstrap overrides. Classes can override this fixture"""
    return {}


@pytest.fixture
def make_test_app(bus_params) -> Callable[..., AppContainer]:
    """Factory for an application wired to in-memory storage and a fixed clock."""

    def _make() -> AppContainer:
        params: dict[str, Any] = {
            "uow": InMemoryUnitOfWork(),
            "clock": FixedClock(NOW),
            "id_generator": SequentialIdGenerator(),
            "pricing": PricingConfig(),
        }
        params.update(bus_params)
        return bootstrap(**params)

    return _make
