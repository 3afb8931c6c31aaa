"""Contract tests for PropertyRepository implementations."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from tests.fixtures.datagen import NOW, build_account, build_property
from ubiqa.domain.entities.ids import AccountId, PropertyId
from ubiqa.domain.value_objects.property_specs import PropertySpecs
from ubiqa.interfaces.repositories import (
    AccountNotFoundError,
    DuplicateIdError,
    PropertyNotFoundError,
)

if TYPE_CHECKING:
    from ubiqa.interfaces.unit_of_work import AbstractUnitOfWork

# pylint: disable=magic-value-comparison

OWNER_ID = AccountId("acc-owner")


def test_add_then_get(seeded: AbstractUnitOfWork) -> None:
    """A stored property loads back equal, creation time included."""
    assert seeded.properties.get(PropertyId("prop-1")) == build_property()


def test_creation_time_survives_updates(seeded: AbstractUnitOfWork) -> None:
    """Updates never move the creation time."""
    later = NOW + timedelta(days=2)
    seeded.properties.update(build_property().mark_unavailable(now=later))
    loaded = seeded.properties.get(PropertyId("prop-1"))
    assert loaded.created_at == NOW
    assert loaded.updated_at == later
    assert not loaded.is_available


def test_update_changes_content(seeded: AbstractUnitOfWork) -> None:
    """Specs written by update() load back."""
    bigger = build_property().with_content(
        specs=PropertySpecs.residential(180, bedrooms=4, bathrooms=3),
        now=NOW + timedelta(hours=1),
    )
    seeded.properties.update(bigger)
    assert seeded.properties.get(bigger.id).specs.area_m2 == 180


def test_owner_of(seeded: AbstractUnitOfWork) -> None:
    """The owner link is stored beside the property."""
    assert seeded.properties.owner_of(PropertyId("prop-1")) == OWNER_ID


def test_duplicate_id_rejected(seeded: AbstractUnitOfWork) -> None:
    """Adding the same id twice raises DuplicateIdError."""
    with pytest.raises(DuplicateIdError, match=r"Property \(prop-1\) already exists"):
        seeded.properties.add(build_property(), OWNER_ID)


def test_unknown_owner_rejected(uow: AbstractUnitOfWork) -> None:
    """A property needs a stored owner."""
    with pytest.raises(AccountNotFoundError):
        uow.properties.add(build_property(), OWNER_ID)


@pytest.mark.parametrize("operation", ["get", "owner_of"])
def test_missing_property(uow: AbstractUnitOfWork, operation: str) -> None:
    """Lookups of unknown ids raise PropertyNotFoundError."""
    with pytest.raises(PropertyNotFoundError):
        getattr(uow.properties, operation)(PropertyId("prop-missing"))


def test_update_missing(uow: AbstractUnitOfWork) -> None:
    """Updating an unknown property raises PropertyNotFoundError."""
    with pytest.raises(PropertyNotFoundError):
        uow.properties.update(build_property())


def test_list_for_owner_oldest_first(seeded: AbstractUnitOfWork) -> None:
    """An owner's properties list in creation order."""
    second = build_property(
        id=PropertyId("prop-2"),
        created_at=NOW + timedelta(days=1),
        updated_at=NOW + timedelta(days=1),
    )
    seeded.properties.add(second, OWNER_ID)
    ids = [p.id.value for p in seeded.properties.list_for_owner(OWNER_ID)]
    assert ids == ["prop-1", "prop-2"]


def test_list_for_owner_only_theirs(seeded: AbstractUnitOfWork) -> None:
    """Other owners' properties are not listed."""
    other = build_account(id=AccountId("acc-other"), email="luis@example.com")
    seeded.accounts.add(other)
    seeded.properties.add(build_property(id=PropertyId("prop-9")), other.id)
    assert [p.id.value for p in seeded.properties.list_for_owner(other.id)] == [
        "prop-9"
    ]
    assert seeded.properties.list_for_owner(AccountId("acc-nobody")) == []
