"""Interface for the property repository."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ubiqa.domain.entities.ids import AccountId, PropertyId
    from ubiqa.domain.entities.property import Property


class PropertyRepository(abc.ABC):
    """Contract for storing and loading properties.

    Ownership is stored next to the property record, not inside it.
    """

    @abc.abstractmethod
    def add(self, prop: Property, owner_id: AccountId) -> None:
        """Store a new property owned by `owner_id`.

        Raises:
            DuplicateIdError: If the id is already stored.
        """

    @abc.abstractmethod
    def update(self, prop: Property) -> None:
        """Replace a stored property.

        Raises:
            PropertyNotFoundError: If the property does not exist.
        """

    @abc.abstractmethod
    def get(self, property_id: PropertyId) -> Property:
        """Load a property.

        Raises:
            PropertyNotFoundError: If the property does not exist.
        """

    @abc.abstractmethod
    def owner_of(self, property_id: PropertyId) -> AccountId:
        """Return the owner of a property.

        Raises:
            PropertyNotFoundError: If the property does not exist.
        """

    @abc.abstractmethod
    def list_for_owner(self, owner_id: AccountId) -> list[Property]:
        """Every property owned by `owner_id`, oldest first."""
