"""Typed identifiers, one per entity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ubiqa.domain.errors import InvalidIdentifierError


@dataclass(frozen=True, slots=True)
class EntityId:
    """Non-empty, trimmed string identifier compared by value."""

    KIND: ClassVar[str] = "EntityId"

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise InvalidIdentifierError(self.KIND)
        object.__setattr__(self, "value", self.value.strip())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class AccountId(EntityId):
    """Identifier assigned to an account by the identity provider."""

    KIND: ClassVar[str] = "AccountId"


@dataclass(frozen=True, slots=True)
class PropertyId(EntityId):
    """Identifier of a property."""

    KIND: ClassVar[str] = "PropertyId"


@dataclass(frozen=True, slots=True)
class ListingId(EntityId):
    """Identifier of a listing."""

    KIND: ClassVar[str] = "ListingId"


@dataclass(frozen=True, slots=True)
class PaymentId(EntityId):
    """Identifier of a payment."""

    KIND: ClassVar[str] = "PaymentId"
