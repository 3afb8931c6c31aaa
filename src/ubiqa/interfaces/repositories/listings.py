"""Interface and DTOs for the listing repository."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from ubiqa.domain.value_objects.location import DEFAULT_SEARCH_RADIUS_KM, check_search_radius

if TYPE_CHECKING:
    from ubiqa.domain.entities.ids import AccountId, ListingId, PropertyId
    from ubiqa.domain.entities.listing import Listing, ListingStatus
    from ubiqa.domain.entities.property import OperationType, Property, PropertyType
    from ubiqa.domain.value_objects.location import Location
    from ubiqa.domain.value_objects.price import Currency, Price


@dataclass(frozen=True, slots=True)
class ListingWithDetails:
    """A listing joined with the property it advertises and its owner."""

    listing: Listing
    property: Property
    owner_id: AccountId


@dataclass(frozen=True, slots=True)
class ListingFilter:
    """Search criteria for live listings; unset fields do not filter.

    Attributes:
        operation_type: Sale or rent.
        property_type: Kind of property.
        currency: Listing price currency.
        min_price: Inclusive lower bound; must share `currency` when both are set.
        max_price: Inclusive upper bound.
        center: When set, only properties within `radius_km` of it match.
        radius_km: Search radius around `center`.
    """

    operation_type: OperationType | None = None
    property_type: PropertyType | None = None
    currency: Currency | None = None
    min_price: Price | None = None
    max_price: Price | None = None
    center: Location | None = None
    radius_km: float = DEFAULT_SEARCH_RADIUS_KM

    def __post_init__(self) -> None:
        if self.radius_km <= 0:
            raise ValueError("Search radius must be positive")
        check_search_radius(self.radius_km)
        if self.min_price is not None and self.max_price is not None:
            if self.min_price.currency is not self.max_price.currency:
                raise ValueError("Price bounds must share a currency")
            if self.min_price > self.max_price:
                raise ValueError("Minimum price cannot exceed maximum price")

    def matches(self, details: ListingWithDetails) -> bool:
        """True if `details` satisfies every set criterion.

        A listing priced in another currency than a bound never matches it.
        """
        listing, prop = details.listing, details.property
        if self.operation_type is not None and prop.operation_type is not self.operation_type:
            return False
        if self.property_type is not None and prop.property_type is not self.property_type:
            return False
        price = listing.price
        if self.currency is not None and price.currency is not self.currency:
            return False
        if self.min_price is not None and not (
            price.currency is self.min_price.currency and price >= self.min_price
        ):
            return False
        if self.max_price is not None and not (
            price.currency is self.max_price.currency and price <= self.max_price
        ):
            return False
        if self.center is not None:
            return prop.location.is_within_radius(self.center, self.radius_km)
        return True


class ListingRepository(abc.ABC):
    """Contract for storing, loading and searching listings.

    Each listing advertises one property and belongs to one account; both
    links are stored next to the listing record and never change.
    """

    @abc.abstractmethod
    def add(self, listing: Listing, owner_id: AccountId, property_id: PropertyId) -> None:
        """Store a new listing.

        Raises:
            DuplicateIdError: If the id is already stored.
        """

    @abc.abstractmethod
    def update(
        self, listing: Listing, expected_status: ListingStatus | None = None
    ) -> None:
        """Replace a stored listing.

        Args:
            listing: The new state.
            expected_status: When given, the write only happens if the stored
                listing is still in this status.

        Raises:
            ListingNotFoundError: If the listing does not exist.
            StaleStatusError: If the stored status differs from `expected_status`.
        """

    @abc.abstractmethod
    def get(self, listing_id: ListingId) -> Listing:
        """Load a listing.

        Raises:
            ListingNotFoundError: If the listing does not exist.
        """

    @abc.abstractmethod
    def get_details(self, listing_id: ListingId) -> ListingWithDetails:
        """Load a listing together with its property and owner.

        Raises:
            ListingNotFoundError: If the listing does not exist.
            PropertyNotFoundError: If its property has disappeared.
        """

    @abc.abstractmethod
    def owner_of(self, listing_id: ListingId) -> AccountId:
        """Return the account that owns a listing.

        Raises:
            ListingNotFoundError: If the listing does not exist.
        """

    @abc.abstractmethod
    def list_for_owner(self, owner_id: AccountId) -> list[Listing]:
        """Every listing owned by `owner_id`, newest first."""

    @abc.abstractmethod
    def search(self, criteria: ListingFilter, now: datetime) -> list[ListingWithDetails]:
        """Searchable listings matching `criteria`, newest publication first.

        Only active, unexpired listings for available properties qualify.
        """

    @abc.abstractmethod
    def due_for_expiry(self, now: datetime) -> list[Listing]:
        """Active listings whose expiration time has passed at `now`."""
