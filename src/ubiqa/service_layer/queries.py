"""Read-side use cases.

Queries never write: they open a unit of work, read, and let it roll back.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from ubiqa.domain.entities.ids import AccountId, ListingId
from ubiqa.domain.orchestrator import DomainOrchestrator, UserCapabilities

if TYPE_CHECKING:
    from ubiqa.domain.entities.listing import Listing
    from ubiqa.domain.pricing import PricingConfig
    from ubiqa.interfaces.repositories import ListingFilter, ListingWithDetails
    from ubiqa.interfaces.unit_of_work import AbstractUnitOfWork


def search_listings(
    uow: AbstractUnitOfWork, criteria: ListingFilter, now: datetime
) -> list[ListingWithDetails]:
    """Live listings matching `criteria`, newest publication first."""
    with uow:
        return uow.listings.search(criteria, now)


def listing_details(uow: AbstractUnitOfWork, listing_id: str) -> ListingWithDetails:
    """One listing with its property and owner.

    Raises:
        ListingNotFoundError: If the listing does not exist.
    """
    with uow:
        return uow.listings.get_details(ListingId(listing_id))


def listings_for_owner(uow: AbstractUnitOfWork, owner_id: str) -> list[Listing]:
    """Every listing of an account, newest first."""
    with uow:
        return uow.listings.list_for_owner(AccountId(owner_id))


def due_for_expiry(uow: AbstractUnitOfWork, now: datetime) -> list[Listing]:
    """Active listings an expiry sweep at `now` would expire."""
    with uow:
        return uow.listings.due_for_expiry(now)


def account_capabilities(
    uow: AbstractUnitOfWork, account_id: str, pricing: PricingConfig, now: datetime
) -> UserCapabilities:
    """What an account may currently do.

    Raises:
        AccountNotFoundError: If the account does not exist.
    """
    with uow:
        account = uow.accounts.get(AccountId(account_id))
    return DomainOrchestrator(pricing).capabilities(account, now)
