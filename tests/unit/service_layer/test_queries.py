"""Unit tests for the read-side queries."""

from datetime import timedelta

import pytest

from tests.fixtures.datagen import NOW, build_account, build_listing, build_property
from ubiqa.adapters.unit_of_work import InMemoryUnitOfWork
from ubiqa.domain.entities.ids import AccountId, ListingId, PropertyId
from ubiqa.domain.pricing import PricingConfig
from ubiqa.interfaces.repositories import (
    AccountNotFoundError,
    ListingFilter,
    ListingNotFoundError,
)
from ubiqa.service_layer import queries

# pylint: disable=redefined-outer-name, magic-value-comparison

OWNER = AccountId("acc-owner")
HOUSE = PropertyId("prop-1")


@pytest.fixture
def uow() -> InMemoryUnitOfWork:
    """A store with one owner, their house, a draft and two active listings."""
    unit = InMemoryUnitOfWork()
    with unit:
        unit.accounts.add(build_account())
        unit.properties.add(build_property(), OWNER)
        unit.listings.add(build_listing(id=ListingId("lst-draft")), OWNER, HOUSE)
        unit.listings.add(
            build_listing(id=ListingId("lst-a")).activate(now=NOW), OWNER, HOUSE
        )
        later = NOW + timedelta(hours=1)
        unit.listings.add(
            build_listing(id=ListingId("lst-b"), created_at=later, updated_at=later)
            .activate(now=later),
            OWNER,
            HOUSE,
        )
        unit.commit()
    unit.committed = False
    return unit


def test_search_returns_live_listings_newest_first(uow):
    """Drafts are hidden and later publications come first."""
    found = queries.search_listings(uow, ListingFilter(), NOW + timedelta(days=1))
    assert [d.listing.id.value for d in found] == ["lst-b", "lst-a"]
    assert all(d.owner_id == OWNER for d in found)


def test_search_hides_expired_windows(uow):
    """Past the first window only the later listing is live."""
    found = queries.search_listings(
        uow, ListingFilter(), NOW + timedelta(days=30, minutes=30)
    )
    assert [d.listing.id.value for d in found] == ["lst-b"]


def test_listing_details(uow):
    """Details join the property and the owner."""
    details = queries.listing_details(uow, "lst-a")
    assert details.property.id == HOUSE
    assert details.owner_id == OWNER


def test_listing_details_missing(uow):
    """An unknown listing raises."""
    with pytest.raises(ListingNotFoundError):
        queries.listing_details(uow, "lst-404")


def test_listings_for_owner(uow):
    """Every status is included, newest first."""
    owned = queries.listings_for_owner(uow, "acc-owner")
    assert [listing.id.value for listing in owned][0] == "lst-b"
    assert len(owned) == 3


def test_due_for_expiry(uow):
    """Only active listings past their window are due."""
    due = queries.due_for_expiry(uow, NOW + timedelta(days=30, minutes=30))
    assert [listing.id.value for listing in due] == ["lst-a"]


def test_queries_never_commit(uow):
    """Reading leaves the unit of work uncommitted."""
    queries.search_listings(uow, ListingFilter(), NOW)
    queries.listings_for_owner(uow, "acc-owner")
    assert uow.committed is False


class TestAccountCapabilities:
    """Tests for account_capabilities."""

    @staticmethod
    def test_verified_new_account(uow):
        """A verified account registered today may do everything."""
        caps = queries.account_capabilities(uow, "acc-owner", PricingConfig(), NOW)
        assert caps.can_create_listings
        assert caps.can_make_payments
        assert caps.is_new_user
        assert not caps.needs_phone_verification

    @staticmethod
    def test_no_longer_new(uow):
        """The new-account window is seven days."""
        caps = queries.account_capabilities(
            uow, "acc-owner", PricingConfig(), NOW + timedelta(days=8)
        )
        assert not caps.is_new_user

    @staticmethod
    def test_missing_account(uow):
        """An unknown account raises."""
        with pytest.raises(AccountNotFoundError):
            queries.account_capabilities(uow, "acc-404", PricingConfig(), NOW)
