"""Base class for handler tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING

import pytest

from tests.fixtures.datagen import OTHER_PERU_PHONE, build_account, build_property
from ubiqa.domain.entities.ids import AccountId, ListingId, PaymentId, PropertyId
from ubiqa.domain.value_objects.contact_info import ContactInfo

if TYPE_CHECKING:
    from ubiqa.adapters.clock import FixedClock
    from ubiqa.domain.entities.account import Account
    from ubiqa.domain.entities.listing import Listing
    from ubiqa.domain.entities.payment import Payment
    from ubiqa.domain.entities.property import Property
    from ubiqa.service_layer.messagebus import MessageBus

OWNER_ID = AccountId("acc-owner")
OTHER_ID = AccountId("acc-other")
HOUSE_ID = PropertyId("prop-1")


class HandlerTestBase:
    """Base class for handler tests providing common setup and utilities."""

    bus: MessageBus
    clock: FixedClock

    # declare what fixtures seeding needs (subclasses can override)
    seed_uses: tuple[str, ...] = ()
    fx: SimpleNamespace

    @pytest.fixture(autouse=True)
    def _attach_bus(self, request, make_test_app):
        """Fresh bus per test; seed using any fixtures declared in seed_uses."""
        app = make_test_app()
        self.bus = app.message_bus
        self.clock = app.clock

        # Make a handy namespace of requested fixtures available as self.fx
        fx = {name: request.getfixturevalue(name) for name in self.seed_uses}
        self.fx = SimpleNamespace(**fx)

        self._seed_bus(request)  # generic: can pull *any* fixture by name
        self.reset_committed()

    def _seed_bus(self, request) -> None:
        """Override to preload the bus. Use request.getfixturevalue(...) as needed."""

    # --- Seeding helpers ---

    def seed_account(self, account: Account | None = None) -> Account:
        """Store an account (the verified owner by default)."""
        account = account or build_account()
        with self.bus.uow as uow:
            uow.accounts.add(account)
            uow.commit()
        return account

    def seed_other_account(self) -> Account:
        """Store a second verified account with its own email and phone."""
        return self.seed_account(
            build_account(
                id=OTHER_ID,
                email="luis.rivas@example.com",
                name="Luis Rivas",
                contact=ContactInfo.create(OTHER_PERU_PHONE),
            )
        )

    def seed_property(
        self, prop: Property | None = None, owner_id: AccountId = OWNER_ID
    ) -> Property:
        """Store a property (the default house) for `owner_id`."""
        prop = prop or build_property()
        with self.bus.uow as uow:
            uow.properties.add(prop, owner_id)
            uow.commit()
        return prop

    def seed_listing(
        self,
        listing: Listing,
        owner_id: AccountId = OWNER_ID,
        property_id: PropertyId = HOUSE_ID,
    ) -> Listing:
        """Store `listing` for an existing owner and property."""
        with self.bus.uow as uow:
            uow.listings.add(listing, owner_id, property_id)
            uow.commit()
        return listing

    # --- Read helpers ---

    def stored_listing(self, listing_id: str) -> Listing:
        """Committed state of a listing."""
        with self.bus.uow as uow:
            return uow.listings.get(ListingId(listing_id))

    def stored_payment(self, payment_id: str) -> Payment:
        """Committed state of a payment."""
        with self.bus.uow as uow:
            return uow.payments.get(PaymentId(payment_id))

    # --- Assertions ---

    def assert_committed(self) -> None:
        """Assert that the unit of work was committed."""
        assert hasattr(self.bus.uow, "committed")
        assert self.bus.uow.committed is True

    def assert_not_committed(self) -> None:
        """Assert that the unit of work was not committed."""
        assert hasattr(self.bus.uow, "committed")
        assert self.bus.uow.committed is False

    def reset_committed(self) -> None:
        """Reset the committed flag on the unit of work."""
        if hasattr(self.bus.uow, "committed"):
            self.bus.uow.committed = False
