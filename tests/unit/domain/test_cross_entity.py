"""Unit tests for rules that relate several entities."""

from datetime import timedelta
from decimal import Decimal

import pytest

from tests.fixtures.datagen import (
    NOW,
    OTHER_PERU_PHONE,
    build_account,
    build_listing,
    build_payment,
    build_property,
)
from ubiqa.domain import cross_entity
from ubiqa.domain.entities.property import PropertyType
from ubiqa.domain.pricing import PricingConfig
from ubiqa.domain.value_objects.contact_info import ContactInfo
from ubiqa.domain.value_objects.price import Price
from ubiqa.domain.value_objects.property_specs import PropertySpecs

# pylint: disable=magic-value-comparison


class TestContactViolations:
    """The listing contact must use the owner's phone."""

    @staticmethod
    def test_matching_phone() -> None:
        """Test that the same number passes."""
        assert not cross_entity.contact_violations(build_account(), build_listing())

    @staticmethod
    def test_different_phone() -> None:
        """Test that another number is flagged."""
        listing = build_listing(contact=ContactInfo.create(OTHER_PERU_PHONE))
        assert cross_entity.contact_violations(build_account(), listing) == [
            "Contact phone should match user verified phone number"
        ]

    @staticmethod
    def test_skipped_when_either_side_has_no_contact() -> None:
        """Test that the rule needs both contacts."""
        assert not cross_entity.contact_violations(
            build_account(verified=False), build_listing()
        )
        assert not cross_entity.contact_violations(
            build_account(), build_listing(contact=None)
        )


class TestPriceSanity:
    """Tests for price plausibility relative to the property."""

    @staticmethod
    def test_reasonable_price() -> None:
        """Test that US$ 1,250/m² passes."""
        assert not cross_entity.price_sanity_violations(build_property(), build_listing())

    @staticmethod
    def test_cheap_land() -> None:
        """Test the land floor."""
        land = build_property(
            property_type=PropertyType.TERRENO, specs=PropertySpecs.land(500)
        )
        listing = build_listing(price=Price.soles(9_000))
        assert cross_entity.price_sanity_violations(land, listing) == [
            "Terreno price seems unusually low"
        ]

    @staticmethod
    @pytest.mark.parametrize(
        "amount, flagged", [("9999.99", True), ("10000", False), ("10000.01", False)]
    )
    def test_land_floor_boundary(amount: str, flagged: bool) -> None:
        """Test that the land floor itself is an acceptable price."""
        land = build_property(
            property_type=PropertyType.TERRENO, specs=PropertySpecs.land(500)
        )
        listing = build_listing(price=Price.soles(amount))
        assert bool(cross_entity.price_sanity_violations(land, listing)) is flagged

    @staticmethod
    @pytest.mark.parametrize(
        "price, message",
        [
            (Price.soles(6_000), "Price per square meter seems unusually low"),
            (Price.soles(1_990_000), None),
            (Price.dollars(600_000), None),
        ],
    )
    def test_price_per_square_meter(price: Price, message: str | None) -> None:
        """Test per-m² bounds on a 120 m² house."""
        violations = cross_entity.price_sanity_violations(
            build_property(), build_listing(price=price)
        )
        assert violations == ([message] if message else [])

    @staticmethod
    def test_expensive_small_unit() -> None:
        """Test the per-m² ceiling."""
        tiny = build_property(
            property_type=PropertyType.OFICINA, specs=PropertySpecs.land(10)
        )
        listing = build_listing(price=Price.dollars(600_000))
        assert cross_entity.price_sanity_violations(tiny, listing) == [
            "Price per square meter seems unusually high"
        ]


class TestPaymentListingViolations:
    """Preconditions for applying a payment to a listing."""

    @staticmethod
    def test_all_preconditions_hold() -> None:
        """Test the happy path."""
        payment = build_payment().mark_processing("chr_1", now=NOW)
        listing = build_listing().mark_payment_pending(now=NOW)
        assert not cross_entity.payment_listing_violations(
            payment, listing, PricingConfig(), now=NOW
        )

    @staticmethod
    def test_every_violation_is_reported() -> None:
        """Test status, amount and expiry checks together."""
        payment = build_payment(price=Price.soles(Decimal("18.99")))
        violations = cross_entity.payment_listing_violations(
            payment, build_listing(), PricingConfig(), now=NOW + timedelta(hours=3)
        )
        assert violations == [
            "Payment must be in processing state",
            "Listing must be in payment pending state",
            "Payment amount does not match listing fee",
            "Payment has expired",
        ]

    @staticmethod
    def test_currency_counts_for_fee_match() -> None:
        """Test that the same amount in dollars does not match a soles fee."""
        payment = build_payment(price=Price.dollars(19)).mark_processing("c", now=NOW)
        listing = build_listing().mark_payment_pending(now=NOW)
        assert cross_entity.payment_listing_violations(
            payment, listing, PricingConfig(), now=NOW
        ) == ["Payment amount does not match listing fee"]
