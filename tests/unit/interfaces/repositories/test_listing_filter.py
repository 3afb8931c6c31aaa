"""Unit tests for ListingFilter."""

from __future__ import annotations

import pytest

from tests.fixtures.datagen import CENTER_LAT, build_listing, build_location, build_property
from ubiqa.domain.entities.ids import AccountId
from ubiqa.domain.entities.property import OperationType, PropertyType
from ubiqa.domain.value_objects.price import Currency, Price
from ubiqa.interfaces.repositories import ListingFilter, ListingWithDetails


def details(price: Price = Price.dollars(150_000), **property_overrides) -> ListingWithDetails:
    """A house listing with its property."""
    return ListingWithDetails(
        build_listing(price=price),
        build_property(**property_overrides),
        AccountId("acc-owner"),
    )


class TestValidation:
    """Filters reject impossible criteria when built."""

    @staticmethod
    @pytest.mark.parametrize("radius", [0, -1.5])
    def test_radius_must_be_positive(radius: float):
        """Zero or negative radii are rejected."""
        with pytest.raises(ValueError, match="Search radius must be positive"):
            ListingFilter(radius_km=radius)

    @staticmethod
    def test_radius_upper_bound():
        """Radii above 25 km are rejected."""
        with pytest.raises(ValueError):
            ListingFilter(radius_km=25.5)
        assert ListingFilter(radius_km=25).radius_km == 25

    @staticmethod
    def test_bounds_share_currency():
        """Mixed-currency bounds are rejected."""
        with pytest.raises(ValueError, match="Price bounds must share a currency"):
            ListingFilter(min_price=Price.soles(1_000), max_price=Price.dollars(900))

    @staticmethod
    def test_min_not_above_max():
        """An inverted range is rejected."""
        with pytest.raises(ValueError, match="Minimum price cannot exceed maximum price"):
            ListingFilter(min_price=Price.dollars(900), max_price=Price.dollars(800))


class TestMatches:
    """Tests for ListingFilter.matches."""

    @staticmethod
    def test_empty_filter_matches_everything():
        """Unset criteria do not filter."""
        assert ListingFilter().matches(details())

    @staticmethod
    def test_property_criteria():
        """Operation and property type compare against the property."""
        assert ListingFilter(operation_type=OperationType.VENTA).matches(details())
        assert not ListingFilter(operation_type=OperationType.ALQUILER).matches(details())
        assert not ListingFilter(property_type=PropertyType.TERRENO).matches(details())

    @staticmethod
    def test_currency():
        """The currency criterion compares the listing price."""
        assert ListingFilter(currency=Currency.USD).matches(details())
        assert not ListingFilter(currency=Currency.PEN).matches(details())

    @staticmethod
    def test_bounds_in_other_currency_never_match():
        """A dollar listing does not match a soles bound."""
        assert not ListingFilter(min_price=Price.soles(500)).matches(details())
        assert not ListingFilter(max_price=Price.soles(2_000_000)).matches(details())

    @staticmethod
    def test_inclusive_bounds():
        """Prices equal to a bound match."""
        criteria = ListingFilter(
            min_price=Price.dollars(150_000), max_price=Price.dollars(150_000)
        )
        assert criteria.matches(details())
        assert not criteria.matches(details(Price.dollars(150_001)))

    @staticmethod
    def test_radius():
        """Properties farther than the radius do not match."""
        far = details(location=build_location(lat=CENTER_LAT, lon=-80.75))
        assert ListingFilter(center=build_location()).matches(details())
        assert not ListingFilter(center=build_location()).matches(far)
        assert ListingFilter(center=build_location(), radius_km=15).matches(far)
