"""Unit tests for the Price value object and its helpers."""

from decimal import Decimal

import pytest

from ubiqa.domain.errors import (
    CurrencyMismatchError,
    PriceValidationError,
    UnsupportedCurrencyError,
)
from ubiqa.domain.value_objects.price import (
    Currency,
    MarketCategory,
    Price,
    from_url_parameter,
    listing_price_advisories,
    to_url_parameter,
    typical_currency_for_operation,
)

# pylint: disable=magic-value-comparison


class TestCurrency:
    """Tests for the Currency enum."""

    @staticmethod
    @pytest.mark.parametrize("code", ["PEN", "pen", " Pen "])
    def test_from_code_is_case_insensitive(code: str) -> None:
        """Test that codes are matched regardless of case and padding."""
        assert Currency.from_code(code) is Currency.PEN

    @staticmethod
    def test_from_code_rejects_unknown_currency() -> None:
        """Test that unsupported codes raise UnsupportedCurrencyError."""
        with pytest.raises(UnsupportedCurrencyError) as excinfo:
            Currency.from_code("EUR")
        assert excinfo.value.code == "EUR"

    @staticmethod
    def test_symbols() -> None:
        """Test the display symbols of both currencies."""
        assert Currency.PEN.symbol == "S/"
        assert Currency.USD.symbol == "US$"


class TestPriceConstruction:
    """Tests for Price validation."""

    @staticmethod
    def test_amount_is_quantized_to_cents() -> None:
        """Test that amounts are stored with exactly two decimals."""
        price = Price(Decimal("19"), Currency.PEN)
        assert price.amount == Decimal("19.00")
        assert str(price.amount) == "19.00"

    @staticmethod
    @pytest.mark.parametrize("amount", [0, -1, "-0.01"])
    def test_non_positive_amount_is_rejected(amount) -> None:
        """Test that zero and negative amounts are rejected."""
        with pytest.raises(PriceValidationError) as excinfo:
            Price.soles(amount)
        assert excinfo.value.violations == (
            "Price amount must be greater than 0 for valid property transactions",
        )

    @staticmethod
    def test_more_than_two_decimals_is_rejected() -> None:
        """Test that sub-cent precision is rejected."""
        with pytest.raises(PriceValidationError, match="2 decimal places"):
            Price.soles("19.999")

    @staticmethod
    def test_non_numeric_amount_is_rejected() -> None:
        """Test that text that is not a number is rejected."""
        with pytest.raises(PriceValidationError, match="Price amount must be a number"):
            Price("abc", Currency.PEN)  # type: ignore[arg-type]

    @staticmethod
    def test_non_numeric_amount_and_bad_currency_are_both_reported() -> None:
        """Test that a bad amount does not hide a bad currency."""
        with pytest.raises(PriceValidationError) as excinfo:
            Price("abc", "EUR")  # type: ignore[arg-type]
        assert excinfo.value.violations == (
            "Price amount must be a number",
            "Currency must be PEN or USD",
        )

    @staticmethod
    def test_float_input_does_not_carry_binary_noise() -> None:
        """Test that float inputs are converted through their repr."""
        assert Price.dollars(19.9).amount == Decimal("19.90")

    @staticmethod
    def test_of_uses_currency_code() -> None:
        """Test the generic factory."""
        assert Price.of(1500, "usd") == Price.dollars(1500)

    @staticmethod
    def test_large_amounts_are_valid_prices() -> None:
        """Test that construction does not apply market bounds."""
        assert Price.soles(5_000_000).amount == Decimal("5000000.00")


class TestPriceFormatting:
    """Tests for Price display helpers."""

    @staticmethod
    @pytest.mark.parametrize(
        "price, expected",
        [
            (Price.soles(1500), "S/ 1,500"),
            (Price.soles("19.50"), "S/ 19.50"),
            (Price.dollars(150_000), "US$ 150,000"),
        ],
    )
    def test_format(price: Price, expected: str) -> None:
        """Test that cents are shown only when non-zero."""
        assert price.format() == expected
        assert str(price) == expected

    @staticmethod
    @pytest.mark.parametrize(
        "price, expected",
        [
            (Price.dollars(1_200_000), "US$ 1.2M"),
            (Price.soles(250_000), "S/ 250K"),
            (Price.soles(850), "S/ 850"),
        ],
    )
    def test_format_compact(price: Price, expected: str) -> None:
        """Test compact formatting for map markers."""
        assert price.format_compact() == expected

    @staticmethod
    def test_format_with_currency_name() -> None:
        """Test the amount followed by the currency name."""
        assert Price.soles(1500).format_with_currency_name() == "1,500 Soles"

    @staticmethod
    def test_format_range_same_currency() -> None:
        """Test that a same-currency range shares the symbol."""
        text = Price.format_range(Price.soles(100_000), Price.soles(200_000))
        assert text == "S/ 100,000 - 200,000"

    @staticmethod
    def test_parse_displayed_price() -> None:
        """Test that display strings parse back into prices."""
        assert Price.parse("S/ 1,500") == Price.soles(1500)
        assert Price.parse("US$ 19.50") == Price.dollars("19.50")

    @staticmethod
    def test_parse_rejects_unknown_format() -> None:
        """Test that unrecognized text raises PriceValidationError."""
        with pytest.raises(PriceValidationError, match="Cannot parse price"):
            Price.parse("EUR 5")

    @staticmethod
    def test_per_square_meter() -> None:
        """Test the price of one square meter."""
        price = Price.dollars(150_000)
        assert price.per_square_meter(120) == Price.dollars(1250)
        assert price.format_per_square_meter(120) == "US$ 1,250/m²"

    @staticmethod
    def test_per_square_meter_requires_positive_area() -> None:
        """Test that a zero area raises ValueError."""
        with pytest.raises(ValueError, match="greater than 0"):
            Price.soles(1000).per_square_meter(0)


class TestPriceComparison:
    """Tests for ordering and range checks."""

    @staticmethod
    def test_same_currency_ordering() -> None:
        """Test ordering operators on same-currency prices."""
        assert Price.soles(100) < Price.soles(200)
        assert Price.soles(200) >= Price.soles(200)
        assert Price.soles(100).compare(Price.soles(100)) == 0

    @staticmethod
    def test_ordering_across_currencies_raises() -> None:
        """Test that comparing PEN with USD raises CurrencyMismatchError."""
        with pytest.raises(CurrencyMismatchError, match=r"\(PEN vs USD\)"):
            _ = Price.soles(100) < Price.dollars(100)

    @staticmethod
    def test_equality_across_currencies_is_false() -> None:
        """Test that equal amounts in different currencies are not equal."""
        assert Price.soles(100) != Price.dollars(100)

    @staticmethod
    def test_is_within() -> None:
        """Test inclusive range checks, with mismatches reported as outside."""
        low, high = Price.soles(100), Price.soles(200)
        assert Price.soles(100).is_within(low, high)
        assert not Price.soles("200.01").is_within(low, high)
        assert not Price.dollars(150).is_within(low, high)

    @staticmethod
    def test_percentage_difference() -> None:
        """Test the percentage difference between two prices."""
        assert Price.soles(110).percentage_difference(Price.soles(100)) == 10.0


class TestMarketRules:
    """Tests for market categorisation and bounds."""

    @staticmethod
    @pytest.mark.parametrize(
        "price, category",
        [
            (Price.soles(100_000), MarketCategory.ECONOMIC),
            (Price.dollars(50_000), MarketCategory.MID_MARKET),
            (Price.soles(450_000), MarketCategory.UPSCALE),
            (Price.dollars(200_000), MarketCategory.LUXURY),
        ],
    )
    def test_market_category_uses_soles_equivalent(
        price: Price, category: MarketCategory
    ) -> None:
        """Test that dollar amounts are converted before categorising."""
        assert price.market_category is category

    @staticmethod
    def test_market_violations_above_maximum() -> None:
        """Test the message for a price above the PEN market bound."""
        assert Price.soles(2_500_000).market_violations() == [
            "PEN price cannot exceed S/ 2,000,000 (exceeds typical Piura market range)"
        ]

    @staticmethod
    def test_market_violations_below_minimum() -> None:
        """Test the message for a price below the USD market bound."""
        assert Price.dollars(100).market_violations() == [
            "USD price cannot be less than US$ 200 (below realistic property minimum)"
        ]

    @staticmethod
    @pytest.mark.parametrize(
        "price", [Price.soles(500), Price.soles(2_000_000), Price.dollars(600_000)]
    )
    def test_market_bounds_are_inclusive(price: Price) -> None:
        """Test that prices on the bounds are accepted."""
        assert not price.market_violations()


def test_url_parameter_round_trip() -> None:
    """Test encoding a price for URLs and decoding it back."""
    assert to_url_parameter(Price.soles(1500)) == "1500_PEN"
    assert from_url_parameter("1500_PEN") == Price.soles(1500)


@pytest.mark.parametrize("value", ["1500", "x_PEN", "10_EUR", "0_PEN", "1_2_PEN"])
def test_from_url_parameter_malformed_returns_none(value: str) -> None:
    """Test that malformed URL parameters decode to None."""
    assert from_url_parameter(value) is None


def test_typical_currency_for_operation() -> None:
    """Test that sales are quoted in dollars and rentals in soles."""
    assert typical_currency_for_operation("venta") is Currency.USD
    assert typical_currency_for_operation("alquiler") is Currency.PEN


def test_listing_price_advisories() -> None:
    """Test soft warnings for low and unrounded prices."""
    assert listing_price_advisories(Price.soles(20_000)) == [
        "PEN property price seems unusually low for Piura market (below S/ 30,000)"
    ]
    assert listing_price_advisories(Price.dollars(150_050)) == [
        "Large property prices should be rounded to hundreds for better presentation"
    ]
    assert not listing_price_advisories(Price.dollars(150_000))
