"""Monetary amount value object and related helpers.

A `Price` is an amount with at most two decimal places in one of the two
supported currencies. Construction only enforces what every amount of money
must satisfy (positive, whole cents); the market-specific bounds that apply
to property prices are reported by `Price.market_violations()` and enforced
by the listing that carries the price. This lets the same type represent the
small listing fee and large property prices.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import assert_never

from ubiqa.domain.errors import (
    CurrencyMismatchError,
    PriceValidationError,
    UnsupportedCurrencyError,
    ValidationError,
)
from ubiqa.domain.utils import CENT, round_half_up, to_decimal

# pylint: disable=magic-value-comparison

PEN_PER_USD = Decimal("3.8")  # rough conversion used only for categorisation
MILLION = Decimal(1_000_000)
THOUSAND = Decimal(1_000)

DISPLAY_PATTERN = re.compile(r"^\s*(S/|US\$)\s*([\d,]+(?:\.\d{1,2})?)\s*$")


class Currency(Enum):
    """Enumeration of supported currencies (ISO 4217 codes)."""

    PEN = "PEN"
    USD = "USD"

    @property
    def code(self) -> str:
        """ISO 4217 currency code."""
        return self.value

    @property
    def symbol(self) -> str:
        """Symbol used in front of displayed amounts."""
        match self:
            case Currency.PEN:
                return "S/"
            case Currency.USD:
                return "US$"
            case _:
                assert_never(self)

    @property
    def display_name(self) -> str:
        """Localized currency name."""
        match self:
            case Currency.PEN:
                return "Soles"
            case Currency.USD:
                return "Dólares"
            case _:
                assert_never(self)

    @classmethod
    def from_code(cls, code: str) -> Currency:
        """Return the currency for an ISO code (case-insensitive).

        Raises:
            UnsupportedCurrencyError: If the code is not PEN or USD.
        """
        try:
            return cls(code.strip().upper())
        except ValueError as e:
            raise UnsupportedCurrencyError(code) from e

    @classmethod
    def from_symbol(cls, symbol: str) -> Currency:
        """Return the currency whose display symbol is `symbol`."""
        for currency in cls:
            if currency.symbol == symbol:
                return currency
        raise UnsupportedCurrencyError(symbol)


# Market bounds for property prices, per currency (inclusive).
MARKET_BOUNDS: dict[Currency, tuple[Decimal, Decimal]] = {
    Currency.PEN: (Decimal(500), Decimal(2_000_000)),
    Currency.USD: (Decimal(200), Decimal(600_000)),
}


class MarketCategory(Enum):
    """Price segment of a property, measured in soles."""

    ECONOMIC = "economic"
    MID_MARKET = "midMarket"
    UPSCALE = "upscale"
    LUXURY = "luxury"

    @property
    def label(self) -> str:
        """Spanish label shown to users."""
        match self:
            case MarketCategory.ECONOMIC:
                return "Económico"
            case MarketCategory.MID_MARKET:
                return "Rango Medio"
            case MarketCategory.UPSCALE:
                return "Alto Valor"
            case MarketCategory.LUXURY:
                return "Lujo"
            case _:
                assert_never(self)

    @property
    def range_description(self) -> str:
        """Human-readable range covered by the segment."""
        match self:
            case MarketCategory.ECONOMIC:
                return "Hasta S/ 150,000"
            case MarketCategory.MID_MARKET:
                return "S/ 150,000 - 300,000"
            case MarketCategory.UPSCALE:
                return "S/ 300,000 - 600,000"
            case MarketCategory.LUXURY:
                return "Más de S/ 600,000"
            case _:
                assert_never(self)


@dataclass(frozen=True, slots=True)
class Price:
    """An amount of money in a supported currency.

    Conventions:
      - `amount` is a `Decimal` quantized to cents.
      - Ordering comparisons between different currencies raise
        `CurrencyMismatchError`; equality simply returns False.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        violations: list[str] = []
        amount: Decimal | None
        try:
            amount = to_decimal(self.amount)
        except (InvalidOperation, TypeError, ValueError):
            amount = None
            violations.append("Price amount must be a number")

        if amount is not None:
            if not amount.is_finite() or amount <= 0:
                violations.append(
                    "Price amount must be greater than 0 for valid property transactions"
                )
            if amount.is_finite() and amount.normalize().as_tuple().exponent < -2:  # type: ignore[operator]
                violations.append(
                    "Price precision cannot exceed 2 decimal places "
                    "(currency subdivision limit)"
                )
        if not isinstance(self.currency, Currency):
            violations.append("Currency must be PEN or USD")
        if violations or amount is None:
            raise PriceValidationError("Invalid price data", violations)

        object.__setattr__(self, "amount", amount.quantize(CENT))

    # --- Factories ---

    @classmethod
    def of(cls, amount: Decimal | int | float | str, currency_code: str) -> Price:
        """Build a price from an amount and an ISO currency code."""
        return cls(to_decimal(amount), Currency.from_code(currency_code))

    @classmethod
    def soles(cls, amount: Decimal | int | float | str) -> Price:
        """Build a price in Peruvian soles."""
        return cls(to_decimal(amount), Currency.PEN)

    @classmethod
    def dollars(cls, amount: Decimal | int | float | str) -> Price:
        """Build a price in US dollars."""
        return cls(to_decimal(amount), Currency.USD)

    @classmethod
    def parse(cls, text: str) -> Price:
        """Parse a displayed price such as ``"S/ 1,500"`` or ``"US$ 19.50"``.

        Raises:
            PriceValidationError: If the text is not a displayed price.
        """
        match = DISPLAY_PATTERN.match(text)
        if match is None:
            raise PriceValidationError(
                "Invalid price data", [f"Cannot parse price from {text!r}"]
            )
        symbol, digits = match.groups()
        return cls(Decimal(digits.replace(",", "")), Currency.from_symbol(symbol))

    # --- Formatting ---

    def format(self) -> str:
        """Display form with thousands separators, e.g. ``"S/ 1,500"``."""
        return f"{self.currency.symbol} {format_amount(self.amount)}"

    def format_compact(self) -> str:
        """Compact form for map markers, e.g. ``"US$ 1.2M"`` or ``"S/ 250K"``."""
        if self.amount >= MILLION:
            return f"{self.currency.symbol} {round_half_up(self.amount / MILLION, 1)}M"
        if self.amount >= THOUSAND:
            return f"{self.currency.symbol} {round_half_up(self.amount / THOUSAND)}K"
        return f"{self.currency.symbol} {round_half_up(self.amount)}"

    def format_with_currency_name(self) -> str:
        """Amount followed by the currency name, e.g. ``"1,500 Soles"``."""
        return f"{format_amount(self.amount)} {self.currency.display_name}"

    @staticmethod
    def format_range(minimum: Price, maximum: Price) -> str:
        """Display a price range, sharing the symbol when currencies agree."""
        if minimum.currency != maximum.currency:
            return f"{minimum.format_compact()} - {maximum.format()}"
        return (
            f"{minimum.currency.symbol} {format_amount(minimum.amount)} - "
            f"{format_amount(maximum.amount)}"
        )

    def per_square_meter(self, area: float | Decimal) -> Price:
        """Return the price of one square meter for a property of `area` m².

        Raises:
            ValueError: If `area` is not positive.
        """
        area_value = to_decimal(area)
        if area_value <= 0:
            raise ValueError(
                "Total area must be greater than 0 to calculate price per square meter"
            )
        return Price(round_half_up(self.amount / area_value, 2), self.currency)

    def format_per_square_meter(self, area: float | Decimal) -> str:
        """Display the price per square meter, e.g. ``"US$ 1,250/m²"``."""
        return f"{self.per_square_meter(area).format()}/m²"

    # --- Comparison ---

    def compare(self, other: Price) -> int:
        """Return -1, 0 or 1 comparing the amounts of two same-currency prices.

        Raises:
            CurrencyMismatchError: If the currencies differ.
        """
        self._require_same_currency(other)
        if self.amount < other.amount:
            return -1
        if self.amount > other.amount:
            return 1
        return 0

    def __lt__(self, other: Price) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: Price) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: Price) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: Price) -> bool:
        return self.compare(other) >= 0

    def is_within(self, minimum: Price, maximum: Price) -> bool:
        """True if this price lies in [minimum, maximum] of the same currency.

        A currency mismatch is reported as "not within range", not as an error.
        """
        if self.currency != minimum.currency or self.currency != maximum.currency:
            return False
        return minimum.amount <= self.amount <= maximum.amount

    def percentage_difference(self, other: Price) -> float:
        """Percentage by which this price differs from `other`.

        Raises:
            CurrencyMismatchError: If the currencies differ.
        """
        self._require_same_currency(other)
        return float((self.amount - other.amount) / other.amount * 100)

    # --- Market rules ---

    def soles_equivalent(self) -> Decimal:
        """Amount expressed in soles using the categorisation rate."""
        if self.currency is Currency.USD:
            return self.amount * PEN_PER_USD
        return self.amount

    @property
    def market_category(self) -> MarketCategory:
        """Market segment this price falls in."""
        soles = self.soles_equivalent()
        if soles < 150_000:
            return MarketCategory.ECONOMIC
        if soles < 300_000:
            return MarketCategory.MID_MARKET
        if soles < 600_000:
            return MarketCategory.UPSCALE
        return MarketCategory.LUXURY

    def market_violations(self) -> list[str]:
        """Rules broken when this amount is used as a property price."""
        minimum, maximum = MARKET_BOUNDS[self.currency]
        violations: list[str] = []
        symbol = self.currency.symbol
        code = self.currency.code
        if self.amount > maximum:
            violations.append(
                f"{code} price cannot exceed {symbol} {format_amount(maximum)} "
                "(exceeds typical Piura market range)"
            )
        if self.amount < minimum:
            violations.append(
                f"{code} price cannot be less than {symbol} {format_amount(minimum)} "
                "(below realistic property minimum)"
            )
        return violations

    def _require_same_currency(self, other: Price) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency.code, other.currency.code)

    def __str__(self) -> str:
        return self.format()


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators and cents only when non-zero."""
    cents_total = int(round_half_up(amount, 2) * 100)
    whole, cents = divmod(cents_total, 100)
    if cents:
        return f"{whole:,}.{cents:02d}"
    return f"{whole:,}"


# ============================================================================
#                           Price domain helpers
# ============================================================================

LOW_PRICE_THRESHOLDS: dict[Currency, Decimal] = {
    Currency.PEN: Decimal(30_000),
    Currency.USD: Decimal(8_000),
}

SEARCH_FILTER_THRESHOLDS: dict[Currency, tuple[int, ...]] = {
    Currency.PEN: (0, 50_000, 100_000, 200_000, 300_000, 500_000, 750_000, 1_000_000),
    Currency.USD: (0, 15_000, 30_000, 60_000, 100_000, 150_000, 250_000, 400_000),
}


def listing_price_advisories(price: Price) -> list[str]:
    """Soft warnings for a listing price; they do not block publication."""
    advisories: list[str] = []
    threshold = LOW_PRICE_THRESHOLDS[price.currency]
    if price.amount < threshold:
        advisories.append(
            f"{price.currency.code} property price seems unusually low for Piura "
            f"market (below {price.currency.symbol} {format_amount(threshold)})"
        )
    if price.amount > 10_000 and price.amount % 100 != 0:
        advisories.append(
            "Large property prices should be rounded to hundreds for better "
            "presentation"
        )
    return advisories


def typical_currency_for_operation(operation: str) -> Currency:
    """Currency usually quoted for an operation ("venta" or "alquiler")."""
    match operation.strip().lower():
        case "venta":
            return Currency.USD
        case _:
            return Currency.PEN


def search_filter_thresholds(currency: Currency) -> list[Decimal]:
    """Price steps offered by the search filter for `currency`."""
    return [Decimal(step) for step in SEARCH_FILTER_THRESHOLDS[currency]]


def to_url_parameter(price: Price) -> str:
    """Encode a price as ``"<whole amount>_<ISO code>"`` for URLs."""
    return f"{int(price.amount)}_{price.currency.code}"


def from_url_parameter(value: str) -> Price | None:
    """Decode a price produced by `to_url_parameter`, or None if malformed."""
    parts = value.split("_")
    if len(parts) != 2:
        return None
    try:
        return Price(Decimal(parts[0]), Currency.from_code(parts[1]))
    except (InvalidOperation, UnsupportedCurrencyError, ValidationError):
        return None
