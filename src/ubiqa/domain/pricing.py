"""Listing fee configuration and pricing rules.

`PricingConfig` is built once at startup (see `ubiqa.config`) and injected
into the services that need it; nothing in the domain reads a global fee.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from ubiqa.domain.errors import PricingValidationError
from ubiqa.domain.utils import round_half_up, to_decimal
from ubiqa.domain.value_objects.price import Currency, Price

# pylint: disable=magic-value-comparison

DEFAULT_LISTING_FEE = Decimal("19.00")
LISTING_DURATION_DAYS = 30
LISTING_DURATION = timedelta(days=LISTING_DURATION_DAYS)
DEFAULT_PAYMENT_EXPIRY = timedelta(hours=2)
DEFAULT_NEW_ACCOUNT_WINDOW = timedelta(days=7)
DEFAULT_EXPIRING_SOON_WINDOW = timedelta(days=3)

MIN_LISTING_FEE = Decimal("1.00")
MAX_LISTING_FEE = Decimal("200.00")
COMPETITIVE_FACTOR = Decimal("1.2")


def is_valid_listing_fee(amount: Decimal) -> bool:
    """True if `amount` is within the accepted listing fee range."""
    return MIN_LISTING_FEE <= amount <= MAX_LISTING_FEE


def is_competitive_fee(amount: Decimal, base_fee: Decimal = DEFAULT_LISTING_FEE) -> bool:
    """True if `amount` is at most 20% above `base_fee`."""
    return amount <= base_fee * COMPETITIVE_FACTOR


def multiple_listings_cost(count: int, unit_fee: Price) -> Decimal:
    """Total fee for publishing `count` listings; zero for non-positive counts."""
    if count <= 0:
        return Decimal("0.00")
    return unit_fee.amount * count


@dataclass(frozen=True, slots=True)
class PricingConfig:
    """Fees and time windows of the listing lifecycle.

    Attributes:
        listing_fee: Fee charged to publish one listing.
        payment_expiry: How long a pending payment may wait for completion.
        new_account_window: Age below which an account counts as new.
        expiring_soon_window: Remaining time below which a listing is
            "expiring soon".
    """

    listing_fee: Price = field(default_factory=lambda: Price.soles(DEFAULT_LISTING_FEE))
    payment_expiry: timedelta = DEFAULT_PAYMENT_EXPIRY
    new_account_window: timedelta = DEFAULT_NEW_ACCOUNT_WINDOW
    expiring_soon_window: timedelta = DEFAULT_EXPIRING_SOON_WINDOW

    def __post_init__(self) -> None:
        violations: list[str] = []
        if not is_valid_listing_fee(self.listing_fee.amount):
            violations.append(
                f"Listing fee must be between {MIN_LISTING_FEE} and {MAX_LISTING_FEE}"
            )
        for name in ("payment_expiry", "new_account_window", "expiring_soon_window"):
            if getattr(self, name) <= timedelta(0):
                violations.append(f"{name} must be a positive duration")
        if violations:
            raise PricingValidationError("Invalid pricing configuration", violations)

    @property
    def listing_duration_days(self) -> int:
        """How long a paid listing stays active; fixed by the listing rules."""
        return LISTING_DURATION_DAYS

    @property
    def listing_duration(self) -> timedelta:
        """Listing duration as a timedelta."""
        return LISTING_DURATION

    def current_pricing(self) -> ListingPricing:
        """Pricing offered to every account today (no promotions yet)."""
        return ListingPricing.standard(self)

    def breakdown(self) -> PriceBreakdown:
        """Line-by-line breakdown of the listing fee."""
        return PriceBreakdown.for_fee(self.listing_fee)


@dataclass(frozen=True, slots=True)
class ListingPricing:
    """Fee a user pays for one listing, possibly discounted by a promotion."""

    fee: Price
    base_fee: Price
    duration_days: int
    promotion_code: str | None = None
    promotion_expires_at: datetime | None = None

    @classmethod
    def standard(cls, config: PricingConfig) -> ListingPricing:
        """Undiscounted pricing."""
        return cls(
            fee=config.listing_fee,
            base_fee=config.listing_fee,
            duration_days=config.listing_duration_days,
        )

    @classmethod
    def promotional(
        cls,
        config: PricingConfig,
        discounted_fee: Decimal | int | float | str,
        promotion_code: str,
        expires_at: datetime | None = None,
    ) -> ListingPricing:
        """Pricing discounted by `promotion_code`.

        Raises:
            PricingValidationError: If the discounted fee is out of range.
        """
        amount = to_decimal(discounted_fee)
        if not is_valid_listing_fee(amount):
            raise PricingValidationError(
                "Invalid promotional pricing",
                [f"Listing fee must be between {MIN_LISTING_FEE} and {MAX_LISTING_FEE}"],
            )
        return cls(
            fee=Price(amount, config.listing_fee.currency),
            base_fee=config.listing_fee,
            duration_days=config.listing_duration_days,
            promotion_code=promotion_code,
            promotion_expires_at=expires_at,
        )

    @property
    def is_promotional(self) -> bool:
        """True when a promotion code applies."""
        return self.promotion_code is not None

    @property
    def savings(self) -> Decimal:
        """Base fee minus the charged fee; zero without a promotion."""
        if not self.is_promotional:
            return Decimal("0.00")
        return self.base_fee.amount - self.fee.amount

    def description(self) -> str:
        """Spanish summary, e.g. ``"S/ 19 por 30 días"``."""
        symbol = self.fee.currency.symbol
        text = f"{symbol} {round_half_up(self.fee.amount)} por {self.duration_days} días"
        if self.is_promotional:
            text += f" (Ahorro: {symbol} {round_half_up(self.savings)})"
        return text


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    """Components of the amount charged at checkout."""

    base: Decimal
    currency: Currency = Currency.PEN
    taxes: Decimal = Decimal("0.00")
    platform_fee: Decimal = Decimal("0.00")
    discount: Decimal = Decimal("0.00")

    @classmethod
    def for_fee(cls, fee: Price) -> PriceBreakdown:
        """Breakdown for a bare fee without taxes or discounts."""
        return cls(base=fee.amount, currency=fee.currency)

    @property
    def total(self) -> Decimal:
        """Base plus taxes and platform fee, minus discount."""
        return self.base + self.taxes + self.platform_fee - self.discount

    def lines(self) -> list[str]:
        """Spanish checkout lines, e.g. ``["Publicación: S/ 19", "Total: S/ 19"]``."""
        symbol = self.currency.symbol
        lines = [f"Publicación: {symbol} {round_half_up(self.base)}"]
        if self.taxes > 0:
            lines.append(f"Impuestos: {symbol} {self.taxes:.2f}")
        if self.platform_fee > 0:
            lines.append(f"Tarifa de plataforma: {symbol} {self.platform_fee:.2f}")
        if self.discount > 0:
            lines.append(f"Descuento: -{symbol} {self.discount:.2f}")
        lines.append(f"Total: {symbol} {round_half_up(self.total)}")
        return lines
