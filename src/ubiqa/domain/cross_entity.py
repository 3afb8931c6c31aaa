"""Rules that relate two or more already-valid entities.

Nothing here re-validates an entity's own fields; each function takes fully
built entities and reports broken relationships as violation strings.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ubiqa.domain.entities.account import Account
from ubiqa.domain.entities.listing import Listing, ListingStatus
from ubiqa.domain.entities.payment import Payment, PaymentStatus
from ubiqa.domain.entities.property import Property, PropertyType
from ubiqa.domain.pricing import PricingConfig
from ubiqa.domain.utils import to_decimal

# Sanity bounds compare the raw amount, whatever the currency.
LAND_PRICE_FLOOR = Decimal(10_000)
PRICE_PER_M2_FLOOR = Decimal(100)
PRICE_PER_M2_CEILING = Decimal(50_000)


def contact_violations(account: Account, listing: Listing) -> list[str]:
    """The listing contact must use the account's phone.

    Only checked when both sides have a contact; a listing without one falls
    back to the account's channel, and an account without one cannot publish.
    """
    if listing.contact is None or account.contact is None:
        return []
    if not listing.contact.same_phone_as(account.contact):
        return ["Contact phone should match user verified phone number"]
    return []


def price_sanity_violations(prop: Property, listing: Listing) -> list[str]:
    """Flag prices that are implausible for the property's type and area."""
    amount = listing.price.amount
    if prop.property_type is PropertyType.TERRENO:
        if amount < LAND_PRICE_FLOOR:
            return ["Terreno price seems unusually low"]
        return []

    per_m2 = amount / to_decimal(prop.specs.area_m2)
    violations: list[str] = []
    if per_m2 < PRICE_PER_M2_FLOOR:
        violations.append("Price per square meter seems unusually low")
    if per_m2 > PRICE_PER_M2_CEILING:
        violations.append("Price per square meter seems unusually high")
    return violations


def listing_violations(account: Account, prop: Property, listing: Listing) -> list[str]:
    """Every broken relationship between an account, a property and a listing."""
    return [
        *contact_violations(account, listing),
        *price_sanity_violations(prop, listing),
    ]


def payment_listing_violations(
    payment: Payment,
    listing: Listing,
    config: PricingConfig,
    now: datetime | None = None,
) -> list[str]:
    """Preconditions for applying `payment` to `listing`."""
    violations: list[str] = []
    if payment.status is not PaymentStatus.PROCESSING:
        violations.append("Payment must be in processing state")
    if listing.status is not ListingStatus.PAYMENT_PENDING:
        violations.append("Listing must be in payment pending state")
    if payment.price != config.listing_fee:
        violations.append("Payment amount does not match listing fee")
    if payment.is_expired(now):
        violations.append("Payment has expired")
    return violations
