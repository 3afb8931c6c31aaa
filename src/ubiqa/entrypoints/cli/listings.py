"""UBIQA listings CLI.

``sweep-expired`` is the periodic trigger that moves active listings past
their publication window to ``expired``; schedule it from cron or a job
runner. ``search`` prints live listings matching a filter, newest first.
"""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation

import click
import click_extra as clickx

from ubiqa import config
from ubiqa.bootstrap import AppContainer, bootstrap
from ubiqa.domain.entities.property import OperationType, PropertyType
from ubiqa.domain.errors import ValidationError
from ubiqa.domain.records import listing_to_record, location_to_record
from ubiqa.domain.value_objects.location import DEFAULT_SEARCH_RADIUS_KM, Location
from ubiqa.domain.value_objects.price import Currency, Price
from ubiqa.interfaces.repositories import ListingFilter, ListingWithDetails
from ubiqa.service_layer import commands, queries

from .db import MISSING_DB_URL_MSG
from .helpers import hyperlink, success, warn

# pylint: disable=too-many-arguments,too-many-positional-arguments


def load_app() -> AppContainer:
    """Bootstrap the application, turning configuration errors into CLI errors."""
    try:
        return bootstrap()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    except config.InvalidConfigError as e:
        raise click.ClickException(str(e)) from e


def _price(amount: str | None, currency: Currency) -> Price | None:
    if amount is None:
        return None
    try:
        return Price(Decimal(amount), currency)
    except (InvalidOperation, ValidationError) as e:
        raise click.BadParameter(f"Invalid price {amount!r}: {e}") from e


def build_filter(
    operation: str | None,
    property_type: str | None,
    currency: str | None,
    min_price: str | None,
    max_price: str | None,
    lat: float | None,
    lon: float | None,
    radius: float,
) -> ListingFilter:
    """Translate raw option values into a `ListingFilter`.

    Price bounds without ``--currency`` are taken as soles.

    Raises:
        click.BadParameter: If a value is invalid or the filter is inconsistent.
    """
    bound_currency = Currency.from_code(currency) if currency else Currency.PEN
    center = None
    if (lat is None) != (lon is None):
        raise click.BadParameter("--lat and --lon must be given together")
    try:
        if lat is not None and lon is not None:
            center = Location(lat, lon, address="Centro de búsqueda", district="-")
        return ListingFilter(
            operation_type=OperationType(operation) if operation else None,
            property_type=PropertyType(property_type) if property_type else None,
            currency=Currency.from_code(currency) if currency else None,
            min_price=_price(min_price, bound_currency),
            max_price=_price(max_price, bound_currency),
            center=center,
            radius_km=radius,
        )
    except (ValueError, ValidationError) as e:
        raise click.BadParameter(str(e)) from e


def _as_json(details: ListingWithDetails) -> dict[str, object]:
    prop = details.property
    return {
        "id": str(details.listing.id),
        "ownerId": str(details.owner_id),
        "propertyId": str(prop.id),
        "propertyType": prop.property_type.value,
        "operationType": prop.operation_type.value,
        "location": location_to_record(prop.location),
        **listing_to_record(details.listing),
    }


def _as_line(details: ListingWithDetails) -> str:
    listing, prop = details.listing, details.property
    return (
        f"{listing.id}  {listing.price.format():>14}  "
        f"{prop.property_type.label} en {prop.operation_type.label.lower()}  "
        f"{prop.location.district}  {listing.title}  "
        f"{hyperlink(prop.location.google_maps_url(), 'mapa')}"
    )


@click.group(cls=clickx.ExtraGroup)
def listings() -> None:
    """Listing maintenance and search commands."""


@listings.command("sweep-expired")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Only list the listings that would expire; change nothing.",
)
def sweep_expired(dry_run: bool) -> None:
    """Expire every active listing whose publication window has closed."""
    app = load_app()
    if dry_run:
        due = queries.due_for_expiry(app.uow, app.clock.now())
        for listing in due:
            click.echo(f"{listing.id}  {listing.title}")
        warn(f"{len(due)} listing(s) would expire (dry run).")
        return

    result = app.message_bus.handle(commands.ExpireListings())
    expired = result.unwrap()
    for listing in expired:
        click.echo(str(listing.id))
    success(f"Expired {len(expired)} listing(s).")


@listings.command()
@click.option(
    "--operation",
    type=click.Choice([o.value for o in OperationType]),
    help="Sale (venta) or rent (alquiler).",
)
@click.option(
    "--type",
    "property_type",
    type=click.Choice([t.value for t in PropertyType]),
    help="Kind of property.",
)
@click.option(
    "--currency",
    type=click.Choice([c.code for c in Currency], case_sensitive=False),
    help="Only listings priced in this currency (also the currency of price bounds).",
)
@click.option("--min-price", help="Inclusive lower price bound.")
@click.option("--max-price", help="Inclusive upper price bound.")
@click.option("--lat", type=float, help="Latitude of the search center.")
@click.option("--lon", type=float, help="Longitude of the search center.")
@click.option(
    "--radius",
    type=float,
    default=DEFAULT_SEARCH_RADIUS_KM,
    show_default=True,
    help="Search radius in km around --lat/--lon.",
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
def search(
    operation: str | None,
    property_type: str | None,
    currency: str | None,
    min_price: str | None,
    max_price: str | None,
    lat: float | None,
    lon: float | None,
    radius: float,
    as_json: bool,
) -> None:
    """Search live listings, newest publication first."""
    criteria = build_filter(
        operation, property_type, currency, min_price, max_price, lat, lon, radius
    )
    app = load_app()
    results = queries.search_listings(app.uow, criteria, app.clock.now())
    if as_json:
        click.echo(json.dumps([_as_json(d) for d in results], ensure_ascii=False, indent=2))
        return
    for details in results:
        click.echo(_as_line(details))
    if not results:
        warn("No listings match the given filters.")
