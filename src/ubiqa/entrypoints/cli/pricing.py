"""UBIQA pricing CLI.

Shows the listing fee and time windows in effect, after applying the
``UBIQA_LISTING_FEE`` and ``UBIQA_PAYMENT_EXPIRY_HOURS`` overrides. Needs no
database.
"""

from __future__ import annotations

import click
import click_extra as clickx

from ubiqa import config


@click.group(cls=clickx.ExtraGroup)
def pricing() -> None:
    """Listing fee commands."""


@pricing.command()
def show() -> None:
    """Show the listing fee, durations and checkout breakdown."""
    try:
        cfg = config.load_pricing_config()
    except config.InvalidConfigError as e:
        raise click.ClickException(str(e)) from e

    offer = cfg.current_pricing()
    click.echo(f"Listing fee     : {cfg.listing_fee.format()} ({cfg.listing_fee.currency.code})")
    click.echo(f"Listing duration: {cfg.listing_duration_days} days")
    click.echo(f"Payment expiry  : {cfg.payment_expiry}")
    click.echo(f"Summary         : {offer.description()}")
    click.echo("Checkout:")
    for line in cfg.breakdown().lines():
        click.echo(f"  {line}")
