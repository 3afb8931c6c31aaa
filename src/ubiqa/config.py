"""Configuration utilities for UBIQA.

This module centralizes small helpers and constants related to application
configuration: the database URL, pricing overrides, and the Alembic config.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from datetime import timedelta
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

from ubiqa.domain.errors import ValidationError
from ubiqa.domain.pricing import PricingConfig
from ubiqa.domain.utils import to_decimal
from ubiqa.domain.value_objects.price import Price

DB_URL_ENV = "UBIQA_DB_URL"  # pragma: no mutate
LISTING_FEE_ENV = "UBIQA_LISTING_FEE"  # pragma: no mutate
PAYMENT_EXPIRY_HOURS_ENV = "UBIQA_PAYMENT_EXPIRY_HOURS"  # pragma: no mutate

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate


class DatabaseUrlNotSetError(Exception):
    """Raised when the UBIQA_DB_URL environment variable is not set."""


class InvalidConfigError(Exception):
    """Raised when a configuration variable holds an unusable value."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid value for {name}: {value!r} ({reason})")
        self.name = name
        self.value = value
        self.reason = reason


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `UBIQA_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `UBIQA_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def _positive_int(environ: Mapping[str, str], name: str) -> int | None:
    if not (raw := environ.get(name)):
        return None
    try:
        value = int(raw)
    except ValueError as e:
        raise InvalidConfigError(name, raw, "expected a whole number") from e
    if value <= 0:
        raise InvalidConfigError(name, raw, "must be greater than zero")
    return value


def load_pricing_config(environ: Mapping[str, str] | None = None) -> PricingConfig:
    """Build the `PricingConfig`, applying any environment overrides.

    Recognized variables are `UBIQA_LISTING_FEE` (soles, e.g. ``"19.00"``) and
    `UBIQA_PAYMENT_EXPIRY_HOURS`. Unset or empty variables keep the defaults.
    The 30-day listing window is not configurable.

    Args:
        environ: Mapping to read from; defaults to `os.environ`.

    Raises:
        InvalidConfigError: If a variable is malformed or the resulting
            configuration is rejected by the pricing rules.
    """
    environ = os.environ if environ is None else environ
    overrides: dict[str, object] = {}

    if raw_fee := environ.get(LISTING_FEE_ENV):
        try:
            overrides["listing_fee"] = Price.soles(to_decimal(raw_fee.strip()))
        except (ArithmeticError, ValueError, ValidationError) as e:
            raise InvalidConfigError(LISTING_FEE_ENV, raw_fee, str(e)) from e

    if (hours := _positive_int(environ, PAYMENT_EXPIRY_HOURS_ENV)) is not None:
        overrides["payment_expiry"] = timedelta(hours=hours)

    try:
        return PricingConfig(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        raise InvalidConfigError(
            LISTING_FEE_ENV, environ.get(LISTING_FEE_ENV, ""), str(e)
        ) from e


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for UBIQA's migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → UBIQA's packaged Alembic scripts

    Args:
        db_url: SQLAlchemy database URL (e.g., `sqlite:///ubiqa.db`). Can be
            `None` only in contexts where Alembic won't need to connect to the DB.
        stdout: Text stream Alembic will write status lines to. Defaults to
            `sys.stdout`; override in tests to capture output.

    Returns:
        An `alembic.config.Config` pointing to UBIQA's migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("ubiqa.adapters.db.alembic")),
    )
    return cfg
