"""UBIQA DB CLI: forward-only Alembic wrappers.

Provides a minimal, forward-only interface over Alembic. Destructive
operations (``downgrade``, ``stamp``) are not exposed; listing and payment
history is never rolled back from the command line.

Behavior
- Uses programmatic Alembic configuration; human-oriented notices go to **stderr**,
  Alembic output to **stdout** to keep machine-readable flows intact.
- Schema-changing actions prompt for confirmation unless explicitly bypassed.

Requirements
- ``UBIQA_DB_URL`` must be set.
- Alembic config is built by ``config.build_alembic_config`` and points at
  the packaged ``ubiqa.adapters.db.alembic`` scripts.

Failure modes
- Missing/invalid ``UBIQA_DB_URL`` or unreachable DB → ``ClickException`` with guidance.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, OperationalError

from ubiqa import config
from ubiqa.adapters.db.dialects import DialectName, UnsupportedDialect
from ubiqa.adapters.db.engine import make_engine

from .helpers import error, sanitize_url, success, warn

if TYPE_CHECKING:
    from alembic.config import Config
    from sqlalchemy.engine import Engine

MISSING_DB_URL_MSG = (
    "UBIQA_DB_URL is not set.\n\n"
    "Set it before running this command, e.g.:\n"
    "  export UBIQA_DB_URL='sqlite:///ubiqa.db'\n"
    "  or in PowerShell:\n"
    "  $env:UBIQA_DB_URL='sqlite:///ubiqa.db'"
)

INVALID_URL_FORMAT_MSG = "The value of UBIQA_DB_URL is not a valid SQLAlchemy database URL."

CANNOT_CONNECT_MSG = (
    "UBIQA_DB_URL is set, but the database is not reachable.\n"
    "Please ensure the database is running and the URL is correct."
)

UPGRADE_SCHEMA_WARNING = (
    "This will upgrade the database schema to the latest version.\n"
    "Please ensure you have a backup before proceeding."
)

UPGRADE_SCHEMA_INSTRUCTIONS = "Run 'ubiqa db upgrade' to update the schema."


def _check_connection(url: str) -> None:
    engine = make_engine(url)
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))  # pragma: no mutate


def get_checked_url() -> str:
    """Return ``UBIQA_DB_URL`` after checking the database answers.

    Raises:
        click.ClickException: If the URL is missing, malformed or unreachable.
    """
    try:
        url = config.get_db_url()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    try:
        _check_connection(url)
    except OperationalError as e:
        raise click.ClickException(CANNOT_CONNECT_MSG) from e
    except ArgumentError as e:
        raise click.ClickException(INVALID_URL_FORMAT_MSG) from e
    return url


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Database management commands."""


@db.command()
@click.option(
    "--verbose", "-v", "verbose", is_flag=True, help="Show alembic's more verbose output."
)
def current(verbose: bool) -> None:
    """Show current DB revision."""
    cfg = config.build_alembic_config(db_url=get_checked_url(), stdout=sys.stdout)
    command.current(cfg, verbose=verbose)


@db.command()
@click.option(
    "--verbose", "-v", "verbose", is_flag=True, help="Show alembic's more verbose output."
)
def heads(verbose: bool) -> None:
    """Show available head revisions."""
    cfg = config.build_alembic_config(stdout=sys.stdout)
    command.heads(cfg, verbose=verbose)


@db.command()
@click.option(
    "--verbose", "-v", "verbose", is_flag=True, help="Show alembic's more verbose output."
)
@click.option(
    "--indicate-current",
    "-i",
    "indicate_current",
    is_flag=True,
    help="Indicate the current revision.",
)
def history(verbose: bool, indicate_current: bool) -> None:
    """Show revision history."""
    cfg = (
        config.build_alembic_config(db_url=get_checked_url(), stdout=sys.stdout)
        if indicate_current
        else config.build_alembic_config(stdout=sys.stdout)
    )
    command.history(cfg, verbose=verbose, indicate_current=indicate_current)


@db.command()
@click.option("--sql", is_flag=True, help="Generate SQL without executing.")
@click.option("--force", is_flag=True, help="Upgrade without confirmation.")
def upgrade(sql: bool, force: bool) -> None:
    """Upgrade the database to the head revision."""
    url = get_checked_url()
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    if not force and not sql:
        warn(UPGRADE_SCHEMA_WARNING)
        click.secho(f"db: {click.style(sanitize_url(url), underline=True)}", err=True)
        click.confirm("Are you sure you want to proceed?", abort=True)
    command.upgrade(cfg, revision="head", sql=sql)
    success("Upgrade complete!")


def _get_current_revision(engine: Engine) -> str | None:
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def _get_head_revision(cfg: Config) -> str | None:
    script = ScriptDirectory.from_config(cfg)
    if results := script.get_heads():
        return results[0]
    return None  # pragma: nocover


class MigrationStatus(Enum):
    """Describes the migration status of the database schema."""

    UP_TO_DATE = "up to date"
    OUT_OF_DATE = "out of date"
    UNINITIALIZED = "uninitialized"


@db.command()
def status() -> None:
    """Show database connection and schema status."""
    url = get_checked_url()
    engine = make_engine(url)
    try:
        backend = DialectName.from_sqlalchemy(engine)
    except UnsupportedDialect as e:
        raise click.ClickException(str(e)) from e
    success("Database reachable")
    click.echo(f"Backend : {backend.value}")
    click.echo(f"URL     : {sanitize_url(url)}")

    rev = _get_current_revision(engine)
    head = _get_head_revision(config.build_alembic_config(db_url=url))
    if rev == head:
        migration_status = MigrationStatus.UP_TO_DATE
    elif rev is None:
        migration_status = MigrationStatus.UNINITIALIZED
    else:
        migration_status = MigrationStatus.OUT_OF_DATE  # pragma: nocover

    message = f"{rev} ({migration_status.value})" if rev else migration_status.value
    click.echo(f"Schema  : {message}")

    if migration_status is not MigrationStatus.UP_TO_DATE:
        error(f"Schema is {migration_status.value}.")
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
