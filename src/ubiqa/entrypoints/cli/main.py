"""UBIQA CLI entry point.

Defines the top-level ``ubiqa`` command (via Click-Extra) and registers
the subcommand groups:

- ``ubiqa db``: forward-only database management (upgrade/current/heads/history/status).
- ``ubiqa listings``: expiry sweep and search.
- ``ubiqa pricing``: the fee configuration in effect.

Examples
    $ ubiqa --version
    $ ubiqa db upgrade
    $ ubiqa listings sweep-expired
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from ubiqa import __version__
from ubiqa.adapters.redactor import Redactor
from ubiqa.interfaces.redactor import RedactorMode
from ubiqa.logging import (
    config_console_handler,
    config_flight_recorder,
    install_contact_masking,
    log_startup,
)

from .db import db as db_group
from .helpers.log_level_parser import parse_log_level
from .listings import listings as listings_group
from .pricing import pricing as pricing_group

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


def console_level(verbose_count: int, quiet_count: int) -> int:
    """WARNING moved one level down per -v and one level up per -q, clamped."""
    level = logging.WARNING - 10 * verbose_count + 10 * quiet_count
    return max(logging.DEBUG, min(logging.CRITICAL, level))


HELP = """UBIQA command-line interface.

    UBIQA is a real-estate classifieds marketplace: owners publish property
    listings that go live after a one-time fee and expire automatically when
    their publication window closes.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir("ubiqa", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="UBIQA_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="UBIQA_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Enable the in-memory flight recorder. Keeps the last N log records "
        "(tunable via UBIQA_FLIGHT_RECORDER_CAPACITY) at DEBUG granularity "
        "(unaffected by -v/-q) and writes them to --log-path when a WARNING/ERROR "
        "occurs, or on clean exit if --force-flush is set."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help=(
        "Force-flush the flight recorder buffer to --log-path on program exit. "
        "Normally the buffer only dumps on WARNING/ERROR; console output is unaffected."
    ),
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight-recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L ubiqa.service_layer=DEBUG) or via UBIQA_LOGGER_LEVELS (comma/space list)."
    ),
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--redactor-mode",
    "redactor_mode",
    type=click.Choice([m.value for m in RedactorMode], case_sensitive=False),
    help=(
        "Redaction applied to logs and error messages. 'lenient' (default) masks "
        "passwords and tokens, keeps the last phone digits and e-mail domains; "
        "'strict' also hides usernames and masks phones and e-mails completely."
    ),
    default=RedactorMode.LENIENT.value,
    show_envvar=True,
    show_default=True,
)
@clickx.pass_context
def ubiqa(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
    redactor_mode: str,
) -> None:
    """UBIQA command-line interface."""
    level = console_level(verbose_count, quiet_count)

    handlers: list[Handler] = [
        # None or True from --color/--no-color both allow color
        config_console_handler(level=level, debug_mode=debug, color=ctx.color is not False)
    ]
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )
    install_contact_masking(handlers, Redactor(RedactorMode(redactor_mode.lower())))

    # the root logger passes everything; handlers and -L overrides do the filtering
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
        redactor_mode=redactor_mode,
    )

    ctx.call_on_close(logging.shutdown)


ubiqa.add_command(db_group)
ubiqa.add_command(listings_group)
ubiqa.add_command(pricing_group)
