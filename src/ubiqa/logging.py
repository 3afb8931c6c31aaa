"""Logging setup for the UBIQA command line.

Three pieces are wired onto the root logger by the CLI:

* a Rich console handler on stderr, whose lines from libraries such as
  SQLAlchemy or Alembic carry a short ``[library]`` tag;
* a flight recorder: a memory buffer that only reaches its log file when
  something at WARNING or above happens (or on exit, when forced);
* a contact-data filter on both, so owner phone numbers and e-mail addresses
  are masked before any handler formats a record.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

    from ubiqa.interfaces.redactor import Redactor

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "ubiqa"
CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):
    """Set ``record.prefix`` to ``[top-level package]`` for non-UBIQA loggers.

    UBIQA's own records get an empty prefix. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        top_level = record.name.partition(".")[0]
        record.prefix = "" if top_level == PROJECT_PREFIX else f"[{top_level}]"
        return True


class ContactDataFilter(logging.Filter):
    """Mask phone numbers and e-mail addresses in log records.

    The message is rendered with its arguments first, masked with the
    redactor, and stored back with the arguments cleared, so every handler
    downstream sees the masked text only.

    Args:
        redactor: Redactor whose mode decides how much of each value is kept.
    """

    def __init__(self, redactor: Redactor) -> None:
        super().__init__()
        self.redactor = redactor

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.redactor.mask_contact_data(record.getMessage())
        record.args = None
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr console handler.

    Args:
        level: Console threshold. Debug mode always uses DEBUG.
        debug_mode: Show timestamps, logger names and source paths instead of
            the library tag.
        color: Let Rich pick a color system; ``False`` disables styling, in
            step with click-extra's ``--no-color``.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(fmt=DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build the flight recorder writing to `path`.

    The file is truncated when the recorder is built. Up to `capacity`
    records are held in memory; the buffer is written out when a record at
    `flush_level` or above arrives, when it is full, and on close only if
    `flush_on_close` is set.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def install_contact_masking(
    handlers: list[logging.Handler], redactor: Redactor
) -> ContactDataFilter:
    """Attach one `ContactDataFilter` to every handler and return it."""
    contact_filter = ContactDataFilter(redactor)
    for handler in handlers:
        handler.addFilter(contact_filter)
    return contact_filter


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
    redactor_mode: str,
) -> None:
    """Log one INFO summary line, then DEBUG diagnostics for bug reports.

    The DEBUG lines cover the interpreter, platform, process, working
    directory, database library versions, handler types, redaction mode,
    flight-recorder settings and per-logger level overrides. They normally
    only end up in the flight recorder.
    """
    logger.info(
        "UBIQA %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )

    diagnostics = {
        "Python": sys.version.split()[0],
        "Platform": f"{platform.system()} {platform.release()}",
        "PID": os.getpid(),
        "CWD": Path.cwd(),
        "Alembic": alembic.__version__,
        "SQLAlchemy": sqlalchemy.__version__,
        "Handlers": [type(h).__name__ for h in handlers],
        "Redactor mode": redactor_mode,
    }
    for label, value in diagnostics.items():
        logger.debug("%s: %s", label, value)

    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            log_path or "<none>",
            flight_capacity,
            force_flush_fr,
        )
    overrides = {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
    logger.debug("Per-logger overrides: %s", overrides or "<none>")
