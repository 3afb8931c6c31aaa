"""Parsing of ``-L/--logger-level`` values.

Values have the form NAME=LEVEL and may be repeated or packed into one
comma/space separated string (as when read from ``UBIQA_LOGGER_LEVELS``).
Library loggers default to WARNING so SQL echo and migration chatter stay
out of the console unless asked for.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

import click

DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "alembic": logging.WARNING}
ITEM_SEPARATOR = re.compile(r"[,\s]+")


def split_items(value: str | Iterable[str]) -> list[str]:
    """Flatten one string or a sequence of strings into NAME=LEVEL items."""
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in ITEM_SEPARATOR.split(chunk) if item]


def level_from_name(name: str) -> int:
    """Numeric level for a standard level name, case-insensitively.

    Raises:
        ValueError: If `name` is not a standard logging level.
    """
    level = logging.getLevelNamesMapping().get(name.strip().upper())
    if level is None:
        raise ValueError(name)
    return level


def parse_log_level(
    ctx: click.Context | None,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | Iterable[str],
) -> dict[str, int]:
    """Click callback turning NAME=LEVEL items into a logger-name→level dict.

    The result starts from `DEFAULT_LIB_LEVELS`; later items override
    earlier ones.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in split_items(value):
        name, sep, level_name = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        try:
            levels[name.strip()] = level_from_name(level_name)
        except ValueError as e:
            raise click.BadParameter(f"Invalid log level: {level_name}") from e
    return levels
