"""Fixtures and test helpers for CLI tests.

Provides a test-only `log-demo` Click command that emits representative log
messages (including contact data that must be masked), a fixture to register
that command, and an autouse cleanup of the root-logger configuration each
`ubiqa` invocation installs.
"""

import logging

import click
import pytest

from tests.fixtures.datagen import PERU_PHONE
from ubiqa.entrypoints.cli.main import ubiqa

# pylint: disable=redefined-outer-name, unused-argument


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests.

    Emits DEBUG/INFO/WARNING/ERROR/CRITICAL messages on the 'ubiqa.demo'
    logger, a WARNING carrying a phone number and an e-mail address, and
    additional messages on a 'some.thirdparty' logger to exercise
    logger-level filtering and flight-recorder behavior.
    """
    logger = logging.getLogger("ubiqa.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.warning("Contact owner at %s or %s", PERU_PHONE, "ana.torres@example.com")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its internal sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture(autouse=True)
def _clean_logging(clean_root_logger):
    """Every CLI test leaves the root logger as it found it."""


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test."""
    ubiqa.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(ubiqa, "log-demo")


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated filesystem."""
    with runner.isolated_filesystem():
        yield
