"""CLI tests for the top-level `ubiqa` command.

These tests exercise logging, verbosity flags, logger-level overrides, debug
formatting, contact masking and the in-memory flight-recorder by invoking the
`log-demo` command under various CLI flags.
"""

import re
from pathlib import Path

import pytest

from tests.fixtures.datagen import PERU_PHONE
from ubiqa.entrypoints.cli.main import console_level, ubiqa

# pylint: disable=unused-argument

LOG_PATH = "flight_recorder.log"
OWNER_EMAIL = "ana.torres@example.com"


def assert_in_output(pattern: str, output: str) -> None:
    """Assert that a regex pattern is found in the output string."""
    if not re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' not found in output:\n{output}")


def assert_not_in_output(pattern: str, output: str) -> None:
    """Assert that a regex pattern is NOT found in the output string."""
    if re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' found in output:\n{output}")


def read_log(path: str = LOG_PATH) -> str:
    """Contents of the flight-recorder file."""
    return Path(path).read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "flags, shown, hidden",
    [
        ([], "WARNING", "INFO"),
        (["-v"], "INFO", "DEBUG"),
        (["-q"], "ERROR", "WARNING"),
        (["-qq"], "CRITICAL", "ERROR"),
    ],
    ids=["default", "verbose", "quiet", "very-quiet"],
)
def test_verbosity(registered_log_demo, runner, fs, flags, shown, hidden):
    """Each -v lowers and each -q raises the console threshold by one level."""
    result = runner.invoke(ubiqa, ["--no-flight-recorder", *flags, "log-demo"])
    assert result.exit_code == 0
    assert_in_output(shown, result.output)
    assert_not_in_output(hidden, result.output)


def test_vv_shows_debug(registered_log_demo, runner, fs):
    """-vv enables DEBUG-level console output."""
    result = runner.invoke(ubiqa, ["--no-flight-recorder", "-vv", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("DEBUG", result.output)


def test_logger_level_silences_debug(registered_log_demo, runner, fs):
    """Logger-level overrides silence third-party DEBUG while keeping INFO+."""
    result = runner.invoke(
        ubiqa,
        ["--no-flight-recorder", "-vv", "-L", "some.thirdparty=INFO", "log-demo"],
    )
    assert result.exit_code == 0
    assert_not_in_output("debug-level third-party", result.output)
    assert_in_output("info-level third-party", result.output)


def test_bad_logger_level_is_a_usage_error(registered_log_demo, runner, fs):
    """Unknown level names are rejected before anything runs."""
    result = runner.invoke(ubiqa, ["-L", "sqlalchemy=LOUD", "log-demo"])
    assert result.exit_code == 2
    assert "Invalid log level: LOUD" in result.output


def test_third_party_records_are_prefixed(registered_log_demo, runner, fs):
    """Console lines from other libraries carry a bracketed source."""
    result = runner.invoke(ubiqa, ["--no-flight-recorder", "log-demo"])
    assert_in_output(r"\[some\] This is a warning-level third-party", result.output)


def test_debug_mode_shows_paths(registered_log_demo, runner, fs):
    """With --debug the console shows file paths and line numbers."""
    result = runner.invoke(ubiqa, ["--no-flight-recorder", "--debug", "log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"conftest\.py:\d+\b", result.output)


def test_debug_mode_is_off_by_default(registered_log_demo, runner, fs):
    """By default no file paths appear."""
    result = runner.invoke(ubiqa, ["--no-flight-recorder", "log-demo"])
    assert result.exit_code == 0
    assert_not_in_output(r"conftest\.py:\d+\b", result.output)


class TestContactMasking:
    """Phone numbers and e-mail addresses never reach a handler in clear."""

    @staticmethod
    def test_lenient_console(registered_log_demo, runner, fs):
        """Lenient mode keeps the last phone digits and the mail domain."""
        result = runner.invoke(ubiqa, ["--no-flight-recorder", "log-demo"])
        assert "Contact owner at ***321 or ***@example.com" in result.output
        assert PERU_PHONE not in result.output
        assert OWNER_EMAIL not in result.output

    @staticmethod
    def test_strict_console(registered_log_demo, runner, fs):
        """Strict mode hides both values entirely."""
        result = runner.invoke(
            ubiqa, ["--no-flight-recorder", "--redactor-mode", "strict", "log-demo"]
        )
        assert "Contact owner at *** or ***" in result.output

    @staticmethod
    def test_flight_recorder_file(registered_log_demo, runner, fs):
        """The flight-recorder file only holds masked values."""
        result = runner.invoke(ubiqa, ["--log-path", LOG_PATH, "log-demo"])
        assert result.exit_code == 0
        content = read_log()
        assert "Contact owner at ***321 or ***@example.com" in content
        assert PERU_PHONE not in content


def test_flight_recorder_flush_on_warning(registered_log_demo, runner, fs):
    """Buffered DEBUG records are written once a WARNING occurs."""
    result = runner.invoke(
        ubiqa, ["--log-path", LOG_PATH, "-L", "some.thirdparty=INFO", "log-demo"]
    )
    assert result.exit_code == 0
    content = read_log()
    assert_in_output("This is a debug-level test message.", content)
    assert_not_in_output("This is a debug-level third-party test message.", content)
    assert_in_output("This is an info-level third-party test message.", content)
    assert_in_output("This is a critical-level test message.", content)
    # nothing after the last WARNING+ record is flushed
    assert_not_in_output("This is a final debug-level test message.", content)


def test_flight_recorder_force_flush(registered_log_demo, runner, fs):
    """--force-flush writes the trailing DEBUG buffer on exit."""
    result = runner.invoke(
        ubiqa, ["--log-path", LOG_PATH, "--force-flush", "log-demo"]
    )
    assert result.exit_code == 0
    assert_in_output("This is a final debug-level test message.", read_log())


def test_flight_recorder_can_be_disabled(registered_log_demo, runner, fs):
    """--no-flight-recorder writes no file."""
    result = runner.invoke(
        ubiqa, ["--log-path", LOG_PATH, "--no-flight-recorder", "log-demo"]
    )
    assert result.exit_code == 0
    assert not Path(LOG_PATH).exists()


def test_flight_recorder_truncates_log(registered_log_demo, runner, fs):
    """The file is rewritten on each run, not appended to."""
    runner.invoke(ubiqa, ["--log-path", LOG_PATH, "log-demo"])
    first = len(read_log().splitlines())
    runner.invoke(ubiqa, ["--log-path", LOG_PATH, "log-demo"])
    assert len(read_log().splitlines()) == first


def test_startup_logging(registered_log_demo, runner, fs):
    """Startup diagnostics reach the flight recorder."""
    result = runner.invoke(
        ubiqa, ["--log-path", "startup.log", "--force-flush", "log-demo"]
    )
    assert result.exit_code == 0
    content = read_log("startup.log")
    assert_in_output(r"UBIQA \d+\.\d+\.\d+", content)
    assert_in_output(r"console=WARNING", content)
    assert_in_output(r"flight-recorder=ON", content)
    assert_in_output(r"Python: \d+\.\d+\.\d+", content)
    assert_in_output(r"SQLAlchemy: \d+\.\d+\.\d+", content)
    assert_in_output(r"Redactor mode: lenient", content)
    assert_in_output(
        r"Flight recorder: path=startup\.log, capacity=2000, flush_on_close=True",
        content,
    )
    assert_in_output(
        r"Per-logger overrides: \{'sqlalchemy': 'WARNING', 'alembic': 'WARNING'\}",
        content,
    )


@pytest.mark.parametrize(
    "verbose, quiet, level",
    [(0, 0, 30), (1, 0, 20), (5, 0, 10), (0, 2, 50), (0, 9, 50), (2, 1, 20)],
)
def test_console_level(verbose, quiet, level):
    """-v and -q cancel out and the result stays within DEBUG..CRITICAL."""
    assert console_level(verbose, quiet) == level
