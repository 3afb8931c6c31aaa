"""Unit tests for OSC-8 hyperlink rendering."""

import io

import pytest

from ubiqa.entrypoints.cli.helpers.hyperlinks import hyperlink, supports_osc8

URL = "https://wa.me/51987654321"


class FakeTTY(io.StringIO):
    """A StringIO that claims to be a terminal."""

    def isatty(self) -> bool:
        return True


@pytest.fixture
def plain_terminal(monkeypatch):
    """Clear every variable the detection looks at."""
    for name in ("TERM_PROGRAM", "WT_SESSION", "VTE_VERSION", "TERM"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_non_tty_gets_plain_url(plain_terminal):
    """Pipes and files never receive escape sequences."""
    plain_terminal.setenv("TERM_PROGRAM", "vscode")
    stream = io.StringIO()
    assert supports_osc8(stream) is False
    assert hyperlink(URL, "WhatsApp", stream) == URL


def test_unknown_terminal_gets_plain_url(plain_terminal):
    """A TTY outside the allowlist is treated as unsupported."""
    assert hyperlink(URL, "WhatsApp", FakeTTY()) == URL


@pytest.mark.parametrize(
    "name, value",
    [
        ("TERM_PROGRAM", "vscode"),
        ("TERM_PROGRAM", "iTerm.app"),
        ("WT_SESSION", "1"),
        ("VTE_VERSION", "7200"),
        ("TERM", "alacritty"),
    ],
)
def test_known_terminals(plain_terminal, name, value):
    """Allowlisted terminals get an OSC-8 sequence around the text."""
    plain_terminal.setenv(name, value)
    assert hyperlink(URL, "WhatsApp", FakeTTY()) == (
        f"\x1b]8;;{URL}\x07WhatsApp\x1b]8;;\x07"
    )


def test_text_defaults_to_url(plain_terminal):
    """Without link text the URL itself is shown."""
    plain_terminal.setenv("TERM_PROGRAM", "kitty")
    assert hyperlink(URL, stream=FakeTTY()) == f"\x1b]8;;{URL}\x07{URL}\x1b]8;;\x07"
