"""OSC-8 hyperlink utilities for the UBIQA CLI.

Detects whether the active text stream supports OSC-8 terminal hyperlinks and
renders a URL (listing pages, map links, WhatsApp links) as a clickable link,
falling back to plain text when unsupported.
"""

import os
import sys
from typing import TextIO

OSC8_TERMINALS = {"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"}


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Heuristically detect whether `stream` supports OSC-8 hyperlinks.

    Returns ``False`` for anything that is not a TTY; otherwise checks a
    conservative allowlist of terminal identifiers. Some pagers may still
    strip the escapes.
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    terminal_program = (os.getenv("TERM_PROGRAM") or "").lower()
    return bool(
        terminal_program in OSC8_TERMINALS
        or os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix, etc.
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str, text: str | None = None, stream: TextIO | None = None) -> str:
    """Return `text` (default: the URL) as an OSC-8 link when supported.

    Falls back to the plain URL, since the link text alone would lose it.
    """
    if not supports_osc8(stream):
        return url
    return f"\x1b]8;;{url}\x07{text or url}\x1b]8;;\x07"  # OSC 8 ; ; URL BEL
