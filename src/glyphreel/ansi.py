"""ANSI control sequences emitted by the renderer and players."""

from __future__ import annotations

import re

ESC = "\x1b"
RESET = f"{ESC}[0m"
CLEAR_SCREEN = f"{ESC}[2J"

_SGR_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def truecolor(red: int, green: int, blue: int) -> str:
    """Return the 24-bit foreground color sequence for an RGB triple."""
    return f"{ESC}[38;2;{red};{green};{blue}m"


def strip_sgr(text: str) -> str:
    """Return text with SGR color sequences removed."""
    if not text:
        return text
    return _SGR_PATTERN.sub("", text)
