"""Write rendered output to files, including shell replay scripts."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from glyphreel.ansi import CLEAR_SCREEN
from glyphreel.errors import IOFailure
from glyphreel.sequence import AsciiSequence

logger = logging.getLogger(__name__)

# echo -e undoes one level of backslashes and the double quotes another
_SHELL_ESCAPES = str.maketrans(
    {
        "\\": "\\\\\\\\",
        '"': '\\"',
        "$": "\\$",
        "`": "\\`",
    }
)


def _quote_for_echo(text: str) -> str:
    return text.translate(_SHELL_ESCAPES)


def sleep_seconds(fps: float) -> str:
    """Frame period for ``sleep``, as the shortest plain decimal."""
    return np.format_float_positional(1.0 / fps, trim="0")


def export_script(sequence: AsciiSequence) -> str:
    """Return a POSIX shell script that replays ``sequence``.

    Each frame becomes an ``echo -e`` of a clear-screen plus the frame,
    followed by a ``sleep`` of one frame period. Audio is never included.
    """
    delay = sleep_seconds(sequence.fps)
    blocks = [
        f'echo -e "{_quote_for_echo(CLEAR_SCREEN + frame)}"\nsleep {delay}\n'
        for frame in sequence
    ]
    return "".join(blocks)


def _write_text(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise IOFailure(f"failed to write {path}: {exc}") from exc


def write_script(sequence: AsciiSequence, path: str | Path) -> Path:
    """Write the replay script for ``sequence`` to ``path``."""
    dest = Path(path)
    _write_text(dest, export_script(sequence))
    logger.info("Wrote %d frame script to %s", len(sequence), dest)
    return dest


def write_frame(frame: str, path: str | Path) -> Path:
    """Write a single rendered frame to ``path`` as is."""
    dest = Path(path)
    _write_text(dest, frame)
    logger.info("Wrote frame to %s", dest)
    return dest
