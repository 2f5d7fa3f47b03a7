"""Split a raw RGB24 byte stream into pixel grids."""

from __future__ import annotations

import logging
from typing import Iterator

import numpy as np

from glyphreel.errors import MalformedFrame

logger = logging.getLogger(__name__)


def frame_size(width: int, height: int) -> int:
    """Return the byte length of one RGB24 frame."""
    if width < 1 or height < 1:
        raise MalformedFrame(f"frame dimensions must be positive, got {width}x{height}")
    return width * height * 3


def iter_frames(raw: bytes, width: int, height: int) -> Iterator[np.ndarray]:
    """Yield one read-only ``(height, width, 3)`` grid per whole frame in ``raw``.

    ``width`` and ``height`` must be the values the stream was decoded at.
    Trailing bytes that do not make up a full frame are dropped.
    """
    size = frame_size(width, height)
    count, remainder = divmod(len(raw), size)
    if remainder:
        logger.debug("Dropping %d trailing bytes after %d frames", remainder, count)
    if not count:
        return
    buffer = np.frombuffer(raw, dtype=np.uint8)
    for index in range(count):
        chunk = buffer[index * size : (index + 1) * size]
        try:
            yield chunk.reshape((height, width, 3))
        except ValueError as exc:
            raise MalformedFrame(
                f"frame {index} cannot be read as {width}x{height} RGB"
            ) from exc


def demux(raw: bytes, width: int, height: int) -> list[np.ndarray]:
    """Return every whole frame in ``raw`` as a pixel grid."""
    return list(iter_frames(raw, width, height))
