"""Pixel to glyph-cell encoding.

Brightness is weighted differently depending on the color mode. Color output
uses ``(0.267, 0.642, 0.091)``; monochrome output uses Rec. 709 luma weights.
Existing renders depend on both profiles, so they stay separate.

The array helpers here are shared by :func:`encode` and the frame renderer so
a pixel always maps to the same character whichever path renders it.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from glyphreel.ansi import truecolor
from glyphreel.settings import RenderSettings

COLOR_WEIGHTS = (0.267, 0.642, 0.091)
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)

Pixel = Union[Sequence[int], Sequence[float], np.ndarray]


def channel_range(pixels: np.ndarray) -> float:
    """Return the native channel maximum: 1.0 for floats, 255 otherwise."""
    if np.issubdtype(pixels.dtype, np.floating):
        return 1.0
    return 255.0


def brightness(pixels: np.ndarray, color: bool) -> np.ndarray:
    """Weighted brightness of every RGB triple along the last axis."""
    wr, wg, wb = COLOR_WEIGHTS if color else LUMA_WEIGHTS
    values = pixels.astype(np.float64)
    return wr * values[..., 0] + wg * values[..., 1] + wb * values[..., 2]


def ramp_indices(pixels: np.ndarray, settings: RenderSettings) -> np.ndarray:
    """Map RGB triples to positions in ``settings.char_ramp``."""
    top = len(settings.char_ramp) - 1
    scaled = top * brightness(pixels, settings.color) / channel_range(pixels)
    # round half away from zero; brightness is never negative for valid input
    indices = np.floor(scaled + 0.5).astype(np.int64)
    return np.clip(indices, 0, top)


def color_values(pixels: np.ndarray) -> np.ndarray:
    """Return integer 0-255 channels for truecolor escapes."""
    if np.issubdtype(pixels.dtype, np.floating):
        scaled = np.floor(pixels.astype(np.float64) * 255.0 + 0.5)
        return np.clip(scaled, 0, 255).astype(np.int64)
    return pixels.astype(np.int64)


def glyph_cell(char: str, rgb: Sequence[int] | None = None) -> str:
    """Build one cell: the character doubled, optionally colored."""
    if rgb is None:
        return char * 2
    return truecolor(*rgb) + char * 2


def encode(pixel: Pixel, settings: RenderSettings) -> str:
    """Encode a single RGB pixel as a glyph cell."""
    pixels = np.asarray(pixel).reshape(1, 3)
    index = int(ramp_indices(pixels, settings)[0])
    char = settings.char_ramp[index]
    if settings.color:
        return glyph_cell(char, color_values(pixels)[0].tolist())
    return glyph_cell(char)
