"""Turn a pixel grid into one text frame."""

from __future__ import annotations

import numpy as np

from glyphreel.ansi import RESET
from glyphreel.encoder import color_values, glyph_cell, ramp_indices
from glyphreel.errors import MalformedFrame
from glyphreel.settings import RenderSettings


def render(grid: np.ndarray, settings: RenderSettings) -> str:
    """Render ``grid`` (height x width x RGB) row by row.

    The pixel in the last column of every row is not drawn; its slot becomes
    the row's newline. Output always ends with a color reset, even in
    monochrome mode, and nothing follows the reset.
    """
    pixels = np.asarray(grid)
    if pixels.ndim != 3 or pixels.shape[2] != 3 or 0 in pixels.shape[:2]:
        raise MalformedFrame(f"expected a (height, width, 3) grid, got {pixels.shape}")
    width = pixels.shape[1]
    body = pixels[:, : width - 1]
    indices = ramp_indices(body, settings).tolist()
    ramp = settings.char_ramp
    parts: list[str] = []
    if settings.color:
        for index_row, rgb_row in zip(indices, color_values(body).tolist()):
            parts.extend(glyph_cell(ramp[i], rgb) for i, rgb in zip(index_row, rgb_row))
            parts.append("\n")
    else:
        for index_row in indices:
            parts.extend(glyph_cell(ramp[i]) for i in index_row)
            parts.append("\n")
    parts.append(RESET)
    return "".join(parts)
