"""Aspect-ratio-preserving size calculation."""

from __future__ import annotations

import math

from glyphreel.errors import InvalidConfiguration
from glyphreel.settings import RenderSettings


def fit(original: tuple[int, int], bound: tuple[int, int]) -> tuple[int, int]:
    """Scale ``original`` uniformly so it fits inside ``bound``.

    The limiting axis lands exactly on the bound; the other axis may come out
    smaller. Each side is rounded half away from zero and never drops below 1.
    """
    ow, oh = original
    bw, bh = bound
    if min(ow, oh, bw, bh) <= 0:
        raise InvalidConfiguration(
            f"sizes must be positive, got original={original} bound={bound}"
        )
    ratio = min(bw / ow, bh / oh)
    width = max(1, math.floor(ow * ratio + 0.5))
    height = max(1, math.floor(oh * ratio + 0.5))
    return (width, height)


def target_size(original: tuple[int, int], settings: RenderSettings) -> tuple[int, int]:
    """Return the grid size a source of ``original`` size should be scaled to."""
    if settings.preserve_aspect_ratio:
        return fit(original, settings.size)
    return settings.size
