"""Still image loading through Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from glyphreel.aspect import target_size
from glyphreel.errors import IOFailure
from glyphreel.renderer import render
from glyphreel.settings import RenderSettings

logger = logging.getLogger(__name__)


def load_image(path: str | Path) -> Image.Image:
    """Open and fully decode ``path`` as an RGB image."""
    try:
        with Image.open(path) as img:
            return img.convert("RGB")
    except (OSError, UnidentifiedImageError) as exc:
        raise IOFailure(f"failed to load image {path}: {exc}") from exc


def image_to_grid(img: Image.Image, settings: RenderSettings) -> np.ndarray:
    """Resize ``img`` for ``settings`` and return it as an RGB grid."""
    size = target_size(img.size, settings)
    if size != img.size:
        img = img.resize(size, Image.Resampling.BILINEAR)
    return np.asarray(img.convert("RGB"), dtype=np.uint8)


def open_image(path: str | Path, settings: RenderSettings) -> str:
    """Load, resize and render a still image."""
    img = load_image(path)
    grid = image_to_grid(img, settings)
    logger.info("Rendering %s at %dx%d", path, grid.shape[1], grid.shape[0])
    return render(grid, settings)
