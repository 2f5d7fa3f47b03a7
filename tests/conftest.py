"""Pytest configuration for GlyphReel."""

from __future__ import annotations

import io
import os
import shutil

import numpy as np
import pytest

from glyphreel.settings import RenderSettings


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("GLYPHREEL_CI") != "1" and shutil.which("ffmpeg"):
        return
    skip_ffmpeg = pytest.mark.skip(reason="ffmpeg tests disabled or ffmpeg missing.")
    for item in items:
        if "ffmpeg" in item.keywords:
            item.add_marker(skip_ffmpeg)


@pytest.fixture
def mono() -> RenderSettings:
    return RenderSettings(color=False, char_ramp=(" ", "#"), width=4, height=2)


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def solid():
    """Factory for single-color uint8 grids."""

    def _make(rgb: tuple[int, int, int], width: int, height: int) -> np.ndarray:
        grid = np.empty((height, width, 3), dtype=np.uint8)
        grid[:, :] = rgb
        return grid

    return _make
