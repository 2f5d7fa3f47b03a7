"""Tests for render settings and run option validation."""

from __future__ import annotations

import pytest

from glyphreel.errors import InvalidConfiguration
from glyphreel.settings import (
    CHAR_PRESETS,
    CHARS_MEDIUM,
    RenderSettings,
    RunOptions,
    ramp_for,
)


def test_defaults() -> None:
    settings = RenderSettings()
    assert settings.color is True
    assert settings.char_ramp == CHARS_MEDIUM
    assert settings.size == (30, 30)
    assert settings.preserve_aspect_ratio is True
    assert settings.fps == 30.0


def test_presets_are_ordered_dark_to_light() -> None:
    assert set(CHAR_PRESETS) == {"light", "medium", "filled"}
    assert CHAR_PRESETS["filled"] == ("░", "▒", "▓", "█")
    assert CHAR_PRESETS["light"][-1] == "8"
    assert ramp_for("medium") == CHARS_MEDIUM


def test_unknown_preset() -> None:
    with pytest.raises(InvalidConfiguration, match="light/medium/filled"):
        ramp_for("dense")


@pytest.mark.parametrize(
    "changes",
    [
        {"width": 0},
        {"height": -3},
        {"width": 2.5},
        {"height": True},
        {"char_ramp": ()},
        {"char_ramp": ("ab",)},
        {"fps": 0},
    ],
)
def test_invalid_settings(changes: dict) -> None:
    with pytest.raises(InvalidConfiguration):
        RenderSettings(**changes)


def test_with_overrides_returns_validated_copy() -> None:
    base = RenderSettings()
    wide = base.with_overrides(width=120, char_ramp=["a", "b"])
    assert wide.width == 120
    assert wide.char_ramp == ("a", "b")
    assert base.width == 30
    with pytest.raises(InvalidConfiguration):
        base.with_overrides(height=0)


def test_with_preset() -> None:
    assert RenderSettings().with_preset("filled").char_ramp == CHAR_PRESETS["filled"]


def test_settings_are_frozen() -> None:
    with pytest.raises(AttributeError):
        RenderSettings().width = 5  # type: ignore[misc]


def test_video_with_audio_is_valid() -> None:
    options = RunOptions(source="video", path="clip.mp4", audio=True)
    assert options.audio is True


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"source": "video", "path": "a.mp4", "audio": True, "output_file": "a.sh"}, "audio"),
        ({"source": "image", "path": "a.png", "audio": True}, "only available"),
        ({"source": "webcam", "camera_index": 0, "output_file": "a.sh"}, "file"),
        ({"source": "webcam"}, "camera index"),
        ({"source": "video"}, "needs a path"),
        ({"source": "tape", "path": "a"}, "unknown source"),
    ],
)
def test_conflicting_run_options(kwargs: dict, message: str) -> None:
    with pytest.raises(InvalidConfiguration, match=message):
        RunOptions(**kwargs)
