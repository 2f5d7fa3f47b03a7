"""Rendering settings and run option validation."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from glyphreel.errors import InvalidConfiguration

CHARS_LIGHT: tuple[str, ...] = (" ", " ", ".", ":", "!", "+", "*", "e", "$", "@", "8")
CHARS_MEDIUM: tuple[str, ...] = (".", "*", "e", "s", "◍")
CHARS_FILLED: tuple[str, ...] = ("░", "▒", "▓", "█")

CHAR_PRESETS: Mapping[str, tuple[str, ...]] = {
    "light": CHARS_LIGHT,
    "medium": CHARS_MEDIUM,
    "filled": CHARS_FILLED,
}

SOURCE_KINDS = ("image", "video", "webcam")


def ramp_for(name: str) -> tuple[str, ...]:
    """Return the character ramp registered under ``name``."""
    try:
        return CHAR_PRESETS[name]
    except KeyError:
        choices = "/".join(CHAR_PRESETS)
        raise InvalidConfiguration(
            f"unknown char set {name!r}; expected one of {choices}"
        ) from None


@dataclass(frozen=True)
class RenderSettings:
    """Immutable parameters shared by every rendering call."""

    color: bool = True
    char_ramp: tuple[str, ...] = field(default=CHARS_MEDIUM)
    width: int = 30
    height: int = 30
    preserve_aspect_ratio: bool = True
    fps: float = 30.0

    def __post_init__(self) -> None:
        ramp = tuple(self.char_ramp)
        if not ramp:
            raise InvalidConfiguration("char ramp must contain at least one character")
        if any(not isinstance(ch, str) or len(ch) != 1 for ch in ramp):
            raise InvalidConfiguration("char ramp entries must be single characters")
        object.__setattr__(self, "char_ramp", ramp)
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidConfiguration(f"{name} must be a positive integer")
        if not self.fps > 0:
            raise InvalidConfiguration("fps must be positive")

    def with_overrides(self, **changes: Any) -> "RenderSettings":
        """Return a validated copy with ``changes`` applied."""
        return replace(self, **changes)

    def with_preset(self, name: str) -> "RenderSettings":
        return replace(self, char_ramp=ramp_for(name))

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class RunOptions:
    """What one invocation should do with its source."""

    source: str
    path: Optional[str] = None
    camera_index: Optional[int] = None
    output_file: Optional[str] = None
    audio: bool = False

    def __post_init__(self) -> None:
        if self.source not in SOURCE_KINDS:
            raise InvalidConfiguration(f"unknown source kind {self.source!r}")
        if self.source == "webcam":
            if self.camera_index is None or self.camera_index < 0:
                raise InvalidConfiguration("webcam input needs a camera index")
            if self.output_file:
                raise InvalidConfiguration("webcam input cannot be written to a file")
        elif not self.path:
            raise InvalidConfiguration(f"{self.source} input needs a path")
        if self.audio and self.source != "video":
            raise InvalidConfiguration("audio is only available for video input")
        if self.audio and self.output_file:
            raise InvalidConfiguration(
                "exported scripts never carry audio; drop --audio or --output-file"
            )
