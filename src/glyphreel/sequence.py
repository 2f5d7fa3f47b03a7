"""Video clips and rendered frame sequences."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterator, Optional

from glyphreel.aspect import target_size
from glyphreel.demux import frame_size, iter_frames
from glyphreel.errors import InvalidConfiguration
from glyphreel.media import FfmpegMedia, MediaTool
from glyphreel.renderer import render
from glyphreel.settings import RenderSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AsciiSequence:
    """Rendered frames in playback order plus the rate they were made for."""

    frames: tuple[str, ...]
    fps: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "frames", tuple(self.frames))
        if not self.fps > 0:
            raise InvalidConfiguration("sequence fps must be positive")

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[str]:
        return iter(self.frames)


@dataclass(frozen=True)
class RawVideo:
    """Decoded RGB24 frames together with the size they were decoded at."""

    data: bytes
    width: int
    height: int
    fps: float

    @property
    def frame_count(self) -> int:
        return len(self.data) // frame_size(self.width, self.height)


def load_video(
    path: str, settings: RenderSettings, media: Optional[MediaTool] = None
) -> tuple[RawVideo, RenderSettings]:
    """Probe and decode ``path`` at the size ``settings`` asks for.

    Returns the raw clip and the settings adjusted to the decoded size and
    the source frame rate.
    """
    tool = media if media is not None else FfmpegMedia()
    info = tool.probe(path)
    width, height = target_size(info.size, settings)
    adjusted = settings.with_overrides(width=width, height=height, fps=info.fps)
    data = tool.decode(path, (width, height))
    clip = RawVideo(data=data, width=width, height=height, fps=info.fps)
    logger.info(
        "Loaded %s as %d frames of %dx%d", path, clip.frame_count, width, height
    )
    return clip, adjusted


def render_video(clip: RawVideo, settings: RenderSettings) -> AsciiSequence:
    """Render every frame of ``clip`` using its own decoded dimensions."""
    frames = tuple(
        render(grid, settings) for grid in iter_frames(clip.data, clip.width, clip.height)
    )
    return AsciiSequence(frames=frames, fps=clip.fps)


def open_video(
    path: str, settings: RenderSettings, media: Optional[MediaTool] = None
) -> AsciiSequence:
    """Decode and render a whole video file."""
    clip, adjusted = load_video(path, settings, media)
    return render_video(clip, adjusted)
