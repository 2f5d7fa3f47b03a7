"""Real-time frame playback to a text stream."""

from __future__ import annotations

from enum import Enum
import logging
import time
from typing import Callable, Iterable, Iterator, Optional, TextIO, TYPE_CHECKING

from glyphreel.ansi import CLEAR_SCREEN
from glyphreel.errors import IOFailure, RenderTooSlow

if TYPE_CHECKING:
    from glyphreel.audio import AudioHandle
    from glyphreel.sequence import AsciiSequence

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    READY = "ready"
    EMITTING = "emitting"
    DONE = "done"
    ABORTED = "aborted"


def frame_budget_us(fps: float) -> int:
    """Microseconds available for each frame at ``fps``."""
    return round(1_000_000 / fps)


def _monotonic_us() -> int:
    return time.perf_counter_ns() // 1000


def _sleep_us(duration_us: int) -> None:
    time.sleep(duration_us / 1_000_000)


def _emit(out: TextIO, frame: str) -> None:
    try:
        out.write(CLEAR_SCREEN + frame)
        out.flush()
    except OSError as exc:
        raise IOFailure(f"failed to write frame: {exc}") from exc


class PlaybackScheduler:
    """Write frames at a fixed cadence and fail fast when the output lags.

    Each frame is cleared-and-written, then the scheduler sleeps for whatever
    is left of the frame budget. A frame whose write uses the whole budget
    aborts playback with :class:`RenderTooSlow`; frames are never dropped.
    """

    def __init__(
        self,
        frames: Iterable[str],
        fps: float,
        out: TextIO,
        *,
        clock: Optional[Callable[[], int]] = None,
        sleep: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._frames: Optional[Iterator[str]] = iter(frames)
        self._fps = fps
        self._out = out
        self._clock = clock if clock is not None else _monotonic_us
        self._sleep = sleep if sleep is not None else _sleep_us
        self._budget_us = frame_budget_us(fps)
        self.state = PlaybackState.READY
        self.index = 0

    @property
    def budget_us(self) -> int:
        return self._budget_us

    def run(self) -> None:
        """Emit every frame, blocking the calling thread until done."""
        if self.state is not PlaybackState.READY or self._frames is None:
            raise RuntimeError(f"scheduler already ran (state={self.state.value})")
        frames, self._frames = self._frames, None
        self.state = PlaybackState.EMITTING
        logger.info("Playback start fps=%s budget=%dus", self._fps, self._budget_us)
        for frame in frames:
            started = self._clock()
            try:
                _emit(self._out, frame)
            except IOFailure:
                self.state = PlaybackState.ABORTED
                raise
            elapsed = self._clock() - started
            if elapsed >= self._budget_us:
                self.state = PlaybackState.ABORTED
                logger.warning(
                    "Frame %d took %dus, budget %dus at %s fps",
                    self.index,
                    elapsed,
                    self._budget_us,
                    self._fps,
                )
                raise RenderTooSlow(self._fps, elapsed, self._budget_us)
            self._sleep(self._budget_us - elapsed)
            self.index += 1
        self.state = PlaybackState.DONE
        logger.info("Playback done frames=%d", self.index)


def play(sequence: "AsciiSequence", out: TextIO) -> PlaybackScheduler:
    """Play ``sequence`` to ``out`` and return the finished scheduler."""
    scheduler = PlaybackScheduler(sequence.frames, sequence.fps, out)
    scheduler.run()
    return scheduler


def play_with_audio(
    sequence: "AsciiSequence",
    audio: bytes,
    out: TextIO,
    *,
    start_audio: Optional[Callable[[bytes], "AudioHandle"]] = None,
) -> PlaybackScheduler:
    """Start the audio track, then immediately play ``sequence``.

    The two only share a start instant. The audio thread is never joined and
    its failures do not affect video playback.
    """
    if start_audio is None:
        from glyphreel import audio as audio_module

        start_audio = audio_module.start_audio
    start_audio(audio)
    return play(sequence, out)


def play_live(frames: Iterable[str], out: TextIO) -> int:
    """Write frames as fast as they arrive, without a frame budget.

    Runs until ``frames`` is exhausted or raises; the source's error
    propagates unchanged. Returns the number of frames written.
    """
    count = 0
    for frame in frames:
        _emit(out, frame)
        count += 1
    return count
