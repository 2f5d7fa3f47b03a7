"""VLC-backed audio accompaniment for video playback.

Audio runs on a detached daemon thread. It starts right before the video and
shares no clock with it; the handle returned to callers can be inspected but
not joined or cancelled, and audio failures never reach the video player.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import atexit
import logging
import os
import tempfile
import threading
from typing import Any, Callable, Optional, Protocol, cast

logger = logging.getLogger(__name__)

vlc: Any | None = None
_VLC_IMPORT_ERROR: Optional[Exception] = None


def _load_vlc() -> None:
    global vlc
    global _VLC_IMPORT_ERROR
    if vlc is not None or _VLC_IMPORT_ERROR is not None:
        return
    try:
        import vlc as vlc_module  # type: ignore
    except Exception as exc:  # pragma: no cover - platform-dependent import
        vlc = None
        _VLC_IMPORT_ERROR = exc
    else:
        vlc = cast(Any, vlc_module)
        _VLC_IMPORT_ERROR = None


class AudioPlayer(Protocol):
    def load(self, path: str) -> None: ...

    def play(self) -> None: ...

    def stop(self) -> None: ...


class VlcAudioPlayer:
    """Thin wrapper around python-vlc's MediaPlayer."""

    def __init__(self) -> None:
        _load_vlc()
        if vlc is None:
            raise RuntimeError(
                "VLC backend is unavailable. Install VLC and the python-vlc package."
            ) from _VLC_IMPORT_ERROR
        self._instance = cast(Any, vlc).Instance()
        self._player = self._instance.media_player_new()

    def load(self, path: str) -> None:
        media = self._instance.media_new(path)
        self._player.set_media(media)

    def play(self) -> None:
        self._player.play()

    def stop(self) -> None:
        self._player.stop()


@dataclass
class AudioHandle:
    """Observation point for a detached audio track.

    There is intentionally no ``join`` or ``cancel``: the track plays until
    it ends or the process exits.
    """

    thread: threading.Thread
    started: threading.Event = field(default_factory=threading.Event)
    error: Optional[BaseException] = None
    # the player must stay referenced for as long as the track plays
    player: Optional[AudioPlayer] = None

    @property
    def is_alive(self) -> bool:
        return self.thread.is_alive()


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except OSError:
        logger.debug("Could not remove temporary audio file %s", path)


def _write_temp_audio(blob: bytes) -> str:
    fd, path = tempfile.mkstemp(prefix="glyphreel-", suffix=".audio")
    with os.fdopen(fd, "wb") as stream:
        stream.write(blob)
    atexit.register(_remove_quietly, path)
    return path


def start_audio(
    blob: bytes,
    player_factory: Callable[[], AudioPlayer] = VlcAudioPlayer,
) -> AudioHandle:
    """Play an opaque audio blob on a new daemon thread and return at once."""

    def _run() -> None:
        try:
            path = _write_temp_audio(blob)
            player = player_factory()
            player.load(path)
            player.play()
        except Exception as exc:
            handle.error = exc
            logger.exception("Audio playback failed")
            return
        handle.player = player
        handle.started.set()
        logger.info("Audio playback started (%d bytes)", len(blob))

    thread = threading.Thread(target=_run, name="AudioPlayback", daemon=True)
    handle = AudioHandle(thread=thread)
    thread.start()
    return handle
