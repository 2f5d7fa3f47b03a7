"""Live camera input through OpenCV."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional, TextIO, cast

from glyphreel.aspect import target_size
from glyphreel.errors import CaptureFailure
from glyphreel.playback import play_live
from glyphreel.renderer import render
from glyphreel.settings import RenderSettings

logger = logging.getLogger(__name__)

cv2: Any | None = None
_CV2_IMPORT_ERROR: Optional[Exception] = None


def _load_cv2() -> None:
    global cv2
    global _CV2_IMPORT_ERROR
    if cv2 is not None or _CV2_IMPORT_ERROR is not None:
        return
    try:
        import cv2 as cv2_module  # type: ignore
    except Exception as exc:  # pragma: no cover - platform-dependent import
        cv2 = None
        _CV2_IMPORT_ERROR = exc
    else:
        cv2 = cast(Any, cv2_module)
        _CV2_IMPORT_ERROR = None


def _require_cv2() -> Any:
    _load_cv2()
    if cv2 is None:
        raise RuntimeError(
            "Camera capture is unavailable. Install the opencv-python package."
        ) from _CV2_IMPORT_ERROR
    return cv2


def camera_frames(
    index: int,
    settings: RenderSettings,
    capture_factory: Optional[Callable[[int], Any]] = None,
) -> Iterator[str]:
    """Yield rendered frames from camera ``index`` until a read fails."""
    cv = _require_cv2()
    factory = capture_factory if capture_factory is not None else cv.VideoCapture
    capture = factory(index)
    if not capture.isOpened():
        capture.release()
        raise CaptureFailure(f"could not open camera {index}")
    logger.info("Camera %d opened", index)
    try:
        while True:
            ok, frame = capture.read()
            if not ok or frame is None:
                raise CaptureFailure(f"camera {index} stopped delivering frames")
            height, width = frame.shape[:2]
            size = target_size((width, height), settings)
            if size != (width, height):
                frame = cv.resize(frame, size, interpolation=cv.INTER_LINEAR)
            rgb = cv.cvtColor(frame, cv.COLOR_BGR2RGB)
            yield render(rgb, settings)
    finally:
        capture.release()
        logger.info("Camera %d released", index)


def run_webcam(index: int, settings: RenderSettings, out: TextIO) -> int:
    """Render camera ``index`` to ``out`` until the camera fails."""
    return play_live(camera_frames(index, settings), out)
