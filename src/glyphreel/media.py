"""ffprobe/ffmpeg collaborator for video sources."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import subprocess
from typing import Protocol, Sequence

from glyphreel.errors import ExternalToolFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    width: int
    height: int
    fps: float

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


class MediaTool(Protocol):
    def probe(self, path: str) -> ProbeResult: ...

    def decode(self, path: str, size: tuple[int, int]) -> bytes: ...

    def extract_audio(self, path: str) -> bytes: ...


def parse_frame_rate(value: str) -> float:
    """Convert an ffprobe rational such as ``30000/1001`` to a float."""
    numerator, _, denominator = value.strip().partition("/")
    num = float(numerator)
    den = float(denominator) if denominator else 1.0
    if den == 0 or num <= 0:
        raise ValueError(f"unusable frame rate {value!r}")
    return num / den


def parse_probe_output(text: str) -> ProbeResult:
    """Parse ``WIDTHxHEIGHTxNUM/DEN`` as printed by the probe command."""
    line = text.strip().splitlines()[0] if text.strip() else ""
    fields = line.split("x")
    try:
        if len(fields) < 3:
            raise ValueError(f"expected width, height and frame rate, got {line!r}")
        width = int(fields[0])
        height = int(fields[1])
        fps = parse_frame_rate(fields[2])
    except ValueError as exc:
        raise ExternalToolFailure("ffprobe", 0, f"unexpected output: {exc}") from exc
    if width < 1 or height < 1:
        raise ExternalToolFailure("ffprobe", 0, f"unexpected video size {line!r}")
    return ProbeResult(width=width, height=height, fps=fps)


class FfmpegMedia:
    """Probe and decode media by running the ffmpeg command line tools."""

    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe") -> None:
        self._ffmpeg = ffmpeg
        self._ffprobe = ffprobe

    def _run(self, tool: str, args: Sequence[str]) -> bytes:
        command = [tool, *args]
        logger.debug("Running %s", " ".join(command))
        try:
            result = subprocess.run(command, capture_output=True, check=False)
        except OSError as exc:
            raise ExternalToolFailure(tool, None, str(exc)) from exc
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            logger.error("%s failed with status %s", tool, result.returncode)
            raise ExternalToolFailure(tool, result.returncode, stderr)
        return result.stdout

    def probe(self, path: str) -> ProbeResult:
        output = self._run(
            self._ffprobe,
            [
                "-v",
                "error",
                "-select_streams",
                "v:0",
                "-show_entries",
                "stream=width,height,r_frame_rate",
                "-of",
                "csv=s=x:p=0",
                path,
            ],
        )
        result = parse_probe_output(output.decode("utf-8", errors="replace"))
        logger.info(
            "Probed %s: %dx%d at %.3f fps", path, result.width, result.height, result.fps
        )
        return result

    def decode(self, path: str, size: tuple[int, int]) -> bytes:
        width, height = size
        raw = self._run(
            self._ffmpeg,
            [
                "-i",
                path,
                "-vf",
                f"format=rgb24,scale={width}:{height}",
                "-f",
                "rawvideo",
                "-",
            ],
        )
        logger.info("Decoded %d bytes of raw video from %s", len(raw), path)
        return raw

    def extract_audio(self, path: str) -> bytes:
        audio = self._run(self._ffmpeg, ["-i", path, "-vn", "-f", "mp3", "-"])
        logger.info("Extracted %d bytes of audio from %s", len(audio), path)
        return audio
