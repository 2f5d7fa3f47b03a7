"""Error kinds raised by GlyphReel."""

from __future__ import annotations


class GlyphReelError(Exception):
    """Base class for every failure surfaced to callers."""


class InvalidConfiguration(GlyphReelError):
    """Settings or run options that cannot be honored."""


class MalformedFrame(GlyphReelError):
    """A byte slice or array could not be read as a width x height RGB grid."""


class IOFailure(GlyphReelError):
    """Reading input or writing rendered output failed."""


class CaptureFailure(GlyphReelError):
    """The camera could not be opened or stopped delivering frames."""


class ExternalToolFailure(GlyphReelError):
    """An external decoder or prober exited unsuccessfully."""

    def __init__(self, tool: str, returncode: int | None, stderr: str = "") -> None:
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr.strip()
        if returncode is None:
            message = f"{tool} could not be run"
        else:
            message = f"{tool} exited with status {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class RenderTooSlow(GlyphReelError):
    """The output stream cannot keep up with the requested frame rate."""

    def __init__(self, fps: float, elapsed_us: int, budget_us: int) -> None:
        self.fps = fps
        self.elapsed_us = elapsed_us
        self.budget_us = budget_us
        super().__init__(
            f"terminal prints too slowly for {fps:g} fps "
            f"(frame took {elapsed_us}us, budget {budget_us}us)"
        )
