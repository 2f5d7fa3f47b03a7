"""Tests for the ffmpeg collaborator using a fake subprocess."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from glyphreel import media
from glyphreel.ansi import RESET
from glyphreel.errors import ExternalToolFailure
from glyphreel.media import FfmpegMedia, parse_frame_rate, parse_probe_output
from glyphreel.sequence import open_video
from glyphreel.settings import RenderSettings


class _Runner:
    def __init__(self, returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"") -> None:
        self.commands: list[list[str]] = []
        self._result = SimpleNamespace(returncode=returncode, stdout=stdout, stderr=stderr)

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        return self._result


def test_parse_frame_rate() -> None:
    assert parse_frame_rate("30/1") == 30.0
    assert parse_frame_rate("30000/1001") == pytest.approx(29.97, abs=1e-3)
    assert parse_frame_rate("25") == 25.0
    with pytest.raises(ValueError):
        parse_frame_rate("0/0")


def test_parse_probe_output() -> None:
    result = parse_probe_output("1920x1080x24000/1001\n")
    assert result.size == (1920, 1080)
    assert result.fps == pytest.approx(23.976, abs=1e-3)


@pytest.mark.parametrize("text", ["", "garbage", "1920x1080", "axbx30/1", "0x10x30/1"])
def test_parse_probe_output_rejects_bad_text(text: str) -> None:
    with pytest.raises(ExternalToolFailure):
        parse_probe_output(text)


def test_probe_runs_ffprobe(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = _Runner(stdout=b"640x360x30/1\n")
    monkeypatch.setattr(media.subprocess, "run", runner)
    result = FfmpegMedia().probe("clip.mp4")
    assert result.size == (640, 360)
    assert result.fps == 30.0
    command = runner.commands[0]
    assert command[0] == "ffprobe"
    assert "stream=width,height,r_frame_rate" in command
    assert "csv=s=x:p=0" in command
    assert command[-1] == "clip.mp4"


def test_decode_requests_scaled_rgb24(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = _Runner(stdout=b"\x00" * 12)
    monkeypatch.setattr(media.subprocess, "run", runner)
    raw = FfmpegMedia(ffmpeg="/opt/ffmpeg").decode("clip.mp4", (8, 4))
    assert raw == b"\x00" * 12
    command = runner.commands[0]
    assert command[0] == "/opt/ffmpeg"
    assert "format=rgb24,scale=8:4" in command
    assert command[-3:] == ["-f", "rawvideo", "-"]


def test_extract_audio(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = _Runner(stdout=b"ID3")
    monkeypatch.setattr(media.subprocess, "run", runner)
    assert FfmpegMedia().extract_audio("clip.mp4") == b"ID3"
    assert runner.commands[0][-3:] == ["-f", "mp3", "-"]


def test_non_zero_exit_raises_with_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    runner = _Runner(returncode=1, stderr=b"clip.mp4: No such file or directory\n")
    monkeypatch.setattr(media.subprocess, "run", runner)
    with pytest.raises(ExternalToolFailure) as excinfo:
        FfmpegMedia().probe("clip.mp4")
    assert excinfo.value.tool == "ffprobe"
    assert excinfo.value.returncode == 1
    assert "No such file" in str(excinfo.value)
    assert len(runner.commands) == 1


def test_missing_binary_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(command, **kwargs):
        raise FileNotFoundError(command[0])

    monkeypatch.setattr(media.subprocess, "run", boom)
    with pytest.raises(ExternalToolFailure) as excinfo:
        FfmpegMedia().decode("clip.mp4", (2, 2))
    assert excinfo.value.returncode is None


@pytest.mark.ffmpeg
def test_real_ffmpeg_round_trip(tmp_path: Path) -> None:
    clip = tmp_path / "white.mkv"
    subprocess.run(
        [
            shutil.which("ffmpeg") or "ffmpeg",
            "-v",
            "error",
            "-f",
            "lavfi",
            "-i",
            "color=c=white:size=16x8:rate=10",
            "-t",
            "0.3",
            "-c:v",
            "ffv1",
            str(clip),
        ],
        check=True,
    )
    settings = RenderSettings(color=False, char_ramp=(" ", "#"), width=8, height=8)
    sequence = open_video(str(clip), settings)
    assert sequence.fps == pytest.approx(10.0)
    assert len(sequence) >= 1
    body = sequence.frames[0][: -len(RESET)]
    assert body.count("\n") == 4
    assert set(body.replace("\n", "")) == {"#"}
