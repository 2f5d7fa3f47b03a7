"""Tests for detached audio playback using fakes."""

from __future__ import annotations

from pathlib import Path

import pytest

from glyphreel import audio


class FakePlayer:
    def __init__(self) -> None:
        self.loaded: bytes | None = None
        self.played = 0

    def load(self, path: str) -> None:
        self.loaded = Path(path).read_bytes()

    def play(self) -> None:
        self.played += 1

    def stop(self) -> None:
        pass


class FakeMediaPlayer:
    def __init__(self) -> None:
        self.media = None
        self.playing = False

    def set_media(self, media: str) -> None:
        self.media = media

    def play(self) -> None:
        self.playing = True

    def stop(self) -> None:
        self.playing = False


class FakeInstance:
    def __init__(self) -> None:
        self.player = FakeMediaPlayer()

    def media_player_new(self) -> FakeMediaPlayer:
        return self.player

    def media_new(self, path: str) -> str:
        return f"media:{path}"


class FakeVlc:
    @staticmethod
    def Instance() -> FakeInstance:
        return FakeInstance()


def test_start_audio_plays_blob_on_daemon_thread() -> None:
    player = FakePlayer()
    handle = audio.start_audio(b"mp3-bytes", player_factory=lambda: player)
    handle.thread.join(timeout=5)
    assert handle.thread.daemon is True
    assert handle.thread.name == "AudioPlayback"
    assert handle.started.is_set()
    assert handle.error is None
    assert handle.player is player
    assert player.loaded == b"mp3-bytes"
    assert player.played == 1


def test_handle_offers_no_join_or_cancel() -> None:
    handle = audio.start_audio(b"", player_factory=FakePlayer)
    handle.thread.join(timeout=5)
    assert not hasattr(handle, "join")
    assert not hasattr(handle, "cancel")
    assert handle.is_alive is False


def test_audio_failure_is_isolated() -> None:
    def broken() -> FakePlayer:
        raise RuntimeError("no output device")

    handle = audio.start_audio(b"mp3", player_factory=broken)
    handle.thread.join(timeout=5)
    assert isinstance(handle.error, RuntimeError)
    assert not handle.started.is_set()
    assert handle.player is None


def test_vlc_player_wraps_media_player(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(audio, "vlc", FakeVlc)
    monkeypatch.setattr(audio, "_VLC_IMPORT_ERROR", None)
    player = audio.VlcAudioPlayer()
    player.load("track.mp3")
    player.play()
    inner = player._player
    assert inner.media == "media:track.mp3"
    assert inner.playing is True
    player.stop()
    assert inner.playing is False


def test_missing_vlc_raises_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(audio, "vlc", None)
    monkeypatch.setattr(audio, "_VLC_IMPORT_ERROR", RuntimeError("missing"))
    with pytest.raises(RuntimeError, match="python-vlc"):
        audio.VlcAudioPlayer()


def test_load_vlc_import_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    import builtins

    original_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "vlc":
            raise ModuleNotFoundError("vlc")
        return original_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    monkeypatch.setattr(audio, "vlc", None)
    monkeypatch.setattr(audio, "_VLC_IMPORT_ERROR", None)
    audio._load_vlc()
    assert audio.vlc is None
    assert isinstance(audio._VLC_IMPORT_ERROR, ModuleNotFoundError)
