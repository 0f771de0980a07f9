"""Shared fixtures: isolated runtime directories and generated audio files."""

from __future__ import annotations

import struct
import wave
from pathlib import Path
from typing import Optional

import pytest
from mutagen.id3 import APIC, TALB, TIT2, TPE1
from mutagen.wave import WAVE

from rift.runtime import runtime_config

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x11" * 32


@pytest.fixture
def runtime_dirs(tmp_path, monkeypatch):
    """Point every runtime directory at a temporary location."""
    monkeypatch.setenv(runtime_config.ENV_CONFIG_DIR, str(tmp_path / "config"))
    monkeypatch.setenv(runtime_config.ENV_CACHE_DIR, str(tmp_path / "cache"))
    monkeypatch.setenv(runtime_config.ENV_DATA_DIR, str(tmp_path / "data"))
    monkeypatch.setattr("rift.core.config._config_manager", None)
    runtime_config.reset_runtime_config()
    yield runtime_config.get_runtime_config().paths
    runtime_config.reset_runtime_config()


def write_wav(
    path: Path,
    seconds: int = 2,
    title: Optional[str] = None,
    artist: Optional[str] = None,
    album: Optional[str] = None,
    cover: Optional[bytes] = None,
    cover_mime: str = "image/png",
) -> Path:
    """Write a silent mono WAV file, optionally with ID3 tags."""
    path.parent.mkdir(parents=True, exist_ok=True)
    rate = 8000
    with wave.open(str(path), "wb") as handle:
        handle.setnchannels(1)
        handle.setsampwidth(2)
        handle.setframerate(rate)
        handle.writeframes(struct.pack("<h", 0) * rate * seconds)

    if title or artist or album or cover:
        audio = WAVE(path)
        audio.add_tags()
        if title:
            audio.tags.add(TIT2(encoding=3, text=title))
        if artist:
            audio.tags.add(TPE1(encoding=3, text=artist))
        if album:
            audio.tags.add(TALB(encoding=3, text=album))
        if cover:
            audio.tags.add(APIC(encoding=3, mime=cover_mime, type=3, desc="Cover", data=cover))
        audio.save()

    return path


@pytest.fixture
def wav_factory(tmp_path):
    """Create WAV files below ``tmp_path / "music"``."""
    music_dir = tmp_path / "music"
    music_dir.mkdir(exist_ok=True)

    def factory(relative: str, **kwargs) -> Path:
        return write_wav(music_dir / relative, **kwargs)

    factory.music_dir = music_dir
    return factory


@pytest.fixture
def music_dir(wav_factory):
    return wav_factory.music_dir
