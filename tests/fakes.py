"""In-memory audio output used in place of GStreamer."""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from rift.domain.exceptions import DecodeError
from rift.infrastructure.audio_engine import AudioOutput, AudioStream


class FakeStream(AudioStream):
    """
    Stream whose clock only moves when the test calls ``advance``.

    ``seek_error`` is added to every in-place seek, to simulate a decoder
    that lands somewhere other than where it was asked to.
    """

    def __init__(self, path: str, duration: float, seek_error: float = 0.0,
                 supports_seek: bool = True, refuse_seek: bool = False,
                 fail_skip: bool = False):
        self.path = path
        self._duration = duration
        self.seek_error = seek_error
        self._supports_seek = supports_seek
        self.refuse_seek = refuse_seek
        self.fail_skip = fail_skip
        self.start_offset = 0.0
        self.played = 0.0
        self.playing = False
        self.stopped = False
        self.volume: Optional[float] = None
        self.seeks: List[float] = []

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def position(self) -> float:
        return self.played

    @property
    def supports_seek(self) -> bool:
        return self._supports_seek

    def advance(self, seconds: float) -> None:
        if self.playing:
            remaining = max(0.0, self._duration - self.start_offset - self.played)
            self.played += min(seconds, remaining)

    def skip(self, offset: float) -> None:
        if self.fail_skip and offset > 0:
            raise DecodeError(f"Cannot skip to {offset:.2f}s", self.path)
        self.start_offset = offset

    def try_seek(self, position: float) -> bool:
        self.seeks.append(position)
        if self.refuse_seek:
            return False
        self.played = max(0.0, position + self.seek_error)
        return True

    def play(self) -> None:
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def stop(self) -> None:
        self.playing = False
        self.stopped = True

    def set_volume(self, volume: float) -> None:
        self.volume = volume

    def is_drained(self) -> bool:
        return self.start_offset + self.played >= self._duration


class FakeAudioOutput(AudioOutput):
    """Hands out FakeStreams; paths in ``fail_paths`` cannot be decoded."""

    def __init__(self, duration: float = 200.0, durations: Optional[Dict[str, float]] = None,
                 seek_error: float = 0.0, supports_seek: bool = True,
                 fail_paths: Optional[Set[str]] = None, fail_skip: bool = False):
        self.duration = duration
        self.durations = durations or {}
        self.seek_error = seek_error
        self.supports_seek = supports_seek
        self.fail_paths = set(fail_paths or ())
        self.fail_skip = fail_skip
        self.streams: List[FakeStream] = []
        self.closed = False

    @property
    def current(self) -> Optional[FakeStream]:
        return self.streams[-1] if self.streams else None

    def advance(self, seconds: float) -> None:
        if self.current is not None:
            self.current.advance(seconds)

    def open_stream(self, path: str) -> FakeStream:
        if path in self.fail_paths:
            raise DecodeError(f"Unsupported format: {path}", path)
        stream = FakeStream(
            path,
            self.durations.get(path, self.duration),
            seek_error=self.seek_error,
            supports_seek=self.supports_seek,
            fail_skip=self.fail_skip,
        )
        self.streams.append(stream)
        return stream

    def close(self) -> None:
        self.closed = True
