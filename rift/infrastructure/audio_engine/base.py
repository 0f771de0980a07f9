"""
Audio Output Interfaces

The playback engine treats decoding as an opaque capability. An AudioOutput
is acquired once per process and opens one AudioStream per loaded track (or
per seek that needs a fresh decoder).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AudioStream(ABC):
    """
    One decode-and-play session for a single file.

    ``position`` is the playhead measured by the decoder since the stream's
    starting point (after any initial ``skip``), in seconds.
    """

    @property
    @abstractmethod
    def duration(self) -> float:
        """Total length of the file in seconds, 0.0 when unknown."""

    @property
    @abstractmethod
    def position(self) -> float:
        """Seconds played since the stream's starting point."""

    @property
    def supports_seek(self) -> bool:
        """Whether ``try_seek`` can reposition in place."""
        return True

    @abstractmethod
    def skip(self, offset: float) -> None:
        """Start the stream ``offset`` seconds into the file. Called before playback."""

    @abstractmethod
    def try_seek(self, position: float) -> bool:
        """Reposition in place; returns False when the decoder refused."""

    @abstractmethod
    def play(self) -> None: ...

    @abstractmethod
    def pause(self) -> None: ...

    @abstractmethod
    def stop(self) -> None:
        """Stop output and release the decoder. The stream is unusable afterwards."""

    @abstractmethod
    def set_volume(self, volume: float) -> None: ...

    @abstractmethod
    def is_drained(self) -> bool:
        """True once the decoder has produced all of its audio."""


class AudioOutput(ABC):
    """The process-wide audio output device."""

    @abstractmethod
    def open_stream(self, path: str) -> AudioStream:
        """
        Build a paused decode stream for ``path``.

        Raises:
            DecodeError: If the file cannot be decoded
        """

    def close(self) -> None:
        """Release the output device."""
