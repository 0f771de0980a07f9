"""
Playback Engine Module

The state machine behind every transport command. A PlaybackController owns
the audio output and the stream of the currently loaded track. It is not
thread-safe: only the playback worker in ``player.py`` may call it.

States: empty (nothing loaded) -> playing <-> paused.

Position is ``position_offset + stream.position``: the offset is where the
current stream was started in the file, and the stream reports its own
playhead, so pausing never drifts the clock.
"""

from __future__ import annotations

import logging
from typing import Optional

from rift.domain.exceptions import PlaybackIOError
from rift.domain.models import PlaybackState, DEFAULT_VOLUME
from rift.infrastructure.audio_engine import AudioOutput, AudioStream

logger = logging.getLogger(__name__)

DEFAULT_SEEK_TOLERANCE = 1.0  # seconds


def clamp_volume(volume: float) -> float:
    return max(0.0, min(1.0, float(volume)))


class PlaybackController:
    """
    Single-owner playback session.

    Features:
    - Load and play, pause, resume
    - Two-tier seek: in-place reposition when it is accurate, full stream
      rebuild otherwise
    - Volume and mute that survive stream rebuilds
    - Natural end-of-track detection on state reads
    """

    def __init__(
        self,
        output: AudioOutput,
        volume: float = DEFAULT_VOLUME,
        seek_tolerance: float = DEFAULT_SEEK_TOLERANCE,
    ):
        """
        Args:
            output: Acquired audio output device
            volume: Initial volume (0.0 to 1.0)
            seek_tolerance: Maximum distance in seconds between the requested
                and the reported position for an in-place seek to be accepted
        """
        self._output = output
        self._stream: Optional[AudioStream] = None
        self._path: Optional[str] = None
        self._duration = 0.0
        self._position_offset = 0.0
        self._paused = True
        self._volume = clamp_volume(volume)
        self._muted_volume: Optional[float] = None
        self.seek_tolerance = max(0.0, float(seek_tolerance))

    @property
    def is_loaded(self) -> bool:
        return self._path is not None

    # Transport commands

    def load_and_play(self, path: str) -> PlaybackState:
        """
        Load a file and start playing it from the beginning.

        Raises:
            PlaybackIOError: If the file cannot be opened
            DecodeError: If no decode stream can be built for it
        """
        logger.debug(f"Load and play: {path}")
        self._path = path
        self._rebuild_stream(0.0, should_play=True)
        return self.state()

    def play(self) -> PlaybackState:
        if self._path is None:
            return self.state()

        self._paused = False
        self._stream.play()
        return self.state()

    def pause(self) -> PlaybackState:
        self._paused = True
        if self._stream is not None:
            self._stream.pause()
        return self.state()

    def seek(self, position_seconds: float) -> PlaybackState:
        """
        Seek within the loaded track.

        The target is clamped to the track. An in-place seek is only trusted
        when the current stream started at 0 and the decoder reports a
        position close to the target; otherwise the stream is rebuilt at the
        target in the same play/pause state.
        """
        if self._path is None:
            return self.state()

        clamped = self._clamp_position(position_seconds)
        should_play = not self._paused
        stream = self._stream

        if self._position_offset == 0.0 and stream.supports_seek and stream.try_seek(clamped):
            reported = stream.position
            if abs(reported - clamped) <= self.seek_tolerance:
                logger.debug(f"Seek to {clamped:.2f}s in place")
                if should_play:
                    stream.play()
                else:
                    stream.pause()
                return self.state()
            logger.debug(f"In-place seek landed at {reported:.2f}s, wanted {clamped:.2f}s; rebuilding")

        self._rebuild_stream(clamped, should_play)
        return self.state()

    def set_volume(self, volume: float) -> PlaybackState:
        self._volume = clamp_volume(volume)
        self._muted_volume = None
        self._apply_volume()
        return self.state()

    def toggle_mute(self) -> PlaybackState:
        """Mute, or restore the volume that was active before muting."""
        if self._muted_volume is None:
            self._muted_volume = self._volume
            self._volume = 0.0
        else:
            self._volume = self._muted_volume
            self._muted_volume = None
        self._apply_volume()
        return self.state()

    def state(self) -> PlaybackState:
        """
        Build the current snapshot.

        A track that is still flagged as playing but whose stream has drained
        to the end is moved to paused first.
        """
        if (
            not self._paused
            and self._stream is not None
            and self._duration > 0
            and self._stream.is_drained()
            and self._position() >= self._duration
        ):
            logger.debug("End of track reached")
            self._paused = True
            self._stream.pause()

        return PlaybackState(
            is_loaded=self._path is not None,
            is_playing=self._path is not None and not self._paused,
            current_time=self._position(),
            duration=self._duration,
            volume=self._volume,
            is_muted=self._muted_volume is not None,
            path=self._path,
        )

    def close(self) -> None:
        """Stop playback and release the output."""
        self._discard_stream()
        self._output.close()

    # Internals

    def _rebuild_stream(self, offset_seconds: float, should_play: bool) -> None:
        """
        Replace the current stream with a fresh one started at ``offset_seconds``.

        The old stream is stopped before the new one is opened, so two
        streams never play at once. On failure the controller is left empty.
        """
        path = self._path
        self._discard_stream()

        try:
            with open(path, 'rb'):
                pass
        except OSError as e:
            self._reset()
            raise PlaybackIOError(f"Cannot open file: {e}", path) from e

        try:
            stream = self._output.open_stream(path)
        except Exception:
            self._reset()
            raise

        try:
            duration = stream.duration if stream.duration > 0 else 0.0
            offset = self._clamp_to(offset_seconds, duration)
            stream.set_volume(self._volume)
            stream.skip(offset)
        except Exception:
            self._stream = stream
            self._reset()
            raise

        self._stream = stream
        self._duration = duration
        self._position_offset = offset

        if should_play:
            stream.play()
            self._paused = False
        else:
            stream.pause()
            self._paused = True

    def _discard_stream(self) -> None:
        if self._stream is not None:
            try:
                self._stream.stop()
            except Exception as e:
                logger.warning(f"Error stopping stream: {e}")
            self._stream = None

    def _reset(self) -> None:
        """Return to the empty state; volume and mute are kept."""
        self._discard_stream()
        self._path = None
        self._duration = 0.0
        self._position_offset = 0.0
        self._paused = True

    def _apply_volume(self) -> None:
        if self._stream is not None:
            self._stream.set_volume(self._volume)

    def _clamp_position(self, seconds: float) -> float:
        return self._clamp_to(seconds, self._duration)

    @staticmethod
    def _clamp_to(seconds: float, duration: float) -> float:
        seconds = max(0.0, float(seconds))
        if duration > 0:
            return min(seconds, duration)
        return seconds

    def _position(self) -> float:
        if self._path is None or self._stream is None:
            return 0.0

        absolute = self._position_offset + self._stream.position
        if self._duration > 0:
            return min(absolute, self._duration)
        return absolute
