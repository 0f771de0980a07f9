"""
GStreamer Audio Output

Implements AudioOutput with one ``playbin`` pipeline per stream. Bus messages
are polled rather than dispatched through a GLib main loop, so the streams
can be driven entirely from the playback worker thread.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rift.domain.exceptions import DecodeError, DeviceUnavailableError
from .base import AudioOutput, AudioStream

logger = logging.getLogger(__name__)

# Try to import GStreamer
try:
    import gi
    gi.require_version('Gst', '1.0')
    from gi.repository import Gst
    Gst.init(None)
    GSTREAMER_AVAILABLE = True
except (ImportError, ValueError) as e:
    GSTREAMER_AVAILABLE = False
    logger.warning(f"GStreamer not available: {e}")

# playbin flags: audio only, software volume
PLAY_FLAG_AUDIO = 0x00000002
PLAY_FLAG_SOFT_VOLUME = 0x00000010


def _probe_duration(path: str) -> float:
    """Duration from the file's own headers, used when the pipeline cannot report one."""
    import mutagen

    try:
        audio = mutagen.File(path)
    except (mutagen.MutagenError, OSError):
        return 0.0
    length = getattr(getattr(audio, "info", None), "length", 0.0) or 0.0
    return float(length) if length > 0 else 0.0


class GstAudioStream(AudioStream):
    """A prerolled playbin for one file."""

    def __init__(self, path: str, sink_factory: str = "autoaudiosink"):
        self._path = path
        self._start = 0.0
        self._eos = False

        self._playbin = Gst.ElementFactory.make('playbin', None)
        if self._playbin is None:
            raise DecodeError("Failed to create playbin element", path)

        audio_sink = Gst.ElementFactory.make(sink_factory, None)
        if audio_sink is not None:
            self._playbin.set_property('audio-sink', audio_sink)
        self._playbin.set_property('flags', PLAY_FLAG_AUDIO | PLAY_FLAG_SOFT_VOLUME)
        self._playbin.set_property('uri', Path(path).absolute().as_uri())
        self._bus = self._playbin.get_bus()

        self._preroll()
        self._duration = self._query_duration() or _probe_duration(path)

    def _preroll(self) -> None:
        """Bring the pipeline to PAUSED so the decoder is built and duration is known."""
        ret = self._playbin.set_state(Gst.State.PAUSED)
        if ret != Gst.StateChangeReturn.FAILURE:
            ret, _state, _pending = self._playbin.get_state(Gst.CLOCK_TIME_NONE)

        if ret == Gst.StateChangeReturn.FAILURE:
            detail = self._pop_error() or "pipeline refused to preroll"
            self._playbin.set_state(Gst.State.NULL)
            raise DecodeError(f"Cannot decode audio: {detail}", self._path)

    def _wait(self) -> None:
        self._playbin.get_state(Gst.CLOCK_TIME_NONE)

    def _query_duration(self) -> float:
        ok, duration = self._playbin.query_duration(Gst.Format.TIME)
        if ok and duration > 0:
            return duration / Gst.SECOND
        return 0.0

    def _pop_error(self) -> Optional[str]:
        message = self._bus.pop_filtered(Gst.MessageType.ERROR)
        if message is None:
            return None
        err, _debug = message.parse_error()
        return err.message

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def position(self) -> float:
        if self._eos and self._duration > 0:
            return max(0.0, self._duration - self._start)
        ok, position = self._playbin.query_position(Gst.Format.TIME)
        if not ok:
            return 0.0
        return max(0.0, position / Gst.SECOND - self._start)

    def skip(self, offset: float) -> None:
        if offset <= 0:
            return
        ok = self._playbin.seek_simple(
            Gst.Format.TIME,
            Gst.SeekFlags.FLUSH | Gst.SeekFlags.ACCURATE,
            int(offset * Gst.SECOND),
        )
        if not ok:
            raise DecodeError(f"Cannot skip to {offset:.2f}s", self._path)
        self._wait()
        self._start = offset

    def try_seek(self, position: float) -> bool:
        self._drain_bus()
        ok = self._playbin.seek_simple(
            Gst.Format.TIME,
            Gst.SeekFlags.FLUSH | Gst.SeekFlags.KEY_UNIT,
            int(position * Gst.SECOND),
        )
        if ok:
            self._wait()
            self._eos = False
        return bool(ok)

    def play(self) -> None:
        self._drain_bus()
        self._playbin.set_state(Gst.State.PLAYING)

    def pause(self) -> None:
        self._drain_bus()
        self._playbin.set_state(Gst.State.PAUSED)

    def stop(self) -> None:
        self._playbin.set_state(Gst.State.NULL)

    def set_volume(self, volume: float) -> None:
        self._playbin.set_property('volume', volume)

    def is_drained(self) -> bool:
        self._drain_bus()
        return self._eos

    def _drain_bus(self) -> None:
        """Pop every pending bus message; without a main loop nothing else will."""
        message = self._bus.pop()
        while message is not None:
            if message.type == Gst.MessageType.EOS:
                self._eos = True
            elif message.type == Gst.MessageType.ERROR:
                err, debug = message.parse_error()
                logger.error(f"GStreamer error: {err.message}\nDebug: {debug}")
                self._eos = True
            message = self._bus.pop()


class GstAudioOutput(AudioOutput):
    """
    Audio output backed by GStreamer.

    Construction verifies that GStreamer is importable and that the requested
    sink element exists; failure raises DeviceUnavailableError.
    """

    def __init__(self, sink_factory: str = "autoaudiosink"):
        if not GSTREAMER_AVAILABLE:
            raise DeviceUnavailableError("Cannot initialize audio output: GStreamer is not available")

        if Gst.ElementFactory.find(sink_factory) is None:
            raise DeviceUnavailableError(
                f"Cannot initialize audio output: no '{sink_factory}' element"
            )

        self._sink_factory = sink_factory
        logger.info(f"GStreamer audio output initialized ({sink_factory})")

    def open_stream(self, path: str) -> GstAudioStream:
        return GstAudioStream(path, self._sink_factory)
