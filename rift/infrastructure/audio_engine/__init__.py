"""
Audio Engine Module - Audio Output Backends

Contains:
- AudioOutput / AudioStream: the interface the playback engine drives
- GstAudioOutput: GStreamer playbin-based implementation
"""

from .base import AudioOutput, AudioStream
from .gstreamer import GstAudioOutput, GstAudioStream, GSTREAMER_AVAILABLE

__all__ = [
    "AudioOutput",
    "AudioStream",
    "GstAudioOutput",
    "GstAudioStream",
    "GSTREAMER_AVAILABLE",
]
