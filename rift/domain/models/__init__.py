"""
Domain Models Module

Contains all domain models for Rift.
"""

from .track import Track, UNKNOWN_ARTIST, format_duration
from .playback import PlaybackState, DEFAULT_VOLUME

__all__ = [
    # Track
    "Track",
    "UNKNOWN_ARTIST",
    "format_duration",
    # Playback
    "PlaybackState",
    "DEFAULT_VOLUME",
]
