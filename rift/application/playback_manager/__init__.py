"""
Playback Manager Module

Provides the single-owner playback engine and its thread-safe facade.
"""

from .engine import (
    PlaybackController,
    DEFAULT_SEEK_TOLERANCE,
    clamp_volume,
)
from .player import (
    PlaybackService,
    PlaybackCommand,
    CommandKind,
)

__all__ = [
    "PlaybackController",
    "DEFAULT_SEEK_TOLERANCE",
    "clamp_volume",
    "PlaybackService",
    "PlaybackCommand",
    "CommandKind",
]
