"""
Presence Module

Mirrors playback state to a third party (e.g. a chat client's "now
playing" status). Presence is best-effort: sink failures are logged and never
reach the transport command that triggered them.
"""

from .broadcaster import (
    PresenceUpdate,
    PresenceSink,
    LoggingPresenceSink,
    PresenceBroadcaster,
)

__all__ = [
    "PresenceUpdate",
    "PresenceSink",
    "LoggingPresenceSink",
    "PresenceBroadcaster",
]
