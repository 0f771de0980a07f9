"""
Domain Exceptions Module

Contains domain-specific exceptions:
- RiftError: Base class for every error raised by Rift services
- PlaybackError: Base class for transport command failures
- PlaybackIOError: Audio file could not be opened or read
- DecodeError: Decode stream could not be constructed
- DeviceUnavailableError: Audio output failed to initialize or was lost
- ServiceUnavailableError: Playback worker is not reachable
"""


class RiftError(Exception):
    """Base exception for Rift errors."""
    pass


class PlaybackError(RiftError):
    """A transport command failed."""
    pass


class PlaybackIOError(PlaybackError):
    """The audio file could not be opened."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class DecodeError(PlaybackError):
    """The decode stream could not be constructed or read."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class DeviceUnavailableError(PlaybackError):
    """The audio output failed to initialize or was lost."""
    pass


class ServiceUnavailableError(PlaybackError):
    """The playback worker is gone or never answered."""
    pass


__all__ = [
    "RiftError",
    "PlaybackError",
    "PlaybackIOError",
    "DecodeError",
    "DeviceUnavailableError",
    "ServiceUnavailableError",
]
