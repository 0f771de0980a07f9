"""
Rift - Local Music Player Backend

Indexes a folder of audio files into searchable track metadata and drives
audio output through a serialized transport command protocol.

Architecture:
- Application Layer: library scanning, search, playback and presence services
- Domain Layer: Track and PlaybackState models, exception hierarchy
- Infrastructure Layer: artwork caches, GStreamer audio output, remote APIs
- Runtime/Core: paths, logging bootstrap and JSON configuration
"""

__version__ = "0.3.0"
__author__ = "Rift Team"
__description__ = "Local music library and playback backend"
