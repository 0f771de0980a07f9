"""
Infrastructure Layer - File System and External Services

Modules:
- cache: Content-addressed cover art cache and artist picture cache
- audio_engine: Audio output backends (GStreamer playbin)
- external_apis: Remote artist picture lookup
"""
