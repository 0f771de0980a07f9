"""
Application Layer - Library, Search, Playback and Presence Services

Modules:
- library_manager: Scanning, metadata extraction, the in-memory library index
- search_engine: Ranked search over the library
- playback_manager: Single-owner playback engine and its public facade
- presence: Best-effort broadcasting of playback state
- commands: Entry points used by the UI layer
"""
