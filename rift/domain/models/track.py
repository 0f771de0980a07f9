"""
Track Domain Model

Represents one indexed audio file: its display metadata plus its on-disk path.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

UNKNOWN_ARTIST = "Unknown Artist"


def format_duration(seconds: int) -> str:
    """Render whole seconds as ``m:ss`` (minutes are not zero padded)."""
    seconds = max(0, int(seconds))
    minutes, seconds = divmod(seconds, 60)
    return f"{minutes}:{seconds:02d}"


@dataclass(frozen=True)
class Track:
    """
    Domain model for a single track in the library.

    Tracks are immutable. A reindex produces new instances rather than
    updating existing ones, so a Track handed out to a caller never changes
    underneath it.
    """

    path: str
    title: str
    artist: str = UNKNOWN_ARTIST
    album: str = ""
    duration: int = 0  # whole seconds
    cover: str = ""  # file name inside the cover cache, "" when absent
    added_at: int = 0  # epoch seconds

    @property
    def subtitle(self) -> str:
        """Display subtitle shown under the title (the artist)."""
        return self.artist

    @property
    def duration_formatted(self) -> str:
        """Get duration as ``m:ss``."""
        return format_duration(self.duration)

    @property
    def file_stem(self) -> str:
        return Path(self.path).stem

    @property
    def has_cover(self) -> bool:
        return bool(self.cover)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dictionary shape consumed by the UI layer."""
        return {
            "title": self.title,
            "subtitle": self.artist,
            "album": self.album,
            "added_at": self.added_at,
            "duration": self.duration_formatted,
            "cover": self.cover,
            "path": self.path,
        }
