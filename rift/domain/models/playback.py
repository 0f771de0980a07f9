"""
Playback Domain Model

Snapshot of the playback engine returned by every transport command.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

DEFAULT_VOLUME = 0.7


@dataclass(frozen=True)
class PlaybackState:
    """Current playback information."""
    is_loaded: bool = False
    is_playing: bool = False
    current_time: float = 0.0  # seconds
    duration: float = 0.0  # seconds, 0.0 when unknown
    volume: float = DEFAULT_VOLUME  # 0.0 to 1.0
    is_muted: bool = False
    path: Optional[str] = None

    @property
    def progress(self) -> float:
        """Get playback progress as percentage (0-100)."""
        if self.duration <= 0:
            return 0.0
        return (self.current_time / self.duration) * 100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
