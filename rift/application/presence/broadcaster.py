"""
Presence Broadcaster

Pushes ``(track, is_playing, position, duration)`` to a PresenceSink after
transport commands, and re-publishes the latest playback snapshot on a timer
so the remote side stays in sync while a track plays.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from rift.domain.models import PlaybackState, Track

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresenceUpdate:
    """What the presence sink is told about current playback."""
    track: Optional[Track]
    is_playing: bool
    position: float
    duration: float


class PresenceSink(Protocol):
    """Receives presence updates."""

    def publish(self, update: PresenceUpdate) -> None: ...


class LoggingPresenceSink:
    """Default sink: writes updates to the debug log."""

    def publish(self, update: PresenceUpdate) -> None:
        if update.track is None:
            logger.debug("Presence: idle")
            return
        state = "playing" if update.is_playing else "paused"
        logger.debug(
            f"Presence: {state} {update.track.title} - {update.track.artist} "
            f"({update.position:.0f}/{update.duration:.0f}s)"
        )


class PresenceBroadcaster:
    """
    Best-effort presence publisher.

    Features:
    - Remembers the current track between playback syncs
    - Optional periodic re-publish from a snapshot provider
    - Never raises from publish paths
    """

    def __init__(self, sink: Optional[PresenceSink] = None, enabled: bool = True):
        self._sink = sink or LoggingPresenceSink()
        self._enabled = enabled
        self._track: Optional[Track] = None
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._timer_thread: Optional[threading.Thread] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    @property
    def track(self) -> Optional[Track]:
        with self._lock:
            return self._track

    def set_track(self, track: Optional[Track]) -> None:
        with self._lock:
            self._track = track

    def sync_playback(self, is_playing: bool, position: float, duration: float) -> None:
        """Publish the current track with the given playback figures."""
        self._publish(PresenceUpdate(
            track=self.track,
            is_playing=is_playing,
            position=position,
            duration=duration,
        ))

    def sync_state(self, state: PlaybackState) -> None:
        self.sync_playback(state.is_playing, state.current_time, state.duration)

    def _publish(self, update: PresenceUpdate) -> None:
        if not self._enabled:
            return
        try:
            self._sink.publish(update)
        except Exception as e:
            logger.warning(f"Presence update failed: {e}")

    # Timer

    def start(self, snapshot_provider: Callable[[], PlaybackState], interval: float = 30.0) -> None:
        """
        Re-publish ``snapshot_provider()`` every ``interval`` seconds.

        Args:
            snapshot_provider: Returns the latest playback state without
                blocking on the playback worker
            interval: Seconds between publishes
        """
        if self._timer_thread is not None and self._timer_thread.is_alive():
            return

        self._stop_event.clear()

        def loop() -> None:
            while not self._stop_event.wait(interval):
                try:
                    state = snapshot_provider()
                except Exception as e:
                    logger.warning(f"Presence snapshot unavailable: {e}")
                    continue
                self.sync_state(state)

        self._timer_thread = threading.Thread(target=loop, name="rift-presence", daemon=True)
        self._timer_thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._timer_thread is not None:
            self._timer_thread.join(timeout)
            self._timer_thread = None
