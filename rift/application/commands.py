"""
Command Layer

The operations a UI front end calls. RiftCommands wires the library index,
the playback service, presence and the artist picture cache together:

- library commands read the index and render tracks with ``Track.to_dict``
- transport commands go through the playback service and are mirrored to
  presence afterwards (presence never fails a transport command)
- artist picture lookups honour the ``network.online_requests`` switch
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from rift.application.library_manager import (
    LibraryIndex,
    LibraryScanner,
    MetadataExtractor,
)
from rift.application.playback_manager import PlaybackService
from rift.application.presence import PresenceBroadcaster
from rift.application.search_engine import SearchRanker
from rift.core.config import ConfigManager
from rift.domain.models import PlaybackState, Track
from rift.infrastructure.cache import ArtistImage, ArtistImageCache, CoverCache

logger = logging.getLogger(__name__)


def build_library_index(config: ConfigManager, music_dir: Optional[Path] = None) -> LibraryIndex:
    """
    Assemble an (unscanned) LibraryIndex from configuration.

    Args:
        config: Configuration to read library, search and performance settings from
        music_dir: Overrides ``library.music_dir``
    """
    from rift.runtime.runtime_config import get_covers_dir, get_default_music_dir

    if music_dir is None:
        configured = config.get("library.music_dir")
        music_dir = Path(configured).expanduser() if configured else get_default_music_dir()

    extractor = MetadataExtractor(CoverCache(get_covers_dir()))
    scanner = LibraryScanner(
        extractor,
        supported_formats=config.get("library.supported_formats"),
        max_workers=config.get("performance.scan_workers", 1),
    )
    ranker = SearchRanker(max_results=config.get("search.max_results"))
    return LibraryIndex(scanner, Path(music_dir), ranker)


class RiftCommands:
    """Front-end facing commands over the library and playback services."""

    def __init__(
        self,
        library: LibraryIndex,
        playback: PlaybackService,
        presence: PresenceBroadcaster,
        artist_images: ArtistImageCache,
        config: ConfigManager,
    ):
        self.library = library
        self.playback = playback
        self.presence = presence
        self.artist_images = artist_images
        self.config = config

    @classmethod
    def from_config(
        cls,
        config: Optional[ConfigManager] = None,
        playback: Optional[PlaybackService] = None,
        presence: Optional[PresenceBroadcaster] = None,
        artist_client=None,
        index_now: bool = True,
    ) -> RiftCommands:
        """
        Build the whole service graph from configuration and runtime paths.

        Args:
            config: Configuration (defaults to the global manager)
            playback: Playback service (defaults to a freshly started one)
            presence: Presence broadcaster (defaults to the logging sink)
            artist_client: Remote artist picture client (defaults to Deezer)
            index_now: Run the initial library scan before returning
        """
        from rift.core.config import get_config_manager
        from rift.runtime.runtime_config import get_artists_dir

        config = config or get_config_manager()
        library = build_library_index(config)

        if playback is None:
            playback = PlaybackService.start(
                volume=config.get("player.volume", 0.7),
                seek_tolerance=config.get("player.seek_tolerance_seconds", 1.0),
            )

        if presence is None:
            presence = PresenceBroadcaster(enabled=config.get_bool("presence.enabled", True))

        if artist_client is None:
            from rift.infrastructure.external_apis import DeezerClient
            artist_client = DeezerClient(
                user_agent=config.get("network.user_agent", "Rift/1.0"),
                timeout=config.get("network.timeout_seconds", 10),
            )

        commands = cls(
            library=library,
            playback=playback,
            presence=presence,
            artist_images=ArtistImageCache(get_artists_dir(), client=artist_client),
            config=config,
        )

        if commands.presence.enabled:
            commands.presence.start(
                lambda: commands.playback.snapshot,
                interval=float(config.get("presence.interval_seconds", 30)),
            )

        if index_now:
            commands.reindex_music()
        return commands

    # Library

    def search_music(self, query: str) -> List[Dict[str, Any]]:
        return [track.to_dict() for track in self.library.search(query)]

    def get_music_stats(self) -> Dict[str, Any]:
        return {"total_songs": self.library.count()}

    def reindex_music(self) -> int:
        count = self.library.reindex()
        logger.info(f"Library holds {count} tracks")
        return count

    def get_random_track(self) -> Optional[Dict[str, Any]]:
        track = self.library.random_track()
        return track.to_dict() if track else None

    def lookup(self, path: str) -> Optional[Track]:
        return self.library.by_path(path)

    def tracks_for_paths(self, paths: Iterable[str]) -> List[Dict[str, Any]]:
        return [track.to_dict() for track in self.library.tracks_for_paths(list(paths))]

    # Transport

    def playback_load_and_play(self, path: str) -> PlaybackState:
        state = self.playback.load_and_play(path)
        self.presence.set_track(self.library.by_path(path))
        self._sync_presence(state)
        return state

    def playback_play(self) -> PlaybackState:
        return self._sync_presence(self.playback.play())

    def playback_pause(self) -> PlaybackState:
        return self._sync_presence(self.playback.pause())

    def playback_seek(self, position_seconds: float) -> PlaybackState:
        return self._sync_presence(self.playback.seek(position_seconds))

    def playback_set_volume(self, volume: float) -> PlaybackState:
        return self._sync_presence(self.playback.set_volume(volume))

    def playback_toggle_mute(self) -> PlaybackState:
        return self._sync_presence(self.playback.toggle_mute())

    def playback_get_state(self) -> PlaybackState:
        return self.playback.get_state()

    def _sync_presence(self, state: PlaybackState) -> PlaybackState:
        self.presence.sync_state(state)
        return state

    # Artist pictures

    def get_artist_images(self, names: Iterable[str]) -> List[ArtistImage]:
        allow_remote = self.config.get_bool("network.online_requests", True)
        return self.artist_images.resolve_many(names, allow_remote=allow_remote)

    def close(self) -> None:
        self.presence.stop()
        self.playback.shutdown()
