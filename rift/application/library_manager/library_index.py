"""
Library Index

Owns the in-memory mapping of file path to Track. The mapping is rebuilt by a
full scan and swapped in as a whole; it is never edited in place, so readers
always see either the old or the new library, never a half-built one.
"""

from __future__ import annotations

import logging
import random
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from rift.application.search_engine import SearchRanker
from rift.domain.models import Track
from .scanner import LibraryScanner, ScanResult

logger = logging.getLogger(__name__)


class LibraryIndex:
    """
    Shared-read, exclusive-write library of tracks.

    Features:
    - Build-then-swap reindex (the swap lock is never held during a scan)
    - Lookup by path, count, ranked search, random pick
    - Orphaned cover sweep after every reindex
    """

    def __init__(
        self,
        scanner: LibraryScanner,
        music_dir: Path,
        ranker: Optional[SearchRanker] = None,
    ):
        """
        Args:
            scanner: Scanner used to rebuild the index
            music_dir: Root folder of the library
            ranker: Search ranker (defaults to an unlimited one)
        """
        self._scanner = scanner
        self._music_dir = Path(music_dir)
        self._ranker = ranker or SearchRanker()
        self._tracks: Mapping[str, Track] = MappingProxyType({})
        self._swap_lock = threading.Lock()
        # Serializes whole reindex runs so two sweeps never interleave.
        self._reindex_lock = threading.Lock()
        self._last_scan: Optional[ScanResult] = None

    @classmethod
    def build(
        cls,
        scanner: LibraryScanner,
        music_dir: Path,
        ranker: Optional[SearchRanker] = None,
    ) -> LibraryIndex:
        """Create an index and populate it with an initial full scan."""
        index = cls(scanner, music_dir, ranker)
        index.reindex()
        return index

    @property
    def music_dir(self) -> Path:
        return self._music_dir

    @property
    def last_scan(self) -> Optional[ScanResult]:
        return self._last_scan

    def snapshot(self) -> Mapping[str, Track]:
        """Read-only view of the current library; stays valid after a reindex."""
        with self._swap_lock:
            return self._tracks

    def reindex(self) -> int:
        """
        Rescan the music folder and replace the library.

        Returns:
            int: Number of tracks in the new library
        """
        with self._reindex_lock:
            result = self._scanner.scan(self._music_dir)
            new_tracks = MappingProxyType(dict(result.tracks))

            with self._swap_lock:
                self._tracks = new_tracks

            result.covers_removed = self._scanner.sweep_covers(new_tracks.values())
            self._last_scan = result
            return len(new_tracks)

    def count(self) -> int:
        return len(self.snapshot())

    def by_path(self, path: str) -> Optional[Track]:
        """Look up a track by its absolute file path."""
        return self.snapshot().get(str(path))

    def search(self, query: str) -> List[Track]:
        return self._ranker.search(self.snapshot().values(), query)

    def random_track(self) -> Optional[Track]:
        """Pick a random track, or None when the library is empty."""
        tracks = list(self.snapshot().values())
        if not tracks:
            return None
        return random.choice(tracks)

    def tracks_for_paths(self, paths: List[str]) -> List[Track]:
        """
        Materialize tracks for a list of paths, preserving order.

        Paths that are no longer in the library are dropped. Playlist and
        history stores use this to turn stored paths into display data.
        """
        tracks = self.snapshot()
        return [tracks[path] for path in paths if path in tracks]
