"""
Search Engine Module

Case-insensitive substring search over title, artist and album with tiered
ranking: title matches first, then artist-only matches, then album-only
matches. Within a tier results are ordered by artist, album and title.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Iterable, List, Optional

from rift.domain.models import Track

logger = logging.getLogger(__name__)


class MatchTier(IntEnum):
    """Ranking tier of a matching track (lower sorts first)."""
    TITLE = 0
    ARTIST = 1
    ALBUM = 2
    OTHER = 3


def normalize_query(query: Optional[str]) -> str:
    """Trim and lower-case a raw query string."""
    return (query or "").strip().lower()


class SearchRanker:
    """
    Filters and orders tracks for a query.

    The ranker is stateless; it works on whatever snapshot of the library it
    is given.
    """

    def __init__(self, max_results: Optional[int] = None):
        """
        Args:
            max_results: Upper bound on returned tracks (None = unlimited)
        """
        self.max_results = max_results

    @staticmethod
    def matches(track: Track, needle: str) -> bool:
        """Whether any of title, artist or album contains ``needle`` (already normalized)."""
        return (
            needle in track.title.lower()
            or needle in track.artist.lower()
            or needle in track.album.lower()
        )

    @staticmethod
    def tier(track: Track, needle: str) -> MatchTier:
        if needle in track.title.lower():
            return MatchTier.TITLE
        if needle in track.artist.lower():
            return MatchTier.ARTIST
        if needle in track.album.lower():
            return MatchTier.ALBUM
        return MatchTier.OTHER

    def search(self, tracks: Iterable[Track], query: Optional[str]) -> List[Track]:
        """
        Search ``tracks`` for ``query``.

        An empty or blank query returns no results rather than everything.

        Args:
            tracks: Library snapshot to search
            query: Raw user query

        Returns:
            List[Track]: Matching tracks in ranked order
        """
        needle = normalize_query(query)
        if not needle:
            return []

        ranked = sorted(
            (
                (self.tier(track, needle), track.artist, track.album, track.title, track.path, track)
                for track in tracks
                if self.matches(track, needle)
            ),
            key=lambda entry: entry[:5],
        )
        results = [entry[-1] for entry in ranked]

        if self.max_results is not None and self.max_results >= 0:
            results = results[:self.max_results]

        logger.debug(f"Search {needle!r}: {len(results)} result(s)")
        return results
