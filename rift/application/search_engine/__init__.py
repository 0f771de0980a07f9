"""
Search Engine Module

Provides search functionality for the music library.
"""

from rift.application.search_engine.search_engine import (
    SearchRanker,
    MatchTier,
    normalize_query,
)

__all__ = [
    'SearchRanker',
    'MatchTier',
    'normalize_query',
]
