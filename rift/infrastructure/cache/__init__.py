"""
Cache Infrastructure Module

Provides the on-disk artwork caches owned by Rift.
"""

from .cover_cache import CoverCache, guess_image_extension, content_digest
from .artist_image_cache import ArtistImage, ArtistImageCache, artist_key

__all__ = [
    'CoverCache',
    'guess_image_extension',
    'content_digest',
    'ArtistImage',
    'ArtistImageCache',
    'artist_key',
]
