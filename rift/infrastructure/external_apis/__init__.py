"""
External APIs Module

Contains remote lookups used for optional enrichment:
- deezer: Artist picture search
"""

from .deezer import DeezerClient, DeezerError

__all__ = ["DeezerClient", "DeezerError"]
