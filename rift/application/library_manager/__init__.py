"""
Library Manager Module

Provides library scanning, metadata extraction and the in-memory index.
"""

from .scanner import (
    LibraryScanner,
    ScanProgress,
    ScanResult,
    SUPPORTED_FORMATS,
    normalize_formats,
)

from .metadata_extractor import (
    MetadataExtractor,
    EmbeddedPicture,
)

from .library_index import LibraryIndex

__all__ = [
    # Scanner
    "LibraryScanner",
    "ScanProgress",
    "ScanResult",
    "SUPPORTED_FORMATS",
    "normalize_formats",
    # Metadata
    "MetadataExtractor",
    "EmbeddedPicture",
    # Index
    "LibraryIndex",
]
