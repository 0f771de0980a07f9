"""
Metadata Extractor Module

Extracts track metadata and embedded cover art using the Mutagen library.
Cover art is handed to the content-addressed CoverCache; the resulting
Track only records the cache file name.
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import mutagen
from mutagen.flac import Picture
from mutagen.id3 import ID3
from mutagen.mp4 import MP4Cover, MP4Tags

from rift.domain.models import Track, UNKNOWN_ARTIST
from rift.infrastructure.cache import CoverCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmbeddedPicture:
    """Raw bytes of an embedded picture plus its declared MIME type."""
    data: bytes
    mime: Optional[str] = None


@dataclass
class TextTags:
    """Display tags read from a file; empty strings when absent."""
    title: str = ""
    artist: str = ""
    album: str = ""


class MetadataExtractor:
    """
    Extracts metadata from audio files using Mutagen.

    Supports: MP3, FLAC, OGG, M4A/AAC in MP4, WAV/AIFF with ID3
    """

    def __init__(self, cover_cache: CoverCache):
        """
        Initialize the metadata extractor.

        Args:
            cover_cache: Destination for embedded cover art
        """
        self._cover_cache = cover_cache

    @property
    def cover_cache(self) -> CoverCache:
        return self._cover_cache

    def extract(self, file_path: Path) -> Optional[Track]:
        """
        Extract a Track from an audio file.

        Args:
            file_path: Path to the audio file

        Returns:
            Track: Extracted track, or None if the file cannot be read or
            Mutagen does not recognize it
        """
        file_path = Path(file_path).absolute()

        try:
            audio = mutagen.File(file_path)
            stat = file_path.stat()
        except (mutagen.MutagenError, OSError) as e:
            logger.warning(f"Failed to read metadata from {file_path}: {e}")
            return None

        if audio is None:
            logger.warning(f"Mutagen could not identify file: {file_path}")
            return None

        tags = self._read_text_tags(audio)
        cover = self._cache_cover(file_path, audio)

        duration = 0
        info = getattr(audio, "info", None)
        length = getattr(info, "length", None)
        if length and math.isfinite(length):
            duration = max(0, int(length))

        return Track(
            path=str(file_path),
            title=tags.title or file_path.stem,
            artist=tags.artist or UNKNOWN_ARTIST,
            album=tags.album,
            duration=duration,
            cover=cover,
            added_at=int(stat.st_mtime),
        )

    # Cover art

    def _cache_cover(self, file_path: Path, audio) -> str:
        """Store the first embedded picture and return its cache name ("" if none)."""
        try:
            picture = self.first_picture(audio)
        except (ValueError, TypeError, binascii.Error, mutagen.MutagenError) as e:
            logger.warning(f"Unreadable cover art in {file_path.name}: {e}")
            return ""

        if picture is None or not picture.data:
            return ""

        try:
            return self._cover_cache.store(picture.data, picture.mime)
        except OSError as e:
            logger.warning(f"Could not cache cover for {file_path}: {e}")
            return ""

    @staticmethod
    def first_picture(audio) -> Optional[EmbeddedPicture]:
        """
        Return the first embedded picture of a Mutagen file object.

        FLAC picture blocks take precedence over the tag set; after that the
        tag container is inspected according to its type.
        """
        pictures = getattr(audio, "pictures", None)
        if pictures:
            return EmbeddedPicture(data=bytes(pictures[0].data), mime=pictures[0].mime or None)

        tags = getattr(audio, "tags", None)
        if not tags:
            return None

        if isinstance(tags, ID3):
            frames = tags.getall("APIC")
            if frames:
                return EmbeddedPicture(data=bytes(frames[0].data), mime=frames[0].mime or None)
            return None

        if isinstance(tags, MP4Tags):
            covers = tags.get("covr") or []
            if covers:
                cover = covers[0]
                mime = None
                if getattr(cover, "imageformat", None) == MP4Cover.FORMAT_PNG:
                    mime = "image/png"
                elif getattr(cover, "imageformat", None) == MP4Cover.FORMAT_JPEG:
                    mime = "image/jpeg"
                return EmbeddedPicture(data=bytes(cover), mime=mime)
            return None

        # Vorbis comments (OGG Vorbis/Opus, FLAC without picture blocks)
        if hasattr(tags, "get"):
            blocks = tags.get("metadata_block_picture") or []
            if blocks:
                picture = Picture(base64.b64decode(blocks[0]))
                return EmbeddedPicture(data=bytes(picture.data), mime=picture.mime or None)

        return None

    # Text tags

    def _read_text_tags(self, audio) -> TextTags:
        result = TextTags()
        tags = getattr(audio, "tags", None)
        if not tags:
            return result

        if isinstance(tags, ID3):
            self._extract_id3_tags(tags, result)
        elif isinstance(tags, MP4Tags):
            self._extract_mp4_tags(tags, result)
        elif hasattr(tags, "get"):
            self._extract_vorbis_tags(tags, result)

        return result

    def _extract_id3_tags(self, tags, result: TextTags) -> None:
        """Extract ID3 tags (MP3, WAV, AIFF, AAC)."""
        if 'TIT2' in tags:
            result.title = _clean(str(tags['TIT2']))

        if 'TPE1' in tags:
            result.artist = _clean(str(tags['TPE1']))

        if 'TALB' in tags:
            result.album = _clean(str(tags['TALB']))

    def _extract_vorbis_tags(self, tags, result: TextTags) -> None:
        """Extract Vorbis comments (FLAC, OGG)."""
        result.title = _first_text(tags.get('title'))
        result.artist = _first_text(tags.get('artist'))
        result.album = _first_text(tags.get('album'))

    def _extract_mp4_tags(self, tags, result: TextTags) -> None:
        """Extract MP4/M4A tags."""
        result.title = _first_text(tags.get('\xa9nam'))
        result.artist = _first_text(tags.get('\xa9ART'))
        result.album = _first_text(tags.get('\xa9alb'))


def _clean(value: str) -> str:
    return value.replace("\x00", "").strip()


def _first_text(values) -> str:
    if not values:
        return ""
    return _clean(str(values[0]))
