"""
Cover Cache

Content-addressed storage for embedded cover art. Every image is stored once
as ``<sha256-hex>.<ext>`` no matter how many tracks embed it, and entries no
longer referenced by the library are removed by a sweep after each full scan.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Set

logger = logging.getLogger(__name__)

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    "image/webp": "webp",
}

# (signature, extension), checked in order
MAGIC_SIGNATURES = (
    (b"\xff\xd8\xff", "jpg"),
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"GIF", "gif"),
    (b"BM", "bmp"),
)

DEFAULT_EXTENSION = "jpg"


def content_digest(data: bytes) -> str:
    """SHA-256 hex digest of raw image bytes."""
    return hashlib.sha256(data).hexdigest()


def guess_image_extension(data: bytes, mime: Optional[str] = None) -> str:
    """
    Infer a file extension for image bytes.

    The declared MIME type wins when it is recognized; otherwise the leading
    bytes are sniffed, and anything unrecognized is stored as ``jpg``.
    """
    if mime:
        extension = MIME_EXTENSIONS.get(mime.strip().lower())
        if extension:
            return extension

    for signature, extension in MAGIC_SIGNATURES:
        if data.startswith(signature):
            return extension

    return DEFAULT_EXTENSION


class CoverCache:
    """
    Cover art cache keyed by content hash.

    Usage:
        cache = CoverCache(Path("~/.cache/me.wdkq.rift/covers"))
        name = cache.store(picture_bytes, "image/png")
        cache.sweep({track.cover for track in tracks})
    """

    def __init__(self, cache_dir: Path):
        self._cache_dir = Path(cache_dir)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def path_for(self, name: str) -> Path:
        """Absolute path of a cache entry."""
        return self._cache_dir / name

    def contains(self, name: str) -> bool:
        return bool(name) and self.path_for(name).is_file()

    def store(self, data: bytes, mime: Optional[str] = None) -> str:
        """
        Store image bytes and return the cache file name.

        Storing bytes that are already cached is a no-op. New entries are
        written to a temporary file and renamed into place, so a concurrent
        reader never sees a partially written image.

        Args:
            data: Raw image bytes
            mime: Declared MIME type, if any

        Returns:
            str: ``<hash>.<ext>`` file name inside the cache directory

        Raises:
            OSError: If the cache directory or file cannot be written
        """
        name = f"{content_digest(data)}.{guess_image_extension(data, mime)}"
        target = self.path_for(name)

        if target.exists():
            return name

        self._cache_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".cover-", suffix=".tmp", dir=self._cache_dir)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Cached cover {name} ({len(data)} bytes)")
        return name

    def entries(self) -> Set[str]:
        """Names of all files currently in the cache."""
        if not self._cache_dir.is_dir():
            return set()
        return {entry.name for entry in self._cache_dir.iterdir() if entry.is_file()}

    def sweep(self, referenced: Iterable[str]) -> int:
        """
        Delete every cache file whose name is not in ``referenced``.

        Args:
            referenced: Cover names used by the current library

        Returns:
            int: Number of files removed
        """
        keep = {name for name in referenced if name}
        removed = 0

        for name in sorted(self.entries() - keep):
            try:
                self.path_for(name).unlink()
                removed += 1
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove orphaned cover {name}: {e}")

        if removed:
            logger.info(f"Removed {removed} orphaned cover(s) from {self._cache_dir}")
        return removed
