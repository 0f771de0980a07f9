"""
Artist Image Cache

Caches artist pictures fetched from a remote service. A successful lookup is
stored as ``<key>.img``; a lookup that found nothing is remembered as an
empty ``<key>.missing`` marker so the service is not asked again. The key is
the SHA-256 of the trimmed, lower-cased artist name.

Remote lookups are best-effort: transport failures are logged and reported
as "no picture" without writing a marker, so they are retried next time.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


def artist_key(name: str) -> str:
    """Cache key for an artist name."""
    return hashlib.sha256(name.strip().lower().encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ArtistImage:
    """Artist name paired with its cached picture file name (if any)."""
    name: str
    image_filename: Optional[str] = None


class ArtistImageCache:
    """
    Disk cache in front of a remote artist picture lookup.

    Args:
        cache_dir: Directory holding ``.img`` and ``.missing`` files
        client: Object with ``find_artist_picture_url(name)`` and
            ``download(url)``; None disables remote lookups entirely
    """

    def __init__(self, cache_dir: Path, client=None):
        self._cache_dir = Path(cache_dir)
        self._client = client

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def cached(self, name: str) -> tuple[bool, Optional[str]]:
        """
        Look up a name in the cache only.

        Returns:
            (hit, image_filename): ``hit`` is False when neither an image nor
            a missing marker exists.
        """
        key = artist_key(name)
        image_filename = f"{key}.img"
        if (self._cache_dir / image_filename).exists():
            return True, image_filename
        if (self._cache_dir / f"{key}.missing").exists():
            return True, None
        return False, None

    def resolve(self, name: str, allow_remote: bool = True) -> Optional[str]:
        """
        Get the cached picture file name for an artist, fetching it if needed.

        Args:
            name: Artist display name
            allow_remote: Whether a cache miss may trigger a network lookup

        Returns:
            The ``.img`` file name, or None when there is no picture
        """
        hit, image_filename = self.cached(name)
        if hit:
            return image_filename
        if not allow_remote or self._client is None:
            return None

        try:
            return self._fetch(name)
        except Exception as e:
            # Enrichment only; the caller shows a placeholder instead.
            logger.warning(f"Artist picture lookup failed for {name!r}: {e}")
            return None

    def resolve_many(self, names: Iterable[str], allow_remote: bool = True) -> List[ArtistImage]:
        """
        Resolve a batch of names, skipping blanks and duplicates.

        Names are trimmed; the first occurrence keeps its position.
        """
        seen = set()
        result: List[ArtistImage] = []

        for raw_name in names:
            name = (raw_name or "").strip()
            if not name or name in seen:
                continue
            seen.add(name)
            result.append(ArtistImage(name=name, image_filename=self.resolve(name, allow_remote)))

        return result

    def _fetch(self, name: str) -> Optional[str]:
        key = artist_key(name)
        self._cache_dir.mkdir(parents=True, exist_ok=True)

        url = self._client.find_artist_picture_url(name)
        if url:
            data = self._client.download(url)
            image_filename = f"{key}.img"
            self._write(self._cache_dir / image_filename, data)
            logger.debug(f"Cached artist picture for {name!r}")
            return image_filename

        (self._cache_dir / f"{key}.missing").write_bytes(b"")
        logger.debug(f"No artist picture available for {name!r}")
        return None

    def _write(self, target: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=".artist-", suffix=".tmp", dir=self._cache_dir)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
