"""
Deezer Client

Resolves an artist name to a picture through Deezer's public search API and
downloads the image bytes.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

BASE_URL = "https://api.deezer.com"

# Picture fields in order of preference
PICTURE_FIELDS = ("picture_medium", "picture_big", "picture")


class DeezerError(Exception):
    """Raised when a Deezer request fails at the transport level."""
    pass


class DeezerClient:
    """Minimal synchronous client for artist picture lookups."""

    def __init__(
        self,
        user_agent: str = "Rift/1.0",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    def find_artist_picture_url(self, artist_name: str) -> Optional[str]:
        """
        Search for an artist and return the best picture URL.

        Args:
            artist_name: Artist display name

        Returns:
            The picture URL, or None when the search has no usable result
            or the service answers with a non-success status.

        Raises:
            DeezerError: On network failures or a malformed response
        """
        try:
            response = self._session.get(
                f"{BASE_URL}/search/artist",
                params={"q": artist_name},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DeezerError(f"Artist search failed: {exc}") from exc

        if not response.ok:
            logger.debug(f"Artist search for {artist_name!r} returned HTTP {response.status_code}")
            return None

        payload = self._parse_json(response)
        for item in payload.get("data") or []:
            if not isinstance(item, dict):
                continue
            for key in PICTURE_FIELDS:
                url = item.get(key)
                if url:
                    return url
        return None

    def download(self, url: str) -> bytes:
        """
        Download raw bytes from ``url``.

        Raises:
            DeezerError: On network failures or a non-success status
        """
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise DeezerError(f"Picture download failed: {exc}") from exc
        return response.content

    @staticmethod
    def _parse_json(response: requests.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise DeezerError("Deezer returned a non-JSON response") from exc
        if not isinstance(payload, dict):
            raise DeezerError("Deezer returned an unexpected payload")
        return payload

    def close(self) -> None:
        self._session.close()
