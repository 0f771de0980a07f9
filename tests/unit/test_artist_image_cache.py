"""Tests for ArtistImageCache and the Deezer client."""

import hashlib

import pytest
import requests

from rift.infrastructure.cache import ArtistImage, ArtistImageCache, artist_key
from rift.infrastructure.external_apis import DeezerClient, DeezerError


class FakeClient:
    def __init__(self, pictures=None, error=None):
        self.pictures = pictures or {}
        self.error = error
        self.lookups = []

    def find_artist_picture_url(self, name):
        self.lookups.append(name)
        if self.error:
            raise self.error
        return self.pictures.get(name)

    def download(self, url):
        return f"image:{url}".encode()


def test_artist_key_normalizes_name():
    assert artist_key("  Daft Punk ") == hashlib.sha256(b"daft punk").hexdigest()


def test_found_picture_is_cached(tmp_path):
    client = FakeClient({"Daft Punk": "https://img/dp.jpg"})
    cache = ArtistImageCache(tmp_path, client)

    name = cache.resolve("Daft Punk")

    assert name == f"{artist_key('Daft Punk')}.img"
    assert (tmp_path / name).read_bytes() == b"image:https://img/dp.jpg"
    assert cache.resolve("Daft Punk") == name
    assert client.lookups == ["Daft Punk"]


def test_missing_picture_is_remembered(tmp_path):
    client = FakeClient()
    cache = ArtistImageCache(tmp_path, client)

    assert cache.resolve("Nobody") is None
    assert (tmp_path / f"{artist_key('Nobody')}.missing").exists()
    assert cache.resolve("Nobody") is None
    assert client.lookups == ["Nobody"]


def test_offline_never_calls_client(tmp_path):
    client = FakeClient({"Someone": "https://img/s.jpg"})
    cache = ArtistImageCache(tmp_path, client)

    assert cache.resolve("Someone", allow_remote=False) is None
    assert client.lookups == []
    assert list(tmp_path.iterdir()) == []


def test_transport_failure_is_retried_later(tmp_path):
    client = FakeClient(error=DeezerError("timeout"))
    cache = ArtistImageCache(tmp_path, client)

    assert cache.resolve("Flaky") is None
    assert cache.resolve("Flaky") is None
    assert client.lookups == ["Flaky", "Flaky"]
    assert list(tmp_path.iterdir()) == []


def test_resolve_many_dedups_and_skips_blanks(tmp_path):
    client = FakeClient({"A": "https://img/a.jpg"})
    cache = ArtistImageCache(tmp_path, client)

    result = cache.resolve_many(["A", " A ", "", "B", None])

    assert result == [
        ArtistImage(name="A", image_filename=f"{artist_key('A')}.img"),
        ArtistImage(name="B", image_filename=None),
    ]


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=b""):
        self.status_code = status_code
        self.ok = status_code < 400
        self._payload = payload
        self.content = content

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error:
            raise self.error
        return self.response

    def close(self):
        pass


class TestDeezerClient:
    def test_picks_first_picture(self):
        session = FakeSession(FakeResponse(payload={"data": [{"picture_medium": "https://x/m.jpg", "picture": "https://x/p.jpg"}]}))
        client = DeezerClient(user_agent="Rift/test", timeout=3, session=session)

        assert client.find_artist_picture_url("Air") == "https://x/m.jpg"
        assert session.headers["User-Agent"] == "Rift/test"
        url, params, timeout = session.calls[0]
        assert url.endswith("/search/artist")
        assert params == {"q": "Air"}
        assert timeout == 3

    def test_no_results(self):
        session = FakeSession(FakeResponse(payload={"data": []}))
        assert DeezerClient(session=session).find_artist_picture_url("Air") is None

    def test_http_error_status_means_no_picture(self):
        session = FakeSession(FakeResponse(status_code=503))
        assert DeezerClient(session=session).find_artist_picture_url("Air") is None

    def test_network_failure_raises(self):
        session = FakeSession(error=requests.ConnectionError("offline"))
        with pytest.raises(DeezerError):
            DeezerClient(session=session).find_artist_picture_url("Air")
