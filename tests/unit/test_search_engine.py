"""Tests for SearchRanker."""

from rift.application.search_engine import MatchTier, SearchRanker
from rift.domain.models import Track


def make(title, artist="Someone", album="", path=None):
    return Track(path=path or f"/m/{title}-{artist}.mp3", title=title, artist=artist, album=album)


TRACKS = [
    make("Intro", artist="Love Club", album="Nights"),
    make("Lovesong", artist="Cure"),
    make("Other", artist="Band", album="Love Album"),
    make("Ballad", artist="Alpha Love"),
    make("Unrelated", artist="Nobody"),
]


def test_blank_query_returns_nothing():
    ranker = SearchRanker()
    assert ranker.search(TRACKS, "") == []
    assert ranker.search(TRACKS, "   ") == []
    assert ranker.search(TRACKS, None) == []


def test_every_result_matches():
    results = SearchRanker().search(TRACKS, "LOVE")
    assert all(SearchRanker.matches(t, "love") for t in results)
    assert "Unrelated" not in [t.title for t in results]


def test_tier_order_then_artist():
    results = SearchRanker().search(TRACKS, "love")

    assert [t.title for t in results] == ["Lovesong", "Ballad", "Intro", "Other"]
    tiers = [SearchRanker.tier(t, "love") for t in results]
    assert tiers == [MatchTier.TITLE, MatchTier.ARTIST, MatchTier.ARTIST, MatchTier.ALBUM]


def test_max_results():
    assert len(SearchRanker(max_results=2).search(TRACKS, "love")) == 2
