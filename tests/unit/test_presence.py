"""Tests for PresenceBroadcaster."""

import threading

from rift.application.presence import PresenceBroadcaster, PresenceUpdate
from rift.domain.models import PlaybackState, Track


class RecordingSink:
    def __init__(self):
        self.updates = []
        self.event = threading.Event()

    def publish(self, update):
        self.updates.append(update)
        self.event.set()


class FailingSink:
    def publish(self, update):
        raise ConnectionError("presence client went away")


TRACK = Track(path="/m/a.mp3", title="A", artist="B")


def test_sync_publishes_current_track():
    sink = RecordingSink()
    presence = PresenceBroadcaster(sink)
    presence.set_track(TRACK)

    presence.sync_playback(True, 12.0, 180.0)

    assert sink.updates == [PresenceUpdate(track=TRACK, is_playing=True, position=12.0, duration=180.0)]


def test_disabled_broadcaster_publishes_nothing():
    sink = RecordingSink()
    presence = PresenceBroadcaster(sink, enabled=False)

    presence.sync_playback(True, 0.0, 10.0)

    assert sink.updates == []


def test_sink_failures_are_swallowed():
    presence = PresenceBroadcaster(FailingSink())
    presence.set_track(TRACK)

    presence.sync_state(PlaybackState(is_loaded=True, is_playing=True))


def test_timer_republishes_snapshot():
    sink = RecordingSink()
    presence = PresenceBroadcaster(sink)
    state = PlaybackState(is_loaded=True, is_playing=True, current_time=3.0, duration=9.0)

    presence.start(lambda: state, interval=0.01)
    try:
        assert sink.event.wait(timeout=5)
    finally:
        presence.stop(timeout=5)

    assert sink.updates[0].position == 3.0
    assert sink.updates[0].duration == 9.0
