"""Tests for PlaybackController driven by the fake audio output."""

import pytest

from rift.application.playback_manager import PlaybackController, clamp_volume
from rift.domain.exceptions import DecodeError, PlaybackIOError

from tests.fakes import FakeAudioOutput


@pytest.fixture
def track_file(tmp_path):
    path = tmp_path / "song.flac"
    path.write_bytes(b"fLaC")
    return str(path)


@pytest.fixture
def output():
    return FakeAudioOutput(duration=200.0)


@pytest.fixture
def controller(output):
    return PlaybackController(output, volume=0.7, seek_tolerance=1.0)


def test_clamp_volume():
    assert clamp_volume(-1) == 0.0
    assert clamp_volume(2) == 1.0
    assert clamp_volume(0.25) == 0.25


def test_initial_state_is_empty(controller):
    state = controller.state()
    assert not state.is_loaded
    assert not state.is_playing
    assert state.current_time == 0.0
    assert state.duration == 0.0
    assert state.volume == 0.7


def test_load_and_play(controller, track_file):
    state = controller.load_and_play(track_file)

    assert state.is_loaded
    assert state.is_playing
    assert state.current_time == 0.0
    assert state.duration == 200.0
    assert state.path == track_file


def test_missing_file_leaves_engine_empty(controller, tmp_path):
    with pytest.raises(PlaybackIOError):
        controller.load_and_play(str(tmp_path / "missing.mp3"))

    state = controller.state()
    assert not state.is_loaded
    assert not state.is_playing


def test_decode_failure_leaves_engine_empty(output, controller, track_file):
    output.fail_paths.add(track_file)

    with pytest.raises(DecodeError):
        controller.load_and_play(track_file)

    assert not controller.state().is_loaded


def test_failed_load_replaces_previous_track(output, controller, track_file, tmp_path):
    controller.load_and_play(track_file)

    with pytest.raises(PlaybackIOError):
        controller.load_and_play(str(tmp_path / "missing.mp3"))

    assert not controller.state().is_loaded
    assert output.streams[0].stopped


def test_transport_without_track_is_noop(controller):
    assert not controller.play().is_loaded
    assert not controller.pause().is_loaded
    assert controller.seek(30).current_time == 0.0


def test_pause_freezes_position(output, controller, track_file):
    controller.load_and_play(track_file)
    output.advance(10)

    paused = controller.pause()
    output.advance(10)

    assert not paused.is_playing
    assert controller.state().current_time == pytest.approx(10.0)

    controller.play()
    output.advance(5)
    assert controller.state().current_time == pytest.approx(15.0)


def test_seek_clamps_to_track(controller, track_file):
    controller.load_and_play(track_file)

    assert controller.seek(-5).current_time == 0.0
    assert controller.seek(500).current_time == 200.0


def test_accurate_seek_stays_in_place(output, controller, track_file):
    controller.load_and_play(track_file)

    state = controller.seek(50)

    assert len(output.streams) == 1
    assert state.current_time == pytest.approx(50.0)
    assert state.is_playing


def test_inaccurate_seek_rebuilds_stream(output, controller, track_file):
    output.seek_error = 5.0
    controller.load_and_play(track_file)

    state = controller.seek(50)

    assert len(output.streams) == 2
    assert output.streams[0].stopped
    assert output.current.start_offset == 50.0
    assert state.current_time == pytest.approx(50.0)
    assert state.is_playing


def test_seek_after_rebuild_always_rebuilds(output, controller, track_file):
    output.supports_seek = False
    controller.load_and_play(track_file)
    controller.seek(50)
    output.supports_seek = True

    controller.seek(80)

    assert len(output.streams) == 3
    assert controller.state().current_time == pytest.approx(80.0)


def test_paused_seek_stays_paused(output, controller, track_file):
    output.seek_error = 5.0
    controller.load_and_play(track_file)
    controller.pause()

    state = controller.seek(30)

    assert not state.is_playing
    assert not output.current.playing


def test_volume_survives_rebuild(output, controller, track_file):
    output.seek_error = 5.0
    controller.load_and_play(track_file)
    controller.set_volume(0.3)

    controller.seek(100)

    assert output.current.volume == 0.3
    assert controller.state().volume == 0.3


def test_volume_is_clamped(controller):
    assert controller.set_volume(1.5).volume == 1.0
    assert controller.set_volume(-0.2).volume == 0.0


def test_toggle_mute_restores_volume(output, controller, track_file):
    controller.load_and_play(track_file)
    controller.set_volume(0.4)

    muted = controller.toggle_mute()
    assert muted.is_muted
    assert muted.volume == 0.0
    assert output.current.volume == 0.0

    restored = controller.toggle_mute()
    assert not restored.is_muted
    assert restored.volume == 0.4


def test_natural_end_pauses(output, controller, track_file):
    controller.load_and_play(track_file)
    output.advance(250)

    state = controller.state()

    assert not state.is_playing
    assert state.is_loaded
    assert state.current_time == 200.0


def test_close_releases_output(output, controller, track_file):
    controller.load_and_play(track_file)
    controller.close()

    assert output.closed
    assert output.current.stopped


def test_seek_after_natural_end_stays_paused(output, controller, track_file):
    controller.load_and_play(track_file)
    output.advance(250)
    assert not controller.state().is_playing
    assert not output.current.playing

    state = controller.seek(50)
    output.advance(10)

    assert not state.is_playing
    assert not output.current.playing
    assert controller.state().current_time == pytest.approx(50.0)


def test_in_place_seek_keeps_paused_stream_paused(output, controller, track_file):
    controller.load_and_play(track_file)
    controller.pause()

    controller.seek(40)
    output.advance(10)

    assert len(output.streams) == 1
    assert controller.state().current_time == pytest.approx(40.0)


def test_failed_rebuild_stops_new_stream(output, controller, track_file):
    output.seek_error = 5.0
    controller.load_and_play(track_file)
    output.fail_skip = True

    with pytest.raises(DecodeError):
        controller.seek(50)

    assert len(output.streams) == 2
    assert all(stream.stopped for stream in output.streams)
    assert not controller.state().is_loaded
