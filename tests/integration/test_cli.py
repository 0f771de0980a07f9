"""Tests for the ``python -m rift`` entry point."""

import logging

import pytest

from rift.__main__ import main

from tests.conftest import PNG_BYTES


@pytest.fixture(autouse=True)
def isolated(runtime_dirs, monkeypatch):
    monkeypatch.setattr("rift.runtime.bootstrap._bootstrap", None)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield runtime_dirs
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_scan(wav_factory, music_dir, capsys):
    wav_factory("a.wav", title="Alpha", cover=PNG_BYTES)
    wav_factory("b.wav", title="Beta")

    assert main(["scan", "--root", str(music_dir)]) == 0

    assert "Indexed 2 tracks" in capsys.readouterr().out


def test_scan_missing_root(tmp_path, capsys):
    assert main(["scan", "--root", str(tmp_path / "missing")]) == 0

    captured = capsys.readouterr()
    assert "Indexed 0 tracks" in captured.out
    assert "does not exist" in captured.err


def test_search(wav_factory, music_dir, capsys):
    wav_factory("a.wav", title="Morning Song", artist="Sun")
    wav_factory("b.wav", title="Evening", artist="Moon")

    assert main(["search", "morning", "--root", str(music_dir)]) == 0

    out = capsys.readouterr().out
    assert "Morning Song - Sun" in out
    assert "Evening" not in out


def test_bad_arguments_exit():
    with pytest.raises(SystemExit):
        main(["unknown-command"])


def test_bootstrap_failure_exits_with_error(monkeypatch, capsys):
    from rift.runtime import bootstrap as bootstrap_module

    def failing_bootstrap(verbose=False):
        raise bootstrap_module.BootstrapError("read-only home")

    monkeypatch.setattr(bootstrap_module, "bootstrap", failing_bootstrap)

    assert main(["scan"]) == 1
    assert "read-only home" in capsys.readouterr().err
