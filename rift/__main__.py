"""
Rift - Command Line Entry Point

Runs the library and playback services without a front end.

Usage:
    python -m rift scan [--root DIR]
    python -m rift search QUERY
    python -m rift play PATH

Or via the installed command:
    rift scan
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rift", description="Rift music library and player")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="index the music folder")
    scan.add_argument("--root", type=Path, help="folder to scan instead of the configured one")

    search = subparsers.add_parser("search", help="search the library")
    search.add_argument("query")
    search.add_argument("--root", type=Path, help="folder to scan instead of the configured one")

    play = subparsers.add_parser("play", help="play a file until it ends")
    play.add_argument("path", type=Path)

    return parser


def _cmd_scan(args) -> int:
    from rift.application.commands import build_library_index
    from rift.core.config import get_config_manager

    library = build_library_index(get_config_manager(), args.root)
    count = library.reindex()
    scan = library.last_scan

    print(f"Indexed {count} tracks from {library.music_dir}")
    if scan is not None:
        if scan.files_skipped:
            print(f"Skipped {scan.files_skipped} unreadable files")
        if scan.covers_removed:
            print(f"Removed {scan.covers_removed} unused covers")
        for warning in scan.warnings:
            print(f"Warning: {warning}", file=sys.stderr)
    return 0


def _cmd_search(args) -> int:
    from rift.application.commands import build_library_index
    from rift.core.config import get_config_manager

    library = build_library_index(get_config_manager(), args.root)
    library.reindex()

    results = library.search(args.query)
    for track in results:
        print(f"{track.title} - {track.artist} [{track.duration_formatted}]  {track.path}")
    if not results:
        print("No matches")
    return 0


def _cmd_play(args) -> int:
    from rift.application.playback_manager import PlaybackService
    from rift.core.config import get_config
    from rift.domain.exceptions import PlaybackError

    with PlaybackService.start(
        volume=get_config("player.volume", 0.7),
        seek_tolerance=get_config("player.seek_tolerance_seconds", 1.0),
    ) as playback:
        try:
            state = playback.load_and_play(str(args.path.absolute()))
        except PlaybackError as e:
            print(f"Cannot play {args.path}: {e}", file=sys.stderr)
            return 1

        print(f"Playing {args.path.name} ({state.duration:.0f}s), Ctrl+C to stop")
        try:
            while state.is_playing:
                time.sleep(0.5)
                state = playback.get_state()
        except KeyboardInterrupt:
            playback.pause()
    return 0


COMMANDS = {
    "scan": _cmd_scan,
    "search": _cmd_search,
    "play": _cmd_play,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for Rift.

    Returns:
        int: Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)

    from rift.runtime.bootstrap import bootstrap, BootstrapError

    try:
        bootstrap(verbose=args.verbose)
    except BootstrapError as e:
        print(f"Failed to initialize runtime: {e}", file=sys.stderr)
        return 1

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
