"""
Playback Service Module

Public transport API. A single worker thread owns the PlaybackController and
executes commands one at a time in arrival order; every public method enqueues
a command with a one-shot reply slot and blocks until the worker answers.
This serializes any number of concurrent callers without locking inside the
engine.

The audio output is acquired inside the worker. If that fails, the worker
stays up and answers every command with DeviceUnavailableError.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from rift.domain.exceptions import (
    DeviceUnavailableError,
    PlaybackError,
    ServiceUnavailableError,
)
from rift.domain.models import PlaybackState, DEFAULT_VOLUME
from rift.infrastructure.audio_engine import AudioOutput
from .engine import PlaybackController, DEFAULT_SEEK_TOLERANCE, clamp_volume

logger = logging.getLogger(__name__)

# How often a blocked caller checks that the worker is still alive
LIVENESS_POLL_SECONDS = 0.5


class CommandKind(Enum):
    """Transport commands understood by the worker."""
    LOAD_AND_PLAY = "load_and_play"
    PLAY = "play"
    PAUSE = "pause"
    SEEK = "seek"
    SET_VOLUME = "set_volume"
    TOGGLE_MUTE = "toggle_mute"
    GET_STATE = "get_state"


@dataclass
class PlaybackCommand:
    """A transport request and the slot its single reply goes into."""
    kind: CommandKind
    args: Tuple[Any, ...] = ()
    reply: Future = field(default_factory=Future)


_SHUTDOWN = object()


class PlaybackService:
    """
    Thread-safe facade over the playback worker.

    Usage:
        with PlaybackService.start() as playback:
            playback.load_and_play("/music/track.flac")
            playback.seek(42.0)
            state = playback.get_state()
    """

    def __init__(
        self,
        output_factory: Optional[Callable[[], AudioOutput]] = None,
        volume: float = DEFAULT_VOLUME,
        seek_tolerance: float = DEFAULT_SEEK_TOLERANCE,
    ):
        """
        Args:
            output_factory: Acquires the audio output; called once, on the
                worker thread. Defaults to the GStreamer output.
            volume: Initial volume
            seek_tolerance: In-place seek acceptance window in seconds
        """
        if output_factory is None:
            from rift.infrastructure.audio_engine import GstAudioOutput
            output_factory = GstAudioOutput

        self._output_factory = output_factory
        self._volume = volume
        self._seek_tolerance = seek_tolerance
        self._commands: "queue.Queue[Any]" = queue.Queue()
        self._snapshot = PlaybackState(volume=clamp_volume(volume))
        self._snapshot_lock = threading.Lock()
        self._init_error: Optional[PlaybackError] = None
        self._worker = threading.Thread(target=self._run, name="rift-playback", daemon=True)
        self._started = False
        self._closed = False

    @classmethod
    def start(cls, *args, **kwargs) -> PlaybackService:
        """Create a service and start its worker thread."""
        service = cls(*args, **kwargs)
        service.run()
        return service

    def run(self) -> None:
        if not self._started:
            self._started = True
            self._worker.start()

    @property
    def is_running(self) -> bool:
        return self._worker.is_alive()

    @property
    def snapshot(self) -> PlaybackState:
        """Last successfully observed state, without a round-trip to the worker."""
        with self._snapshot_lock:
            return self._snapshot

    @property
    def init_error(self) -> Optional[PlaybackError]:
        """Why the audio output could not be acquired, if it could not."""
        return self._init_error

    # Public transport API

    def load_and_play(self, path: str) -> PlaybackState:
        return self._call(CommandKind.LOAD_AND_PLAY, str(path))

    def play(self) -> PlaybackState:
        return self._call(CommandKind.PLAY)

    def pause(self) -> PlaybackState:
        return self._call(CommandKind.PAUSE)

    def seek(self, position_seconds: float) -> PlaybackState:
        return self._call(CommandKind.SEEK, float(position_seconds))

    def set_volume(self, volume: float) -> PlaybackState:
        return self._call(CommandKind.SET_VOLUME, float(volume))

    def toggle_mute(self) -> PlaybackState:
        return self._call(CommandKind.TOGGLE_MUTE)

    def get_state(self) -> PlaybackState:
        """
        Current playback state.

        If the round-trip fails for any reason, the last known snapshot is
        returned instead of the error.
        """
        try:
            return self._call(CommandKind.GET_STATE)
        except PlaybackError as e:
            logger.debug(f"State query failed, using last snapshot: {e}")
            return self.snapshot

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop the worker after the already queued commands have run."""
        if self._closed:
            return
        self._closed = True
        if self._started:
            self._commands.put(_SHUTDOWN)
            self._worker.join(timeout)

    def __enter__(self) -> PlaybackService:
        self.run()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # Request/reply

    def _call(self, kind: CommandKind, *args: Any) -> PlaybackState:
        if self._closed or not self._worker.is_alive():
            raise ServiceUnavailableError("Playback service is unavailable")

        command = PlaybackCommand(kind=kind, args=args)
        self._commands.put(command)

        while True:
            try:
                return command.reply.result(timeout=LIVENESS_POLL_SECONDS)
            except FutureTimeoutError:
                if not self._worker.is_alive():
                    raise ServiceUnavailableError("Playback service did not respond") from None

    # Worker

    def _run(self) -> None:
        controller = self._acquire_controller()

        while True:
            command = self._commands.get()
            if command is _SHUTDOWN:
                break

            if controller is None:
                command.reply.set_exception(self._init_error)
                continue

            self._execute(controller, command)

        if controller is not None:
            try:
                controller.close()
            except Exception as e:
                logger.warning(f"Error closing audio output: {e}")

        # Nothing will answer commands that raced the shutdown.
        self._fail_pending()
        logger.debug("Playback worker stopped")

    def _acquire_controller(self) -> Optional[PlaybackController]:
        try:
            output = self._output_factory()
        except DeviceUnavailableError as e:
            self._init_error = e
        except Exception as e:
            self._init_error = DeviceUnavailableError(f"Cannot initialize audio output: {e}")
        else:
            return PlaybackController(output, volume=self._volume, seek_tolerance=self._seek_tolerance)

        logger.error(f"Playback disabled: {self._init_error}")
        return None

    def _execute(self, controller: PlaybackController, command: PlaybackCommand) -> None:
        handlers = {
            CommandKind.LOAD_AND_PLAY: controller.load_and_play,
            CommandKind.PLAY: controller.play,
            CommandKind.PAUSE: controller.pause,
            CommandKind.SEEK: controller.seek,
            CommandKind.SET_VOLUME: controller.set_volume,
            CommandKind.TOGGLE_MUTE: controller.toggle_mute,
            CommandKind.GET_STATE: controller.state,
        }

        try:
            state = handlers[command.kind](*command.args)
        except PlaybackError as e:
            logger.warning(f"Playback command {command.kind.value} failed: {e}")
            command.reply.set_exception(e)
            return
        except Exception as e:
            logger.exception(f"Unexpected error in playback command {command.kind.value}")
            command.reply.set_exception(PlaybackError(f"{command.kind.value} failed: {e}"))
            return

        with self._snapshot_lock:
            self._snapshot = state
        command.reply.set_result(state)

    def _fail_pending(self) -> None:
        while True:
            try:
                command = self._commands.get_nowait()
            except queue.Empty:
                return
            if command is not _SHUTDOWN:
                command.reply.set_exception(ServiceUnavailableError("Playback service is shutting down"))
