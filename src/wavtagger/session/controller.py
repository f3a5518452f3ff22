"""
wavtagger/session/controller.py
Runs the session state machine against the real world.

The controller owns the SessionState and performs the effects that
transition() requests: player calls, waveform recomputation, file removal
and the batch finalizer. Finalization is parked rather than executed
inline so that a UI can draw its "processing" view before the blocking
conversion starts.
"""

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from wavtagger.audio.base import Player
from wavtagger.audio.waveform import summarize_file, DEFAULT_POINTS
from wavtagger.errors import FilesystemError, SeekError
from wavtagger.finalize.batch import BatchFinalizer
from wavtagger.session.commands import (
    Command,
    Tick,
    Effect,
    StopPlayback,
    RemoveFile,
    LoadTrack,
    SeekTo,
    Finalize,
)
from wavtagger.session.state import (
    SessionState,
    SEEK_STEP,
    initial_state,
    transition,
)

logger = logging.getLogger("SessionController")


def remove_from_disk(path: Path) -> None:
    try:
        os.remove(path)
    except OSError as e:
        raise FilesystemError(f"Could not delete {path}: {e.strerror or e}", path=path) from e


class SessionController:

    def __init__(self,
                 files,
                 player: Player,
                 finalizer: BatchFinalizer,
                 waveform_fn: Optional[Callable[[Path, int], list[int]]] = None,
                 remover: Optional[Callable[[Path], None]] = remove_from_disk,
                 seek_step: float = SEEK_STEP,
                 waveform_points: int = DEFAULT_POINTS):
        self.state: SessionState = initial_state(files)
        self.player = player
        self.finalizer = finalizer
        self.waveform_fn = waveform_fn or summarize_file
        self.remover = remover
        self.seek_step = seek_step
        self.waveform_points = waveform_points
        self.outputs: list[Path] = []
        self._finalize_pending = False

    @property
    def finalize_pending(self) -> bool:
        return self._finalize_pending

    @property
    def finished(self) -> bool:
        return self.state.terminate

    def start(self) -> SessionState:
        """Load and summarize the first file, DecodeError is fatal"""
        if not self.state.files:
            self.state = replace(self.state, terminate=True)
            return self.state
        self._load(0, self.state.files[0])
        return self.state

    def dispatch(self, command: Command) -> SessionState:
        self.state, effects = transition(self.state, command, self.seek_step)
        for effect in effects:
            self._perform(effect)
        return self.state

    def handle(self, command: Command) -> SessionState:
        """dispatch() then run any pending finalization immediately"""
        self.dispatch(command)
        if self._finalize_pending:
            self.finalize()
        return self.state

    def tick(self) -> SessionState:
        if self.state.terminate:
            return self.state
        return self.dispatch(Tick(self.player.position()))

    def finalize(self) -> list[Path]:
        """
        Convert the whole batch and write back the last file's metadata.

        Blocks until done. ConversionError and MetadataWriteError propagate,
        the session is left unterminated in that case so the caller decides
        how to exit.
        """
        if not self._finalize_pending:
            return self.outputs
        self._finalize_pending = False
        logger.info("finalizing %d files", len(self.state.files))
        self.outputs = self.finalizer.run(self.state.files, self.state.metadata)
        self.state = replace(self.state, terminate=True)
        return self.outputs

    def close(self):
        self.player.stop()

    def _perform(self, effect: Effect):
        if isinstance(effect, StopPlayback):
            self.player.stop()
        elif isinstance(effect, RemoveFile):
            self._remove(effect.path)
        elif isinstance(effect, LoadTrack):
            self._load(effect.index, effect.path)
        elif isinstance(effect, SeekTo):
            self._seek(effect.target)
        elif isinstance(effect, Finalize):
            self._finalize_pending = True
        else:
            raise TypeError(f"Unknown effect {effect!r}")

    def _load(self, index: int, path: Path):
        duration = self.player.load(path)
        waveform = self.waveform_fn(path, self.waveform_points)
        self.state = replace(self.state,
                             total_duration=duration,
                             playback_position=0.0,
                             progress=0.0,
                             waveform=tuple(waveform))
        logger.info("file %d/%d: %s", index + 1, len(self.state.files), path)

    def _seek(self, target: float):
        try:
            self.player.seek(target)
        except SeekError as e:
            logger.warning("seek to %.1fs rejected: %s", target, e)
            self.state = replace(self.state, status_message=f"Seek failed: {e}")

    def _remove(self, path: Path):
        if self.remover is None:
            return
        try:
            self.remover(path)
        except FilesystemError as e:
            error = e
        except OSError as e:
            error = FilesystemError(f"Could not delete {path}: {e}", path=path)
        else:
            logger.info("deleted %s", path)
            return
        # the file is already out of the batch, keep going
        logger.error("%s", error)
        self.state = replace(self.state, status_message=f"Delete failed: {error}")
