"""
wavtagger/session/state.py
Pure transition logic for the tagging session.

transition() takes the current SessionState and one Command and returns the
next state together with the Effects the controller must perform. It never
mutates its input and never touches the player or the filesystem.

Per-file flow:
    AWAITING_LOCATION --confirm--> AWAITING_TAGS --confirm--> next file
                                                  (or FINALIZING on the last)
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Optional

from wavtagger.session.metadata import FileMetadata
from wavtagger.session.commands import (
    Command,
    Quit,
    Confirm,
    InsertChar,
    Backspace,
    DeleteFile,
    SeekForward,
    SeekBackward,
    Tick,
    Effect,
    StopPlayback,
    RemoveFile,
    LoadTrack,
    SeekTo,
    Finalize,
)

SEEK_STEP = 5.0


class SubState(Enum):
    AWAITING_LOCATION = "awaiting_location"
    AWAITING_TAGS = "awaiting_tags"
    FINALIZING = "finalizing"


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of a tagging session.

    files and metadata are index aligned and always the same length.
    current_index equals len(files) only when the batch has been
    exhausted by a delete.
    """
    files: tuple[Path, ...]
    metadata: tuple[FileMetadata, ...]
    current_index: int = 0
    input_buffer: str = ""
    sub_state: SubState = SubState.AWAITING_LOCATION
    playback_position: float = 0.0
    total_duration: float = 0.0
    progress: float = 0.0
    waveform: tuple[int, ...] = field(default_factory=tuple)
    terminate: bool = False
    status_message: Optional[str] = None

    @property
    def current_file(self) -> Optional[Path]:
        if self.current_index < len(self.files):
            return self.files[self.current_index]
        return None

    @property
    def current_metadata(self) -> Optional[FileMetadata]:
        if self.current_index < len(self.metadata):
            return self.metadata[self.current_index]
        return None

    @property
    def accepts_input(self) -> bool:
        return self.sub_state in (SubState.AWAITING_LOCATION, SubState.AWAITING_TAGS)


def initial_state(files) -> SessionState:
    files = tuple(Path(f) for f in files)
    return SessionState(files=files,
                        metadata=tuple(FileMetadata() for _ in files))


def compute_progress(position: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return min(max(position / total, 0.0), 1.0)


def _replace_record(state: SessionState, record: FileMetadata) -> tuple[FileMetadata, ...]:
    records = list(state.metadata)
    records[state.current_index] = record
    return tuple(records)


def transition(state: SessionState, command: Command,
               seek_step: float = SEEK_STEP) -> tuple[SessionState, list[Effect]]:
    """Apply command to state, returning (next_state, effects)"""
    if state.terminate:
        return state, []

    if isinstance(command, Quit):
        return replace(state, terminate=True), []

    if isinstance(command, Tick):
        return replace(state,
                       playback_position=command.position,
                       progress=compute_progress(command.position, state.total_duration)), []

    if not state.accepts_input or state.current_file is None:
        # FINALIZING ignores everything but Quit and Tick
        return state, []

    if state.status_message is not None:
        state = replace(state, status_message=None)

    if isinstance(command, InsertChar):
        return replace(state, input_buffer=state.input_buffer + command.char), []

    if isinstance(command, Backspace):
        return replace(state, input_buffer=state.input_buffer[:-1]), []

    if isinstance(command, SeekForward):
        return state, [SeekTo(state.playback_position + seek_step)]

    if isinstance(command, SeekBackward):
        return state, [SeekTo(max(state.playback_position - seek_step, 0.0))]

    if isinstance(command, Confirm):
        return _confirm(state)

    if isinstance(command, DeleteFile):
        return _delete_current(state)

    raise TypeError(f"Unknown command {command!r}")


def _confirm(state: SessionState) -> tuple[SessionState, list[Effect]]:
    record = state.metadata[state.current_index]

    if state.sub_state == SubState.AWAITING_LOCATION:
        return replace(state,
                       metadata=_replace_record(state, record.with_location(state.input_buffer)),
                       input_buffer="",
                       sub_state=SubState.AWAITING_TAGS), []

    metadata = _replace_record(state, record.with_tags(state.input_buffer))
    next_index = state.current_index + 1
    if next_index < len(state.files):
        return replace(state,
                       metadata=metadata,
                       input_buffer="",
                       current_index=next_index,
                       sub_state=SubState.AWAITING_LOCATION,
                       playback_position=0.0,
                       progress=0.0), [LoadTrack(next_index, state.files[next_index])]

    return replace(state,
                   metadata=metadata,
                   input_buffer="",
                   sub_state=SubState.FINALIZING), [StopPlayback(), Finalize()]


def _delete_current(state: SessionState) -> tuple[SessionState, list[Effect]]:
    index = state.current_index
    doomed = state.files[index]
    files = state.files[:index] + state.files[index + 1:]
    metadata = state.metadata[:index] + state.metadata[index + 1:]
    effects: list[Effect] = [StopPlayback(), RemoveFile(doomed)]
    next_state = replace(state,
                         files=files,
                         metadata=metadata,
                         input_buffer="",
                         playback_position=0.0,
                         total_duration=0.0,
                         progress=0.0,
                         waveform=())
    if index >= len(files):
        # nothing left at or after this position, end of batch
        return replace(next_state, terminate=True), effects
    effects.append(LoadTrack(index, files[index]))
    return next_state, effects
