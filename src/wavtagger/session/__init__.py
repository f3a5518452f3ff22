"""
Session state machine for a tagging run.

state.py holds the pure transition logic. wavtagger.session.controller
performs the playback, filesystem and finalization side effects it asks
for and is imported from there directly.
"""

from .metadata import FileMetadata
from .commands import (
    Command,
    Quit,
    Confirm,
    InsertChar,
    Backspace,
    DeleteFile,
    SeekForward,
    SeekBackward,
    Tick,
)
from .state import SubState, SessionState, initial_state, transition

__all__ = [
    'FileMetadata',
    'Command',
    'Quit',
    'Confirm',
    'InsertChar',
    'Backspace',
    'DeleteFile',
    'SeekForward',
    'SeekBackward',
    'Tick',
    'SubState',
    'SessionState',
    'initial_state',
    'transition',
]
