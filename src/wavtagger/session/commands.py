"""
wavtagger/session/commands.py
Input commands and the side effects a transition can request.

Commands are the keystrokes abstracted away from the terminal, plus the
periodic Tick. Effects are instructions for the controller; the transition
function never performs them itself.
"""

from dataclasses import dataclass
from pathlib import Path


# ================== COMMANDS ==================

@dataclass(frozen=True)
class Command:
    """Base class for session input"""


@dataclass(frozen=True)
class Quit(Command):
    pass


@dataclass(frozen=True)
class Confirm(Command):
    pass


@dataclass(frozen=True)
class InsertChar(Command):
    char: str


@dataclass(frozen=True)
class Backspace(Command):
    pass


@dataclass(frozen=True)
class DeleteFile(Command):
    pass


@dataclass(frozen=True)
class SeekForward(Command):
    pass


@dataclass(frozen=True)
class SeekBackward(Command):
    pass


@dataclass(frozen=True)
class Tick(Command):
    """Periodic refresh carrying the play head sampled from the player"""
    position: float


# ================== EFFECTS ==================

@dataclass(frozen=True)
class Effect:
    """Base class for side effects requested by a transition"""


@dataclass(frozen=True)
class StopPlayback(Effect):
    pass


@dataclass(frozen=True)
class RemoveFile(Effect):
    path: Path


@dataclass(frozen=True)
class LoadTrack(Effect):
    index: int
    path: Path


@dataclass(frozen=True)
class SeekTo(Effect):
    target: float


@dataclass(frozen=True)
class Finalize(Effect):
    pass
