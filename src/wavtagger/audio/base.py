"""
wavtagger/audio/base.py
Capability surface of a playback engine as seen by the session.
"""

import os
from typing import Protocol


class Player(Protocol):  # pragma: no cover

    def load(self, path: os.PathLike) -> float:
        """Replace current playback with path, return its duration in seconds"""

    def position(self) -> float:
        """Elapsed seconds, 0.0 when nothing is loaded"""

    def seek(self, target: float) -> None:
        """Move the play head, raises SeekError if rejected"""

    def stop(self) -> None:
        """Halt playback, never raises"""
