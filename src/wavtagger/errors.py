"""
wavtagger/errors.py
Error taxonomy for the tagging session.

Fatal errors (DecodeError, ConversionError, MetadataWriteError) end the
session with a non-zero exit code. SeekError is only ever reported, as is a FilesystemError raised while
deleting a file. A FilesystemError during discovery is fatal.
"""

from pathlib import Path
from typing import Optional


class WavTaggerError(Exception):
    """Base class for all session errors"""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class DecodeError(WavTaggerError):
    """Source file could not be opened or decoded"""


class SeekError(WavTaggerError):
    """Playback device rejected a seek request"""


class ConversionError(WavTaggerError):
    """External encoder failed for one file"""


class MetadataWriteError(WavTaggerError):
    """Tag/location write-back into the FLAC output failed"""


class FilesystemError(WavTaggerError):
    """Discovery or deletion failed at the filesystem level"""
