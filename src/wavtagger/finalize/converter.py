"""
wavtagger/finalize/converter.py
Lossless conversion through an external ffmpeg process.
"""

import logging
import os
import subprocess
from pathlib import Path

from wavtagger.errors import ConversionError

logger = logging.getLogger("Converter")

FLAC_EXTENSION = ".flac"


def flac_path_for(path: os.PathLike, extension: str = FLAC_EXTENSION) -> Path:
    """Sibling output path, e.g. take1.wav -> take1.flac"""
    return Path(path).with_suffix(extension)


class FfmpegConverter:

    def __init__(self, binary: str = "ffmpeg", compression_level: int = 8):
        self.binary = binary
        self.compression_level = compression_level

    def command(self, source: os.PathLike, target: os.PathLike) -> list[str]:
        return [
            self.binary,
            "-i", str(source),
            "-compression_level", str(self.compression_level),
            "-y",
            str(target),
        ]

    def convert(self, source: os.PathLike, target: os.PathLike) -> Path:
        cmd = self.command(source, target)
        logger.debug("running %s", " ".join(cmd))
        try:
            r = subprocess.run(cmd,
                               stdout=subprocess.DEVNULL,
                               stderr=subprocess.DEVNULL,
                               check=False)
        except OSError as e:
            raise ConversionError(f"Could not run {self.binary}: {e}", path=Path(source)) from e
        if r.returncode != 0:
            raise ConversionError(f"{self.binary} failed on {source} (exit {r.returncode})",
                                  path=Path(source))
        return Path(target)
