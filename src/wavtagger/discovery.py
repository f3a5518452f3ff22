"""
wavtagger/discovery.py
Finds the input files for a batch.
"""

import logging
import os
from pathlib import Path

from wavtagger.errors import FilesystemError

logger = logging.getLogger("Discovery")


def discover_files(root: os.PathLike = ".", extension: str = ".wav") -> list[Path]:
    """
    Recursively collect regular files under root with the given extension.

    Matching ignores case. The result is sorted by path so that batch order
    does not depend on directory listing order.

    Raises:
        FilesystemError: If root is missing or not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise FilesystemError(f"Not a directory: {root}", path=root)

    wanted = extension.lower()
    found = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        for name in filenames:
            path = Path(dirpath) / name
            if path.suffix.lower() == wanted and path.is_file():
                found.append(path)
    found.sort()
    logger.info("found %d %s files under %s", len(found), extension, root)
    return found


def _log_walk_error(error: OSError):
    logger.warning("skipping unreadable directory %s: %s", error.filename, error)
