"""
wavtagger/finalize/tag_writer.py
Writes a FileMetadata record into a FLAC file's Vorbis comment block.
"""

import logging
import os
from pathlib import Path

from mutagen import MutagenError
from mutagen.flac import FLAC

from wavtagger.errors import MetadataWriteError
from wavtagger.session.metadata import FileMetadata

logger = logging.getLogger("TagWriter")

TAGS_FIELD = "TAGS"
LOCATION_FIELD = "LOCATION"


class VorbisTagWriter:

    def __init__(self, delimiter: str = ", "):
        self.delimiter = delimiter

    def write(self, path: os.PathLike, record: FileMetadata) -> None:
        """
        Set TAGS and LOCATION on the FLAC at path and save it in place.

        TAGS is only written when there is at least one tag, LOCATION only
        when a non-empty location was entered.

        Raises:
            MetadataWriteError: If the file cannot be opened, parsed or saved
        """
        try:
            audio = FLAC(str(path))
            if audio.tags is None:
                audio.add_tags()
            if record.tags:
                audio[TAGS_FIELD] = self.delimiter.join(record.tags)
            if record.location:
                audio[LOCATION_FIELD] = record.location
            audio.save()
        except (MutagenError, OSError) as e:
            raise MetadataWriteError(f"Could not write metadata to {path}: {e}",
                                     path=Path(path)) from e
        logger.info("wrote %d tags, location=%r to %s", len(record.tags), record.location, path)
