"""
wavtagger/finalize/batch.py
One-shot end of batch step.

Every file is converted in order. The first failure aborts the batch;
files converted before it stay on disk. Only after all conversions succeed
is the metadata of the last file written, into the last output.
"""

import logging
from pathlib import Path
from typing import Sequence

from wavtagger.finalize.converter import FfmpegConverter, flac_path_for, FLAC_EXTENSION
from wavtagger.finalize.tag_writer import VorbisTagWriter
from wavtagger.session.metadata import FileMetadata

logger = logging.getLogger("Finalizer")


class BatchFinalizer:

    def __init__(self,
                 converter: FfmpegConverter = None,
                 tag_writer: VorbisTagWriter = None,
                 output_extension: str = FLAC_EXTENSION):
        self.converter = converter or FfmpegConverter()
        self.tag_writer = tag_writer or VorbisTagWriter()
        self.output_extension = output_extension

    def run(self, files: Sequence[Path], metadata: Sequence[FileMetadata]) -> list[Path]:
        if len(files) != len(metadata):
            raise ValueError(f"files/metadata out of step: {len(files)} != {len(metadata)}")
        if not files:
            return []

        outputs = []
        for source in files:
            target = flac_path_for(source, self.output_extension)
            logger.info("converting %s -> %s", source, target)
            # ConversionError propagates, nothing is rolled back
            outputs.append(self.converter.convert(source, target))

        self.tag_writer.write(outputs[-1], metadata[-1])
        logger.info("batch of %d files finalized", len(outputs))
        return outputs
