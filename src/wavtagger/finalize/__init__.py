"""
Batch conversion to FLAC and Vorbis comment write-back.
"""

from .converter import FfmpegConverter, flac_path_for
from .tag_writer import VorbisTagWriter
from .batch import BatchFinalizer

__all__ = ['FfmpegConverter', 'flac_path_for', 'VorbisTagWriter', 'BatchFinalizer']
