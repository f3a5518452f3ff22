"""
wavtagger - annotate a batch of wav recordings while they play, then
convert them to FLAC with the annotations embedded.
"""

__version__ = "0.1.0"
