"""
wavtagger/audio/waveform.py
Downsample decoded audio into a fixed-length amplitude sequence for display.
"""

import logging
import os

import numpy as np
import soundfile as sf

from wavtagger.errors import DecodeError

logger = logging.getLogger("Waveform")

DEFAULT_POINTS = 200
INT16_FULL_SCALE = float(np.iinfo(np.int16).max)


def summarize_samples(samples, num_points: int = DEFAULT_POINTS,
                      full_scale: float = INT16_FULL_SCALE,
                      ceiling: int = 100) -> list[int]:
    """
    Reduce samples to num_points RMS magnitudes in the range [0, ceiling].

    Samples are treated as one flat stream, so interleaved channels are
    summarized together. The stream is cut into num_points equal chunks,
    the last chunk also taking the remainder.
    """
    flat = np.asarray(samples, dtype=np.float64).reshape(-1)
    total = flat.shape[0]
    if total == 0:
        return [0] * num_points

    chunk_size = total // num_points
    waveform = []
    for i in range(num_points):
        start = i * chunk_size
        end = total if i == num_points - 1 else start + chunk_size
        chunk = flat[start:end]
        if chunk.shape[0] == 0:
            waveform.append(0)
            continue
        rms = np.sqrt(np.mean(np.square(chunk)))
        value = int(rms / full_scale * ceiling)
        waveform.append(min(max(value, 0), ceiling))
    return waveform


def summarize_file(path: os.PathLike, num_points: int = DEFAULT_POINTS) -> list[int]:
    try:
        samples, _ = sf.read(str(path), dtype="int16", always_2d=True)
    except (sf.SoundFileError, RuntimeError, OSError) as e:
        raise DecodeError(f"Cannot decode {path}: {e}", path=path) from e
    logger.debug("summarizing %s, %d frames", path, samples.shape[0])
    return summarize_samples(samples, num_points)
