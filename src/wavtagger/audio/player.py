"""
wavtagger/audio/player.py
Playback engine adapter

The session only sees load/position/seek/stop. SoundDevicePlayer keeps the
decoded file in memory and feeds it to a sounddevice output stream from the
stream callback, which runs on the audio device's own thread. The callback
advances a frame cursor; position() and seek() read and move that cursor.
"""

import logging
import os
import threading
from typing import Optional

import numpy as np
import soundfile as sf
import sounddevice as sd

from wavtagger.errors import DecodeError, SeekError

logger = logging.getLogger("Player")

DEFAULT_BLOCKSIZE = 1024


class SoundDevicePlayer:
    """Player implementation on top of a sounddevice output stream"""

    def __init__(self, device=None, blocksize: int = DEFAULT_BLOCKSIZE):
        self.device = device
        self.blocksize = blocksize
        self._lock = threading.Lock()
        self._data: Optional[np.ndarray] = None
        self._samplerate = 0
        self._frame = 0
        self._stream = None

    @property
    def duration(self) -> float:
        if self._data is None or self._samplerate == 0:
            return 0.0
        return self._data.shape[0] / self._samplerate

    def load(self, path: os.PathLike) -> float:
        self.stop()
        try:
            data, samplerate = sf.read(str(path), dtype="float32", always_2d=True)
        except (sf.SoundFileError, RuntimeError, OSError) as e:
            raise DecodeError(f"Cannot decode {path}: {e}", path=path) from e

        with self._lock:
            self._data = data
            self._samplerate = samplerate
            self._frame = 0

        try:
            self._stream = sd.OutputStream(
                samplerate=samplerate,
                channels=data.shape[1],
                blocksize=self.blocksize,
                dtype="float32",
                device=self.device,
                callback=self._callback,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            self.stop()
            raise DecodeError(f"Cannot play {path}: {e}", path=path) from e

        logger.info("playing %s (%.1fs, %d Hz, %d ch)", path, self.duration,
                    samplerate, data.shape[1])
        return self.duration

    def _callback(self, outdata, frames, time_info, status):
        if status:
            logger.debug("output stream status %s", status)
        with self._lock:
            if self._data is None:
                outdata.fill(0)
                return
            chunk = self._data[self._frame:self._frame + frames]
            count = chunk.shape[0]
            outdata[:count] = chunk
            if count < frames:
                outdata[count:] = 0
            self._frame += count

    def position(self) -> float:
        with self._lock:
            if self._data is None or self._samplerate == 0:
                return 0.0
            return self._frame / self._samplerate

    def seek(self, target: float) -> None:
        with self._lock:
            if self._data is None or self._stream is None:
                raise SeekError("Nothing is loaded, cannot seek")
            total = self._data.shape[0]
            frame = int(round(target * self._samplerate))
            self._frame = min(max(frame, 0), total)
        logger.debug("seek to %.2fs", target)

    def stop(self) -> None:
        stream = self._stream
        self._stream = None
        if stream is not None:
            try:
                stream.stop()
                stream.close()
            except sd.PortAudioError as e:
                logger.warning("error closing output stream: %s", e)
        self._release()

    def _release(self):
        with self._lock:
            self._data = None
            self._samplerate = 0
            self._frame = 0
