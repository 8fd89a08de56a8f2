"""
PortAudio microphone adapter (sounddevice InputStream) for NoiseCapture.
"""
from __future__ import annotations

import numpy as np
import sounddevice as sd

from sdk.abstractions import AudioCaptureDevice
from sdk.errors import DeviceError
from sdk.logging import get_logger

logger = get_logger("sounddevice")


class SoundDeviceCapture(AudioCaptureDevice):
    """
    Blocking reads from a sounddevice.InputStream. device is a PortAudio device index or
    name substring; None uses the system default input.
    """

    def __init__(self, device: int | str | None = None) -> None:
        self._device = device
        self._stream: sd.InputStream | None = None

    def open(self, sample_rate: int, channels: int, dtype: str) -> None:
        if self._stream is not None:
            raise DeviceError("Capture device is already open")
        try:
            stream = sd.InputStream(
                samplerate=sample_rate,
                channels=channels,
                dtype=dtype,
                device=self._device,
            )
            stream.start()
        except (sd.PortAudioError, ValueError) as e:
            logger.warning("Opening input device %r failed: %s", self._device, e)
            raise DeviceError(f"Microphone unavailable: {e}") from e
        self._stream = stream

    def read(self, frames: int) -> np.ndarray:
        if self._stream is None:
            return np.zeros(0, dtype=np.int16)
        try:
            data, overflowed = self._stream.read(frames)
        except sd.PortAudioError as e:
            logger.debug("Input stream read failed: %s", e)
            return np.zeros(0, dtype=np.int16)
        if overflowed:
            logger.debug("Input overflow: some samples were dropped")
        return np.asarray(data, dtype=np.int16).reshape(-1)

    def close(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()


__all__ = ["SoundDeviceCapture"]
