"""
Timed capture session: open the device, read fixed-size chunks until the requested duration
has elapsed, concatenate them into one sample buffer, and estimate its loudness.
Blocks the calling thread for the full duration; run it on a worker thread (see app.pipeline).
"""
from __future__ import annotations

import logging
import threading
import time
import weakref
from typing import Callable

import numpy as np

from audio.constants import CHANNELS, CHUNK_FRAMES, SAMPLE_DTYPE, SAMPLE_RATE
from audio.level import chunk_level, estimate_decibels
from sdk.abstractions import AudioCaptureDevice
from sdk.config import DURATION_MAX_SEC, DURATION_MIN_SEC
from sdk.errors import (
    CaptureCancelledError,
    DeviceError,
    InvalidInputError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)

# One lock per device object, shared by every NoiseCapture that drives it.
_device_locks: weakref.WeakKeyDictionary[AudioCaptureDevice, threading.Lock] = (
    weakref.WeakKeyDictionary()
)
_device_locks_guard = threading.Lock()


def device_lock(device: AudioCaptureDevice) -> threading.Lock:
    """Return the lock that serializes captures on device."""
    with _device_locks_guard:
        lock = _device_locks.get(device)
        if lock is None:
            lock = threading.Lock()
            _device_locks[device] = lock
        return lock


def _validate_duration(duration_sec: float) -> float:
    if isinstance(duration_sec, bool):
        raise InvalidInputError("duration_sec must be a number")
    try:
        value = float(duration_sec)
    except (TypeError, ValueError):
        raise InvalidInputError("duration_sec must be a number") from None
    if not (DURATION_MIN_SEC <= value <= DURATION_MAX_SEC):
        raise InvalidInputError(
            f"duration_sec must be between {DURATION_MIN_SEC} and {DURATION_MAX_SEC}, got {duration_sec}"
        )
    return value


class NoiseCapture:
    """
    Drives one capture at a time against an AudioCaptureDevice. Captures on the same device
    are serialized across instances and threads (see device_lock).
    is_authorized is consulted before any device interaction; None means always authorized.
    After an empty read the loop waits one chunk period (sleep) before reading again.
    """

    def __init__(
        self,
        device: AudioCaptureDevice,
        sample_rate: int = SAMPLE_RATE,
        chunk_frames: int = CHUNK_FRAMES,
        is_authorized: Callable[[], bool] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._device = device
        self._sample_rate = sample_rate
        self._chunk_frames = chunk_frames
        self._is_authorized = is_authorized
        self._clock = clock
        self._sleep = sleep
        self._idle_wait = chunk_frames / sample_rate
        self._lock = device_lock(device)

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def _check_authorized(self) -> None:
        if self._is_authorized is not None and not self._is_authorized():
            raise PermissionDeniedError("Audio capture permission not granted")

    def capture(
        self,
        duration_sec: float,
        on_level: Callable[[float], None] | None = None,
        cancel: threading.Event | None = None,
    ) -> np.ndarray:
        """
        Record for duration_sec and return all samples as one 1-D int16 array.
        Zero-length reads are skipped. The device is closed on every exit path.
        Raises PermissionDeniedError, InvalidInputError, DeviceError or CaptureCancelledError.
        """
        self._check_authorized()
        duration = _validate_duration(duration_sec)
        with self._lock:
            chunks: list[np.ndarray] = []
            try:
                try:
                    self._device.open(self._sample_rate, CHANNELS, SAMPLE_DTYPE)
                except DeviceError:
                    raise
                except OSError as e:
                    raise DeviceError(f"Could not open capture device: {e}") from e
                logger.debug(
                    "Capture started: %.1fs at %d Hz, %d frames/chunk",
                    duration,
                    self._sample_rate,
                    self._chunk_frames,
                )
                start = self._clock()
                while self._clock() - start < duration:
                    if cancel is not None and cancel.is_set():
                        raise CaptureCancelledError("Capture cancelled")
                    chunk = self._device.read(self._chunk_frames)
                    if chunk is None or len(chunk) == 0:
                        self._sleep(self._idle_wait)
                        continue
                    chunk = np.asarray(chunk, dtype=np.int16).reshape(-1)
                    chunks.append(chunk)
                    if on_level is not None:
                        try:
                            on_level(chunk_level(chunk))
                        except Exception as e:
                            logger.debug("Level callback failed: %s", e)
                if cancel is not None and cancel.is_set():
                    raise CaptureCancelledError("Capture cancelled")
            finally:
                try:
                    self._device.close()
                except Exception as e:
                    logger.warning("Closing capture device failed: %s", e)
        if not chunks:
            raise DeviceError("Capture device produced no audio")
        samples = np.concatenate(chunks)
        logger.debug("Capture finished: %d samples in %d chunks", samples.size, len(chunks))
        return samples

    def capture_and_estimate(
        self,
        duration_sec: float,
        on_level: Callable[[float], None] | None = None,
        cancel: threading.Event | None = None,
    ) -> float:
        """Capture for duration_sec and return the loudness of the whole session in dB."""
        samples = self.capture(duration_sec, on_level=on_level, cancel=cancel)
        decibels = estimate_decibels(samples)
        logger.info("Ambient noise: %.1f dB over %d samples", decibels, samples.size)
        return decibels


def capture_and_estimate(
    duration_sec: float,
    device: AudioCaptureDevice,
    is_authorized: Callable[[], bool] | None = None,
    on_level: Callable[[float], None] | None = None,
    cancel: threading.Event | None = None,
    sample_rate: int = SAMPLE_RATE,
    chunk_frames: int = CHUNK_FRAMES,
) -> float:
    """One-shot capture against device; see NoiseCapture.capture_and_estimate."""
    session = NoiseCapture(
        device,
        sample_rate=sample_rate,
        chunk_frames=chunk_frames,
        is_authorized=is_authorized,
    )
    return session.capture_and_estimate(duration_sec, on_level=on_level, cancel=cancel)


__all__ = ["NoiseCapture", "capture_and_estimate", "device_lock"]
