"""
Core collaborator abstractions: interfaces and no-op / in-memory implementations.
Used by the capture orchestrator, calibration log and pipeline; concrete desktop
adapters live in audio.sounddevice_capture, audio.volume and persistence.settings_repo.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

import numpy as np


class AudioCaptureDevice(ABC):
    """
    Source of signed 16-bit mono samples.
    Use open() then read() in a loop; close() to release. close() must be safe to call
    even if open() failed part-way.
    """

    @abstractmethod
    def open(self, sample_rate: int, channels: int, dtype: str) -> None:
        """Open the input stream. Raises DeviceError if the device is unavailable."""
        ...

    @abstractmethod
    def read(self, frames: int) -> np.ndarray:
        """
        Read up to frames samples. Returns a 1-D int16 array; may be empty on a
        short or failed read.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Stop and release the stream."""
        ...


class VolumeControl(ABC):
    """Output volume channel (OS mixer or hardware)."""

    @abstractmethod
    def set_volume(self, percent: int) -> None:
        """Set output volume to percent (0--100). Raises VolumeControlError on failure."""
        ...

    def get_volume(self) -> int | None:
        """Current output volume percent, or None if unknown."""
        return None


class KeyValueStore(ABC):
    """Durable string store with get/set semantics on named records."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return value for key, or None if not found."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value for key, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. No-op if missing."""
        ...


# --- No-op / in-memory implementations ---


class NoOpCapture(AudioCaptureDevice):
    """Device that never yields samples; use when no microphone is available."""

    def open(self, sample_rate: int, channels: int, dtype: str) -> None:
        pass

    def read(self, frames: int) -> np.ndarray:
        return np.zeros(0, dtype=np.int16)

    def close(self) -> None:
        pass


class NoOpVolumeControl(VolumeControl):
    """Remembers the last requested volume without touching any mixer."""

    def __init__(self) -> None:
        self._percent: int | None = None

    def set_volume(self, percent: int) -> None:
        self._percent = percent

    def get_volume(self) -> int | None:
        return self._percent


class InMemoryStore(KeyValueStore):
    """Dict-backed store for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


__all__ = [
    "AudioCaptureDevice",
    "InMemoryStore",
    "KeyValueStore",
    "NoOpCapture",
    "NoOpVolumeControl",
    "VolumeControl",
]
