"""Shared fakes for capture tests: a manual clock and a scripted capture device."""

from __future__ import annotations

import threading
from typing import Callable

import numpy as np
import pytest

from sdk import AudioCaptureDevice, DeviceError


class FakeClock:
    """Monotonic clock advanced explicitly (by the fake device on each read)."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)


class FakeDevice(AudioCaptureDevice):
    """
    Returns the scripted chunks in order (repeating the last one), advancing the clock by
    the requested frames / sample_rate on every read so a capture of N seconds terminates.
    """

    def __init__(
        self,
        chunks: list[list[int]] | None = None,
        clock: FakeClock | None = None,
        fail_open: bool = False,
        on_read: Callable[[], None] | None = None,
    ) -> None:
        self.chunks = [np.asarray(c, dtype=np.int16) for c in (chunks or [[1000] * 4])]
        self.clock = clock
        self.fail_open = fail_open
        self.on_read = on_read
        self.open_calls: list[tuple[int, int, str]] = []
        self.read_count = 0
        self.closed = 0
        self.is_open = False
        self.active = 0
        self.max_active = 0
        self.opened = threading.Event()
        self._count_lock = threading.Lock()
        self._sample_rate = 44100

    def open(self, sample_rate: int, channels: int, dtype: str) -> None:
        self.open_calls.append((sample_rate, channels, dtype))
        if self.fail_open:
            raise DeviceError("no microphone")
        self._sample_rate = sample_rate
        with self._count_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        self.is_open = True
        self.opened.set()

    def read(self, frames: int) -> np.ndarray:
        if self.on_read is not None:
            self.on_read()
        idx = min(self.read_count, len(self.chunks) - 1)
        self.read_count += 1
        if self.clock is not None:
            self.clock.advance(frames / self._sample_rate)
        return self.chunks[idx]

    def close(self) -> None:
        with self._count_lock:
            self.closed += 1
            if self.is_open:
                self.active -= 1
        self.is_open = False


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_device(clock: FakeClock) -> Callable[..., FakeDevice]:
    def factory(chunks: list[list[int]] | None = None, **kwargs) -> FakeDevice:
        kwargs.setdefault("clock", clock)
        return FakeDevice(chunks, **kwargs)

    return factory
