"""
Calibration log: append-only history of ambient noise readings (dB), persisted as one
comma-separated record in a KeyValueStore.
"""
from __future__ import annotations

import logging
import math
import sqlite3
import threading
from typing import Iterable

from sdk.abstractions import KeyValueStore
from sdk.errors import InvalidInputError, StorageError

logger = logging.getLogger(__name__)

DEFAULT_LOG_KEY = "ambient_noise_logs"

# Errors a store may raise for I/O problems; wrapped into StorageError.
_STORE_ERRORS = (sqlite3.Error, OSError)


def parse_readings(text: str | None) -> list[float]:
    """
    Parse a stored record into readings. Empty, malformed and non-finite tokens are dropped
    (never counted as 0.0), so a partially corrupt record still yields its valid entries.
    """
    if not text:
        return []
    readings: list[float] = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            value = float(token)
        except ValueError:
            logger.debug("Dropping malformed calibration entry %r", token)
            continue
        if not math.isfinite(value):
            logger.debug("Dropping non-finite calibration entry %r", token)
            continue
        readings.append(value)
    return readings


def format_readings(readings: Iterable[float]) -> str:
    """Serialize readings as comma-separated decimal floats (round-trips exactly)."""
    return ",".join(repr(float(r)) for r in readings)


class CalibrationLog:
    """
    Persistent, ordered history of decibel readings under a single store key.
    append() is a read-modify-write serialized by an internal lock; share one instance per
    store and key within a process. max_history, if set, keeps only the most recent readings.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_LOG_KEY,
        max_history: int | None = None,
    ) -> None:
        if max_history is not None and max_history < 1:
            raise ValueError("max_history must be positive or None")
        self._store = store
        self._key = key
        self._max_history = max_history
        self._lock = threading.Lock()

    @property
    def key(self) -> str:
        return self._key

    @property
    def max_history(self) -> int | None:
        return self._max_history

    def _read(self) -> list[float]:
        try:
            raw = self._store.get(self._key)
        except StorageError:
            raise
        except _STORE_ERRORS as e:
            raise StorageError(f"Could not read calibration history: {e}") from e
        return parse_readings(raw)

    def _write(self, readings: list[float]) -> None:
        try:
            self._store.set(self._key, format_readings(readings))
        except StorageError:
            raise
        except _STORE_ERRORS as e:
            raise StorageError(f"Could not write calibration history: {e}") from e

    def load(self) -> list[float]:
        """Return the persisted history in chronological order; [] if none. Raises StorageError."""
        with self._lock:
            return self._read()

    def append(self, reading: float) -> list[float]:
        """
        Append one reading and write the full history back. Returns the updated history.
        Raises InvalidInputError for a non-finite reading, StorageError on store failure.
        """
        value = float(reading)
        if not math.isfinite(value):
            raise InvalidInputError(f"Cannot log non-finite reading {reading!r}")
        with self._lock:
            readings = self._read()
            readings.append(value)
            if self._max_history is not None and len(readings) > self._max_history:
                readings = readings[-self._max_history :]
            self._write(readings)
        logger.debug("Logged reading %.2f dB (%d in history)", value, len(readings))
        return readings

    def clear(self) -> None:
        """Remove the whole history. Raises StorageError on store failure."""
        with self._lock:
            try:
                self._store.delete(self._key)
            except StorageError:
                raise
            except _STORE_ERRORS as e:
                raise StorageError(f"Could not clear calibration history: {e}") from e
        logger.info("Calibration history cleared (%s)", self._key)


__all__ = ["DEFAULT_LOG_KEY", "CalibrationLog", "format_readings", "parse_readings"]
