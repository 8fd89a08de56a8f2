"""
Volume calibrator: log a reading, recompute thresholds over the updated history, and map the
reading to a suggested volume. preview() does the same computation without writing.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from audio.constants import SILENCE_FLOOR_DB
from calibration.log import CalibrationLog
from calibration.thresholds import (
    DEFAULT_HIGH_DB,
    DEFAULT_LOW_DB,
    MIN_HISTORY,
    ThresholdPair,
    compute_thresholds,
)
from calibration.volume import MAX_VOLUME, MIN_VOLUME, map_volume
from sdk.abstractions import KeyValueStore
from sdk.config import get_calibration_section, get_volume_section
from sdk.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VolumeSuggestion:
    """Outcome of one calibration step. storage_error is set when the reading was not logged."""

    decibels: float
    volume: int
    thresholds: ThresholdPair
    history_size: int
    logged: bool
    storage_error: StorageError | None = field(default=None, compare=False)


def floor_reading(decibel: float) -> float:
    """Replace -inf (silence) and NaN with the quietest representable loudness."""
    if math.isnan(decibel) or decibel == float("-inf"):
        return SILENCE_FLOOR_DB
    return decibel


class VolumeCalibrator:
    """
    Combines the calibration log, threshold calculator and volume mapper.
    Thresholds are recomputed from the log on every call.
    """

    def __init__(
        self,
        log: CalibrationLog,
        min_history: int = MIN_HISTORY,
        default_low: float = DEFAULT_LOW_DB,
        default_high: float = DEFAULT_HIGH_DB,
        min_volume: int = MIN_VOLUME,
        max_volume: int = MAX_VOLUME,
    ) -> None:
        if min_volume > max_volume:
            raise ValueError(f"min_volume {min_volume} exceeds max_volume {max_volume}")
        self._log = log
        self._min_history = min_history
        self._default_low = default_low
        self._default_high = default_high
        self._min_volume = min_volume
        self._max_volume = max_volume

    @classmethod
    def from_config(cls, raw_config: dict, store: KeyValueStore) -> VolumeCalibrator:
        cal = get_calibration_section(raw_config)
        vol = get_volume_section(raw_config)
        log = CalibrationLog(store, key=cal["key"], max_history=cal["max_history"])
        return cls(
            log,
            min_history=cal["min_history"],
            default_low=cal["default_low_db"],
            default_high=cal["default_high_db"],
            min_volume=vol["min_percent"],
            max_volume=vol["max_percent"],
        )

    @property
    def log(self) -> CalibrationLog:
        return self._log

    def thresholds(self, history: list[float]) -> ThresholdPair:
        return compute_thresholds(
            history,
            min_history=self._min_history,
            default_low=self._default_low,
            default_high=self._default_high,
        )

    def _load_or_empty(self) -> list[float]:
        try:
            return self._log.load()
        except StorageError as e:
            logger.warning("Calibration history unavailable, using defaults: %s", e)
            return []

    def _suggest(
        self,
        decibel: float,
        history: list[float],
        logged: bool,
        storage_error: StorageError | None = None,
    ) -> VolumeSuggestion:
        pair = self.thresholds(history)
        volume = map_volume(
            decibel, pair.low, pair.high, self._min_volume, self._max_volume
        )
        logger.info(
            "Suggested volume %d%% for %.1f dB (bounds %.1f..%.1f, %d readings)",
            volume,
            decibel,
            pair.low,
            pair.high,
            len(history),
        )
        return VolumeSuggestion(
            decibels=decibel,
            volume=volume,
            thresholds=pair,
            history_size=len(history),
            logged=logged,
            storage_error=storage_error,
        )

    def determine_volume(self, decibel: float) -> VolumeSuggestion:
        """
        Log the reading, then map it against thresholds from the updated history.
        A failed read degrades to static defaults; a failed write is reported on the
        suggestion (logged=False, storage_error set) and the suggestion is still returned.
        """
        reading = floor_reading(decibel)
        try:
            history = self._log.append(reading)
        except StorageError as e:
            logger.error("Could not log reading %.2f dB: %s", reading, e)
            history = self._load_or_empty() + [reading]
            return self._suggest(reading, history, logged=False, storage_error=e)
        return self._suggest(reading, history, logged=True)

    def preview(self, decibel: float) -> VolumeSuggestion:
        """Suggest a volume as determine_volume would, without writing to the log."""
        reading = floor_reading(decibel)
        history = self._load_or_empty() + [reading]
        return self._suggest(reading, history, logged=False)


__all__ = ["VolumeCalibrator", "VolumeSuggestion", "floor_reading"]
