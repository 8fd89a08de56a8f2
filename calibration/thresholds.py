"""Dynamic calibration bounds derived from the reading history."""

from __future__ import annotations

from typing import NamedTuple, Sequence

MIN_HISTORY = 10
DEFAULT_LOW_DB = -40.0
DEFAULT_HIGH_DB = -20.0


class ThresholdPair(NamedTuple):
    low: float
    high: float


def widen_degenerate(low: float, high: float) -> ThresholdPair:
    """Give a zero-width range a width of 1 dB so normalization never divides by zero."""
    if high == low:
        return ThresholdPair(low, low + 1.0)
    return ThresholdPair(low, high)


def compute_thresholds(
    history: Sequence[float],
    min_history: int = MIN_HISTORY,
    default_low: float = DEFAULT_LOW_DB,
    default_high: float = DEFAULT_HIGH_DB,
) -> ThresholdPair:
    """
    Static defaults until history holds min_history readings, then (min, max) of the history.
    Recomputed on every call; nothing is cached.
    """
    if len(history) < min_history:
        return widen_degenerate(default_low, default_high)
    return widen_degenerate(min(history), max(history))


__all__ = [
    "DEFAULT_HIGH_DB",
    "DEFAULT_LOW_DB",
    "MIN_HISTORY",
    "ThresholdPair",
    "compute_thresholds",
    "widen_degenerate",
]
