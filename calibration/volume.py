"""
Map a decibel reading onto a suggested output volume within [min_volume, max_volume].
"""
from __future__ import annotations

import math

from calibration.thresholds import widen_degenerate

MIN_VOLUME = 20
MAX_VOLUME = 100


def map_volume(
    decibel: float,
    low: float,
    high: float,
    min_volume: int = MIN_VOLUME,
    max_volume: int = MAX_VOLUME,
) -> int:
    """
    Linearly map decibel from [low, high] onto [min_volume, max_volume], clamp, and truncate
    toward zero. Always in range: -inf gives min_volume, +inf gives max_volume, NaN gives
    min_volume. Raises ValueError if min_volume > max_volume.
    """
    if min_volume > max_volume:
        raise ValueError(f"min_volume {min_volume} exceeds max_volume {max_volume}")
    low, high = widen_degenerate(low, high)
    normalized = (decibel - low) / (high - low)
    volume = normalized * (max_volume - min_volume) + min_volume
    if math.isnan(volume):
        return min_volume
    return int(max(float(min_volume), min(float(max_volume), volume)))


__all__ = ["MAX_VOLUME", "MIN_VOLUME", "map_volume"]
