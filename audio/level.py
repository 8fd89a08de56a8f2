"""
Loudness from raw int16 samples: decibels relative to full scale for calibration,
and a normalized 0.0--1.0 chunk level for progress display.
"""
from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from audio.constants import INT16_MAX
from sdk.errors import InvalidInputError

logger = logging.getLogger(__name__)


def _as_mono(samples: Sequence[int] | np.ndarray) -> np.ndarray:
    """Return samples as a 1-D float64 array; a single (N, 1) column is flattened."""
    arr = np.asarray(samples)
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr[:, 0]
    if arr.ndim != 1:
        raise InvalidInputError(f"Expected mono samples, got array of shape {arr.shape}")
    return arr.astype(np.float64, copy=False)


def estimate_decibels(samples: Sequence[int] | np.ndarray) -> float:
    """
    Return loudness of samples in dB relative to int16 full scale:
    20 * log10(rms / 32767). Full-scale constant input gives 0.0; all-zero input gives -inf.
    Raises InvalidInputError for an empty or multi-channel buffer.
    """
    arr = _as_mono(samples)
    if arr.size == 0:
        raise InvalidInputError("Cannot estimate loudness of an empty sample buffer")
    mean_square = float(np.mean(np.square(arr)))
    rms = math.sqrt(mean_square)
    if rms == 0.0:
        return float("-inf")
    return 20.0 * math.log10(rms / INT16_MAX)


def chunk_level(samples: Sequence[int] | np.ndarray | None) -> float:
    """
    Return RMS level of samples normalized to 0.0--1.0.
    Returns 0.0 for None, empty or malformed input; never raises.
    """
    if samples is None:
        return 0.0
    try:
        arr = _as_mono(samples)
        if arr.size == 0:
            return 0.0
        rms = math.sqrt(float(np.mean(np.square(arr))))
        return min(1.0, rms / INT16_MAX)
    except (InvalidInputError, TypeError, ValueError) as e:
        logger.debug("chunk_level failed: %s", e)
        return 0.0


__all__ = ["chunk_level", "estimate_decibels"]
