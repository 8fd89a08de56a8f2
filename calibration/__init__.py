"""
Adaptive volume calibration: reading history, dynamic thresholds, and volume mapping.
"""
from __future__ import annotations

from calibration.calibrator import VolumeCalibrator, VolumeSuggestion
from calibration.log import CalibrationLog
from calibration.thresholds import ThresholdPair, compute_thresholds
from calibration.volume import map_volume

__all__ = [
    "CalibrationLog",
    "ThresholdPair",
    "VolumeCalibrator",
    "VolumeSuggestion",
    "compute_thresholds",
    "map_volume",
]
