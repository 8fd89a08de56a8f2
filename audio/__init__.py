"""
Audio: loudness estimation, timed capture sessions, and desktop capture/volume adapters.
"""
from __future__ import annotations

from audio.capture import NoiseCapture, capture_and_estimate
from audio.constants import INT16_MAX, SAMPLE_RATE, SILENCE_FLOOR_DB
from audio.level import chunk_level, estimate_decibels

__all__ = [
    "INT16_MAX",
    "SAMPLE_RATE",
    "SILENCE_FLOOR_DB",
    "NoiseCapture",
    "capture_and_estimate",
    "chunk_level",
    "estimate_decibels",
]
