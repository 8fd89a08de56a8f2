"""Capture format constants: int16 mono PCM at 44.1 kHz."""

from __future__ import annotations

import math

INT16_MAX = 32767
SAMPLE_RATE = 44100
CHANNELS = 1
SAMPLE_DTYPE = "int16"
CHUNK_FRAMES = 4096

# Loudness of a buffer whose RMS is one LSB: the quietest non-silent reading.
SILENCE_FLOOR_DB = 20.0 * math.log10(1.0 / INT16_MAX)
