"""
Normalized config section access for SmartVolume.
Section getters (audio, calibration, volume) keep config normalization in one place;
entry points and the pipeline use these instead of duplicating clamping logic.
"""

from __future__ import annotations

from typing import Any

DURATION_MIN_SEC = 1
DURATION_MAX_SEC = 30


def _clamp_int(value: Any, low: int, high: int, default: int) -> int:
    """Parse value to int and clamp to [low, high]; return default if value is None or invalid."""
    if value is None:
        return default
    try:
        return max(low, min(high, int(value)))
    except (TypeError, ValueError):
        return default


def _parse_float(value: Any, low: float, high: float, default: float) -> float:
    """Parse value to float and clamp to [low, high]; return default if value is None or parsing fails."""
    if value is None:
        return default
    try:
        return max(low, min(high, float(value)))
    except (TypeError, ValueError):
        return default


def _optional_positive_int(value: Any) -> int | None:
    """Parse value to a positive int; None, invalid or non-positive values give None (unlimited)."""
    if value is None:
        return None
    try:
        n = int(value)
    except (TypeError, ValueError):
        return None
    return n if n > 0 else None


def get_audio_section(raw_config: dict) -> dict[str, Any]:
    """
    Return normalized audio capture config: sample rate, chunk size, default duration,
    device selector and the capture authorization flag.
    """
    a = raw_config.get("audio") or {}
    device = a.get("device")
    if isinstance(device, str):
        device = device.strip() or None
    return {
        "sample_rate": _clamp_int(a.get("sample_rate"), 8000, 192000, 44100),
        "chunk_frames": _clamp_int(a.get("chunk_frames"), 256, 65536, 4096),
        "duration_sec": _clamp_int(
            a.get("duration_sec"), DURATION_MIN_SEC, DURATION_MAX_SEC, 10
        ),
        "device": device,
        "capture_allowed": bool(a.get("capture_allowed", True)),
    }


def get_calibration_section(raw_config: dict) -> dict[str, Any]:
    """
    Return normalized calibration config: history threshold, static default bounds,
    optional history cap and the store key.
    """
    c = raw_config.get("calibration") or {}
    default_low = _parse_float(c.get("default_low_db"), -200.0, 0.0, -40.0)
    default_high = _parse_float(c.get("default_high_db"), -200.0, 0.0, -20.0)
    if default_high < default_low:
        default_low, default_high = default_high, default_low
    key = str(c.get("key") or "").strip() or "ambient_noise_logs"
    return {
        "min_history": _clamp_int(c.get("min_history"), 1, 10000, 10),
        "default_low_db": default_low,
        "default_high_db": default_high,
        "max_history": _optional_positive_int(c.get("max_history")),
        "key": key,
    }


def get_volume_section(raw_config: dict) -> dict[str, Any]:
    """
    Return normalized output volume config: suggested volume range and mixer backend.
    """
    v = raw_config.get("volume") or {}
    min_percent = _clamp_int(v.get("min_percent"), 0, 100, 20)
    max_percent = _clamp_int(v.get("max_percent"), 0, 100, 100)
    if max_percent < min_percent:
        min_percent, max_percent = max_percent, min_percent
    backend = str(v.get("backend") or "amixer").strip().lower()
    if backend not in ("amixer", "none"):
        backend = "amixer"
    card = v.get("amixer_card")
    return {
        "min_percent": min_percent,
        "max_percent": max_percent,
        "backend": backend,
        "amixer_control": str(v.get("amixer_control") or "Master").strip() or "Master",
        "amixer_card": str(card).strip() if card is not None and str(card).strip() else None,
    }


__all__ = [
    "DURATION_MAX_SEC",
    "DURATION_MIN_SEC",
    "get_audio_section",
    "get_calibration_section",
    "get_volume_section",
]
