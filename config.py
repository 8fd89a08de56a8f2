"""
Minimal config wrapper: single place for keys and defaults; dict-like access for existing callers.
Config is merged from the root config.yaml and optional config.user.yaml.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from sdk import get_audio_section, get_calibration_section, get_volume_section

_CONFIG_ROOT = Path(__file__).resolve().parent


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base. override wins for conflicts. Returns new dict."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} if missing or invalid. Single place for safe YAML loading."""
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


def load_config() -> dict:
    """
    Load merged config: root config.yaml -> config.user.yaml (same directory).
    Root config path from SMARTVOLUME_CONFIG or project root/config.yaml.
    """
    config_path = os.environ.get("SMARTVOLUME_CONFIG", str(_CONFIG_ROOT / "config.yaml"))
    root_path = Path(config_path)
    config_dir = root_path.parent

    if not root_path.exists():
        raise FileNotFoundError(f"Config not found: {root_path}")
    merged = load_yaml_file(root_path)

    user_path = config_dir / "config.user.yaml"
    if user_path.exists():
        user_data = load_yaml_file(user_path)
        if user_data:
            merged = _deep_merge(merged, user_data)

    return merged


def validate_config(config: dict) -> None:
    """Validate required config values. Raises ValueError with a clear message if invalid."""
    if not config:
        raise ValueError("Config is empty")
    audio = config.get("audio") or {}
    sr = audio.get("sample_rate", 44100)
    try:
        sr = int(sr)
    except (TypeError, ValueError):
        raise ValueError("config.audio.sample_rate must be a positive integer") from None
    if sr <= 0:
        raise ValueError("config.audio.sample_rate must be positive")
    duration = audio.get("duration_sec", 10)
    try:
        duration = float(duration)
    except (TypeError, ValueError):
        raise ValueError("config.audio.duration_sec must be a number") from None
    if not (1 <= duration <= 30):
        raise ValueError("config.audio.duration_sec must be between 1 and 30")
    volume = config.get("volume") or {}
    try:
        lo = int(volume.get("min_percent", 20))
        hi = int(volume.get("max_percent", 100))
    except (TypeError, ValueError):
        raise ValueError("config.volume.min_percent/max_percent must be integers") from None
    if not (0 <= lo <= hi <= 100):
        raise ValueError(
            "config.volume must satisfy 0 <= min_percent <= max_percent <= 100"
        )
    calibration = config.get("calibration") or {}
    try:
        low_db = float(calibration.get("default_low_db", -40.0))
        high_db = float(calibration.get("default_high_db", -20.0))
    except (TypeError, ValueError):
        raise ValueError(
            "config.calibration.default_low_db/default_high_db must be numbers"
        ) from None
    if high_db < low_db:
        raise ValueError(
            "config.calibration.default_high_db must not be below default_low_db"
        )


class AppConfig:
    """
    Wraps the raw YAML config dict. Use get_* for typed access with defaults;
    use .get(section, default) for dict-like access (e.g. audio, volume).
    """

    def __init__(self, raw: dict) -> None:
        self._raw = raw if raw is not None else {}

    def __getitem__(self, key: str):
        return self._raw[key]

    def get(self, key: str, default=None):
        return self._raw.get(key, default)

    @property
    def raw(self) -> dict:
        return self._raw

    def get_log_level(self) -> str:
        return str(self.get("logging", {}).get("level", "INFO"))

    def get_log_path(self) -> str | None:
        """Path for log file (root logger). Default smartvolume.log."""
        return self.get("logging", {}).get("file", "smartvolume.log")

    def get_db_path(self) -> str:
        return str(self.get("persistence", {}).get("db_path", "data/smartvolume.db"))

    def get_audio_config(self) -> dict:
        """Audio: sample rate, chunk frames, default duration, device, capture_allowed."""
        return get_audio_section(self._raw)

    def get_calibration_config(self) -> dict:
        """Calibration: min_history, default bounds, max_history, store key."""
        return get_calibration_section(self._raw)

    def get_volume_config(self) -> dict:
        """Volume: suggested range and mixer backend."""
        return get_volume_section(self._raw)
