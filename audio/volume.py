"""
Output volume adapters: ALSA mixer via amixer, and a factory selecting the backend from config.
"""
from __future__ import annotations

import re
import subprocess

from sdk.abstractions import NoOpVolumeControl, VolumeControl
from sdk.config import get_volume_section
from sdk.errors import VolumeControlError
from sdk.logging import get_logger

logger = get_logger("volume")

_PERCENT_RE = re.compile(r"\[(\d{1,3})%\]")


def clamp_percent(percent: int | float) -> int:
    """Truncate percent to int and clamp to 0--100."""
    return max(0, min(100, int(percent)))


class AmixerVolumeControl(VolumeControl):
    """Sets a simple mixer control (default Master) with `amixer sset <control> N%`."""

    def __init__(
        self, control: str = "Master", card: str | None = None, timeout_sec: float = 5.0
    ) -> None:
        self._control = control
        self._card = card
        self._timeout_sec = timeout_sec

    def _base_cmd(self) -> list[str]:
        cmd = ["amixer"]
        if self._card:
            cmd.extend(["-c", self._card])
        return cmd

    def set_volume(self, percent: int) -> None:
        value = clamp_percent(percent)
        cmd = self._base_cmd() + ["-q", "sset", self._control, f"{value}%"]
        try:
            subprocess.run(
                cmd, check=True, capture_output=True, timeout=self._timeout_sec
            )
        except (
            FileNotFoundError,
            subprocess.CalledProcessError,
            subprocess.TimeoutExpired,
        ) as e:
            logger.warning("amixer sset %s %d%% failed: %s", self._control, value, e)
            raise VolumeControlError(f"Could not set volume to {value}%: {e}") from e
        logger.info("Output volume set to %d%%", value)

    def get_volume(self) -> int | None:
        cmd = self._base_cmd() + ["sget", self._control]
        try:
            out = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self._timeout_sec,
            ).stdout
        except (
            FileNotFoundError,
            subprocess.CalledProcessError,
            subprocess.TimeoutExpired,
        ) as e:
            logger.debug("amixer sget %s failed: %s", self._control, e)
            return None
        m = _PERCENT_RE.search(out or "")
        return int(m.group(1)) if m else None


def create_volume_control(raw_config: dict) -> VolumeControl:
    """Build the configured volume control (volume.backend: amixer | none)."""
    cfg = get_volume_section(raw_config)
    if cfg["backend"] == "none":
        return NoOpVolumeControl()
    return AmixerVolumeControl(control=cfg["amixer_control"], card=cfg["amixer_card"])


__all__ = ["AmixerVolumeControl", "clamp_percent", "create_volume_control"]
