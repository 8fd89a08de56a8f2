"""Tests for audio.volume: AmixerVolumeControl, clamp_percent, create_volume_control."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from audio.volume import AmixerVolumeControl, clamp_percent, create_volume_control
from sdk import NoOpVolumeControl, VolumeControlError


def test_clamp_percent() -> None:
    assert clamp_percent(55) == 55
    assert clamp_percent(55.9) == 55
    assert clamp_percent(-5) == 0
    assert clamp_percent(150) == 100


def test_set_volume_runs_amixer() -> None:
    with patch("audio.volume.subprocess.run") as run:
        AmixerVolumeControl().set_volume(55)
    args = run.call_args[0][0]
    assert args == ["amixer", "-q", "sset", "Master", "55%"]
    assert run.call_args[1]["check"] is True


def test_set_volume_with_card_and_control() -> None:
    with patch("audio.volume.subprocess.run") as run:
        AmixerVolumeControl(control="PCM", card="1").set_volume(120)
    assert run.call_args[0][0] == ["amixer", "-c", "1", "-q", "sset", "PCM", "100%"]


def test_set_volume_failure_raises_volume_control_error() -> None:
    err = subprocess.CalledProcessError(1, ["amixer"])
    with patch("audio.volume.subprocess.run", side_effect=err):
        with pytest.raises(VolumeControlError):
            AmixerVolumeControl().set_volume(50)


def test_set_volume_missing_binary_raises_volume_control_error() -> None:
    with patch("audio.volume.subprocess.run", side_effect=FileNotFoundError("amixer")):
        with pytest.raises(VolumeControlError):
            AmixerVolumeControl().set_volume(50)


def test_get_volume_parses_percent() -> None:
    out = (
        "Simple mixer control 'Master',0\n"
        "  Front Left: Playback 42000 [64%] [on]\n"
        "  Front Right: Playback 42000 [64%] [on]\n"
    )
    with patch("audio.volume.subprocess.run", return_value=MagicMock(stdout=out)):
        assert AmixerVolumeControl().get_volume() == 64


def test_get_volume_failure_returns_none() -> None:
    with patch("audio.volume.subprocess.run", side_effect=FileNotFoundError("amixer")):
        assert AmixerVolumeControl().get_volume() is None
    with patch("audio.volume.subprocess.run", return_value=MagicMock(stdout="no match")):
        assert AmixerVolumeControl().get_volume() is None


def test_create_volume_control_backends() -> None:
    assert isinstance(create_volume_control({}), AmixerVolumeControl)
    assert isinstance(
        create_volume_control({"volume": {"backend": "none"}}), NoOpVolumeControl
    )
