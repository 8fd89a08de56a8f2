"""Tests for calibration.volume.map_volume: linear mapping, clamp and truncation."""

from __future__ import annotations

import pytest

from calibration.volume import MAX_VOLUME, MIN_VOLUME, map_volume


def test_default_range() -> None:
    assert (MIN_VOLUME, MAX_VOLUME) == (20, 100)


def test_calibrated_bounds_scenario() -> None:
    # (-30 - -50) / (-5 - -50) = 0.444..., * 80 + 20 = 55.55...
    assert map_volume(-30.0, -50.0, -5.0) == 55


def test_default_bounds_scenario() -> None:
    # (-35 - -40) / 20 = 0.25, * 80 + 20 = 40
    assert map_volume(-35.0, -40.0, -20.0) == 40


def test_truncates_not_rounds() -> None:
    # 0.99 * 80 + 20 = 99.2; 0.9975 * 80 + 20 = 99.8
    assert map_volume(-20.2, -40.0, -20.0) == 99
    assert map_volume(-20.05, -40.0, -20.0) == 99


def test_bounds_map_to_range_ends() -> None:
    assert map_volume(-40.0, -40.0, -20.0) == 20
    assert map_volume(-20.0, -40.0, -20.0) == 100


def test_clamped_below_and_above() -> None:
    assert map_volume(-90.0, -40.0, -20.0) == 20
    assert map_volume(5.0, -40.0, -20.0) == 100


def test_infinities_clamped() -> None:
    assert map_volume(float("-inf"), -40.0, -20.0) == 20
    assert map_volume(float("inf"), -40.0, -20.0) == 100


def test_nan_maps_to_min() -> None:
    assert map_volume(float("nan"), -40.0, -20.0) == 20


def test_zero_width_range_does_not_divide_by_zero() -> None:
    assert map_volume(-30.0, -30.0, -30.0) == 20
    assert map_volume(-29.5, -30.0, -30.0) == 60
    assert map_volume(-10.0, -30.0, -30.0) == 100


def test_custom_volume_range() -> None:
    assert map_volume(-30.0, -40.0, -20.0, min_volume=0, max_volume=50) == 25
    assert map_volume(-100.0, -40.0, -20.0, min_volume=10, max_volume=10) == 10


def test_invalid_volume_range_raises() -> None:
    with pytest.raises(ValueError):
        map_volume(-30.0, -40.0, -20.0, min_volume=80, max_volume=20)


def test_monotonic_non_decreasing() -> None:
    readings = [float("-inf")] + [x / 4.0 for x in range(-400, 41)] + [float("inf")]
    for low, high in [(-40.0, -20.0), (-50.0, -5.0), (-10.0, -10.0)]:
        volumes = [map_volume(d, low, high) for d in readings]
        assert volumes == sorted(volumes)


def test_always_in_range() -> None:
    readings = [float("-inf"), -1e9, -96.0, -40.0, -30.0, -20.0, 0.0, 1e9, float("inf")]
    for low, high in [(-40.0, -20.0), (-90.0, 0.0), (-5.0, -5.0)]:
        for d in readings:
            v = map_volume(d, low, high)
            assert 20 <= v <= 100
            assert isinstance(v, int)
