"""Tests for calibration.thresholds: defaults, history bounds and degeneracy correction."""

from __future__ import annotations

from calibration.thresholds import (
    DEFAULT_HIGH_DB,
    DEFAULT_LOW_DB,
    MIN_HISTORY,
    ThresholdPair,
    compute_thresholds,
    widen_degenerate,
)


def test_defaults_constants() -> None:
    assert (DEFAULT_LOW_DB, DEFAULT_HIGH_DB) == (-40.0, -20.0)
    assert MIN_HISTORY == 10


def test_empty_history_returns_defaults() -> None:
    pair = compute_thresholds([])
    assert pair == (-40.0, -20.0)
    assert isinstance(pair, ThresholdPair)
    assert pair.low == -40.0
    assert pair.high == -20.0


def test_short_history_returns_defaults() -> None:
    assert compute_thresholds([-90.0, 0.0, -55.0]) == (-40.0, -20.0)
    assert compute_thresholds([-30.0] * 9) == (-40.0, -20.0)


def test_ten_readings_use_min_max() -> None:
    history = [-50.0, -45.0, -40.0, -35.0, -30.0, -25.0, -20.0, -15.0, -10.0, -5.0]
    assert compute_thresholds(history) == (-50.0, -5.0)


def test_order_does_not_matter() -> None:
    history = [-5.0, -50.0, -30.0, -20.0, -10.0, -45.0, -25.0, -15.0, -35.0, -40.0]
    assert compute_thresholds(history) == (-50.0, -5.0)


def test_identical_history_widened() -> None:
    for v in [-33.0, 0.0, -90.5]:
        assert compute_thresholds([v] * 10) == (v, v + 1.0)


def test_custom_min_history_and_defaults() -> None:
    assert compute_thresholds([-60.0, -10.0], min_history=2) == (-60.0, -10.0)
    assert compute_thresholds(
        [-60.0], min_history=2, default_low=-40.0, default_high=-30.0
    ) == (-40.0, -30.0)


def test_degenerate_defaults_widened() -> None:
    assert compute_thresholds([], default_low=-35.0, default_high=-35.0) == (-35.0, -34.0)


def test_high_never_below_low() -> None:
    for history in ([], [-1.0] * 10, [float(-i) for i in range(20)]):
        low, high = compute_thresholds(history)
        assert high > low


def test_recomputed_as_history_grows() -> None:
    history = [-30.0] * 9
    assert compute_thresholds(history) == (-40.0, -20.0)
    history.append(-60.0)
    assert compute_thresholds(history) == (-60.0, -30.0)
    history.append(-10.0)
    assert compute_thresholds(history) == (-60.0, -10.0)


def test_widen_degenerate_passthrough() -> None:
    assert widen_degenerate(-50.0, -5.0) == (-50.0, -5.0)
    assert widen_degenerate(-5.0, -5.0) == (-5.0, -4.0)
