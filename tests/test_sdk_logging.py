"""Tests for sdk.logging: get_logger."""

from __future__ import annotations

import logging

from sdk import get_logger


def test_get_logger_returns_logger() -> None:
    logger = get_logger("capture")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "smartvolume.capture"


def test_get_logger_empty_strips_to_core() -> None:
    logger = get_logger("")
    assert logger.name == "smartvolume.core"


def test_get_logger_whitespace_strips() -> None:
    logger = get_logger("  calibration  ")
    assert logger.name == "smartvolume.calibration"
