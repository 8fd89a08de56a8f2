"""
Logging helper for SmartVolume components: consistent logger names (smartvolume.<name>).
"""

from __future__ import annotations

import logging


def get_logger(component_name: str) -> logging.Logger:
    """
    Return a logger with a consistent name for the given component.
    Use in entry points and adapters so logs appear under smartvolume.<component_name>.

    Args:
        component_name: Short name of the component (e.g. "capture", "calibration", "cli").

    Returns:
        logging.Logger with name "smartvolume." + component_name.
    """
    name = (component_name or "").strip() or "core"
    return logging.getLogger(f"smartvolume.{name}")


__all__ = ["get_logger"]
