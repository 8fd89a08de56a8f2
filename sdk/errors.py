"""
Error taxonomy shared by the engine, adapters and entry points.
Adapters wrap library errors (sqlite3, PortAudio, subprocess) into these so callers
only need to handle one hierarchy.
"""

from __future__ import annotations


class SmartVolumeError(Exception):
    """Base class for all SmartVolume errors."""


class PermissionDeniedError(SmartVolumeError):
    """Raised when audio capture is not authorized. Checked before touching the device."""


class DeviceError(SmartVolumeError):
    """Raised when the capture device cannot be opened or produced no audio."""


class CaptureCancelledError(SmartVolumeError):
    """Raised when a capture is cancelled mid-flight. No reading is produced."""


class InvalidInputError(SmartVolumeError, ValueError):
    """Raised for caller bugs: empty sample buffer, bad duration, non-finite reading."""


class StorageError(SmartVolumeError):
    """Raised when the calibration history cannot be read from or written to the store."""


class VolumeControlError(SmartVolumeError):
    """Raised when the output volume could not be set."""


__all__ = [
    "CaptureCancelledError",
    "DeviceError",
    "InvalidInputError",
    "PermissionDeniedError",
    "SmartVolumeError",
    "StorageError",
    "VolumeControlError",
]
