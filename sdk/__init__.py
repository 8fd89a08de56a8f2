"""
SmartVolume SDK: shared library for the engine, adapters and entry points.

Provides a single public surface for collaborator abstractions (capture device, volume
control, key-value store), the error taxonomy, config section access, and logging.
Import from this package only; do not depend on app, audio or calibration from within the SDK.

Example:
    from sdk import get_audio_section, get_calibration_section
    cfg = get_audio_section(raw_config)

    from sdk import AudioCaptureDevice, KeyValueStore, InMemoryStore
    from sdk import DeviceError, PermissionDeniedError, StorageError
    from sdk import get_logger
"""

from __future__ import annotations

from sdk.abstractions import (
    AudioCaptureDevice,
    InMemoryStore,
    KeyValueStore,
    NoOpCapture,
    NoOpVolumeControl,
    VolumeControl,
)
from sdk.config import (
    DURATION_MAX_SEC,
    DURATION_MIN_SEC,
    get_audio_section,
    get_calibration_section,
    get_volume_section,
)
from sdk.errors import (
    CaptureCancelledError,
    DeviceError,
    InvalidInputError,
    PermissionDeniedError,
    SmartVolumeError,
    StorageError,
    VolumeControlError,
)
from sdk.logging import get_logger

__version__ = "0.1.0"

__all__ = [
    "DURATION_MAX_SEC",
    "DURATION_MIN_SEC",
    "AudioCaptureDevice",
    "CaptureCancelledError",
    "DeviceError",
    "InMemoryStore",
    "InvalidInputError",
    "KeyValueStore",
    "NoOpCapture",
    "NoOpVolumeControl",
    "PermissionDeniedError",
    "SmartVolumeError",
    "StorageError",
    "VolumeControl",
    "VolumeControlError",
    "get_audio_section",
    "get_calibration_section",
    "get_logger",
    "get_volume_section",
]
