"""
Orchestrator: capture -> loudness -> calibration log -> suggested volume -> UI callbacks.
Runs each analysis in a background thread so interactive callers never block on capture.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from audio.capture import NoiseCapture
from audio.volume import clamp_percent, create_volume_control
from calibration.calibrator import VolumeCalibrator, VolumeSuggestion
from sdk import (
    AudioCaptureDevice,
    CaptureCancelledError,
    DeviceError,
    InvalidInputError,
    KeyValueStore,
    PermissionDeniedError,
    VolumeControl,
    get_audio_section,
)

logger = logging.getLogger(__name__)


def create_pipeline(
    config: dict,
    store: KeyValueStore,
    device: AudioCaptureDevice | None = None,
    volume_control: VolumeControl | None = None,
) -> Pipeline:
    """
    Build pipeline from raw config and the calibration store.
    device defaults to the PortAudio microphone (audio.device); volume_control to the
    configured mixer backend.
    """
    audio_cfg = get_audio_section(config)
    if device is None:
        from audio.sounddevice_capture import SoundDeviceCapture

        device = SoundDeviceCapture(audio_cfg["device"])
    if volume_control is None:
        volume_control = create_volume_control(config)
    capture_allowed = audio_cfg["capture_allowed"]
    capture = NoiseCapture(
        device,
        sample_rate=audio_cfg["sample_rate"],
        chunk_frames=audio_cfg["chunk_frames"],
        is_authorized=lambda: capture_allowed,
    )
    calibrator = VolumeCalibrator.from_config(config, store)
    logger.info(
        "Pipeline ready: %d Hz, default duration %ds",
        audio_cfg["sample_rate"],
        audio_cfg["duration_sec"],
    )
    return Pipeline(
        capture,
        calibrator,
        volume_control,
        default_duration_sec=audio_cfg["duration_sec"],
    )


class Pipeline:
    """
    Runs one analysis at a time in a worker thread: capture -> estimate -> calibrate -> UI.
    """

    def __init__(
        self,
        capture: NoiseCapture,
        calibrator: VolumeCalibrator,
        volume_control: VolumeControl,
        default_duration_sec: int = 10,
    ) -> None:
        self._capture = capture
        self._calibrator = calibrator
        self._volume_control = volume_control
        self._default_duration_sec = default_duration_sec

        self._on_status: Callable[[str], None] = lambda _: None
        self._on_result: Callable[[VolumeSuggestion], None] = lambda _: None
        self._on_error: Callable[[str], None] = lambda _: None
        self._on_level: Callable[[float], None] | None = None

        self._state_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._cancel: threading.Event | None = None
        self._last_suggestion: VolumeSuggestion | None = None

    def set_ui_callbacks(
        self,
        on_status: Callable[[str], None],
        on_result: Callable[[VolumeSuggestion], None],
        on_error: Callable[[str], None],
        on_level: Callable[[float], None] | None = None,
    ) -> None:
        self._on_status = on_status
        self._on_result = on_result
        self._on_error = on_error
        self._on_level = on_level

    @property
    def calibrator(self) -> VolumeCalibrator:
        return self._calibrator

    @property
    def volume_control(self) -> VolumeControl:
        return self._volume_control

    @property
    def last_suggestion(self) -> VolumeSuggestion | None:
        return self._last_suggestion

    def is_analyzing(self) -> bool:
        with self._state_lock:
            return self._thread is not None and self._thread.is_alive()

    def analyze(
        self,
        duration_sec: int | None = None,
        cancel: threading.Event | None = None,
        preview: bool = False,
    ) -> VolumeSuggestion:
        """
        Blocking analysis on the calling thread. preview=True suggests a volume without
        logging the reading. Raises the SmartVolumeError subclasses of capture.
        """
        duration = self._default_duration_sec if duration_sec is None else duration_sec
        decibels = self._capture.capture_and_estimate(
            duration, on_level=self._on_level, cancel=cancel
        )
        if preview:
            suggestion = self._calibrator.preview(decibels)
        else:
            suggestion = self._calibrator.determine_volume(decibels)
        self._last_suggestion = suggestion
        return suggestion

    def start_analysis(self, duration_sec: int | None = None) -> bool:
        """Start an analysis in the background. Returns False if one is already running."""
        with self._state_lock:
            if self._thread is not None and self._thread.is_alive():
                logger.debug("Analysis already running; ignoring start request")
                return False
            cancel = threading.Event()
            self._cancel = cancel
            self._thread = threading.Thread(
                target=self._run,
                args=(duration_sec, cancel),
                name="smartvolume-analysis",
                daemon=True,
            )
            self._thread.start()
        return True

    def cancel(self) -> None:
        """Ask the running analysis to stop. The device is released and nothing is logged."""
        with self._state_lock:
            if self._cancel is not None:
                self._cancel.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Join the worker thread. Returns True if no analysis is running afterwards."""
        with self._state_lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout=timeout)
        if thread.is_alive():
            logger.warning("Analysis thread did not finish within timeout")
            return False
        return True

    def apply_volume(self, percent: int) -> int:
        """Set the output volume to percent (clamped to 0--100). Returns the value applied."""
        value = clamp_percent(percent)
        self._volume_control.set_volume(value)
        return value

    def _run(self, duration_sec: int | None, cancel: threading.Event) -> None:
        self._on_status("Analyzing...")
        try:
            suggestion = self.analyze(duration_sec, cancel=cancel)
        except CaptureCancelledError:
            logger.info("Analysis cancelled")
            self._on_status("Cancelled")
            return
        except PermissionDeniedError as e:
            logger.warning("Analysis refused: %s", e)
            self._on_error(f"Permission error: {e}")
            self._on_status("Failed")
            return
        except DeviceError as e:
            logger.warning("Analysis failed: %s", e)
            self._on_error(f"Microphone unavailable: {e}")
            self._on_status("Failed")
            return
        except InvalidInputError as e:
            logger.warning("Analysis rejected: %s", e)
            self._on_error(str(e))
            self._on_status("Failed")
            return
        except Exception as e:
            logger.exception("Analysis failed: %s", e)
            self._on_error(str(e))
            self._on_status("Failed")
            return
        self._on_result(suggestion)
        if suggestion.storage_error is not None:
            self._on_error(f"Reading not saved: {suggestion.storage_error}")
        self._on_status("Done")
