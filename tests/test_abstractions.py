"""Tests for sdk.abstractions and sdk.errors: no-op implementations, in-memory store, taxonomy."""

from __future__ import annotations

import pytest

from sdk import (
    AudioCaptureDevice,
    CaptureCancelledError,
    DeviceError,
    InMemoryStore,
    InvalidInputError,
    KeyValueStore,
    NoOpCapture,
    NoOpVolumeControl,
    PermissionDeniedError,
    SmartVolumeError,
    StorageError,
    VolumeControl,
    VolumeControlError,
)


def test_noop_capture_yields_nothing() -> None:
    cap = NoOpCapture()
    assert isinstance(cap, AudioCaptureDevice)
    cap.open(44100, 1, "int16")
    chunk = cap.read(1024)
    assert len(chunk) == 0
    assert str(chunk.dtype) == "int16"
    cap.close()


def test_noop_volume_control_remembers_last() -> None:
    vc = NoOpVolumeControl()
    assert isinstance(vc, VolumeControl)
    assert vc.get_volume() is None
    vc.set_volume(42)
    assert vc.get_volume() == 42


def test_in_memory_store_get_set_delete() -> None:
    store = InMemoryStore({"a": "1"})
    assert isinstance(store, KeyValueStore)
    assert store.get("a") == "1"
    assert store.get("b") is None
    store.set("b", "2")
    assert store.get("b") == "2"
    store.delete("a")
    store.delete("missing")
    assert store.get("a") is None


def test_in_memory_store_copies_initial() -> None:
    initial = {"a": "1"}
    store = InMemoryStore(initial)
    store.set("a", "2")
    assert initial["a"] == "1"


def test_abstract_classes_not_instantiable() -> None:
    with pytest.raises(TypeError):
        AudioCaptureDevice()  # type: ignore[abstract]
    with pytest.raises(TypeError):
        KeyValueStore()  # type: ignore[abstract]


def test_store_without_delete_not_instantiable() -> None:
    class GetSetOnly(KeyValueStore):
        def get(self, key: str) -> str | None:
            return None

        def set(self, key: str, value: str) -> None:
            pass

    with pytest.raises(TypeError):
        GetSetOnly()  # type: ignore[abstract]


def test_error_taxonomy() -> None:
    for cls in (
        PermissionDeniedError,
        DeviceError,
        CaptureCancelledError,
        InvalidInputError,
        StorageError,
        VolumeControlError,
    ):
        assert issubclass(cls, SmartVolumeError)
    assert issubclass(InvalidInputError, ValueError)
    assert not issubclass(StorageError, ValueError)
