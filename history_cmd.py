#!/usr/bin/env python3
"""
CLI for the ambient noise calibration history: list, stats, clear.
Usage: python history_cmd.py list [N] | stats | clear
Uses SMARTVOLUME_CONFIG or config.yaml for db_path and calibration settings.
List is newest-first (1 = most recent).
"""

from __future__ import annotations

import sqlite3
import sys
from pathlib import Path

# Project root on path
_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from calibration.calibrator import VolumeCalibrator  # noqa: E402
from config import load_config  # noqa: E402
from persistence.database import get_connection, init_database  # noqa: E402
from persistence.settings_repo import SettingsRepo  # noqa: E402
from sdk import StorageError  # noqa: E402

LIST_DEFAULT_LIMIT = 50


def _load_raw_config() -> dict:
    try:
        return load_config()
    except FileNotFoundError as e:
        print(e, file=sys.stderr)
        sys.exit(1)


def _resolve_db_path(raw: dict) -> Path:
    db_path = Path(raw.get("persistence", {}).get("db_path", "data/smartvolume.db"))
    if not db_path.is_absolute():
        db_path = Path.cwd() / db_path
    return db_path


def _repo(db_path: Path) -> SettingsRepo:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    init_database(str(db_path))

    def conn_factory():
        return get_connection(str(db_path))

    return SettingsRepo(conn_factory)


def cmd_list(calibrator: VolumeCalibrator, limit: int = LIST_DEFAULT_LIMIT) -> None:
    readings = calibrator.log.load()
    newest_first = list(reversed(readings))[:limit]
    for i, value in enumerate(newest_first, start=1):
        print(f"{i:5}  {value:8.2f} dB")
    if len(readings) > len(newest_first):
        print(f"... {len(readings) - len(newest_first)} older reading(s)")


def cmd_stats(calibrator: VolumeCalibrator, repo: SettingsRepo | None = None) -> None:
    readings = calibrator.log.load()
    low, high = calibrator.thresholds(readings)
    print(f"readings: {len(readings)}")
    if readings:
        print(f"min: {min(readings):.2f} dB")
        print(f"max: {max(readings):.2f} dB")
        print(f"mean: {sum(readings) / len(readings):.2f} dB")
    print(f"active bounds: {low:.2f} .. {high:.2f} dB")
    if repo is not None:
        print("last updated:", repo.get_updated_at(calibrator.log.key) or "(never)")


def cmd_clear(calibrator: VolumeCalibrator) -> None:
    n = len(calibrator.log.load())
    calibrator.log.clear()
    print(f"Cleared {n} reading(s).")


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: history_cmd.py list [N] | stats | clear", file=sys.stderr)
        sys.exit(1)
    subcommand = sys.argv[1].lower()
    raw = _load_raw_config()

    try:
        repo = _repo(_resolve_db_path(raw))
        calibrator = VolumeCalibrator.from_config(raw, repo)
        if subcommand == "list":
            limit = LIST_DEFAULT_LIMIT
            if len(sys.argv) >= 3:
                try:
                    limit = max(1, int(sys.argv[2]))
                except ValueError:
                    print("N must be a positive integer.", file=sys.stderr)
                    sys.exit(1)
            cmd_list(calibrator, limit)
            return
        if subcommand == "stats":
            cmd_stats(calibrator, repo)
            return
        if subcommand == "clear":
            cmd_clear(calibrator)
            return
    except (StorageError, sqlite3.Error, OSError) as e:
        print(f"Calibration history unavailable: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Unknown subcommand: {subcommand}", file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
