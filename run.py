#!/usr/bin/env python3
"""
SmartVolume entry point: load config, initialize database, measure ambient noise and
suggest (or apply) an output volume.

Usage:
    python run.py analyze [--duration N] [--apply] [--preview]
    python run.py apply PERCENT
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

# Ensure project root is on path
_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from app.pipeline import Pipeline, create_pipeline  # noqa: E402
from audio.volume import clamp_percent, create_volume_control  # noqa: E402
from calibration.calibrator import VolumeSuggestion  # noqa: E402
from config import AppConfig, load_config, validate_config  # noqa: E402
from persistence.database import get_connection, init_database  # noqa: E402
from persistence.settings_repo import SettingsRepo  # noqa: E402
from sdk import (  # noqa: E402
    DURATION_MAX_SEC,
    DURATION_MIN_SEC,
    SmartVolumeError,
    VolumeControl,
    VolumeControlError,
)

logger = logging.getLogger(__name__)


def bootstrap_config_and_db(root: Path) -> tuple[AppConfig, Path]:
    """
    Load and validate config, set up logging, initialize database.
    Returns (config, db_path). Single place for entry-point startup.
    """
    config_path = os.environ.get("SMARTVOLUME_CONFIG", str(root / "config.yaml"))
    raw = load_config()
    validate_config(raw)
    config = AppConfig(raw)
    log_level = config.get_log_level()
    level = getattr(logging, log_level.upper(), logging.INFO)
    log_fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    logging.basicConfig(level=level, format=log_fmt)
    log_path = config.get_log_path()
    if log_path:
        path = Path(log_path) if os.path.isabs(log_path) else root / log_path
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(log_fmt))
        logging.getLogger().addHandler(fh)
    logger.info("Config path: %s", config_path)

    db_path = Path(config.get_db_path())
    db_path.parent.mkdir(parents=True, exist_ok=True)
    init_database(str(db_path))
    logger.info("Database initialized at %s", db_path)
    return (config, db_path)


def _settings_repo(db_path: Path) -> SettingsRepo:
    def conn_factory():
        return get_connection(str(db_path))

    return SettingsRepo(conn_factory)


def _print_suggestion(suggestion: VolumeSuggestion) -> None:
    low, high = suggestion.thresholds
    print(f"Ambient Noise: {suggestion.decibels:.1f} dB")
    print(f"Suggested Volume: {suggestion.volume}%")
    print(
        f"Calibration: {low:.1f}..{high:.1f} dB from {suggestion.history_size} reading(s)"
    )


def cmd_analyze(
    pipeline: Pipeline, duration_sec: int, apply: bool = False, preview: bool = False
) -> int:
    """Measure for duration_sec on the worker thread; Ctrl-C cancels without logging."""
    errors: list[str] = []
    results: list[VolumeSuggestion] = []
    if preview:
        try:
            suggestion = pipeline.analyze(duration_sec, preview=True)
        except SmartVolumeError as e:
            print(e, file=sys.stderr)
            return 1
    else:
        pipeline.set_ui_callbacks(
            on_status=lambda s: logger.debug("Status: %s", s),
            on_result=results.append,
            on_error=errors.append,
        )
        print(f"Listening for {duration_sec} second(s)...")
        pipeline.start_analysis(duration_sec)
        try:
            pipeline.wait()
        except KeyboardInterrupt:
            pipeline.cancel()
            pipeline.wait()
            print("Cancelled.", file=sys.stderr)
            return 130
        for msg in errors:
            print(msg, file=sys.stderr)
        if not results:
            return 1
        suggestion = results[-1]
    _print_suggestion(suggestion)
    if apply:
        return cmd_apply(pipeline.volume_control, suggestion.volume)
    return 0


def cmd_apply(volume_control: VolumeControl, percent: int) -> int:
    """Confirm a volume: program the output channel."""
    value = clamp_percent(percent)
    try:
        volume_control.set_volume(value)
    except VolumeControlError as e:
        print(f"Could not set volume: {e}", file=sys.stderr)
        return 1
    print(f"Volume set to {value}%")
    return 0


def _build_parser(default_duration: int) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py", description="Suggest an output volume from ambient noise."
    )
    sub = parser.add_subparsers(dest="command", required=True)
    analyze = sub.add_parser("analyze", help="Measure ambient noise and suggest a volume")
    analyze.add_argument(
        "--duration",
        type=int,
        default=default_duration,
        help=f"Recording duration in seconds ({DURATION_MIN_SEC}-{DURATION_MAX_SEC})",
    )
    analyze.add_argument(
        "--apply", action="store_true", help="Set the output volume to the suggestion"
    )
    analyze.add_argument(
        "--preview",
        action="store_true",
        help="Suggest without adding the reading to the calibration history",
    )
    apply = sub.add_parser("apply", help="Set the output volume to PERCENT")
    apply.add_argument("percent", type=int)
    return parser


def main(argv: list[str] | None = None) -> int:
    try:
        config, db_path = bootstrap_config_and_db(_ROOT)
    except (FileNotFoundError, ValueError) as e:
        print(e, file=sys.stderr)
        return 1
    args = _build_parser(config.get_audio_config()["duration_sec"]).parse_args(argv)
    if args.command == "apply":
        return cmd_apply(create_volume_control(config.raw), args.percent)
    pipeline = create_pipeline(config.raw, _settings_repo(db_path))
    if not (DURATION_MIN_SEC <= args.duration <= DURATION_MAX_SEC):
        print(
            f"--duration must be between {DURATION_MIN_SEC} and {DURATION_MAX_SEC}",
            file=sys.stderr,
        )
        return 2
    return cmd_analyze(pipeline, args.duration, apply=args.apply, preview=args.preview)


if __name__ == "__main__":
    sys.exit(main())
