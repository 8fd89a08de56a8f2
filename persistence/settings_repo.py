"""
Repository for user_settings key-value store (e.g. the ambient noise calibration history).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

import sqlite3

from persistence.database import with_connection
from sdk.abstractions import KeyValueStore

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SettingsRepo(KeyValueStore):
    """
    Read/write user_settings table. On DB errors, logs and re-raises so callers can wrap or report.
    get() returns None for missing key; set() raises on failure.
    """

    def __init__(self, connector: Callable[[], sqlite3.Connection]) -> None:
        self._connector = connector

    def get(self, key: str) -> str | None:
        """Return value for key, or None if not found."""

        def get_one(conn: sqlite3.Connection) -> str | None:
            cur = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

        try:
            return with_connection(self._connector, get_one)
        except sqlite3.Error as e:
            logger.exception("SettingsRepo.get failed: %s", e)
            raise

    def get_updated_at(self, key: str) -> str | None:
        """Return ISO timestamp of the last write to key, or None if missing or unknown."""

        def get_ts(conn: sqlite3.Connection) -> str | None:
            cur = conn.execute(
                "SELECT updated_at FROM user_settings WHERE key = ?", (key,)
            )
            row = cur.fetchone()
            return row[0] if row else None

        try:
            return with_connection(self._connector, get_ts)
        except sqlite3.Error as e:
            logger.exception("SettingsRepo.get_updated_at failed: %s", e)
            raise

    def set(self, key: str, value: str) -> None:
        """Store value for key, replacing any previous value."""
        try:
            with_connection(
                self._connector,
                lambda conn: conn.execute(
                    """
                    INSERT INTO user_settings (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, _now_iso()),
                ),
                commit=True,
            )
        except sqlite3.Error as e:
            logger.exception("SettingsRepo.set failed: %s", e)
            raise

    def delete(self, key: str) -> None:
        """Remove key from user_settings. No-op if key is missing."""
        try:
            with_connection(
                self._connector,
                lambda conn: conn.execute(
                    "DELETE FROM user_settings WHERE key = ?", (key,)
                ),
                commit=True,
            )
        except sqlite3.Error as e:
            logger.exception("SettingsRepo.delete failed: %s", e)
            raise
