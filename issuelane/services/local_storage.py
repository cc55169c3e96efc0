"""
Local Storage Service.

Persistent key/value store backed by the ``local_storage`` table of the
local SQLite file.  Values are JSON text.

Like the session cache, this touches SQLite directly rather than through
a repository: it is client infrastructure state, not domain data.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Optional

from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger
from issuelane.services.base_service import BaseService
from issuelane.utils.text import JsonValue


class LocalStorageService(BaseService):
    """Key/value persistence that survives restarts."""

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._db: DatabaseManager = db

    def get_item(self, key: str) -> Optional[JsonValue]:
        """Return the decoded value stored under *key*, or ``None``.

        A value that is not valid JSON is logged and treated as missing.
        """
        row = self._db.sqlite.execute(
            "SELECT value FROM local_storage WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as exc:
            self._logger.warning("Discarding malformed local_storage[%s]: %s", key, exc)
            return None

    def set_item(self, key: str, value: JsonValue) -> None:
        payload = json.dumps(value, ensure_ascii=False, default=str)
        with self._db.write_lock:
            self._db.sqlite.execute(
                """
                INSERT INTO local_storage (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = CURRENT_TIMESTAMP
                """,
                (key, payload),
            )
            self._db.sqlite.commit()

    def remove_item(self, key: str) -> None:
        with self._db.write_lock:
            self._db.sqlite.execute("DELETE FROM local_storage WHERE key = ?", (key,))
            self._db.sqlite.commit()

    def keys(self) -> list[str]:
        rows = self._db.sqlite.execute(
            "SELECT key FROM local_storage ORDER BY key"
        ).fetchall()
        return [row["key"] for row in rows]

    def clear(self) -> None:
        """Remove every key.

        Raises
        ------
        sqlite3.Error
            If the delete cannot be committed; the transaction is rolled back.
        """
        with self._db.write_lock:
            try:
                self._db.sqlite.execute("DELETE FROM local_storage")
                self._db.sqlite.commit()
            except sqlite3.Error:
                self._db.sqlite.rollback()
                raise
        self._logger.info("Local storage cleared.")
