"""
Database Abstraction Layer.

Owns the two stores the client talks to:

- **Supabase**: the hosted backend (auth, PostgREST tables, object
  storage).  Every ticket and profile read or write goes here.

- **SQLite (local)**: a small file holding client-side state only: the
  ``local_storage`` key/value table (cached profile) and the encrypted
  remembered session.  It never mirrors remote tables.

Data access is performed through the Repository pattern.  This module only
manages the raw *connections*; it contains no query logic.

Usage (dependency injection at app startup)::

    from issuelane.database import DatabaseManager
    from issuelane.logger import StructuredLogger

    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        sqlite_path=config.LOCAL_DB_PATH,
        logger=StructuredLogger(name="database"),
    )
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Optional, Union

from supabase import create_client, Client as SupabaseClient

from issuelane.logger import StructuredLogger


class DatabaseManager:
    """Manages the Supabase client and the local SQLite connection.

    When ``supabase_url`` or ``supabase_key`` is empty the Supabase client
    is **not** created.  The ``supabase`` property then raises
    ``RuntimeError``, which services report as "backend unavailable".

    Parameters
    ----------
    supabase_url:
        The Supabase project URL (e.g. ``https://xyz.supabase.co``).
    supabase_key:
        The Supabase anonymous key.
    sqlite_path:
        Filesystem path for the local SQLite file, or ``":memory:"``.
    logger:
        A ``StructuredLogger`` instance for structured JSON log output.
    supabase_client:
        Pre-built client; bypasses ``create_client`` when given.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        sqlite_path: Union[Path, str],
        logger: StructuredLogger,
        supabase_client: Optional[SupabaseClient] = None,
    ) -> None:
        self._logger: StructuredLogger = logger
        self._write_lock: threading.RLock = threading.RLock()

        self._supabase: Optional[SupabaseClient] = supabase_client
        if self._supabase is None and supabase_url and supabase_key:
            try:
                self._supabase = create_client(supabase_url, supabase_key)
                self._logger.info("Supabase client initialized.")
            except (ValueError, TypeError) as exc:
                self._logger.warning(
                    "Supabase credential format error: %s. Backend unavailable.",
                    exc,
                )
            except Exception as exc:
                self._logger.error(
                    "Unexpected Supabase initialization failure: %s. "
                    "Backend unavailable.",
                    exc,
                    exc_info=True,
                )
        elif self._supabase is None:
            self._logger.warning(
                "Supabase credentials not configured — backend unavailable."
            )

        self._sqlite_conn: sqlite3.Connection = self._connect_sqlite(sqlite_path)

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def supabase(self) -> SupabaseClient:
        """Return the initialised Supabase client.

        Raises
        ------
        RuntimeError
            If the Supabase client was not initialised.
        """
        if self._supabase is None:
            raise RuntimeError(
                "Supabase client is not initialised. "
                "Check SUPABASE_URL and SUPABASE_ANON_KEY."
            )
        return self._supabase

    @property
    def is_online(self) -> bool:
        """``True`` when the Supabase client is available."""
        return self._supabase is not None

    @property
    def sqlite(self) -> sqlite3.Connection:
        """Return the initialised SQLite connection."""
        return self._sqlite_conn

    @property
    def write_lock(self) -> threading.RLock:
        """Return the write lock for thread-safe SQLite operations.

        Every local write runs on a worker thread, so callers hold this
        lock around ``execute`` + ``commit``::

            with db.write_lock:
                db.sqlite.execute("DELETE FROM local_storage")
                db.sqlite.commit()
        """
        return self._write_lock

    # ------------------------------------------------------------------
    # Lifecycle helpers
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the local SQLite connection.

        Safe to call multiple times; subsequent calls are no-ops.
        """
        with self._write_lock:
            try:
                self._sqlite_conn.close()
                self._logger.info("SQLite connection closed.")
            except sqlite3.ProgrammingError:
                pass

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _connect_sqlite(self, path: Union[Path, str]) -> sqlite3.Connection:
        """Open (or create) the local SQLite file.

        Raises
        ------
        PermissionError
            If the OS denies access to the database file or its directory.
        """
        try:
            conn = sqlite3.connect(str(path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            if str(path) != ":memory:":
                conn.execute("PRAGMA journal_mode=WAL;")
            self._logger.info("SQLite database opened at %s", path)
            return conn
        except PermissionError as exc:
            msg = (
                f"Cannot open the local database at '{path}'. "
                "The file or its directory may be read-only or locked by "
                "another process.  Please check file permissions and try again."
            )
            self._logger.error(msg)
            raise PermissionError(msg) from exc
