"""
Local SQLite Schema Initialization.

Defines the schema of the client-side state file and provides a single
entry-point -- :func:`initialize_schema` -- that creates the tables
idempotently.  A ``schema_version`` table tracks applied migrations.

The local file holds client state only:

- ``local_storage``: key/value JSON entries (the cached user profile).
- ``encrypted_sessions``: the AES-GCM sealed "remember me" session.

Migration Strategy
~~~~~~~~~~~~~~~~~~
- **Fresh databases** (version 0): all tables are created in one shot from
  :data:`_TABLE_DEFINITIONS`.
- **Existing databases** (version N > 0): only the migrations registered
  in :data:`_MIGRATIONS` for versions ``(N, CURRENT_SCHEMA_VERSION]`` run.
- The upgrade (migrations + version bump) is one SQLite transaction.

Usage::

    from issuelane.schema import initialize_schema

    initialize_schema(db.sqlite, StructuredLogger(name="schema"))
"""

from __future__ import annotations

import sqlite3
from collections.abc import Callable

from issuelane.logger import StructuredLogger

__all__ = ["CURRENT_SCHEMA_VERSION", "initialize_schema"]

CURRENT_SCHEMA_VERSION: int = 2

_LOCAL_STORAGE_DDL: str = """
    CREATE TABLE IF NOT EXISTS local_storage (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

_ENCRYPTED_SESSIONS_DDL: str = """
    CREATE TABLE IF NOT EXISTS encrypted_sessions (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        encrypted_payload BLOB NOT NULL,
        nonce BLOB NOT NULL,
        tag BLOB NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

_TABLE_DEFINITIONS: list[str] = [
    _LOCAL_STORAGE_DDL,
    _ENCRYPTED_SESSIONS_DDL,
]


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _ensure_version_table(conn: sqlite3.Connection) -> None:
    """Create the ``schema_version`` table if it does not yet exist."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_version (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            version INTEGER NOT NULL,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """
    )
    conn.commit()


def _get_schema_version(conn: sqlite3.Connection) -> int:
    """Return the current schema version, or ``0`` if unset."""
    row = conn.execute("SELECT version FROM schema_version WHERE id = 1").fetchone()
    return row[0] if row is not None else 0


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Upsert the single-row version tracker to *version*.

    Does **not** commit — the caller owns the transaction.
    """
    conn.execute(
        """
        INSERT INTO schema_version (id, version) VALUES (1, ?)
        ON CONFLICT(id) DO UPDATE SET version = excluded.version,
                                      applied_at = CURRENT_TIMESTAMP
        """,
        (version,),
    )


def _create_all_tables(conn: sqlite3.Connection, logger: StructuredLogger) -> None:
    """Execute every DDL statement in :data:`_TABLE_DEFINITIONS`."""
    for ddl in _TABLE_DEFINITIONS:
        conn.execute(ddl)
    logger.info(
        f"All {len(_TABLE_DEFINITIONS)} tables created or verified successfully."
    )


def _migrate_v1_to_v2(conn: sqlite3.Connection, logger: StructuredLogger) -> None:
    """Add ``encrypted_sessions`` for the "Remember me" sign-in option."""
    conn.execute(_ENCRYPTED_SESSIONS_DDL)
    logger.info("Migration v1 → v2: encrypted_sessions table created.")


_MIGRATIONS: dict[int, Callable[[sqlite3.Connection, StructuredLogger], None]] = {
    2: _migrate_v1_to_v2,
}


def _run_incremental_migrations(
    conn: sqlite3.Connection,
    logger: StructuredLogger,
    from_version: int,
    to_version: int,
) -> None:
    """Run all registered migrations in ``(from_version, to_version]``."""
    versions_to_apply: list[int] = sorted(
        v for v in _MIGRATIONS if from_version < v <= to_version
    )

    if not versions_to_apply:
        logger.info("No incremental migrations to apply.")
        return

    for version in versions_to_apply:
        logger.info(f"Running migration to version {version} …")
        _MIGRATIONS[version](conn, logger)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def initialize_schema(conn: sqlite3.Connection, logger: StructuredLogger) -> None:
    """Ensure the local SQLite file matches :data:`CURRENT_SCHEMA_VERSION`.

    Called on every startup and fully idempotent.  On failure the upgrade
    is rolled back so the stored version stays unchanged and the next
    startup retries.
    """
    _ensure_version_table(conn)
    current: int = _get_schema_version(conn)

    if current >= CURRENT_SCHEMA_VERSION:
        logger.info(f"Schema is up to date (version {current}).")
        return

    logger.info(
        f"Upgrading schema from version {current} to {CURRENT_SCHEMA_VERSION} …"
    )

    try:
        if current == 0:
            _create_all_tables(conn, logger)
        else:
            _run_incremental_migrations(conn, logger, current, CURRENT_SCHEMA_VERSION)

        _set_schema_version(conn, CURRENT_SCHEMA_VERSION)
        conn.commit()
    except Exception:
        conn.rollback()
        logger.error(
            f"Schema migration failed — rolled back to version {current}."
        )
        raise

    logger.info(f"Schema initialised at version {CURRENT_SCHEMA_VERSION}.")
