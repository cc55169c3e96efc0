"""Tests for the encrypted "remember me" session and the local schema.

Covers:
- encrypt / decrypt through SQLite
- tampered ciphertext and a replaced salt are rejected
- expiry after max_age_days
- schema initialisation is idempotent and upgrades version 1 files
"""

import sqlite3
from datetime import datetime, timedelta, timezone

from issuelane.schema import CURRENT_SCHEMA_VERSION, initialize_schema
from issuelane.services.session_cache import SessionCacheService

from tests.conftest import AUTH_USER_ID


# ─── Session cache ─────────────────────────────────────────

def test_cached_session_is_encrypted_at_rest(session_cache, db):
    assert session_cache.cache_session(AUTH_USER_ID, "sarah.chen@example.com", "refresh-xyz")

    row = db.sqlite.execute("SELECT encrypted_payload FROM encrypted_sessions").fetchone()
    assert b"refresh-xyz" not in row["encrypted_payload"]

    loaded = session_cache.load_cached_session()
    assert loaded.refresh_token == "refresh-xyz"
    assert loaded.email == "sarah.chen@example.com"


def test_second_cache_overwrites_single_row(session_cache, db):
    session_cache.cache_session(AUTH_USER_ID, "a@example.com", "one")
    session_cache.cache_session(AUTH_USER_ID, "a@example.com", "two")
    count = db.sqlite.execute("SELECT COUNT(*) FROM encrypted_sessions").fetchone()[0]
    assert count == 1
    assert session_cache.load_cached_session().refresh_token == "two"


def test_tampered_payload_is_rejected(session_cache, db):
    session_cache.cache_session(AUTH_USER_ID, "a@example.com", "token")
    db.sqlite.execute("UPDATE encrypted_sessions SET tag = ?", (b"\x00" * 16,))
    assert session_cache.load_cached_session() is None


def test_other_machine_salt_cannot_decrypt(session_cache, db, logger, tmp_path):
    session_cache.cache_session(AUTH_USER_ID, "a@example.com", "token")
    other = SessionCacheService(
        db=db, logger=logger, salt_path=tmp_path / "other-salt", kdf_iterations=1_000
    )
    assert other.load_cached_session() is None


def test_expired_session_is_ignored(db, logger, tmp_path):
    cache = SessionCacheService(
        db=db, logger=logger, max_age_days=0, salt_path=tmp_path / "salt", kdf_iterations=1_000
    )
    cache.cache_session(AUTH_USER_ID, "a@example.com", "token")
    assert cache.load_cached_session() is None


def test_clear_session(session_cache):
    session_cache.cache_session(AUTH_USER_ID, "a@example.com", "token")
    assert session_cache.clear_session()
    assert session_cache.load_cached_session() is None
    assert session_cache.clear_session()


# ─── Schema ────────────────────────────────────────────────

def _tables(conn):
    return {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}


def test_schema_initialisation_is_idempotent(logger):
    conn = sqlite3.connect(":memory:")
    initialize_schema(conn, logger)
    initialize_schema(conn, logger)
    assert {"local_storage", "encrypted_sessions", "schema_version"} <= _tables(conn)
    version = conn.execute("SELECT version FROM schema_version").fetchone()[0]
    assert version == CURRENT_SCHEMA_VERSION


def test_version_one_file_gains_session_table(logger):
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE schema_version (id INTEGER PRIMARY KEY, version INTEGER NOT NULL, applied_at TIMESTAMP)")
    conn.execute("INSERT INTO schema_version (id, version) VALUES (1, 1)")
    conn.execute("CREATE TABLE local_storage (key TEXT PRIMARY KEY, value TEXT NOT NULL, updated_at TIMESTAMP)")
    conn.commit()

    initialize_schema(conn, logger)

    assert "encrypted_sessions" in _tables(conn)
    assert conn.execute("SELECT version FROM schema_version").fetchone()[0] == 2
