"""
Encrypted Session Cache Service.

Keeps the user signed in across launches when "Remember me" is ticked at
sign-in.  The Supabase refresh token is encrypted and stored in the
single-row ``encrypted_sessions`` table of the local SQLite file.

Security model
--------------
- The encryption key is derived at runtime from machine-specific
  characteristics (hostname + OS username) via PBKDF2-HMAC-SHA256 with
  a per-machine random salt.  The key is **never** persisted to disk.
- Payloads are encrypted with AES-256-GCM, providing both confidentiality
  and integrity (authenticated encryption).
- Remembered sessions expire after ``max_age_days``.
- Sign-out deletes the row entirely.

Storage layout (single-row table, ``id = 1``)::

    encrypted_sessions
    ├── id               INTEGER PRIMARY KEY  (always 1)
    ├── encrypted_payload BLOB
    ├── nonce            BLOB
    └── tag              BLOB
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import socket
import stat
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2

from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger
from issuelane.models.auth_models import CachedSession


class SessionCacheService:
    """Manages the encrypted "remember me" session.

    This service accesses SQLite directly rather than through a
    repository because the encrypted session is infrastructure state
    (auth tokens), not domain data.

    Parameters
    ----------
    db:
        An initialised ``DatabaseManager`` providing access to the local
        SQLite database.
    logger:
        A ``StructuredLogger`` instance for structured JSON log output.
    max_age_days:
        Number of days a remembered session remains valid.
    salt_path:
        Location of the per-machine salt file.  Defaults to
        ``~/.issuelane_session_salt``.
    kdf_iterations:
        PBKDF2 iteration count.
    """

    _PBKDF2_ITERATIONS: int = 600_000
    _KEY_LENGTH: int = 32  # 256 bits

    def __init__(
        self,
        db: DatabaseManager,
        logger: StructuredLogger,
        max_age_days: int = 30,
        salt_path: Optional[Path] = None,
        kdf_iterations: Optional[int] = None,
    ) -> None:
        self._db: DatabaseManager = db
        self._logger: StructuredLogger = logger
        self._max_age_days: int = max_age_days
        self._salt_path: Path = salt_path or Path.home() / ".issuelane_session_salt"
        self._iterations: int = kdf_iterations or self._PBKDF2_ITERATIONS

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def cache_session(self, auth_user_id: str, email: str, refresh_token: str) -> bool:
        """Encrypt and persist the refresh token.

        Returns
        -------
        bool
            ``True`` if the session was encrypted and persisted.  ``False``
            if encryption or the database write failed; the error is
            logged but not raised since remembering the session is not
            required for sign-in to succeed.
        """
        payload = CachedSession(
            auth_user_id=auth_user_id,
            email=email,
            refresh_token=refresh_token,
            cached_at=datetime.now(tz=timezone.utc).isoformat(),
        )
        plaintext: bytes = payload.model_dump_json().encode("utf-8")

        try:
            key: bytes = self._derive_key()
            cipher = AES.new(key, AES.MODE_GCM)
            ciphertext, tag = cipher.encrypt_and_digest(plaintext)
            nonce: bytes = cipher.nonce
        except Exception as exc:
            self._logger.warning("Failed to encrypt session payload: %s", exc)
            return False

        try:
            with self._db.write_lock:
                self._db.sqlite.execute(
                    """
                    INSERT INTO encrypted_sessions (id, encrypted_payload, nonce, tag)
                    VALUES (1, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        encrypted_payload = excluded.encrypted_payload,
                        nonce             = excluded.nonce,
                        tag               = excluded.tag,
                        created_at        = CURRENT_TIMESTAMP
                    """,
                    (ciphertext, nonce, tag),
                )
                self._db.sqlite.commit()
            self._logger.info("Session remembered for %s.", email)
            return True
        except Exception as exc:
            self._logger.warning(
                "Failed to write encrypted session to database: %s", exc,
            )
            return False

    def load_cached_session(self) -> Optional[CachedSession]:
        """Load and decrypt the remembered session.

        Returns ``None`` when no row exists, decryption fails (corrupted
        data or machine identity changed), the payload is malformed, or
        the session is older than ``max_age_days``.
        """
        try:
            row = self._db.sqlite.execute(
                "SELECT encrypted_payload, nonce, tag FROM encrypted_sessions WHERE id = 1",
            ).fetchone()
        except Exception as exc:
            self._logger.warning("Failed to read cached session from database: %s", exc)
            return None

        if row is None:
            self._logger.debug("No remembered session found.")
            return None

        # --- Decrypt ---
        try:
            key: bytes = self._derive_key()
            cipher = AES.new(key, AES.MODE_GCM, nonce=row["nonce"])
            plaintext: bytes = cipher.decrypt_and_verify(row["encrypted_payload"], row["tag"])
        except (ValueError, KeyError, OSError) as exc:
            self._logger.warning(
                "Decryption of remembered session failed (corrupted data or "
                "machine identity changed): %s",
                exc,
            )
            return None

        # --- Deserialize ---
        try:
            session = CachedSession(**json.loads(plaintext.decode("utf-8")))
        except (json.JSONDecodeError, TypeError, ValueError) as exc:
            self._logger.warning("Remembered session payload is malformed: %s", exc)
            return None

        # --- Expiry check ---
        try:
            cached_at: datetime = datetime.fromisoformat(session.cached_at)
        except ValueError as exc:
            self._logger.warning(
                "Could not parse cached_at timestamp '%s': %s", session.cached_at, exc,
            )
            return None
        if datetime.now(tz=timezone.utc) > cached_at + timedelta(days=self._max_age_days):
            self._logger.info(
                "Remembered session for %s expired (cached at %s, max age %d days).",
                session.email,
                session.cached_at,
                self._max_age_days,
            )
            return None

        return session

    def clear_session(self) -> bool:
        """Delete the remembered session.  Safe when none exists."""
        try:
            with self._db.write_lock:
                self._db.sqlite.execute("DELETE FROM encrypted_sessions WHERE id = 1")
                self._db.sqlite.commit()
            self._logger.info("Remembered session cleared.")
            return True
        except Exception as exc:
            self._logger.error("Failed to clear remembered session: %s", exc)
            return False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _derive_key(self) -> bytes:
        """Derive a 256-bit AES key from machine identity via PBKDF2-HMAC-SHA256.

        The key is deterministic for a given (hostname, OS username,
        salt) triple and is never stored.  Copying the SQLite file to
        another machine or OS account leaves the session undecryptable.

        Raises
        ------
        OSError
            If the per-machine salt file cannot be created or read.
        """
        password: str = f"{socket.gethostname()}:{getpass.getuser()}"
        return PBKDF2(
            password=password,
            salt=self._get_or_create_salt(),
            dkLen=self._KEY_LENGTH,
            count=self._iterations,
            hmac_hash_module=SHA256,
        )

    def _get_or_create_salt(self) -> bytes:
        """Return the per-machine random salt, creating it on first run."""
        if self._salt_path.exists():
            data: bytes = self._salt_path.read_bytes()
            if len(data) == 32:
                return data
            self._logger.warning(
                "Salt file has unexpected length (%d); regenerating.", len(data),
            )
        salt: bytes = os.urandom(32)
        self._salt_path.parent.mkdir(parents=True, exist_ok=True)
        self._salt_path.write_bytes(salt)

        # Owner-only permissions; NTFS ACLs are left to the installer.
        if platform.system() != "Windows":
            self._salt_path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 0o600

        self._logger.info("Per-machine session salt created at %s.", self._salt_path)
        return salt
