"""
Authentication & Session State.

Provides an injectable ``SessionManager`` that holds the Supabase tokens
of the signed-in account for the lifetime of one desktop session.  This
is the client's "session storage": it is never written to disk and is
cleared on sign-out.

Usage::

    from issuelane.auth import SessionManager

    session = SessionManager()
    session.set_tokens(access, refresh, expires_at, auth_user_id="9b1c...")
    session.is_authenticated  # True
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional


class SessionManager:
    """Injectable holder for the current Supabase session.

    Pass a single ``SessionManager`` through the composition root so
    every component shares the same session.
    """

    def __init__(self) -> None:
        self._lock: threading.RLock = threading.RLock()
        self._auth_user_id: Optional[str] = None
        self._email: Optional[str] = None
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._token_expiry: Optional[datetime] = None

    def set_tokens(
        self,
        access_token: str,
        refresh_token: str,
        expires_at: Optional[int],
        *,
        auth_user_id: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        """Store Supabase auth tokens for session refresh.

        Parameters
        ----------
        access_token:
            The short-lived JWT access token.
        refresh_token:
            The long-lived refresh token used to obtain new access tokens.
        expires_at:
            Unix timestamp (seconds) when the access token expires, or
            ``None`` when the backend did not report one.
        auth_user_id:
            Supabase account UUID; kept from the previous call when omitted.
        email:
            Account email; kept from the previous call when omitted.
        """
        with self._lock:
            self._access_token = access_token
            self._refresh_token = refresh_token
            self._token_expiry = (
                datetime.fromtimestamp(expires_at, tz=timezone.utc)
                if expires_at is not None
                else None
            )
            if auth_user_id is not None:
                self._auth_user_id = auth_user_id
            if email is not None:
                self._email = email

    @property
    def auth_user_id(self) -> Optional[str]:
        with self._lock:
            return self._auth_user_id

    @property
    def email(self) -> Optional[str]:
        with self._lock:
            return self._email

    @property
    def access_token(self) -> Optional[str]:
        """Return the current access token, or ``None`` if not set."""
        with self._lock:
            return self._access_token

    @property
    def refresh_token(self) -> Optional[str]:
        """Return the refresh token for session renewal."""
        with self._lock:
            return self._refresh_token

    @property
    def is_token_expired(self) -> bool:
        """``True`` when the access token has expired or was never set."""
        with self._lock:
            if self._token_expiry is None:
                return True
            return datetime.now(timezone.utc) >= (self._token_expiry - timedelta(seconds=30))

    def clear(self) -> None:
        """Drop every token, ending the session."""
        with self._lock:
            self._auth_user_id = None
            self._email = None
            self._access_token = None
            self._refresh_token = None
            self._token_expiry = None

    @property
    def is_authenticated(self) -> bool:
        """``True`` while an account is signed in."""
        with self._lock:
            return self._auth_user_id is not None
