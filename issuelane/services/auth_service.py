"""
Authentication Service.

Single orchestrator for every authentication concern of the IssueLane
client: the staged sign-in pipeline, sign-out, restoring a remembered
session at launch, periodic token refresh, and error classification.

Sits between the UI layer and the Supabase / local-storage layer so
that ``LoginView`` remains a thin form handler.  All methods return
typed ``AuthResult`` models; the UI never inspects raw exceptions.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional

from issuelane.auth import SessionManager
from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger
from issuelane.models.auth_models import (
    STAGE_MESSAGES,
    SUPABASE_ERROR_MAP,
    AuthErrorCode,
    AuthResult,
    SignInStage,
)
from issuelane.models.user import Assignment, UserProfile
from issuelane.repositories.base_repository import RepositoryError
from issuelane.repositories.user_repository import UserRepository
from issuelane.services.local_storage import LocalStorageService
from issuelane.services.notifier import Notifier
from issuelane.services.profile_cache import ProfileCacheService
from issuelane.services.session_cache import SessionCacheService

# Toast id shared by every message of one sign-in / sign-out attempt.
AUTH_TOAST_ID: str = "auth"

_BAD_CREDENTIALS_MESSAGE: str = "Incorrect username or password."


# ---------------------------------------------------------------------------
# Pipeline state
# ---------------------------------------------------------------------------

@dataclass
class _SignInContext:
    """Values threaded through the sign-in stages.

    Nothing here is visible outside the pipeline until ``CACHE_PROFILE``
    commits it.
    """

    identifier: str
    secret: str
    persist_session: bool
    email: str = ""
    auth_user_id: Optional[str] = None
    access_token: str = ""
    refresh_token: str = ""
    expires_at: Optional[int] = None
    profile: Optional[UserProfile] = None
    assignment: Optional[Assignment] = None

    @property
    def authenticated(self) -> bool:
        return self.auth_user_id is not None


_Stage = Callable[[_SignInContext], Optional[AuthResult]]


class AuthService:
    """Authentication orchestrator.

    Parameters
    ----------
    db:
        Provides the Supabase client (``db.supabase.auth``).
    session:
        In-memory token holder ("session storage").
    user_repo:
        Reads ``users`` and ``user_assignments``.
    profile_cache:
        Session context receiving the merged profile after sign-in.
    local_storage:
        Wiped wholesale on sign-out.
    session_cache:
        Encrypted "remember me" row.
    notifier:
        User-visible progress and error messages.
    logger:
        Structured JSON logger.
    """

    def __init__(
        self,
        db: DatabaseManager,
        session: SessionManager,
        user_repo: UserRepository,
        profile_cache: ProfileCacheService,
        local_storage: LocalStorageService,
        session_cache: SessionCacheService,
        notifier: Notifier,
        logger: StructuredLogger,
    ) -> None:
        self._db: DatabaseManager = db
        self._session: SessionManager = session
        self._user_repo: UserRepository = user_repo
        self._profile_cache: ProfileCacheService = profile_cache
        self._local_storage: LocalStorageService = local_storage
        self._session_cache: SessionCacheService = session_cache
        self._notifier: Notifier = notifier
        self._logger: StructuredLogger = logger
        self._remember: bool = False
        self._lock: threading.Lock = threading.Lock()

        self._stages: list[tuple[SignInStage, _Stage]] = [
            (SignInStage.AUTHENTICATE, self._authenticate),
            (SignInStage.LOAD_PROFILE, self._load_profile),
            (SignInStage.LOAD_ASSIGNMENT, self._load_assignment),
            (SignInStage.CACHE_PROFILE, self._cache_profile),
        ]

    # ==================================================================
    # Sign-in
    # ==================================================================

    def sign_in(
        self, identifier: str, secret: str, persist_session: bool = False
    ) -> AuthResult:
        """Run the sign-in pipeline.

        Stages run in order and the first failure halts the pipeline.
        When a stage after ``AUTHENTICATE`` fails, the account is signed
        back out remotely so no profile-less session survives.  Local
        state (profile cache, session tokens, remembered session) is
        written only by ``CACHE_PROFILE``, after every lookup succeeded.

        Parameters
        ----------
        identifier:
            Email address, or a username resolved to its email.
        secret:
            The password.
        persist_session:
            ``True`` when "Remember me" is ticked: the refresh token is
            stored encrypted so the next launch skips the sign-in form.

        Returns
        -------
        AuthResult
            ``success=True`` with ``stage=NAVIGATE`` and the profile, or
            the failing ``stage`` with ``error_code`` / ``error_message``.
        """
        ctx = _SignInContext(
            identifier=identifier.strip(),
            secret=secret,
            persist_session=persist_session,
        )

        with self._lock:
            for stage, run in self._stages:
                self._notifier.loading(STAGE_MESSAGES[stage], id=AUTH_TOAST_ID)
                failure = run(ctx)
                if failure is not None:
                    failure.stage = stage
                    if ctx.authenticated and stage is not SignInStage.AUTHENTICATE:
                        self._revoke_remote_session()
                    self._notifier.error(
                        failure.error_message or "Sign-in failed.", id=AUTH_TOAST_ID
                    )
                    self._logger.warning(
                        "Sign-in halted at %s: %s",
                        stage,
                        failure.error_code,
                        extra={"event": "SIGN_IN_FAILED", "stage": str(stage)},
                    )
                    return failure

        profile = ctx.profile
        self._notifier.success(STAGE_MESSAGES[SignInStage.NAVIGATE], id=AUTH_TOAST_ID)
        self._logger.info(
            "User signed in: %s",
            profile.username if profile else ctx.email,
            extra={"event": "SIGN_IN", "user_id": str(profile.user_id if profile else "")},
        )
        return AuthResult(success=True, stage=SignInStage.NAVIGATE, profile=profile)

    # -- Stages ---------------------------------------------------------

    def _authenticate(self, ctx: _SignInContext) -> Optional[AuthResult]:
        if not ctx.identifier or not ctx.secret:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.VALIDATION_ERROR,
                error_message="Enter your username or email and your password.",
            )

        try:
            ctx.email = self._resolve_email(ctx.identifier)
        except RepositoryError as exc:
            return self._lookup_failure(exc, "Could not reach the server. Please try again.")
        if not ctx.email:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.INVALID_CREDENTIALS,
                error_message=_BAD_CREDENTIALS_MESSAGE,
            )

        try:
            response = self._db.supabase.auth.sign_in_with_password({
                "email": ctx.email,
                "password": ctx.secret,
            })
        except Exception as exc:
            return self._classify_auth_error(exc)

        user = getattr(response, "user", None)
        account_id = getattr(user, "id", None)
        if not account_id:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.MISSING_ACCOUNT_ID,
                error_message="Sign-in did not return an account. Please try again.",
            )

        ctx.auth_user_id = str(account_id)
        ctx.email = getattr(user, "email", None) or ctx.email
        session = getattr(response, "session", None)
        if session is not None:
            ctx.access_token = session.access_token
            ctx.refresh_token = session.refresh_token
            ctx.expires_at = session.expires_at
        return None

    def _load_profile(self, ctx: _SignInContext) -> Optional[AuthResult]:
        try:
            ctx.profile = self._user_repo.get_by_auth_id(ctx.auth_user_id or "")
        except RepositoryError as exc:
            return self._lookup_failure(exc, "Could not load your profile. Please try again.")
        if ctx.profile is None:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.USER_NOT_FOUND,
                error_message="User ID not found",
            )
        return None

    def _load_assignment(self, ctx: _SignInContext) -> Optional[AuthResult]:
        assert ctx.profile is not None
        try:
            ctx.assignment = self._user_repo.get_assignment(ctx.profile.user_id)
        except RepositoryError as exc:
            return self._lookup_failure(exc, "Could not load your assignment. Please try again.")
        if ctx.assignment is None:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.ASSIGNMENT_NOT_FOUND,
                error_message="No role assignment found for this user.",
            )
        return None

    def _cache_profile(self, ctx: _SignInContext) -> Optional[AuthResult]:
        assert ctx.profile is not None
        merged = ctx.profile.model_copy(update={"assignment": ctx.assignment})
        try:
            self._profile_cache.store(merged)
        except Exception as exc:
            self._logger.error("Failed to cache profile: %s", exc, exc_info=True)
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.UNKNOWN_ERROR,
                error_message="Could not save your session locally.",
            )
        ctx.profile = merged

        self._session.set_tokens(
            access_token=ctx.access_token,
            refresh_token=ctx.refresh_token,
            expires_at=ctx.expires_at,
            auth_user_id=ctx.auth_user_id,
            email=ctx.email,
        )

        self._remember = ctx.persist_session and bool(ctx.refresh_token)
        if self._remember:
            if not self._session_cache.cache_session(
                auth_user_id=ctx.auth_user_id or "",
                email=ctx.email,
                refresh_token=ctx.refresh_token,
            ):
                self._remember = False
                self._logger.warning(
                    "Remember-me unavailable for %s; session kept in memory only.",
                    ctx.email,
                )
        else:
            # Unticked "Remember me" also forgets an older remembered session.
            self._session_cache.clear_session()
        return None

    # -- Helpers --------------------------------------------------------

    def _resolve_email(self, identifier: str) -> str:
        """Return the email to authenticate with, or ``""`` if unknown."""
        if "@" in identifier:
            return identifier.lower()
        profile = self._user_repo.get_by_username(identifier)
        return profile.email.strip().lower() if profile else ""

    def _revoke_remote_session(self) -> None:
        """Best-effort remote sign-out after a failed post-auth stage."""
        try:
            self._db.supabase.auth.sign_out()
            self._logger.info("Signed back out after incomplete sign-in.")
        except Exception as exc:
            self._logger.warning(
                "Remote sign-out after incomplete sign-in failed: %s", exc,
            )

    def _lookup_failure(self, exc: RepositoryError, message: str) -> AuthResult:
        code = (
            AuthErrorCode.BACKEND_UNAVAILABLE
            if not self._db.is_online
            else AuthErrorCode.NETWORK_ERROR
        )
        return AuthResult(success=False, error_code=code, error_message=message)

    def _classify_auth_error(self, exc: Exception) -> AuthResult:
        """Map a Supabase or network exception to a structured ``AuthResult``."""
        if isinstance(exc, RuntimeError) and not self._db.is_online:
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.BACKEND_UNAVAILABLE,
                error_message="The server is not configured. Contact your administrator.",
            )

        # Network errors (ConnectionError covers socket-level OSError subclasses)
        if isinstance(exc, (ConnectionError, TimeoutError)):
            self._logger.warning(
                "Network error during sign-in: %s", exc,
                extra={"event": "SIGN_IN_NETWORK_ERROR"},
            )
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message="Cannot reach the server. Check your internet connection.",
            )

        # Supabase auth errors carry their code in the message text.
        error_str = f"{getattr(exc, 'code', '') or ''} {exc}".lower()
        for code_key, (error_code, human_message) in SUPABASE_ERROR_MAP.items():
            if code_key in error_str:
                self._logger.warning(
                    "Auth error (%s): %s", code_key, exc,
                    extra={"event": "SIGN_IN_FAILED", "error_code": code_key},
                )
                return AuthResult(
                    success=False, error_code=error_code, error_message=human_message,
                )

        self._logger.warning(
            "Unknown sign-in error: %s", exc,
            extra={"event": "SIGN_IN_FAILED", "error_code": "unknown"},
        )
        return AuthResult(
            success=False,
            error_code=AuthErrorCode.UNKNOWN_ERROR,
            error_message="An unexpected error occurred. Please try again later.",
        )

    # ==================================================================
    # Sign-out
    # ==================================================================

    def sign_out(self) -> AuthResult:
        """Revoke the server session, then clear every piece of local state.

        A remote failure is terminal: nothing local is cleared and the
        error is reported, so the user stays signed in and can retry.
        On success local storage, the in-memory session and the
        remembered session are all cleared.
        """
        self._notifier.loading("Signing out...", id=AUTH_TOAST_ID)
        email = self._session.email or "unknown"

        try:
            self._db.supabase.auth.sign_out()
        except Exception as exc:
            self._logger.warning(
                "Server-side sign_out failed for %s: %s", email, exc,
                extra={"event": "SIGN_OUT_FAILED"},
            )
            message = "Sign-out failed. Please try again."
            self._notifier.error(message, id=AUTH_TOAST_ID)
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.SIGN_OUT_FAILED,
                error_message=message,
            )

        try:
            self._local_storage.clear()
        except Exception as exc:
            self._logger.error("Failed to clear local storage: %s", exc, exc_info=True)
        self._profile_cache.forget_in_memory()
        self._session.clear()
        self._session_cache.clear_session()
        self._remember = False

        self._notifier.success("Signed out successfully.", id=AUTH_TOAST_ID)
        self._logger.info("User signed out: %s", email, extra={"event": "SIGN_OUT"})
        return AuthResult(success=True)

    # ==================================================================
    # Remembered session
    # ==================================================================

    def restore_session(self) -> AuthResult:
        """Resume a remembered session at launch.

        Exchanges the stored refresh token for a fresh session, then
        reuses the cached profile when it belongs to the same account or
        reloads profile and assignment otherwise.  Any failure clears
        the remembered session and reports ``success=False``; a launch
        with nothing remembered reports ``success=False`` with no error.
        """
        cached = self._session_cache.load_cached_session()
        if cached is None:
            return AuthResult(success=False)

        try:
            response = self._db.supabase.auth.refresh_session(cached.refresh_token)
        except Exception as exc:
            self._logger.info("Remembered session rejected: %s", exc)
            self._forget_remembered()
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.SESSION_EXPIRED,
                error_message="Your session has expired. Please sign in again.",
            )

        session = getattr(response, "session", None)
        user = getattr(response, "user", None)
        auth_user_id = str(getattr(user, "id", "") or cached.auth_user_id)
        if session is None:
            self._forget_remembered()
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.SESSION_EXPIRED,
                error_message="Your session has expired. Please sign in again.",
            )

        profile = self._profile_cache.get_profile()
        if profile is None or profile.auth_user_id != auth_user_id:
            ctx = _SignInContext(identifier=cached.email, secret="", persist_session=True)
            ctx.auth_user_id = auth_user_id
            failure = self._load_profile(ctx) or self._load_assignment(ctx)
            if failure is not None:
                self._revoke_remote_session()
                self._forget_remembered()
                return failure
            assert ctx.profile is not None
            profile = ctx.profile.model_copy(update={"assignment": ctx.assignment})
            self._profile_cache.store(profile)

        self._session.set_tokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            auth_user_id=auth_user_id,
            email=cached.email,
        )
        # Refresh tokens are single-use; remember the rotated one.
        self._remember = self._session_cache.cache_session(
            auth_user_id=auth_user_id,
            email=cached.email,
            refresh_token=session.refresh_token,
        )
        self._logger.info("Remembered session restored for %s.", cached.email)
        return AuthResult(success=True, stage=SignInStage.NAVIGATE, profile=profile)

    def _forget_remembered(self) -> None:
        self._session_cache.clear_session()
        self._session.clear()
        self._remember = False

    # ==================================================================
    # Token refresh
    # ==================================================================

    def refresh_session_token(self) -> AuthResult:
        """Refresh the access token when it is about to expire.

        Distinguishes auth errors (expired/revoked refresh token →
        ``SESSION_EXPIRED``) from transient network errors (silently
        skipped, retried on the next cycle).
        """
        if not self._session.is_authenticated:
            return AuthResult(success=True)

        if not self._session.is_token_expired:
            return AuthResult(success=True)

        if not self._db.is_online:
            return AuthResult(success=True)

        refresh_token: Optional[str] = self._session.refresh_token
        if not refresh_token:
            return AuthResult(success=True)

        try:
            response = self._db.supabase.auth.refresh_session(refresh_token)
            new_session = response.session
            if new_session is not None:
                self._session.set_tokens(
                    access_token=new_session.access_token,
                    refresh_token=new_session.refresh_token,
                    expires_at=new_session.expires_at,
                )
                if self._remember:
                    self._session_cache.cache_session(
                        auth_user_id=self._session.auth_user_id or "",
                        email=self._session.email or "",
                        refresh_token=new_session.refresh_token,
                    )
                self._logger.info("Session token refreshed.")
            return AuthResult(success=True)

        except (ConnectionError, TimeoutError):
            self._logger.debug("Network error during token refresh; will retry.")
            return AuthResult(success=True)

        except Exception as exc:
            self._logger.warning(
                "Token refresh failed (auth error): %s. Forcing sign-out.", exc,
                extra={"event": "SESSION_EXPIRED"},
            )
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.SESSION_EXPIRED,
                error_message="Your session has expired. Please sign in again.",
            )

    def end_expired_session(self) -> None:
        """Clear local state after ``SESSION_EXPIRED`` without a remote call."""
        try:
            self._local_storage.clear()
        except Exception as exc:
            self._logger.error("Failed to clear local storage: %s", exc, exc_info=True)
        self._profile_cache.forget_in_memory()
        self._forget_remembered()
