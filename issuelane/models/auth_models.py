"""
Authentication Pipeline Models.

Pydantic models and enumerations for the auth request/response
contracts between ``AuthService`` and the UI layer.

Every auth operation returns a structured, inspectable ``AuthResult``
rather than raw strings or exception side-channels.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel

from issuelane.models.user import UserProfile


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class AuthErrorCode(StrEnum):
    """Exhaustive enumeration of authentication error categories.

    Used by ``AuthService`` to classify Supabase errors and by the
    UI layer to decide which feedback to display.
    """

    INVALID_CREDENTIALS = "invalid_credentials"
    MISSING_ACCOUNT_ID = "missing_account_id"
    USER_NOT_FOUND = "user_not_found"
    ASSIGNMENT_NOT_FOUND = "assignment_not_found"
    USER_BANNED = "user_banned"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    NETWORK_ERROR = "network_error"
    TIMEOUT_ERROR = "timeout_error"
    RATE_LIMITED = "rate_limited"
    VALIDATION_ERROR = "validation_error"
    SESSION_EXPIRED = "session_expired"
    SIGN_OUT_FAILED = "sign_out_failed"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    UNKNOWN_ERROR = "unknown_error"


class SignInStage(StrEnum):
    """Named stages of the sign-in pipeline, in execution order."""

    AUTHENTICATE = "authenticate"
    LOAD_PROFILE = "load_profile"
    LOAD_ASSIGNMENT = "load_assignment"
    CACHE_PROFILE = "cache_profile"
    NAVIGATE = "navigate"


# User-visible progress message shown while each stage runs.
STAGE_MESSAGES: dict[SignInStage, str] = {
    SignInStage.AUTHENTICATE: "Signing in...",
    SignInStage.LOAD_PROFILE: "Loading your profile...",
    SignInStage.LOAD_ASSIGNMENT: "Loading your assignment...",
    SignInStage.CACHE_PROFILE: "Saving your session...",
    SignInStage.NAVIGATE: "Welcome back!",
}


# ---------------------------------------------------------------------------
# Supabase error-code mapping
# ---------------------------------------------------------------------------

SUPABASE_ERROR_MAP: dict[str, tuple[AuthErrorCode, str]] = {
    "invalid_credentials": (
        AuthErrorCode.INVALID_CREDENTIALS,
        "Incorrect username or password.",
    ),
    "invalid login credentials": (
        AuthErrorCode.INVALID_CREDENTIALS,
        "Incorrect username or password.",
    ),
    "invalid_grant": (
        AuthErrorCode.INVALID_CREDENTIALS,
        "Incorrect username or password.",
    ),
    "email_not_confirmed": (
        AuthErrorCode.EMAIL_NOT_CONFIRMED,
        "Please confirm your email address before signing in.",
    ),
    "user_banned": (
        AuthErrorCode.USER_BANNED,
        "Your account has been deactivated. Contact your administrator.",
    ),
    "over_request_rate_limit": (
        AuthErrorCode.RATE_LIMITED,
        "Too many sign-in attempts. Please wait a moment and try again.",
    ),
    "refresh_token_not_found": (
        AuthErrorCode.SESSION_EXPIRED,
        "Your session has expired. Please sign in again.",
    ),
}


# ---------------------------------------------------------------------------
# Unified auth response
# ---------------------------------------------------------------------------

class AuthResult(BaseModel):
    """Unified response for sign-in, sign-out and session restore.

    Attributes
    ----------
    success:
        ``True`` when the operation completed without error.
    stage:
        The sign-in stage that produced this result: the failing stage
        on error, ``NAVIGATE`` on a completed sign-in, ``None`` for
        operations that are not part of the pipeline.
    error_code:
        Structured error category (``None`` on success).
    error_message:
        Human-readable error description (``None`` on success).
    profile:
        The merged profile + assignment on a successful sign-in or restore.
    """

    success: bool
    stage: Optional[SignInStage] = None
    error_code: Optional[AuthErrorCode] = None
    error_message: Optional[str] = None
    profile: Optional[UserProfile] = None

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Remembered session model
# ---------------------------------------------------------------------------

class CachedSession(BaseModel):
    """Decrypted "remember me" payload.

    Attributes
    ----------
    auth_user_id:
        The Supabase UUID of the authenticated user.
    email:
        The user's email address.
    refresh_token:
        The Supabase refresh token used to obtain new access tokens.
    cached_at:
        ISO-8601 UTC timestamp indicating when the session was cached.
    """

    auth_user_id: str
    email: str
    refresh_token: str
    cached_at: str  # ISO-8601 UTC

    model_config = {"from_attributes": True}
