"""Tests for the sign-in pipeline, sign-out and remembered sessions.

Covers:
- successful sign-in caches the merged profile and reports NAVIGATE
- username identifiers are resolved to an email first
- missing account id, missing profile and missing assignment halt the
  pipeline without writing the profile cache
- post-authentication failures sign the user back out remotely
- "Remember me" stores (or forgets) the encrypted session
- sign-out clears everything; a remote sign-out error clears nothing
- restore_session and refresh_session_token
"""

import pytest

from issuelane.models.auth_models import AuthErrorCode, SignInStage
from issuelane.services.profile_cache import PROFILE_KEY

from tests.conftest import AUTH_USER_ID, auth_response


@pytest.fixture
def signed_in(auth_service, fake_supabase, seed_user):
    fake_supabase.auth.sign_in_result = auth_response()
    result = auth_service.sign_in("sarah.chen@example.com", "hunter2", persist_session=True)
    assert result.success
    return result


# ─── Sign-in ───────────────────────────────────────────────

def test_sign_in_caches_merged_profile(auth_service, fake_supabase, seed_user, local_storage, session):
    fake_supabase.auth.sign_in_result = auth_response()

    result = auth_service.sign_in("sarah.chen@example.com", "hunter2")

    assert result.success
    assert result.stage == SignInStage.NAVIGATE
    assert result.profile.user_id == 7
    assert result.profile.role_name == "Agent"
    stored = local_storage.get_item(PROFILE_KEY)
    assert stored["username"] == "schen"
    assert stored["assignment"]["designation"]["name"] == "IT Support"
    assert session.is_authenticated
    assert session.auth_user_id == AUTH_USER_ID


def test_sign_in_reports_each_stage(auth_service, fake_supabase, seed_user, notifier):
    fake_supabase.auth.sign_in_result = auth_response()
    auth_service.sign_in("sarah.chen@example.com", "hunter2")

    assert notifier.of("loading") == [
        "Signing in...",
        "Loading your profile...",
        "Loading your assignment...",
        "Saving your session...",
    ]
    assert notifier.of("success") == ["Welcome back!"]
    assert notifier.of("error") == []


def test_username_is_resolved_to_email(auth_service, fake_supabase, seed_user):
    fake_supabase.auth.sign_in_result = auth_response()

    result = auth_service.sign_in("schen", "hunter2")

    assert result.success
    assert fake_supabase.auth.sign_in_calls == [
        {"email": "sarah.chen@example.com", "password": "hunter2"}
    ]


def test_unknown_username_fails_without_authenticating(auth_service, fake_supabase, seed_user):
    result = auth_service.sign_in("nobody", "hunter2")

    assert not result.success
    assert result.error_code == AuthErrorCode.INVALID_CREDENTIALS
    assert fake_supabase.auth.sign_in_calls == []


def test_blank_credentials_are_rejected_locally(auth_service, fake_supabase):
    result = auth_service.sign_in("  ", "")
    assert result.error_code == AuthErrorCode.VALIDATION_ERROR
    assert result.stage == SignInStage.AUTHENTICATE
    assert fake_supabase.calls == []


def test_bad_password_is_classified(auth_service, fake_supabase, notifier, local_storage):
    fake_supabase.auth.sign_in_error = Exception("Invalid login credentials")

    result = auth_service.sign_in("sarah.chen@example.com", "wrong")

    assert not result.success
    assert result.stage == SignInStage.AUTHENTICATE
    assert result.error_code == AuthErrorCode.INVALID_CREDENTIALS
    assert notifier.of("error") == ["Incorrect username or password."]
    assert fake_supabase.auth.sign_out_calls == 0
    assert local_storage.keys() == []


def test_missing_account_id_is_an_auth_failure(auth_service, fake_supabase, local_storage):
    fake_supabase.auth.sign_in_result = auth_response(user_id=None)

    result = auth_service.sign_in("sarah.chen@example.com", "hunter2")

    assert result.error_code == AuthErrorCode.MISSING_ACCOUNT_ID
    assert result.stage == SignInStage.AUTHENTICATE
    assert local_storage.keys() == []


def test_missing_profile_reports_user_id_not_found(
    auth_service, fake_supabase, notifier, local_storage, session
):
    fake_supabase.auth.sign_in_result = auth_response()
    fake_supabase.tables["users"] = []

    result = auth_service.sign_in("sarah.chen@example.com", "hunter2")

    assert not result.success
    assert result.stage == SignInStage.LOAD_PROFILE
    assert result.error_code == AuthErrorCode.USER_NOT_FOUND
    assert result.error_message == "User ID not found"
    assert notifier.of("error") == ["User ID not found"]
    assert local_storage.get_item(PROFILE_KEY) is None
    assert not session.is_authenticated
    # No authenticated-but-profile-less session is left behind.
    assert fake_supabase.auth.sign_out_calls == 1


def test_missing_assignment_halts_before_cache(auth_service, fake_supabase, seed_user, local_storage):
    fake_supabase.auth.sign_in_result = auth_response()
    fake_supabase.tables["user_assignments"] = []

    result = auth_service.sign_in("sarah.chen@example.com", "hunter2")

    assert result.stage == SignInStage.LOAD_ASSIGNMENT
    assert result.error_code == AuthErrorCode.ASSIGNMENT_NOT_FOUND
    assert local_storage.keys() == []
    assert fake_supabase.auth.sign_out_calls == 1


def test_profile_read_error_signs_back_out(auth_service, fake_supabase, seed_user, local_storage):
    fake_supabase.auth.sign_in_result = auth_response()
    fake_supabase.failures[("users", "select")] = ConnectionError("connection reset")

    result = auth_service.sign_in("sarah.chen@example.com", "hunter2")

    assert result.stage == SignInStage.LOAD_PROFILE
    assert result.error_code == AuthErrorCode.NETWORK_ERROR
    assert local_storage.keys() == []
    assert fake_supabase.auth.sign_out_calls == 1


def test_remember_me_stores_encrypted_session(signed_in, session_cache):
    cached = session_cache.load_cached_session()
    assert cached is not None
    assert cached.refresh_token == "refresh-1"
    assert cached.auth_user_id == AUTH_USER_ID


def test_without_remember_me_nothing_is_persisted(auth_service, fake_supabase, seed_user, session_cache):
    session_cache.cache_session(AUTH_USER_ID, "old@example.com", "stale-token")
    fake_supabase.auth.sign_in_result = auth_response()

    auth_service.sign_in("sarah.chen@example.com", "hunter2", persist_session=False)

    assert session_cache.load_cached_session() is None


# ─── Sign-out ──────────────────────────────────────────────

def test_sign_out_clears_all_local_state(
    signed_in, auth_service, local_storage, session, session_cache, profile_cache, notifier
):
    local_storage.set_item("tickets_page_size", 10)

    result = auth_service.sign_out()

    assert result.success
    assert local_storage.keys() == []
    assert not session.is_authenticated
    assert session_cache.load_cached_session() is None
    assert profile_cache.get_profile() is None
    assert notifier.of("success")[-1] == "Signed out successfully."


def test_sign_out_remote_error_keeps_local_state(
    signed_in, auth_service, fake_supabase, local_storage, session, session_cache, notifier
):
    fake_supabase.auth.sign_out_error = ConnectionError("offline")

    result = auth_service.sign_out()

    assert not result.success
    assert result.error_code == AuthErrorCode.SIGN_OUT_FAILED
    assert PROFILE_KEY in local_storage.keys()
    assert session.is_authenticated
    assert session_cache.load_cached_session() is not None
    assert notifier.of("error") == ["Sign-out failed. Please try again."]


# ─── Remembered session ────────────────────────────────────

def test_restore_without_remembered_session(auth_service, fake_supabase):
    result = auth_service.restore_session()
    assert not result.success
    assert result.error_code is None
    assert fake_supabase.auth.refresh_calls == []


def test_restore_uses_cached_profile_and_rotates_token(
    signed_in, auth_service, fake_supabase, session, session_cache
):
    session.clear()
    fake_supabase.calls.clear()

    result = auth_service.restore_session()

    assert result.success
    assert result.profile.username == "schen"
    assert fake_supabase.auth.refresh_calls == ["refresh-1"]
    assert fake_supabase.calls_to("users") == []
    assert session.refresh_token == "refresh-1-rotated"
    assert session_cache.load_cached_session().refresh_token == "refresh-1-rotated"


def test_restore_rejected_token_forgets_session(signed_in, auth_service, fake_supabase, session_cache):
    fake_supabase.auth.refresh_error = Exception("refresh_token_not_found")

    result = auth_service.restore_session()

    assert not result.success
    assert result.error_code == AuthErrorCode.SESSION_EXPIRED
    assert session_cache.load_cached_session() is None


def test_refresh_token_noop_when_not_expired(signed_in, auth_service, fake_supabase):
    result = auth_service.refresh_session_token()
    assert result.success
    assert fake_supabase.auth.refresh_calls == []


def test_refresh_token_failure_reports_expired(signed_in, auth_service, fake_supabase, session):
    session.set_tokens("access-old", "refresh-1", expires_at=0)
    fake_supabase.auth.refresh_error = Exception("invalid_grant")

    result = auth_service.refresh_session_token()

    assert not result.success
    assert result.error_code == AuthErrorCode.SESSION_EXPIRED
