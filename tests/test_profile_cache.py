"""Tests for the profile cache session context and local storage.

Covers:
- store / get_profile / current_user_id / require_profile
- the cache survives a new service instance (restart)
- invalidate and refresh
- malformed stored values are discarded
"""

import pytest

from issuelane.services.profile_cache import (
    PROFILE_KEY,
    ProfileCacheService,
    ProfileNotCachedError,
)


def test_empty_cache(profile_cache):
    assert profile_cache.get_profile() is None
    assert profile_cache.current_user_id() is None
    with pytest.raises(ProfileNotCachedError):
        profile_cache.require_profile()


def test_store_then_read(profile_cache, profile):
    profile_cache.store(profile)
    assert profile_cache.current_user_id() == 7
    assert profile_cache.require_profile().full_name == "Sarah Chen"
    assert profile_cache.require_profile().initials == "SC"


def test_profile_survives_restart(profile_cache, profile, local_storage, logger):
    profile_cache.store(profile)

    reopened = ProfileCacheService(storage=local_storage, logger=logger)

    assert reopened.get_profile() == profile


def test_invalidate_removes_key(profile_cache, profile, local_storage):
    profile_cache.store(profile)
    profile_cache.invalidate()
    assert profile_cache.get_profile() is None
    assert local_storage.get_item(PROFILE_KEY) is None


def test_listeners_see_changes(profile_cache, profile):
    seen = []
    unsubscribe = profile_cache.subscribe(seen.append)
    profile_cache.store(profile)
    profile_cache.invalidate()
    unsubscribe()
    profile_cache.store(profile)
    assert seen == [profile, None]


def test_refresh_rewrites_cache(profile_cache, profile, user_repo, seed_user, fake_supabase):
    profile_cache.store(profile)
    fake_supabase.tables["users"][0]["first_name"] = "Sara"

    result = profile_cache.refresh(user_repo)

    assert result.success
    assert profile_cache.require_profile().first_name == "Sara"
    assert profile_cache.require_profile().role_name == "Agent"


def test_refresh_keeps_cache_on_backend_error(profile_cache, profile, user_repo, fake_supabase):
    profile_cache.store(profile)
    fake_supabase.failures[("users", "select")] = TimeoutError("timed out")

    result = profile_cache.refresh(user_repo)

    assert not result.success
    assert profile_cache.get_profile() == profile


def test_refresh_invalidates_deleted_user(profile_cache, profile, user_repo, fake_supabase):
    profile_cache.store(profile)
    fake_supabase.tables["users"] = []

    result = profile_cache.refresh(user_repo)

    assert result.error == "User ID not found"
    assert profile_cache.get_profile() is None


def test_refresh_requires_sign_in(profile_cache, user_repo):
    assert profile_cache.refresh(user_repo).status_code == 401


def test_malformed_profile_is_discarded(local_storage, logger):
    local_storage.set_item(PROFILE_KEY, {"user_id": "not-a-number"})
    cache = ProfileCacheService(storage=local_storage, logger=logger)
    assert cache.get_profile() is None


def test_local_storage_round_trip_and_clear(local_storage):
    local_storage.set_item("a", {"x": [1, 2]})
    local_storage.set_item("b", "text")
    local_storage.set_item("a", {"x": [3]})
    assert local_storage.get_item("a") == {"x": [3]}
    assert local_storage.keys() == ["a", "b"]
    local_storage.clear()
    assert local_storage.keys() == []
