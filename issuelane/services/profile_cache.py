"""
Profile Cache Service.

The signed-in user's merged profile + assignment record, persisted as
JSON under the ``user_profile`` local-storage key so the identity
survives restarts without re-querying on every screen.

One instance is built in ``create_services`` and injected wherever the
current user is needed; nothing reads the local-storage key directly.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from pydantic import ValidationError

from issuelane.logger import StructuredLogger
from issuelane.models.service_models import ServiceResult
from issuelane.models.user import UserProfile
from issuelane.repositories.base_repository import RepositoryError
from issuelane.repositories.user_repository import UserRepository
from issuelane.services.base_service import BaseService
from issuelane.services.local_storage import LocalStorageService

PROFILE_KEY: str = "user_profile"

ProfileListener = Callable[[Optional[UserProfile]], None]


class ProfileNotCachedError(RuntimeError):
    """Raised by :meth:`ProfileCacheService.require_profile` when signed out."""


class ProfileCacheService(BaseService):
    """Session context holding the current user's profile."""

    def __init__(self, storage: LocalStorageService, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._storage: LocalStorageService = storage
        self._lock: threading.RLock = threading.RLock()
        self._profile: Optional[UserProfile] = None
        self._loaded: bool = False
        self._listeners: list[ProfileListener] = []

    # -- Accessors -----------------------------------------------------------

    def get_profile(self) -> Optional[UserProfile]:
        """Return the cached profile, reading local storage on first use."""
        with self._lock:
            if not self._loaded:
                self._profile = self._read_stored()
                self._loaded = True
            return self._profile

    def current_user_id(self) -> Optional[int]:
        profile = self.get_profile()
        return profile.user_id if profile is not None else None

    def require_profile(self) -> UserProfile:
        """Return the cached profile.

        Raises:
            ProfileNotCachedError: If no user is signed in.
        """
        profile = self.get_profile()
        if profile is None:
            raise ProfileNotCachedError("No user profile cached. Sign-in required.")
        return profile

    # -- Mutations -----------------------------------------------------------

    def store(self, profile: UserProfile) -> None:
        """Persist *profile* and make it the current user."""
        with self._lock:
            self._storage.set_item(PROFILE_KEY, profile.model_dump(mode="json"))
            self._profile = profile
            self._loaded = True
        self._logger.info("Profile cached for user %s.", profile.user_id)
        self._notify(profile)

    def invalidate(self) -> None:
        """Forget the cached profile in memory and on disk."""
        with self._lock:
            self._storage.remove_item(PROFILE_KEY)
            self._profile = None
            self._loaded = True
        self._notify(None)

    def forget_in_memory(self) -> None:
        """Drop the in-memory copy after local storage was wiped wholesale."""
        with self._lock:
            self._profile = None
            self._loaded = True
        self._notify(None)

    def refresh(self, user_repo: UserRepository) -> ServiceResult[UserProfile]:
        """Re-read profile and assignment from the backend and rewrite the cache.

        The cache is left untouched when the backend call fails; a
        profile that no longer exists remotely is invalidated.
        """
        current = self.get_profile()
        if current is None:
            return ServiceResult(success=False, error="No user is signed in.", status_code=401)

        try:
            fresh = user_repo.get_by_auth_id(current.auth_user_id)
            if fresh is None:
                self.invalidate()
                return ServiceResult(success=False, error="User ID not found", status_code=404)
            assignment = user_repo.get_assignment(fresh.user_id)
        except RepositoryError as exc:
            return ServiceResult(success=False, error=exc.message, status_code=503)

        merged = fresh.model_copy(update={"assignment": assignment})
        self.store(merged)
        return ServiceResult(success=True, data=merged)

    # -- Change listeners ----------------------------------------------------

    def subscribe(self, listener: ProfileListener) -> Callable[[], None]:
        """Call *listener* whenever the profile changes; returns an unsubscribe hook."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, profile: Optional[UserProfile]) -> None:
        for listener in list(self._listeners):
            try:
                listener(profile)
            except Exception as exc:
                self._logger.warning("Profile listener failed: %s", exc)

    def _read_stored(self) -> Optional[UserProfile]:
        raw = self._storage.get_item(PROFILE_KEY)
        if raw is None:
            return None
        try:
            return UserProfile.model_validate(raw)
        except ValidationError as exc:
            self._logger.warning("Discarding unreadable cached profile: %s", exc)
            return None
