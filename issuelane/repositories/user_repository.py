"""
User Repository.

Reads ``users`` and ``user_assignments`` rows from Supabase.  The client
never writes either table.
"""

from __future__ import annotations

from typing import Optional

from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger
from issuelane.models.user import Assignment, UserProfile
from issuelane.repositories.base_repository import BaseRepository

_PROFILE_COLUMNS: str = (
    "user_id, auth_user_id, username, first_name, middle_name, last_name, "
    "email, birthday, sex, mobile_number, address, created_at"
)

# Nested projection: role and designation names come from their own tables.
_ASSIGNMENT_COLUMNS: str = (
    "role_id, designation_id, role:roles(name), designation:designations(name)"
)


class UserRepository(BaseRepository):
    """Data access layer for user profiles and assignments."""

    TABLE = "users"
    ASSIGNMENTS_TABLE = "user_assignments"

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        super().__init__(db, logger)

    def get_by_auth_id(self, auth_user_id: str) -> Optional[UserProfile]:
        """Fetch the profile linked to a Supabase auth account."""
        def _op() -> Optional[UserProfile]:
            response = (
                self.supabase.table(self.TABLE)
                .select(_PROFILE_COLUMNS)
                .eq("auth_user_id", auth_user_id)
                .maybe_single()
                .execute()
            )
            row = self._first_row(response)
            return UserProfile(**row) if row else None

        return self._execute(_op, operation_name="get_by_auth_id (users)")

    def get_by_username(self, username: str) -> Optional[UserProfile]:
        """Fetch a profile by its username (used to resolve sign-in identifiers)."""
        def _op() -> Optional[UserProfile]:
            response = (
                self.supabase.table(self.TABLE)
                .select(_PROFILE_COLUMNS)
                .eq("username", username.strip())
                .maybe_single()
                .execute()
            )
            row = self._first_row(response)
            return UserProfile(**row) if row else None

        return self._execute(_op, operation_name="get_by_username (users)")

    def get_assignment(self, user_id: int) -> Optional[Assignment]:
        """Fetch the user's assignment with nested role and designation.

        A user has at most one effective assignment; when several rows
        exist the first one returned wins.
        """
        def _op() -> Optional[Assignment]:
            response = (
                self.supabase.table(self.ASSIGNMENTS_TABLE)
                .select(_ASSIGNMENT_COLUMNS)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
            row = self._first_row(response)
            return Assignment(**row) if row else None

        return self._execute(_op, operation_name="get_assignment (user_assignments)")
