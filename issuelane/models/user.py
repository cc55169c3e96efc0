"""
User Profile Model.

Mirrors a ``users`` row merged with its ``user_assignments`` row
(role and designation).  This merged record is what the profile cache
persists after a successful sign-in.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from issuelane.utils.text import get_initials


class Role(BaseModel):
    name: str


class Designation(BaseModel):
    name: str


class Assignment(BaseModel):
    """A ``user_assignments`` row with its nested role and designation."""

    role_id: Optional[int] = None
    designation_id: Optional[int] = None
    role: Optional[Role] = None
    designation: Optional[Designation] = None

    model_config = {"from_attributes": True}


class UserProfile(BaseModel):
    """Represents a signed-in user's profile.

    ``user_id`` is the integer key of the ``users`` table and is what
    tickets reference; ``auth_user_id`` is the Supabase auth UUID.
    """

    user_id: int
    auth_user_id: str
    username: str
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    email: str
    birthday: Optional[date] = None
    sex: Optional[str] = None
    mobile_number: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    assignment: Optional[Assignment] = None

    model_config = {"from_attributes": True}

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        return get_initials(self.full_name)

    @property
    def role_name(self) -> str:
        if self.assignment is None or self.assignment.role is None:
            return ""
        return self.assignment.role.name

    @property
    def designation_name(self) -> str:
        if self.assignment is None or self.assignment.designation is None:
            return ""
        return self.assignment.designation.name
