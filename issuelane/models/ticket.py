"""
Ticket Model.

The shape every ticket screen renders, independent of how the
``tickets`` row and its joins arrived from the backend.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from issuelane.models.enums import IssueType, Priority, TicketStatus
from issuelane.utils.text import file_name_from_url, get_initials


class PersonRef(BaseModel):
    """Display name plus avatar initials for an assignee or reporter."""

    name: str
    avatar: str = ""

    @classmethod
    def from_name(cls, name: str) -> "PersonRef":
        return cls(name=name, avatar=get_initials(name))


class Attachment(BaseModel):
    url: str
    type: str = ""

    @property
    def is_image(self) -> bool:
        return self.type.startswith("image/")

    @property
    def file_name(self) -> str:
        return file_name_from_url(self.url)


class Ticket(BaseModel):
    """A support ticket.

    ``id`` is the display form (``#2035``) used by search and the
    detail dialog; ``ticket_id`` keeps the numeric row key for writes.
    """

    id: str
    ticket_id: Optional[int] = None
    title: str
    description: str = ""
    status: TicketStatus
    priority: Priority
    issue_type: Optional[IssueType] = None
    created_at: datetime
    updated_at: datetime
    due_date: Optional[datetime] = None
    attachments: list[Attachment] = Field(default_factory=list)
    assignee: Optional[PersonRef] = None
    reporter: Optional[PersonRef] = None

    model_config = {"from_attributes": True, "validate_assignment": True}
