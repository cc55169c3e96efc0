"""
Service Layer Data Transfer Objects.

Pydantic models for validated input/output at service boundaries.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from issuelane.models.enums import IssueType, Priority

T = TypeVar("T")

ALL: str = "all"

__all__ = [
    "ALL",
    "AttachmentUpload",
    "ListFilters",
    "PageSlice",
    "ServiceResult",
    "TaskDraft",
    "TicketDraft",
]


# ---------------------------------------------------------------------------
# List screens
# ---------------------------------------------------------------------------

class ListFilters(BaseModel):
    """Active filters of a list screen.

    ``"all"`` disables a categorical filter; an empty ``search`` disables
    the text filter.  ``extra`` holds further categorical filters keyed
    by record attribute (``{"project": "IssueLane Docs"}``).
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    status: str = ALL
    priority: str = ALL
    extra: dict[str, str] = Field(default_factory=dict)

    @property
    def is_unfiltered(self) -> bool:
        return (
            not self.search.strip()
            and self.status == ALL
            and self.priority == ALL
            and all(value == ALL for value in self.extra.values())
        )


class PageSlice(BaseModel, Generic[T]):
    """One page of a filtered list.

    ``start_index``/``end_index`` are 1-based and inclusive for the
    "Showing 6 to 10 of 23" label; both are 0 when ``total`` is 0.
    """

    items: list[T]
    page: int
    page_size: int
    total: int
    total_pages: int
    start_index: int
    end_index: int
    has_previous: bool
    has_next: bool


# ---------------------------------------------------------------------------
# Create forms
# ---------------------------------------------------------------------------

class AttachmentUpload(BaseModel):
    """A file picked in the new-ticket dialog, read into memory."""

    file_name: str = Field(min_length=1)
    content: bytes
    content_type: str = "application/octet-stream"


class TicketDraft(BaseModel):
    """Validated input of the new-ticket dialog."""

    title: str = Field(min_length=1)
    description: str = ""
    issue_type: IssueType = IssueType.OTHER
    priority: Priority = Priority.MEDIUM
    deadline: Optional[date] = None
    attachment: Optional[AttachmentUpload] = None

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class TaskDraft(BaseModel):
    """Validated input of the new-task dialog."""

    title: str = Field(min_length=1)
    description: str = ""
    priority: Priority = Priority.MEDIUM
    project: str = Field(min_length=1)
    assignee: str = Field(min_length=1)
    due_date: Optional[datetime] = None
    estimated_hours: float = Field(default=0, ge=0)

    @field_validator("title", "project", "assignee")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


# ---------------------------------------------------------------------------
# Generic service models
# ---------------------------------------------------------------------------

class ServiceResult(BaseModel, Generic[T]):
    """
    Standard service return envelope.

    All service methods return this, providing a consistent contract
    for the view layer.  Generic over ``T`` so callers can annotate
    return types precisely (e.g. ``ServiceResult[list[Ticket]]``).
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: int = 200
