"""
Data Models Package.

Re-exports all Pydantic models:
    from issuelane.models import Ticket, Task, UserProfile, Notification
    from issuelane.models import TicketStatus, TaskStatus, Priority
"""

from __future__ import annotations

from issuelane.models.enums import (
    IssueType,
    NotificationType,
    Priority,
    TaskStatus,
    TicketStatus,
)
from issuelane.models.notification import Notification
from issuelane.models.task import Task
from issuelane.models.ticket import Attachment, PersonRef, Ticket
from issuelane.models.user import Assignment, Designation, Role, UserProfile

__all__ = [
    "Assignment",
    "Attachment",
    "Designation",
    "IssueType",
    "Notification",
    "NotificationType",
    "PersonRef",
    "Priority",
    "Role",
    "Task",
    "TaskStatus",
    "Ticket",
    "TicketStatus",
    "UserProfile",
]
