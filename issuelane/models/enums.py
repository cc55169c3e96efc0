"""
Shared Enumerations for IssueLane Models.

All string enumerations for type-safe field constraints.
StrEnum values compare equal to their string equivalents,
so code like ``if ticket.status == "Open"`` keeps working.
"""

from __future__ import annotations
from enum import StrEnum


class TicketStatus(StrEnum):
    """Lifecycle states of a support ticket."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    WAITING = "Waiting"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class TaskStatus(StrEnum):
    """Board columns of a work item."""

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    IN_REVIEW = "In Review"
    COMPLETED = "Completed"


class Priority(StrEnum):
    """Shared by tickets and tasks."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class IssueType(StrEnum):
    """Category chosen when raising a ticket."""

    NETWORK = "Network"
    SOFTWARE = "Software"
    HARDWARE = "Hardware"
    ACCESS = "Access"
    EMAIL = "Email"
    OTHER = "Other"


class NotificationType(StrEnum):
    TICKET = "ticket"
    TASK = "task"
    SYSTEM = "system"
    MENTION = "mention"
