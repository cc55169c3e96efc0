"""
Notification Service.

Client-local notification inbox backed by a seed list.  Read state and
deletions last for the session only.
"""

from __future__ import annotations

import threading
from typing import Literal, Optional

from issuelane.logger import StructuredLogger
from issuelane.models.enums import NotificationType
from issuelane.models.notification import Notification
from issuelane.services.base_service import BaseService

NotificationFilter = Literal["all", "unread"]

_SEED: tuple[tuple[str, str, str, bool, NotificationType], ...] = (
    ("New ticket assigned", "TASK-006 has been assigned to you by Sarah Chen",
     "2 min ago", True, NotificationType.TICKET),
    ("Task completed", "Mike Ross resolved #2041 - API timeout fix",
     "15 min ago", True, NotificationType.TASK),
    ("System update scheduled", "Scheduled maintenance tonight at 2 AM EST",
     "30 min ago", False, NotificationType.SYSTEM),
    ("You were mentioned", "Sarah Chen mentioned you in TASK-004 comments",
     "45 min ago", True, NotificationType.MENTION),
    ("Deadline approaching", "TASK-002 is due tomorrow - Design dashboard charts",
     "1 hour ago", False, NotificationType.TASK),
    ("New comment on your ticket", "John Doe commented on #2038 - Database connection issue",
     "2 hours ago", True, NotificationType.TICKET),
    ("Build failed", "Production deployment failed - Check logs",
     "3 hours ago", True, NotificationType.SYSTEM),
    ("Task moved to review", "Alex Kim moved TASK-007 to In Review",
     "4 hours ago", False, NotificationType.TASK),
    ("New team member", "Emma Wilson joined the IssueLane Core project",
     "5 hours ago", False, NotificationType.SYSTEM),
    ("Priority changed", "TASK-005 priority changed to Urgent by Mike Ross",
     "6 hours ago", True, NotificationType.TASK),
    ("Ticket reopened", "#2032 reopened by customer - Login issue persists",
     "8 hours ago", True, NotificationType.TICKET),
    ("Sprint started", "Sprint 24 started - 12 tasks assigned to you",
     "10 hours ago", False, NotificationType.SYSTEM),
    ("You were assigned as reviewer", "James Lee requested your review on PR #442",
     "12 hours ago", True, NotificationType.MENTION),
    ("Task blocked", "TASK-009 blocked - Waiting for API documentation",
     "1 day ago", False, NotificationType.TASK),
    ("Security alert", "New vulnerability detected in dependency lodash",
     "1 day ago", True, NotificationType.SYSTEM),
    ("Milestone completed", "v2.0 Beta milestone completed - 45/45 tasks done",
     "2 days ago", False, NotificationType.SYSTEM),
    ("New ticket created", "Customer created #2056 - Payment not processing",
     "2 days ago", False, NotificationType.TICKET),
    ("Weekly summary", "You completed 8 tasks this week - Great job!",
     "3 days ago", False, NotificationType.SYSTEM),
    ("Meeting reminder", "Team standup in 15 minutes - Daily sync",
     "3 days ago", False, NotificationType.MENTION),
    ("Task overdue", "TASK-001 is now overdue - Please update status",
     "4 days ago", True, NotificationType.TASK),
)


def seed_notifications() -> list[Notification]:
    return [
        Notification(id=index, title=title, message=message, time=time, unread=unread, type=kind)
        for index, (title, message, time, unread, kind) in enumerate(_SEED, start=1)
    ]


class NotificationService(BaseService):
    """Inbox operations for the notifications dialog and the sidebar badge."""

    def __init__(
        self,
        logger: StructuredLogger,
        notifications: Optional[list[Notification]] = None,
    ) -> None:
        super().__init__(logger)
        self._lock: threading.Lock = threading.Lock()
        self._items: list[Notification] = (
            list(notifications) if notifications is not None else seed_notifications()
        )

    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._items if n.unread)

    def filtered(self, mode: NotificationFilter = "all") -> list[Notification]:
        """Every notification, or only unread ones, newest first."""
        with self._lock:
            if mode == "unread":
                return [n for n in self._items if n.unread]
            return list(self._items)

    def mark_as_read(self, notification_id: int) -> bool:
        """Returns ``False`` when no notification has that id."""
        with self._lock:
            for item in self._items:
                if item.id == notification_id:
                    item.unread = False
                    return True
        return False

    def mark_all_as_read(self) -> int:
        """Mark everything read; returns how many were unread."""
        with self._lock:
            changed = 0
            for item in self._items:
                if item.unread:
                    item.unread = False
                    changed += 1
        self._logger.debug("Marked %d notifications read", changed)
        return changed

    def delete(self, notification_id: int) -> bool:
        with self._lock:
            before = len(self._items)
            self._items = [n for n in self._items if n.id != notification_id]
            return len(self._items) != before
