"""
Task Service.

Tasks have no backend table: the board starts from a fixed seed list and
every change lives in memory for the session.
"""

from __future__ import annotations

import re
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

from issuelane.logger import StructuredLogger
from issuelane.models.enums import Priority, TaskStatus
from issuelane.models.service_models import ServiceResult, TaskDraft
from issuelane.models.task import Task
from issuelane.models.ticket import PersonRef
from issuelane.services.base_service import BaseService

PROJECTS: tuple[str, ...] = (
    "IssueLane Core",
    "IssueLane Docs",
    "IssueLane Infrastructure",
    "IssueLane Mobile",
)

ASSIGNEES: tuple[str, ...] = (
    "Sarah Chen",
    "John Doe",
    "Mike Ross",
    "Emma Wilson",
    "Alex Kim",
    "James Lee",
)

_TASK_ID_RE = re.compile(r"^TASK-(\d+)$")

# (id, title, description, status, priority, project, assignee,
#  created ago, updated ago, due in, progress, estimated h, logged h)
_SEED: tuple[tuple, ...] = (
    ("TASK-001", "Implement user authentication API",
     "Create JWT-based auth system with refresh tokens",
     TaskStatus.IN_PROGRESS, Priority.HIGH, "IssueLane Core", "Sarah Chen",
     timedelta(days=3), timedelta(hours=2), timedelta(days=2), 65, 16, 10),
    ("TASK-002", "Design dashboard analytics charts",
     "Create reusable chart components for data visualization",
     TaskStatus.TODO, Priority.MEDIUM, "IssueLane Core", "John Doe",
     timedelta(days=5), timedelta(days=1), timedelta(days=5), 0, 12, 0),
    ("TASK-003", "Fix responsive layout on mobile",
     "Resolve CSS issues on iPhone and Android devices",
     TaskStatus.COMPLETED, Priority.HIGH, "IssueLane Core", "Emma Wilson",
     timedelta(weeks=1), timedelta(hours=3), None, 100, 8, 6),
    ("TASK-004", "Write documentation for API endpoints",
     "Document all REST endpoints with examples",
     TaskStatus.TODO, Priority.LOW, "IssueLane Docs", "Alex Kim",
     timedelta(days=2), timedelta(hours=5), timedelta(weeks=1), 0, 6, 0),
    ("TASK-005", "Optimize database queries",
     "Improve query performance for dashboard stats",
     TaskStatus.IN_REVIEW, Priority.MEDIUM, "IssueLane Core", "Mike Ross",
     timedelta(days=4), timedelta(hours=1), timedelta(days=3), 90, 10, 9),
    ("TASK-006", "Setup CI/CD pipeline",
     "Configure GitHub Actions for automated testing and deployment",
     TaskStatus.IN_PROGRESS, Priority.HIGH, "IssueLane Infrastructure", "James Lee",
     timedelta(weeks=1), timedelta(hours=6), timedelta(days=1), 40, 20, 8),
    ("TASK-007", "Implement email notifications",
     "Add SMTP integration for ticket updates",
     TaskStatus.TODO, Priority.MEDIUM, "IssueLane Core", "Sarah Chen",
     timedelta(days=2), timedelta(days=1), timedelta(weeks=1), 0, 8, 0),
    ("TASK-008", "Security audit and fixes",
     "Review code for vulnerabilities and apply patches",
     TaskStatus.IN_REVIEW, Priority.URGENT, "IssueLane Core", "John Doe",
     timedelta(days=3), timedelta(minutes=30), timedelta(hours=8), 85, 24, 20),
)


def seed_tasks(now: Optional[datetime] = None) -> list[Task]:
    """Build the starter task list with timestamps relative to *now*."""
    now = now or datetime.now(timezone.utc)
    return [
        Task(
            id=task_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            project=project,
            assignee=PersonRef.from_name(assignee),
            created_at=now - created_ago,
            updated_at=now - updated_ago,
            due_date=now + due_in if due_in is not None else None,
            progress=progress,
            estimated_hours=estimated,
            logged_hours=logged,
        )
        for (task_id, title, description, status, priority, project, assignee,
             created_ago, updated_ago, due_in, progress, estimated, logged) in _SEED
    ]


def progress_for_status(status: TaskStatus, current: int) -> int:
    """Progress is pinned to 0 in "To Do" and 100 in "Completed"."""
    if status == TaskStatus.TODO:
        return 0
    if status == TaskStatus.COMPLETED:
        return 100
    return current


class TaskService(BaseService):
    """In-memory task board shared by the tasks screen and the dashboard."""

    def __init__(
        self, logger: StructuredLogger, tasks: Optional[list[Task]] = None
    ) -> None:
        super().__init__(logger)
        self._lock: threading.Lock = threading.Lock()
        self._tasks: list[Task] = list(tasks) if tasks is not None else seed_tasks()

    def list_tasks(self) -> list[Task]:
        """Current tasks in board order (a copy of the list, same objects)."""
        with self._lock:
            return list(self._tasks)

    def recent(self, limit: int = 5) -> list[Task]:
        """The first *limit* tasks, as shown on the dashboard."""
        with self._lock:
            return list(self._tasks[:limit])

    def get(self, task_id: str) -> Optional[Task]:
        with self._lock:
            return next((t for t in self._tasks if t.id == task_id), None)

    def change_status(self, task_id: str, new_status: TaskStatus) -> ServiceResult[Task]:
        """Set a task's status locally; there is no remote write."""
        with self._lock:
            task = next((t for t in self._tasks if t.id == task_id), None)
            if task is None:
                return ServiceResult(success=False, error=f"Task {task_id} not found", status_code=404)
            task.status = new_status
            task.progress = progress_for_status(new_status, task.progress)
            task.updated_at = datetime.now(timezone.utc)
        self._logger.info("Task %s moved to %s", task_id, new_status)
        return ServiceResult(success=True, data=task)

    def create_task(self, draft: TaskDraft) -> ServiceResult[Task]:
        """Append a new "To Do" task with the next ``TASK-NNN`` id."""
        now = datetime.now(timezone.utc)
        with self._lock:
            task = Task(
                id=self._next_id(),
                title=draft.title,
                description=draft.description,
                status=TaskStatus.TODO,
                priority=draft.priority,
                project=draft.project,
                assignee=PersonRef.from_name(draft.assignee),
                created_at=now,
                updated_at=now,
                due_date=draft.due_date,
                progress=0,
                estimated_hours=draft.estimated_hours,
                logged_hours=0,
            )
            self._tasks.append(task)
        self._logger.info("Task created: %s", task.id)
        return ServiceResult(success=True, data=task, status_code=201)

    def _next_id(self) -> str:
        numbers = [
            int(match.group(1))
            for match in (_TASK_ID_RE.match(t.id) for t in self._tasks)
            if match
        ]
        return f"TASK-{max(numbers, default=0) + 1:03d}"
