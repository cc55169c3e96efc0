"""
Dashboard Service.

Aggregates ticket and task data for the home screen.  Holds no state of
its own; the dashboard view supplies the tickets it fetched.
"""

from __future__ import annotations

from pydantic import BaseModel

from issuelane.logger import StructuredLogger
from issuelane.models.enums import TaskStatus, TicketStatus
from issuelane.models.task import Task
from issuelane.models.ticket import Ticket
from issuelane.services.base_service import BaseService
from issuelane.services.list_controller import status_counts
from issuelane.services.task_service import TaskService


class TicketStats(BaseModel):
    """Figures behind the stat cards of the dashboard and tickets screen."""

    total: int = 0
    open: int = 0
    in_progress: int = 0
    waiting: int = 0
    resolved: int = 0  # Resolved + Closed


class TaskStats(BaseModel):
    total: int = 0
    todo: int = 0
    in_progress: int = 0
    in_review: int = 0
    completed: int = 0


def ticket_stats(tickets: list[Ticket]) -> TicketStats:
    counts = status_counts(tickets)
    return TicketStats(
        total=len(tickets),
        open=counts[TicketStatus.OPEN],
        in_progress=counts[TicketStatus.IN_PROGRESS],
        waiting=counts[TicketStatus.WAITING],
        resolved=counts[TicketStatus.RESOLVED] + counts[TicketStatus.CLOSED],
    )


def task_stats(tasks: list[Task]) -> TaskStats:
    counts = status_counts(tasks)
    return TaskStats(
        total=len(tasks),
        todo=counts[TaskStatus.TODO],
        in_progress=counts[TaskStatus.IN_PROGRESS],
        in_review=counts[TaskStatus.IN_REVIEW],
        completed=counts[TaskStatus.COMPLETED],
    )


class DashboardService(BaseService):
    """Home-screen summaries.

    Parameters
    ----------
    task_service:
        Source of the task board.
    logger:
        Structured JSON logger.
    recent_limit:
        How many tasks and tickets the dashboard lists.
    """

    def __init__(
        self,
        task_service: TaskService,
        logger: StructuredLogger,
        recent_limit: int = 5,
    ) -> None:
        super().__init__(logger)
        self._tasks = task_service
        self._recent_limit = recent_limit

    def ticket_stats(self, tickets: list[Ticket]) -> TicketStats:
        return ticket_stats(tickets)

    def recent_tickets(self, tickets: list[Ticket]) -> list[Ticket]:
        """Most recently created tickets first."""
        ordered = sorted(tickets, key=lambda t: t.created_at, reverse=True)
        return ordered[: self._recent_limit]

    def recent_tasks(self) -> list[Task]:
        return self._tasks.recent(self._recent_limit)
