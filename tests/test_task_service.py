"""Tests for the in-memory task board and dashboard summaries.

Covers:
- seed list shape and relative timestamps
- status changes pin progress at 0 / 100
- create_task numbering
- ticket / task stat cards and recent lists
"""

from datetime import datetime, timedelta, timezone

import pytest

from issuelane.models.enums import Priority, TaskStatus, TicketStatus
from issuelane.models.service_models import TaskDraft
from issuelane.models.ticket import Ticket
from issuelane.services.dashboard_service import DashboardService, task_stats, ticket_stats
from issuelane.services.task_service import TaskService, progress_for_status, seed_tasks

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def tasks(logger):
    return TaskService(logger=logger, tasks=seed_tasks(now=NOW))


def _ticket(number, status, created):
    return Ticket(
        id=f"#{number}",
        ticket_id=number,
        title=f"Ticket {number}",
        status=status,
        priority="Medium",
        created_at=created,
        updated_at=created,
    )


# ─── Seed ──────────────────────────────────────────────────

def test_seed_has_eight_tasks_relative_to_now():
    seeded = seed_tasks(now=NOW)
    assert [t.id for t in seeded] == [f"TASK-00{i}" for i in range(1, 9)]
    assert seeded[0].created_at == NOW - timedelta(days=3)
    assert seeded[2].due_date is None
    assert seeded[2].progress == 100


# ─── Status ────────────────────────────────────────────────

@pytest.mark.parametrize(
    "status, expected",
    [
        (TaskStatus.TODO, 0),
        (TaskStatus.IN_PROGRESS, 65),
        (TaskStatus.IN_REVIEW, 65),
        (TaskStatus.COMPLETED, 100),
    ],
)
def test_progress_for_status(status, expected):
    assert progress_for_status(status, 65) == expected


def test_change_status_updates_in_place(tasks):
    result = tasks.change_status("TASK-001", TaskStatus.COMPLETED)

    assert result.success
    task = tasks.get("TASK-001")
    assert task.status == TaskStatus.COMPLETED
    assert task.progress == 100
    assert task.updated_at > NOW


def test_change_status_unknown_task(tasks):
    assert tasks.change_status("TASK-404", TaskStatus.TODO).status_code == 404


# ─── Create ────────────────────────────────────────────────

def test_create_task_appends_next_id(tasks):
    draft = TaskDraft(
        title=" Rotate API keys ",
        priority=Priority.URGENT,
        project="IssueLane Infrastructure",
        assignee="Alex Kim",
        estimated_hours=3,
    )

    result = tasks.create_task(draft)

    assert result.status_code == 201
    assert result.data.id == "TASK-009"
    assert result.data.title == "Rotate API keys"
    assert result.data.status == TaskStatus.TODO
    assert result.data.assignee.avatar == "AK"
    assert tasks.list_tasks()[-1] is result.data


def test_create_task_on_empty_board(logger):
    board = TaskService(logger=logger, tasks=[])
    draft = TaskDraft(title="First", project="IssueLane Core", assignee="John Doe")
    assert board.create_task(draft).data.id == "TASK-001"


def test_task_draft_rejects_blank_assignee():
    with pytest.raises(ValueError):
        TaskDraft(title="x", project="IssueLane Core", assignee=" ")


# ─── Dashboard ─────────────────────────────────────────────

def test_ticket_stats_fold_closed_into_resolved():
    tickets = [
        _ticket(1, TicketStatus.OPEN, NOW),
        _ticket(2, TicketStatus.OPEN, NOW),
        _ticket(3, TicketStatus.WAITING, NOW),
        _ticket(4, TicketStatus.RESOLVED, NOW),
        _ticket(5, TicketStatus.CLOSED, NOW),
    ]
    stats = ticket_stats(tickets)
    assert (stats.total, stats.open, stats.in_progress, stats.waiting, stats.resolved) == (5, 2, 0, 1, 2)


def test_task_stats_on_seed():
    stats = task_stats(seed_tasks(now=NOW))
    assert (stats.total, stats.todo, stats.in_progress, stats.in_review, stats.completed) == (8, 3, 2, 2, 1)


def test_recent_tickets_newest_first(tasks, logger):
    dashboard = DashboardService(task_service=tasks, logger=logger, recent_limit=2)
    tickets = [
        _ticket(1, TicketStatus.OPEN, NOW - timedelta(days=2)),
        _ticket(2, TicketStatus.OPEN, NOW),
        _ticket(3, TicketStatus.OPEN, NOW - timedelta(hours=1)),
    ]

    assert [t.id for t in dashboard.recent_tickets(tickets)] == ["#2", "#3"]
    assert [t.id for t in dashboard.recent_tasks()] == ["TASK-001", "TASK-002"]
