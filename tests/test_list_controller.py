"""Tests for the list / filter / paginate controller.

Covers:
- filter predicates (status, priority, extra, search) and their conjunction
- all-"all" filters return the input unchanged and in order
- pagination windows partition the filtered list
- filter, search and page-size changes reset to page 1
- clamped navigation
- stats helpers
"""

from datetime import datetime, timezone

import pytest

from issuelane.models.enums import Priority, TaskStatus, TicketStatus
from issuelane.models.service_models import ListFilters
from issuelane.models.ticket import Ticket
from issuelane.services.list_controller import (
    ListController,
    distinct_values,
    filter_records,
    paginate,
    status_counts,
)
from issuelane.services.task_service import seed_tasks


# ─── Helpers ───────────────────────────────────────────────

_NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _ticket(number, title, status, priority, description=""):
    return Ticket(
        id=f"#{number}",
        ticket_id=number,
        title=title,
        description=description,
        status=status,
        priority=priority,
        created_at=_NOW,
        updated_at=_NOW,
    )


@pytest.fixture
def tickets():
    return [
        _ticket(2042, "Login page not loading on mobile devices", TicketStatus.OPEN, Priority.HIGH,
                "Users on iOS Safari see a blank screen"),
        _ticket(2041, "API timeout error on checkout process", TicketStatus.IN_PROGRESS, Priority.URGENT,
                "Payment gateway returning 504 errors during peak hours"),
        _ticket(2040, "Update documentation for v2.0 release", TicketStatus.WAITING, Priority.LOW,
                "API docs need updating with new endpoints"),
        _ticket(2039, "Dark mode toggle broken in settings", TicketStatus.RESOLVED, Priority.MEDIUM),
        _ticket(2038, "Database connection pool exhausted", TicketStatus.CLOSED, Priority.URGENT),
        _ticket(2037, "Add export to CSV feature for reports", TicketStatus.OPEN, Priority.MEDIUM),
        _ticket(2036, "Fix navigation menu on tablet view", TicketStatus.OPEN, Priority.MEDIUM),
    ]


# ─── filter_records ────────────────────────────────────────

def test_unfiltered_returns_same_records_in_order(tickets):
    result = filter_records(tickets, ListFilters())
    assert result == tickets
    assert [t.id for t in result] == [t.id for t in tickets]


def test_status_filter(tickets):
    result = filter_records(tickets, ListFilters(status="Open"))
    assert [t.id for t in result] == ["#2042", "#2037", "#2036"]


def test_priority_filter(tickets):
    result = filter_records(tickets, ListFilters(priority="Urgent"))
    assert [t.id for t in result] == ["#2041", "#2038"]


def test_status_and_priority_are_conjunctive(tickets):
    result = filter_records(tickets, ListFilters(status="Open", priority="Medium"))
    assert [t.id for t in result] == ["#2037", "#2036"]


def test_search_is_case_insensitive_over_title(tickets):
    result = filter_records(tickets, ListFilters(search="DARK MODE"))
    assert [t.id for t in result] == ["#2039"]


def test_search_matches_description_and_id(tickets):
    assert [t.id for t in filter_records(tickets, ListFilters(search="gateway"))] == ["#2041"]
    assert [t.id for t in filter_records(tickets, ListFilters(search="#2040"))] == ["#2040"]


def test_search_combined_with_status(tickets):
    result = filter_records(tickets, ListFilters(search="api", status="Waiting"))
    assert [t.id for t in result] == ["#2040"]


def test_every_result_satisfies_every_active_filter(tickets):
    filters = ListFilters(search="o", status="Open", priority="Medium")
    for ticket in filter_records(tickets, filters):
        assert ticket.status == "Open"
        assert ticket.priority == "Medium"
        assert "o" in (ticket.id + ticket.title + ticket.description).lower()


def test_extra_filter_on_project():
    tasks = seed_tasks()
    result = filter_records(tasks, ListFilters(extra={"project": "IssueLane Docs"}))
    assert [t.id for t in result] == ["TASK-004"]


def test_no_matches_returns_empty(tickets):
    assert filter_records(tickets, ListFilters(search="no such words")) == []


# ─── paginate ──────────────────────────────────────────────

def test_first_page_window(tickets):
    page = paginate(tickets, 1, 5)
    assert [t.id for t in page.items] == ["#2042", "#2041", "#2040", "#2039", "#2038"]
    assert page.total == 7
    assert page.total_pages == 2
    assert (page.start_index, page.end_index) == (1, 5)
    assert not page.has_previous
    assert page.has_next


def test_last_page_holds_remainder(tickets):
    page = paginate(tickets, 2, 5)
    assert [t.id for t in page.items] == ["#2037", "#2036"]
    assert (page.start_index, page.end_index) == (6, 7)
    assert page.has_previous
    assert not page.has_next


@pytest.mark.parametrize("page_size", [1, 2, 3, 5, 7, 10])
def test_pages_partition_the_list(tickets, page_size):
    first = paginate(tickets, 1, page_size)
    collected = []
    for number in range(1, first.total_pages + 1):
        page = paginate(tickets, number, page_size)
        assert len(page.items) == min(page_size, len(tickets) - (number - 1) * page_size)
        collected.extend(page.items)
    assert collected == tickets


def test_empty_list_has_one_empty_page():
    page = paginate([], 1, 5)
    assert page.items == []
    assert page.total_pages == 1
    assert (page.start_index, page.end_index) == (0, 0)
    assert not page.has_next


def test_out_of_range_page_is_clamped(tickets):
    assert paginate(tickets, 99, 5).page == 2
    assert paginate(tickets, 0, 5).page == 1


def test_invalid_page_size_rejected(tickets):
    with pytest.raises(ValueError):
        paginate(tickets, 1, 0)


# ─── ListController ────────────────────────────────────────

@pytest.fixture
def controller(tickets):
    ctrl = ListController(page_size=2)
    ctrl.set_records(tickets)
    return ctrl


@pytest.mark.parametrize(
    "change",
    [
        lambda c: c.set_search("api"),
        lambda c: c.set_status("Open"),
        lambda c: c.set_priority("Medium"),
        lambda c: c.set_extra("project", "IssueLane Core"),
        lambda c: c.set_page_size(5),
        lambda c: c.reset_filters(),
    ],
)
def test_any_filter_change_resets_page(controller, change):
    controller.go_to(3)
    assert controller.page == 3
    change(controller)
    assert controller.page == 1


def test_navigation_is_clamped(controller):
    controller.previous()
    assert controller.page == 1
    controller.last()
    assert controller.page == 4
    controller.next()
    assert controller.page == 4
    controller.go_to(-3)
    assert controller.page == 1
    controller.go_to(50)
    assert controller.page == 4
    controller.first()
    assert controller.page == 1


def test_on_change_called_for_each_state_change(tickets):
    calls = []
    ctrl = ListController(page_size=5, on_change=lambda: calls.append(1))
    ctrl.set_records(tickets)
    ctrl.set_search("x")
    ctrl.next()  # only one page of matches: no change
    assert len(calls) == 2


def test_current_slice_reflects_filters(controller):
    controller.set_status("Open")
    page = controller.current_slice()
    assert page.total == 3
    assert [t.id for t in page.items] == ["#2042", "#2037"]


def test_set_records_keeps_valid_page(controller, tickets):
    controller.go_to(2)
    controller.set_records(tickets[:5])
    assert controller.page == 2
    controller.go_to(3)
    controller.set_records(tickets[:2])
    assert controller.page == 1


# ─── Stats helpers ─────────────────────────────────────────

def test_status_counts(tickets):
    counts = status_counts(tickets)
    assert counts["Open"] == 3
    assert counts["Closed"] == 1
    assert counts["Waiting"] == 1


def test_distinct_values_first_seen_order():
    assert distinct_values(seed_tasks(), "project") == [
        "IssueLane Core",
        "IssueLane Docs",
        "IssueLane Infrastructure",
    ]


def test_task_status_counts():
    counts = status_counts(seed_tasks())
    assert counts[TaskStatus.TODO] == 3
    assert counts[TaskStatus.COMPLETED] == 1
