"""Tests for the display-free parts of the UI package.

Covers:
- screen registration order and default screen
- numbered page window of the pagination bar
- deadline parsing of the new-ticket form
- which state a list screen shows (loading, error, empty, no-match, rows)
- ticket status change on the tickets screen: shown before the write,
  restored after a failed write
- a failed ticket reload drops the previous list and stats
"""

from datetime import date
from types import MethodType, SimpleNamespace

import pytest

pytest.importorskip("customtkinter")

from issuelane.models.enums import TicketStatus  # noqa: E402
from issuelane.models.service_models import ServiceResult  # noqa: E402
from issuelane.services.list_controller import paginate  # noqa: E402
from issuelane.ui.components.new_ticket_dialog import parse_deadline  # noqa: E402
from issuelane.ui.components.pagination_bar import page_window  # noqa: E402
from issuelane.ui.module_registry import ModuleRegistry  # noqa: E402
from issuelane.ui.views import tickets_view  # noqa: E402
from issuelane.ui.views.list_screen import EMPTY, ERROR, LOADING, NO_MATCH, ROWS, list_state  # noqa: E402
from issuelane.ui.views.tickets_view import TicketsView  # noqa: E402


# ─── Module registry ───────────────────────────────────────


def _factory(parent):
    return parent


def test_first_registered_module_is_default(logger):
    registry = ModuleRegistry(logger=logger)
    registry.register("tickets", "Tickets", "T", _factory)
    registry.register("tasks", "Tasks", "K", _factory)

    assert registry.default_module_id == "tickets"
    assert [m.module_id for m in registry.modules()] == ["tickets", "tasks"]


def test_explicit_default_wins(logger):
    registry = ModuleRegistry(logger=logger)
    registry.register("tickets", "Tickets", "T", _factory)
    registry.register("dashboard", "Dashboard", "D", _factory, default=True)
    registry.register("tasks", "Tasks", "K", _factory)

    assert registry.default_module_id == "dashboard"


def test_unknown_module_raises(logger):
    registry = ModuleRegistry(logger=logger)
    with pytest.raises(KeyError):
        registry.get_module("settings")


# ─── Pagination window ─────────────────────────────────────


@pytest.mark.parametrize(
    "page, total_pages, expected",
    [
        (1, 0, []),
        (1, 3, [1, 2, 3]),
        (1, 10, [1, 2, 3, 4, 5]),
        (5, 10, [3, 4, 5, 6, 7]),
        (10, 10, [6, 7, 8, 9, 10]),
    ],
)
def test_page_window(page, total_pages, expected):
    assert list(page_window(page, total_pages)) == expected


# ─── Deadline input ────────────────────────────────────────


def test_parse_deadline():
    assert parse_deadline("  ") is None
    assert parse_deadline("2024-07-15") == date(2024, 7, 15)
    with pytest.raises(ValueError):
        parse_deadline("next friday")


# ─── List state ────────────────────────────────────────────


def test_zero_rows_shows_empty_state():
    assert list_state(False, None, paginate([], 1, 5), has_records=False) == EMPTY


def test_loading_state():
    assert list_state(True, None, paginate([], 1, 5), has_records=False) == LOADING


def test_error_state():
    assert list_state(False, "Could not load tickets: offline", paginate([], 1, 5), has_records=False) == ERROR


def test_records_without_matches_show_no_match():
    assert list_state(False, None, paginate([], 1, 5), has_records=True) == NO_MATCH


def test_rows_state():
    assert list_state(False, None, paginate(["a", "b"], 1, 5), has_records=True) == ROWS


# ─── Tickets screen ────────────────────────────────────────


def _ticket_row(ticket_id):
    return {
        "ticket_id": ticket_id,
        "title": f"Ticket {ticket_id}",
        "description": "",
        "issue_type": "Network",
        "priority": "Medium",
        "status": "Open",
        "created_at": "2024-05-01T08:00:00+00:00",
        "updated_at": "2024-05-01T08:00:00+00:00",
    }


@pytest.fixture
def screen(ticket_service, fake_supabase):
    """Stand-in for a ``TicketsView`` with its ticket list loaded."""
    fake_supabase.tables["tickets"] = [_ticket_row(2042), _ticket_row(2041)]
    view = SimpleNamespace(
        _service=ticket_service,
        _tickets=ticket_service.fetch_tickets().data,
        _logger=None,
        renders=[],
    )
    view._refresh_rows = lambda: view.renders.append([t.status for t in view._tickets])
    view._handle_status_written = MethodType(TicketsView._handle_status_written, view)
    return view


@pytest.fixture
def background(monkeypatch):
    calls = []
    monkeypatch.setattr(
        tickets_view,
        "run_in_background",
        lambda widget, work, on_done, logger, name="": calls.append((work, on_done)),
    )
    return calls


def test_status_change_renders_before_the_write(screen, background, fake_supabase):
    TicketsView._change_status(screen, "#2042", TicketStatus.CLOSED)

    assert screen.renders == [[TicketStatus.CLOSED, TicketStatus.OPEN]]
    assert fake_supabase.tables["tickets"][0]["status"] == "Open"
    assert len(background) == 1

    work, on_done = background[0]
    on_done(work())

    assert fake_supabase.tables["tickets"][0]["status"] == "Closed"
    assert screen._tickets[0].status == TicketStatus.CLOSED


def test_failed_status_write_restores_and_rerenders(screen, background, fake_supabase, notifier):
    fake_supabase.failures[("tickets", "update")] = ConnectionError("offline")

    TicketsView._change_status(screen, "#2042", TicketStatus.CLOSED)
    work, on_done = background[0]
    on_done(work())

    assert screen._tickets[0].status == TicketStatus.OPEN
    assert screen.renders[-1] == [TicketStatus.OPEN, TicketStatus.OPEN]
    assert len(notifier.of("error")) == 1


def test_unchanged_status_starts_no_write(screen, background):
    TicketsView._change_status(screen, "#2042", TicketStatus.OPEN)

    assert background == []
    assert screen.renders == []


def test_failed_reload_drops_previous_tickets(screen):
    seen = {}
    screen._update_stats = lambda: seen.setdefault("stats", list(screen._tickets))
    screen.show_error = lambda message: seen.setdefault("error", message)

    TicketsView._handle_loaded(screen, ServiceResult(success=False, error="offline"))

    assert screen._tickets == []
    assert seen["stats"] == []
    assert seen["error"] == "Could not load tickets: offline"
