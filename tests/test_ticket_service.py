"""Tests for ticket fetching, creation and status changes.

Covers:
- row reshaping (joins present, missing, single file, file list)
- fetch failure vs. empty result
- create without attachment: file_id stays NULL, success, refresh callback
- create with attachment: ticket first, then files row, then file_id
- attachment failures: one warning, ticket kept, cleanup
- create without a cached profile makes no backend calls
- optimistic status change: applied locally, written, rolled back on failure
"""

import pytest

from issuelane.models.enums import IssueType, Priority, TicketStatus
from issuelane.models.service_models import AttachmentUpload, TicketDraft
from issuelane.services.ticket_service import ticket_from_row


# ─── Helpers ───────────────────────────────────────────────

def _row(ticket_id=2042, **overrides):
    row = {
        "ticket_id": ticket_id,
        "title": "Login page not loading on mobile devices",
        "description": "Users on iOS Safari see a blank screen",
        "issue_type": "Software",
        "priority": "High",
        "status": "Open",
        "deadline": None,
        "file_id": None,
        "created_at": "2024-05-01T08:00:00+00:00",
        "updated_at": "2024-05-01T09:30:00+00:00",
        "files": None,
        "creator": {"first_name": "Mike", "last_name": "Ross"},
        "assignee": {"first_name": "Sarah", "last_name": "Chen"},
    }
    row.update(overrides)
    return row


@pytest.fixture
def signed_in_cache(profile_cache, profile):
    profile_cache.store(profile)
    return profile_cache


# ─── Reshaping ─────────────────────────────────────────────

def test_row_maps_to_ticket():
    ticket = ticket_from_row(_row())
    assert ticket.id == "#2042"
    assert ticket.ticket_id == 2042
    assert ticket.status == TicketStatus.OPEN
    assert ticket.reporter.name == "Mike Ross"
    assert ticket.assignee.avatar == "SC"
    assert ticket.attachments == []


def test_missing_joins_become_none():
    ticket = ticket_from_row(_row(creator=None, assignee=None))
    assert ticket.reporter is None
    assert ticket.assignee is None


def test_single_file_becomes_one_attachment():
    ticket = ticket_from_row(_row(files={"url": "https://cdn.example.test/a/shot.png", "type": "image/png"}))
    assert len(ticket.attachments) == 1
    assert ticket.attachments[0].is_image
    assert ticket.attachments[0].file_name == "shot.png"


def test_file_list_becomes_many_attachments():
    files = [
        {"url": "https://cdn.example.test/a/log.txt", "type": "text/plain"},
        {"url": "https://cdn.example.test/a/trace.pdf", "type": "application/pdf"},
    ]
    ticket = ticket_from_row(_row(files=files))
    assert [a.file_name for a in ticket.attachments] == ["log.txt", "trace.pdf"]
    assert not any(a.is_image for a in ticket.attachments)


# ─── Fetch ─────────────────────────────────────────────────

def test_fetch_returns_tickets_in_backend_order(ticket_service, fake_supabase):
    fake_supabase.tables["tickets"] = [_row(2042), _row(2041, status="In Progress")]

    result = ticket_service.fetch_tickets()

    assert result.success
    assert [t.id for t in result.data] == ["#2042", "#2041"]


def test_fetch_zero_rows_is_success_with_empty_list(ticket_service, notifier):
    result = ticket_service.fetch_tickets()
    assert result.success
    assert result.data == []
    assert notifier.messages == []


def test_fetch_error_aborts_with_one_notification(ticket_service, fake_supabase, notifier):
    fake_supabase.tables["tickets"] = [_row()]
    fake_supabase.failures[("tickets", "select")] = ConnectionError("connection refused")

    result = ticket_service.fetch_tickets()

    assert not result.success
    assert result.data is None
    assert len(notifier.of("error")) == 1


def test_fetch_invalid_status_is_a_read_error(ticket_service, fake_supabase):
    fake_supabase.tables["tickets"] = [_row(status="Escalated")]
    result = ticket_service.fetch_tickets()
    assert not result.success


# ─── Create ────────────────────────────────────────────────

def test_create_without_attachment(ticket_service, signed_in_cache, fake_supabase, notifier):
    refreshed = []

    result = ticket_service.create_ticket(
        TicketDraft(title="Login broken", priority=Priority.HIGH, issue_type=IssueType.ACCESS),
        on_created=lambda: refreshed.append(True),
    )

    assert result.success
    row = fake_supabase.tables["tickets"][0]
    assert row["ticket_id"] == result.data
    assert row["title"] == "Login broken"
    assert row["file_id"] is None
    assert row["status"] == "Open"
    assert row["created_by"] == 7
    assert row["assigned_to"] == 1
    assert notifier.of("success") == ["Ticket created successfully!"]
    assert notifier.of("warning") == []
    assert refreshed == [True]
    assert fake_supabase.calls_to("files") == []


def test_create_with_attachment_orders_writes(ticket_service, signed_in_cache, fake_supabase):
    draft = TicketDraft(
        title="Printer jam",
        attachment=AttachmentUpload(file_name="jam.png", content=b"\x89PNG", content_type="image/png"),
    )

    result = ticket_service.create_ticket(draft)

    assert result.success
    writes = [(c[0], c[1]) for c in fake_supabase.calls if c[1] != "select"]
    assert writes == [("tickets", "insert"), ("files", "insert"), ("tickets", "update")]
    file_row = fake_supabase.tables["files"][0]
    assert file_row["type"] == "image/png"
    assert file_row["url"].endswith("-jam.png")
    assert fake_supabase.tables["tickets"][0]["file_id"] == file_row["file_id"]
    assert len(fake_supabase.storage.objects) == 1


def test_upload_failure_keeps_ticket_with_one_warning(
    ticket_service, signed_in_cache, fake_supabase, notifier
):
    fake_supabase.storage.upload_error = Exception("bucket not found")
    refreshed = []
    draft = TicketDraft(
        title="VPN drops",
        attachment=AttachmentUpload(file_name="trace.log", content=b"..."),
    )

    result = ticket_service.create_ticket(draft, on_created=lambda: refreshed.append(True))

    assert result.success
    assert fake_supabase.tables["tickets"][0]["file_id"] is None
    assert fake_supabase.tables.get("files", []) == []
    assert len(notifier.of("warning")) == 1
    assert notifier.of("error") == []
    assert refreshed == [True]


def test_file_row_failure_removes_uploaded_object(ticket_service, signed_in_cache, fake_supabase, notifier):
    fake_supabase.failures[("files", "insert")] = Exception("permission denied")
    draft = TicketDraft(
        title="VPN drops",
        attachment=AttachmentUpload(file_name="trace.log", content=b"..."),
    )

    result = ticket_service.create_ticket(draft)

    assert result.success
    assert fake_supabase.storage.objects == {}
    assert len(fake_supabase.storage.removed) == 1
    assert len(notifier.of("warning")) == 1


def test_link_failure_deletes_file_row(ticket_service, signed_in_cache, fake_supabase):
    fake_supabase.failures[("tickets", "update")] = Exception("update rejected")
    draft = TicketDraft(
        title="VPN drops",
        attachment=AttachmentUpload(file_name="trace.log", content=b"..."),
    )

    ticket_service.create_ticket(draft)

    assert fake_supabase.tables["files"] == []
    assert fake_supabase.tables["tickets"][0]["file_id"] is None


def test_oversized_attachment_is_skipped(ticket_service, signed_in_cache, fake_supabase, notifier):
    draft = TicketDraft(
        title="Big file",
        attachment=AttachmentUpload(file_name="dump.bin", content=b"x" * 2048),
    )

    result = ticket_service.create_ticket(draft)

    assert result.success
    assert fake_supabase.storage.objects == {}
    assert len(notifier.of("warning")) == 1


def test_create_without_profile_makes_no_calls(ticket_service, fake_supabase, notifier):
    refreshed = []

    result = ticket_service.create_ticket(
        TicketDraft(title="Login broken"), on_created=lambda: refreshed.append(True)
    )

    assert not result.success
    assert result.status_code == 401
    assert fake_supabase.calls == []
    assert refreshed == []
    assert len(notifier.of("error")) == 1


def test_insert_failure_is_fatal(ticket_service, signed_in_cache, fake_supabase, notifier):
    fake_supabase.failures[("tickets", "insert")] = Exception("violates check constraint")
    refreshed = []

    result = ticket_service.create_ticket(
        TicketDraft(title="Login broken"), on_created=lambda: refreshed.append(True)
    )

    assert not result.success
    assert notifier.of("success") == []
    assert len(notifier.of("error")) == 1
    assert refreshed == []


def test_blank_title_is_rejected_by_draft():
    with pytest.raises(ValueError):
        TicketDraft(title="   ")


# ─── Status change ─────────────────────────────────────────

@pytest.fixture
def loaded(ticket_service, fake_supabase):
    fake_supabase.tables["tickets"] = [_row(2042), _row(2041)]
    return ticket_service.fetch_tickets().data


def test_status_change_is_written(ticket_service, fake_supabase, loaded):
    result = ticket_service.change_status(loaded, "#2041", TicketStatus.RESOLVED)

    assert result.success
    assert loaded[1].status == TicketStatus.RESOLVED
    assert fake_supabase.tables["tickets"][1]["status"] == "Resolved"


def test_status_change_rolls_back_on_write_failure(ticket_service, fake_supabase, loaded, notifier):
    fake_supabase.failures[("tickets", "update")] = ConnectionError("offline")
    before = loaded[0].updated_at

    result = ticket_service.change_status(loaded, "#2042", TicketStatus.CLOSED)

    assert not result.success
    assert loaded[0].status == TicketStatus.OPEN
    assert loaded[0].updated_at == before
    assert len(notifier.of("error")) == 1


def test_status_change_unknown_ticket(ticket_service, loaded):
    assert ticket_service.change_status(loaded, "#9999", TicketStatus.CLOSED).status_code == 404


def test_applied_status_is_visible_before_the_write(ticket_service, fake_supabase, loaded):
    applied = ticket_service.apply_status(loaded, "#2042", TicketStatus.IN_PROGRESS)

    assert loaded[0].status == TicketStatus.IN_PROGRESS
    assert fake_supabase.tables["tickets"][0]["status"] == "Open"

    result = ticket_service.persist_status(applied.data)

    assert result.success
    assert fake_supabase.tables["tickets"][0]["status"] == "In Progress"


def test_failed_write_leaves_entry_until_rolled_back(ticket_service, fake_supabase, loaded, notifier):
    fake_supabase.failures[("tickets", "update")] = ConnectionError("offline")
    before = loaded[0].updated_at
    change = ticket_service.apply_status(loaded, "#2042", TicketStatus.CLOSED).data

    result = ticket_service.persist_status(change)
    assert not result.success
    assert loaded[0].status == TicketStatus.CLOSED
    assert notifier.of("error") == []

    ticket_service.rollback_status(change, result.error)
    assert loaded[0].status == TicketStatus.OPEN
    assert loaded[0].updated_at == before
    assert len(notifier.of("error")) == 1


def test_applying_the_current_status_is_a_no_op(ticket_service, loaded):
    applied = ticket_service.apply_status(loaded, "#2042", TicketStatus.OPEN)

    assert applied.success
    assert applied.data is None


def test_ticket_draft_has_no_assignee_field():
    assert "assignee" not in TicketDraft.model_fields
