"""
Ticket Service.

Fetches tickets with their joins, creates tickets (with an optional
attachment), and changes ticket status.

Operations return ``ServiceResult`` envelopes and report progress to the
user through the injected ``Notifier``; nothing here raises into the UI.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError

from issuelane.config import AppConfig
from issuelane.logger import StructuredLogger
from issuelane.models.enums import TicketStatus
from issuelane.models.service_models import AttachmentUpload, ServiceResult, TicketDraft
from issuelane.models.ticket import Attachment, PersonRef, Ticket
from issuelane.repositories.base_repository import RepositoryError
from issuelane.repositories.file_repository import FileRepository
from issuelane.repositories.ticket_repository import TicketRepository
from issuelane.services.base_service import BaseService
from issuelane.services.notifier import Notifier
from issuelane.services.profile_cache import ProfileCacheService
from issuelane.utils.text import JsonValue, random_storage_name

CREATE_TOAST_ID: str = "create-ticket"
ATTACHMENT_TOAST_ID: str = "ticket-attachment"
FETCH_TOAST_ID: str = "fetch-tickets"
STATUS_TOAST_ID: str = "ticket-status"


@dataclass
class StatusChange:
    """A locally applied ticket status change awaiting its backend write."""

    ticket: Ticket
    previous_status: TicketStatus
    previous_updated_at: datetime


# ---------------------------------------------------------------------------
# Row reshaping
# ---------------------------------------------------------------------------

def _person(row: JsonValue) -> Optional[PersonRef]:
    if not isinstance(row, dict):
        return None
    name = f"{row.get('first_name') or ''} {row.get('last_name') or ''}".strip()
    return PersonRef.from_name(name) if name else None


def _attachments(files: JsonValue) -> list[Attachment]:
    """A to-one join arrives as an object, a to-many join as a list."""
    if files is None:
        return []
    rows = files if isinstance(files, list) else [files]
    return [
        Attachment(url=str(row["url"]), type=str(row.get("type") or ""))
        for row in rows
        if isinstance(row, dict) and row.get("url")
    ]


def ticket_from_row(row: dict[str, JsonValue]) -> Ticket:
    """Reshape one ``tickets`` row (with nested joins) into a ``Ticket``.

    Raises
    ------
    pydantic.ValidationError
        If status, priority or timestamps are not valid.
    """
    created_at = row.get("created_at")
    return Ticket(
        id=f"#{row['ticket_id']}",
        ticket_id=row["ticket_id"],
        title=row.get("title") or "",
        description=row.get("description") or "",
        status=row.get("status"),
        priority=row.get("priority"),
        issue_type=row.get("issue_type") or None,
        created_at=created_at,
        updated_at=row.get("updated_at") or created_at,
        due_date=row.get("deadline") or None,
        attachments=_attachments(row.get("files")),
        assignee=_person(row.get("assignee")),
        reporter=_person(row.get("creator")),
    )


class TicketService(BaseService):
    """Ticket operations for the tickets screen, dialogs and dashboard.

    Parameters
    ----------
    ticket_repo:
        Reads and writes ``tickets``.
    file_repo:
        Storage uploads and the ``files`` table.
    profile_cache:
        Supplies the creator id for new tickets.
    notifier:
        User-visible progress, warnings and errors.
    config:
        Attachment folder, size limit, and the placeholder assignee.
    logger:
        Structured JSON logger.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        file_repo: FileRepository,
        profile_cache: ProfileCacheService,
        notifier: Notifier,
        config: AppConfig,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._tickets = ticket_repo
        self._files = file_repo
        self._profile_cache = profile_cache
        self._notifier = notifier
        self._config = config

    # ==================================================================
    # Fetch
    # ==================================================================

    def fetch_tickets(self) -> ServiceResult[list[Ticket]]:
        """Read every ticket with its attachments, creator and assignee.

        Any failure aborts the whole read: one error notification, no
        partial list, no retry.  Zero rows is a success with ``[]``.
        """
        try:
            rows = self._tickets.list_with_relations()
            tickets = [ticket_from_row(row) for row in rows]
        except RepositoryError as exc:
            return self._fetch_failed(exc.message)
        except (ValidationError, KeyError, TypeError) as exc:
            self._logger.error("Unreadable ticket row: %s", exc)
            return self._fetch_failed("unexpected data from the server")

        self._logger.info("Tickets loaded", extra={"count": str(len(tickets))})
        return ServiceResult(success=True, data=tickets)

    def _fetch_failed(self, reason: str) -> ServiceResult[list[Ticket]]:
        self._notifier.error(f"Failed to load tickets: {reason}", id=FETCH_TOAST_ID)
        return ServiceResult(success=False, error=reason, status_code=503)

    # ==================================================================
    # Create
    # ==================================================================

    def create_ticket(
        self,
        draft: TicketDraft,
        on_created: Optional[Callable[[], None]] = None,
    ) -> ServiceResult[int]:
        """Create a ticket, then attach the selected file if any.

        The ticket row is inserted first with ``file_id = NULL``.  Only
        once it exists is the file uploaded, its ``files`` row inserted
        and the ticket pointed at it, so a ``files`` row never exists
        without its ticket.  Attachment failures produce a single
        warning; the ticket is kept without the file.

        Parameters
        ----------
        draft:
            Validated form input.
        on_created:
            Caller refresh hook, run after the success notification.

        Returns
        -------
        ServiceResult[int]
            The new ``ticket_id`` on success.
        """
        user_id = self._profile_cache.current_user_id()
        if user_id is None:
            message = "You must be signed in to create a ticket."
            self._notifier.error(message, id=CREATE_TOAST_ID)
            return ServiceResult(success=False, error=message, status_code=401)

        self._notifier.loading("Creating ticket...", id=CREATE_TOAST_ID)
        try:
            ticket_id = self._tickets.insert(
                title=draft.title,
                description=draft.description,
                issue_type=draft.issue_type,
                priority=draft.priority,
                assigned_to=self._config.PLACEHOLDER_ASSIGNEE_ID,
                created_by=user_id,
                deadline=draft.deadline,
            )
        except RepositoryError as exc:
            message = f"Failed to create ticket: {exc.message}"
            self._notifier.error(message, id=CREATE_TOAST_ID)
            return ServiceResult(success=False, error=message, status_code=500)

        if draft.attachment is not None and not self._attach(ticket_id, draft.attachment):
            self._notifier.warning(
                "Ticket created, but the attachment could not be uploaded.",
                id=ATTACHMENT_TOAST_ID,
            )

        self._notifier.success("Ticket created successfully!", id=CREATE_TOAST_ID)
        if on_created is not None:
            try:
                on_created()
            except Exception as exc:
                self._logger.error("Ticket refresh callback failed: %s", exc, exc_info=True)
        return ServiceResult(success=True, data=ticket_id, status_code=201)

    def _attach(self, ticket_id: int, upload: AttachmentUpload) -> bool:
        """Upload → public URL → ``files`` row → ticket ``file_id``.

        Returns ``False`` on any failure after undoing what it can.
        """
        if len(upload.content) > self._config.MAX_ATTACHMENT_BYTES:
            self._logger.warning(
                "Attachment %s exceeds %d bytes; skipped.",
                upload.file_name,
                self._config.MAX_ATTACHMENT_BYTES,
            )
            return False

        path = random_storage_name(upload.file_name, self._config.ATTACHMENT_FOLDER)
        uploaded = False
        file_id: Optional[int] = None
        try:
            self._files.upload(path, upload.content, upload.content_type)
            uploaded = True
            url = self._files.public_url(path)
            file_id = self._files.insert(url, upload.content_type)
            self._tickets.set_file(ticket_id, file_id)
            return True
        except RepositoryError as exc:
            self._logger.warning(
                "Attachment for ticket %s failed at %s: %s",
                ticket_id,
                exc.operation,
                exc.message,
            )
            self._undo_attachment(path if uploaded else None, file_id)
            return False

    def _undo_attachment(self, path: Optional[str], file_id: Optional[int]) -> None:
        if file_id is not None:
            try:
                self._files.delete(file_id)
            except RepositoryError:
                self._logger.warning("Orphaned files row %s left behind.", file_id)
        if path is not None:
            try:
                self._files.remove_object(path)
            except RepositoryError:
                self._logger.warning("Orphaned storage object %s left behind.", path)

    # ==================================================================
    # Status change
    # ==================================================================
    #
    # Split in three so the UI can apply the change on its own thread,
    # write it on a worker, and roll back once the write reports back.

    def apply_status(
        self,
        tickets: list[Ticket],
        ticket_id: str,
        new_status: TicketStatus,
    ) -> ServiceResult[StatusChange]:
        """Set the status of the matching entry in *tickets* locally.

        No backend call.  The returned ``StatusChange`` is what
        :meth:`persist_status` writes and :meth:`rollback_status` undoes.
        ``data`` is ``None`` when the ticket already has *new_status*.
        """
        ticket = next((t for t in tickets if t.id == ticket_id), None)
        if ticket is None:
            return ServiceResult(success=False, error=f"Ticket {ticket_id} not found", status_code=404)
        if ticket.status == new_status:
            return ServiceResult(success=True, data=None)

        change = StatusChange(ticket, ticket.status, ticket.updated_at)
        ticket.status = new_status
        ticket.updated_at = datetime.now(timezone.utc)
        return ServiceResult(success=True, data=change)

    def persist_status(self, change: StatusChange) -> ServiceResult[Ticket]:
        """Write the applied status to the ``tickets`` row.

        Safe on a worker thread: reads *change* but never mutates it.
        """
        ticket = change.ticket
        new_status = ticket.status
        try:
            if ticket.ticket_id is None:
                raise RepositoryError("update_status (tickets)", "ticket has no row id")
            self._tickets.update_status(ticket.ticket_id, new_status)
        except RepositoryError as exc:
            message = f"Could not update {ticket.id}: {exc.message}"
            return ServiceResult(success=False, data=ticket, error=message, status_code=500)

        self._logger.info(
            "Ticket %s status changed", ticket.id,
            extra={"from": str(change.previous_status), "to": str(new_status)},
        )
        self._notifier.success(f"{ticket.id} marked {new_status}.", id=STATUS_TOAST_ID)
        return ServiceResult(success=True, data=ticket)

    def rollback_status(self, change: StatusChange, error: str) -> None:
        """Restore the pre-change status and report *error*."""
        change.ticket.status = change.previous_status
        change.ticket.updated_at = change.previous_updated_at
        self._notifier.error(error, id=STATUS_TOAST_ID)

    def change_status(
        self,
        tickets: list[Ticket],
        ticket_id: str,
        new_status: TicketStatus,
    ) -> ServiceResult[Ticket]:
        """Apply, persist and, on failure, roll back in one call."""
        applied = self.apply_status(tickets, ticket_id, new_status)
        if not applied.success:
            return ServiceResult(success=False, error=applied.error, status_code=applied.status_code)
        change = applied.data
        if change is None:
            ticket = next(t for t in tickets if t.id == ticket_id)
            return ServiceResult(success=True, data=ticket)

        result = self.persist_status(change)
        if not result.success:
            self.rollback_status(change, result.error or "Status update failed")
        return result
