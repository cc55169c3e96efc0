"""
Ticket Repository.

Reads and writes the ``tickets`` table.  Reads return raw PostgREST rows
with nested joins; reshaping into ``Ticket`` models happens in
``TicketService``.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger
from issuelane.models.enums import IssueType, Priority, TicketStatus
from issuelane.repositories.base_repository import BaseRepository, RepositoryError
from issuelane.utils.text import JsonValue

# One read: the ticket, its file(s), and the creator/assignee display names.
TICKET_SELECT: str = (
    "ticket_id, title, description, issue_type, priority, status, deadline, "
    "file_id, created_at, updated_at, "
    "files(url, type), "
    "creator:users!tickets_created_by_fkey(first_name, last_name), "
    "assignee:users!tickets_assigned_to_fkey(first_name, last_name)"
)


class TicketRepository(BaseRepository):
    """Data access layer for tickets."""

    TABLE = "tickets"

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        super().__init__(db, logger)

    def list_with_relations(self) -> list[dict[str, JsonValue]]:
        """Every ticket row with its joins, in backend order."""
        def _op() -> list[dict[str, JsonValue]]:
            response = self.supabase.table(self.TABLE).select(TICKET_SELECT).execute()
            return list(response.data or [])

        return self._execute(_op, operation_name="list_with_relations (tickets)")

    def insert(
        self,
        *,
        title: str,
        description: str,
        issue_type: IssueType,
        priority: Priority,
        assigned_to: int,
        created_by: int,
        deadline: Optional[date],
    ) -> int:
        """Insert a new Open ticket without an attachment; returns ``ticket_id``."""
        payload: dict[str, JsonValue] = {
            "title": title,
            "description": description,
            "issue_type": str(issue_type),
            "priority": str(priority),
            "status": str(TicketStatus.OPEN),
            "assigned_to": assigned_to,
            "created_by": created_by,
            "deadline": deadline.isoformat() if deadline else None,
            "file_id": None,
        }

        def _op() -> int:
            response = self.supabase.table(self.TABLE).insert(payload).execute()
            row = self._first_row(response)
            if not row or row.get("ticket_id") is None:
                raise RepositoryError("insert (tickets)", "no ticket_id returned")
            return int(row["ticket_id"])

        ticket_id = self._execute(_op, operation_name="insert (tickets)")
        self._logger.info("Ticket created: %s", ticket_id)
        return ticket_id

    def update_status(self, ticket_id: int, status: TicketStatus) -> None:
        def _op() -> None:
            (
                self.supabase.table(self.TABLE)
                .update({"status": str(status)})
                .eq("ticket_id", ticket_id)
                .execute()
            )

        self._execute(_op, operation_name="update_status (tickets)")

    def set_file(self, ticket_id: int, file_id: int) -> None:
        """Point a ticket at its attachment row."""
        def _op() -> None:
            (
                self.supabase.table(self.TABLE)
                .update({"file_id": file_id})
                .eq("ticket_id", ticket_id)
                .execute()
            )

        self._execute(_op, operation_name="set_file (tickets)")
