"""Tickets View.

Lists every ticket fetched from the backend with stat cards, search,
status / priority filters and pagination.  Opening a row shows the
detail dialog; "New Ticket" opens the create form.

**Thin UI Rule**: fetching, creating and status changes are delegated
to ``TicketService`` on worker threads.
"""

from __future__ import annotations

import customtkinter as ctk

from issuelane.config import AppConfig
from issuelane.logger import StructuredLogger
from issuelane.models.enums import Priority, TicketStatus
from issuelane.models.service_models import ServiceResult
from issuelane.models.ticket import Ticket
from issuelane.services.dashboard_service import ticket_stats
from issuelane.services.ticket_service import StatusChange, TicketService
from issuelane.ui.background import run_in_background
from issuelane.ui.components.new_ticket_dialog import NewTicketDialog
from issuelane.ui.components.ticket_detail_dialog import TicketDetailDialog
from issuelane.ui.components.widgets import avatar, priority_badge, status_badge
from issuelane.ui.theme import (
    ACCENT_PRIMARY,
    FONT_BODY_BOLD,
    FONT_CAPTION,
    FONT_SMALL,
    PADDING_MD,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)
from issuelane.ui.views.list_screen import ListScreen
from issuelane.utils.text import relative_time


class TicketsView(ListScreen):
    """Ticket list screen.

    Parameters
    ----------
    parent:
        Content container provided by the Host Shell.
    ticket_service:
        Fetch, create and status-change operations.
    config:
        Page sizes and attachment limits.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        ticket_service: TicketService,
        config: AppConfig,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(
            parent,
            config,
            logger,
            title="Tickets",
            subtitle="Track and manage support requests",
            action_label="New Ticket",
            stat_labels=("Total", "Open", "In Progress", "Resolved"),
            statuses=[s.value for s in TicketStatus],
            priorities=[p.value for p in Priority],
            noun="tickets",
        )
        self._service = ticket_service
        self._tickets: list[Ticket] = []
        self.reload()

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def reload(self) -> None:
        self.show_loading()
        run_in_background(self, self._service.fetch_tickets, self._handle_loaded, self._logger, name="fetch-tickets")

    def _handle_loaded(self, result: ServiceResult[list[Ticket]]) -> None:
        if not result.success or result.data is None:
            self._tickets = []
            self._update_stats()
            self.show_error(f"Could not load tickets: {result.error or 'unknown error'}")
            return
        self._tickets = result.data
        self._update_stats()
        self.show_records(self._tickets)

    def _update_stats(self) -> None:
        stats = ticket_stats(self._tickets)
        self.set_stat("Total", stats.total)
        self.set_stat("Open", stats.open, f"{stats.waiting} waiting")
        self.set_stat("In Progress", stats.in_progress)
        self.set_stat("Resolved", stats.resolved, "incl. closed")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def on_action(self) -> None:
        NewTicketDialog(
            self,
            ticket_service=self._service,
            config=self._config,
            on_created=lambda: self.after(0, self.reload),
            logger=self._logger,
        )

    def on_row_selected(self, record: Ticket) -> None:
        TicketDetailDialog(self, record, on_status_change=self._change_status)

    def _change_status(self, ticket_id: str, new_status: TicketStatus) -> None:
        """Show the new status at once; write it on a worker thread."""
        applied = self._service.apply_status(self._tickets, ticket_id, new_status)
        change = applied.data
        if change is None:
            return
        self._refresh_rows()
        run_in_background(
            self,
            lambda: self._service.persist_status(change),
            lambda result: self._handle_status_written(change, result),
            self._logger,
            name="ticket-status",
        )

    def _handle_status_written(self, change: StatusChange, result: ServiceResult[Ticket]) -> None:
        if not result.success:
            self._service.rollback_status(change, result.error or "Status update failed")
            self._refresh_rows()

    def _refresh_rows(self) -> None:
        self._update_stats()
        self.show_records(self._tickets)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def build_row(self, parent: ctk.CTkFrame, record: Ticket) -> None:
        parent.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(parent, text=record.id, font=FONT_BODY_BOLD, text_color=ACCENT_PRIMARY, width=70, anchor="w").grid(
            row=0, column=0, rowspan=2, padx=(PADDING_MD, PADDING_SM), pady=PADDING_SM, sticky="w",
        )
        ctk.CTkLabel(parent, text=record.title, font=FONT_BODY_BOLD, text_color=TEXT_PRIMARY, anchor="w").grid(
            row=0, column=1, sticky="w", pady=(PADDING_SM, 0),
        )
        summary = record.description.splitlines()[0] if record.description else ""
        extras = f"  ·  \U0001F4CE {len(record.attachments)}" if record.attachments else ""
        ctk.CTkLabel(
            parent, text=f"{summary[:90]}{extras}", font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w",
        ).grid(row=1, column=1, sticky="w", pady=(0, PADDING_SM))

        status_badge(parent, record.status).grid(row=0, column=2, rowspan=2, padx=PADDING_SM)
        priority_badge(parent, record.priority).grid(row=0, column=3, rowspan=2, padx=PADDING_SM)

        who = ctk.CTkFrame(parent, fg_color="transparent")
        who.grid(row=0, column=4, rowspan=2, padx=PADDING_SM)
        if record.assignee is not None:
            avatar(who, record.assignee.avatar, size=26).pack(side="left", padx=(0, 4))
        ctk.CTkLabel(
            who, text=record.assignee.name if record.assignee else "Unassigned",
            font=FONT_SMALL, text_color=TEXT_SECONDARY, width=110, anchor="w",
        ).pack(side="left")

        ctk.CTkLabel(
            parent, text=relative_time(record.updated_at), font=FONT_CAPTION, text_color=TEXT_SECONDARY,
            width=90, anchor="e",
        ).grid(row=0, column=5, rowspan=2, padx=(PADDING_SM, PADDING_MD))
