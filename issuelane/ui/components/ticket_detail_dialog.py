"""Ticket Detail Dialog.

Read-only ticket fields, attachments, and a status selector.  The
status change itself is delegated to the caller, which applies it
locally and writes it to the backend off the UI thread.
"""

from __future__ import annotations

import webbrowser
from typing import Callable

import customtkinter as ctk

from issuelane.models.enums import TicketStatus
from issuelane.models.ticket import Attachment, Ticket
from issuelane.ui.components.dialog import ModalDialog
from issuelane.ui.components.widgets import priority_badge, status_badge
from issuelane.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    FONT_BODY,
    FONT_BUTTON,
    FONT_SMALL,
    PADDING_MD,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)
from issuelane.utils.text import relative_time


class TicketDetailDialog(ModalDialog):
    """Full view of one ticket.

    Parameters
    ----------
    parent:
        Any widget of the main window.
    ticket:
        The ticket to show.
    on_status_change:
        Called with ``(ticket_id, new_status)`` when the user saves a
        different status.  The dialog closes immediately after.
    """

    def __init__(
        self,
        parent: ctk.CTkBaseClass,
        ticket: Ticket,
        on_status_change: Callable[[str, TicketStatus], None],
    ) -> None:
        super().__init__(parent, title=ticket.title, subtitle=f"Ticket {ticket.id}", height=620)
        self._ticket = ticket
        self._on_status_change = on_status_change
        self._build()

    def _build(self) -> None:
        ticket = self._ticket
        badges = ctk.CTkFrame(self.body, fg_color="transparent")
        badges.pack(fill="x", pady=(0, PADDING_SM))
        status_badge(badges, ticket.status).pack(side="left", padx=(0, PADDING_SM))
        priority_badge(badges, ticket.priority).pack(side="left", padx=(0, PADDING_SM))
        if ticket.issue_type:
            ctk.CTkLabel(badges, text=ticket.issue_type, font=FONT_SMALL, text_color=TEXT_SECONDARY).pack(side="left")

        self.field_label(self.body, "Description")
        ctk.CTkLabel(
            self.body,
            text=ticket.description or "No description provided.",
            font=FONT_BODY,
            text_color=TEXT_PRIMARY,
            anchor="w",
            justify="left",
            wraplength=480,
        ).pack(fill="x")

        grid = ctk.CTkFrame(self.body, fg_color="transparent")
        grid.pack(fill="x", pady=(PADDING_MD, 0))
        rows = (
            ("Reporter", ticket.reporter.name if ticket.reporter else "Unknown"),
            ("Assignee", ticket.assignee.name if ticket.assignee else "Unassigned"),
            ("Created", f"{ticket.created_at:%b %d, %Y %H:%M} ({relative_time(ticket.created_at)})"),
            ("Updated", relative_time(ticket.updated_at)),
            ("Due", f"{ticket.due_date:%b %d, %Y}" if ticket.due_date else "No deadline"),
        )
        for row, (label, value) in enumerate(rows):
            ctk.CTkLabel(grid, text=label, font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w").grid(
                row=row, column=0, sticky="w", padx=(0, PADDING_MD), pady=2,
            )
            ctk.CTkLabel(grid, text=value, font=FONT_BODY, text_color=TEXT_PRIMARY, anchor="w").grid(
                row=row, column=1, sticky="w", pady=2,
            )

        self.field_label(self.body, f"Attachments ({len(ticket.attachments)})")
        if not ticket.attachments:
            ctk.CTkLabel(self.body, text="No attachments", font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w").pack(fill="x")
        for attachment in ticket.attachments:
            self._attachment_row(attachment)

        self.field_label(self.body, "Status")
        footer = ctk.CTkFrame(self.body, fg_color="transparent")
        footer.pack(fill="x", pady=(0, PADDING_MD))
        self._status_menu = ctk.CTkOptionMenu(footer, values=[s.value for s in TicketStatus], width=180)
        self._status_menu.set(ticket.status)
        self._status_menu.pack(side="left")
        ctk.CTkButton(
            footer,
            text="Update Status",
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            command=self._save_status,
        ).pack(side="right")

    def _attachment_row(self, attachment: Attachment) -> None:
        icon = "\U0001F5BC" if attachment.is_image else "\U0001F4C4"
        ctk.CTkButton(
            self.body,
            text=f"{icon}  {attachment.file_name}",
            font=FONT_BODY,
            anchor="w",
            fg_color="transparent",
            hover_color="#eef2ff",
            text_color=ACCENT_PRIMARY,
            command=lambda url=attachment.url: webbrowser.open(url),
        ).pack(fill="x")

    def _save_status(self) -> None:
        selected = TicketStatus(self._status_menu.get())
        if selected != self._ticket.status:
            self._on_status_change(self._ticket.id, selected)
        self.destroy()
