"""New Ticket Dialog.

Collects the ticket form, validates it into a ``TicketDraft``, and
hands it to ``TicketService.create_ticket`` on a worker thread.  The
submit button stays disabled while the request is in flight; progress,
warnings and errors reach the user through toasts.
"""

from __future__ import annotations

import mimetypes
from datetime import date
from pathlib import Path
from tkinter import filedialog
from typing import Callable, Optional

import customtkinter as ctk
from pydantic import ValidationError

from issuelane.config import AppConfig
from issuelane.logger import StructuredLogger
from issuelane.models.enums import IssueType, Priority
from issuelane.models.service_models import AttachmentUpload, ServiceResult, TicketDraft
from issuelane.services.ticket_service import TicketService
from issuelane.ui.background import run_in_background
from issuelane.ui.components.dialog import ModalDialog
from issuelane.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    BUTTON_NEUTRAL,
    BUTTON_NEUTRAL_HOVER,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BUTTON,
    FONT_SMALL,
    INPUT_BG,
    INPUT_BORDER,
    PADDING_MD,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)


def parse_deadline(text: str) -> Optional[date]:
    """``YYYY-MM-DD`` or blank.

    Raises
    ------
    ValueError
        If *text* is neither.
    """
    text = text.strip()
    return date.fromisoformat(text) if text else None


class NewTicketDialog(ModalDialog):
    """Form for raising a ticket.

    Parameters
    ----------
    parent:
        Any widget of the main window.
    ticket_service:
        Performs the create flow.
    config:
        Attachment size limit.
    on_created:
        Refresh hook passed through to ``create_ticket``.  Runs on the
        worker thread after the success toast.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTkBaseClass,
        ticket_service: TicketService,
        config: AppConfig,
        on_created: Callable[[], None],
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, title="Create New Ticket", subtitle="Describe the issue you are facing", height=660)
        self._service = ticket_service
        self._config = config
        self._on_created = on_created
        self._logger = logger
        self._attachment: Optional[AttachmentUpload] = None
        self._build()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _entry(self, placeholder: str) -> ctk.CTkEntry:
        entry = ctk.CTkEntry(
            self.body, placeholder_text=placeholder, font=FONT_BODY, fg_color=INPUT_BG,
            border_color=INPUT_BORDER, text_color=TEXT_PRIMARY, height=38, corner_radius=CORNER_RADIUS,
        )
        entry.pack(fill="x")
        return entry

    def _build(self) -> None:
        self.field_label(self.body, "Title *")
        self._title = self._entry("Brief summary of the issue")

        self.field_label(self.body, "Description")
        self._description = ctk.CTkTextbox(
            self.body, height=110, font=FONT_BODY, fg_color=INPUT_BG, border_color=INPUT_BORDER,
            border_width=1, text_color=TEXT_PRIMARY, corner_radius=CORNER_RADIUS,
        )
        self._description.pack(fill="x")

        selectors = ctk.CTkFrame(self.body, fg_color="transparent")
        selectors.pack(fill="x")
        selectors.grid_columnconfigure((0, 1), weight=1)
        self._issue_type = self._selector(selectors, 0, "Issue Type", [t.value for t in IssueType], IssueType.OTHER)
        self._priority = self._selector(selectors, 1, "Priority", [p.value for p in Priority], Priority.MEDIUM)

        self.field_label(self.body, "Deadline (YYYY-MM-DD)")
        self._deadline = self._entry("Optional")

        self.field_label(self.body, "Attachment")
        picker = ctk.CTkFrame(self.body, fg_color="transparent")
        picker.pack(fill="x")
        ctk.CTkButton(
            picker, text="Choose File...", font=FONT_SMALL, width=120, fg_color=BUTTON_NEUTRAL,
            hover_color=BUTTON_NEUTRAL_HOVER, text_color=TEXT_PRIMARY, command=self._pick_file,
        ).pack(side="left")
        self._file_label = ctk.CTkLabel(picker, text="No file selected", font=FONT_SMALL, text_color=TEXT_SECONDARY)
        self._file_label.pack(side="left", padx=PADDING_SM)

        self._error = ctk.CTkLabel(self.body, text="", font=FONT_SMALL, text_color=ERROR_TEXT, anchor="w")
        self._error.pack(fill="x", pady=(PADDING_SM, 0))

        buttons = ctk.CTkFrame(self.body, fg_color="transparent")
        buttons.pack(fill="x", pady=(PADDING_SM, PADDING_MD))
        self._submit = ctk.CTkButton(
            buttons, text="Create Ticket", font=FONT_BUTTON, fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER, command=self._handle_submit,
        )
        self._submit.pack(side="right")
        ctk.CTkButton(
            buttons, text="Cancel", font=FONT_BUTTON, fg_color=BUTTON_NEUTRAL,
            hover_color=BUTTON_NEUTRAL_HOVER, text_color=TEXT_PRIMARY, command=self.destroy,
        ).pack(side="right", padx=PADDING_SM)

    def _selector(
        self, parent: ctk.CTkFrame, column: int, label: str, values: list[str], default: str,
    ) -> ctk.CTkOptionMenu:
        cell = ctk.CTkFrame(parent, fg_color="transparent")
        cell.grid(row=0, column=column, sticky="ew", padx=(0 if column == 0 else PADDING_SM, 0))
        self.field_label(cell, label)
        menu = ctk.CTkOptionMenu(cell, values=values)
        menu.set(default)
        menu.pack(fill="x")
        return menu

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _pick_file(self) -> None:
        chosen = filedialog.askopenfilename(parent=self, title="Attach a file")
        if not chosen:
            return
        path = Path(chosen)
        try:
            content = path.read_bytes()
        except OSError as exc:
            self._logger.warning("Could not read attachment %s: %s", path, exc)
            self._error.configure(text=f"Could not read {path.name}.")
            return
        if len(content) > self._config.MAX_ATTACHMENT_BYTES:
            limit_mb = self._config.MAX_ATTACHMENT_BYTES / (1024 * 1024)
            self._error.configure(text=f"{path.name} is larger than {limit_mb:g} MB.")
            return

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        self._attachment = AttachmentUpload(file_name=path.name, content=content, content_type=content_type)
        self._file_label.configure(text=f"{path.name} ({len(content) // 1024 or 1} KB)")
        self._error.configure(text="")

    def _handle_submit(self) -> None:
        try:
            draft = TicketDraft(
                title=self._title.get(),
                description=self._description.get("1.0", "end").strip(),
                issue_type=self._issue_type.get(),
                priority=self._priority.get(),
                deadline=parse_deadline(self._deadline.get()),
                attachment=self._attachment,
            )
        except ValidationError as exc:
            field = exc.errors()[0]["loc"][0] if exc.errors() and exc.errors()[0]["loc"] else "form"
            self._error.configure(text=f"Please check the {field} field.")
            return
        except ValueError:
            self._error.configure(text="Deadline must be a date like 2025-01-31.")
            return

        self._error.configure(text="")
        self._submit.configure(state="disabled", text="Creating...")
        run_in_background(
            self,
            lambda: self._service.create_ticket(draft, on_created=self._on_created),
            self._handle_result,
            self._logger,
            name="create-ticket",
        )

    def _handle_result(self, result: ServiceResult[int]) -> None:
        if result.success:
            self.destroy()
            return
        self._submit.configure(state="normal", text="Create Ticket")
