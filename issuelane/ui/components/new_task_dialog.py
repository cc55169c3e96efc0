"""New Task Dialog.

Tasks live in memory only, so creation is synchronous.
"""

from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Callable

import customtkinter as ctk
from pydantic import ValidationError

from issuelane.models.enums import Priority
from issuelane.models.service_models import TaskDraft
from issuelane.models.task import Task
from issuelane.services.task_service import ASSIGNEES, PROJECTS, TaskService
from issuelane.ui.components.dialog import ModalDialog
from issuelane.ui.components.new_ticket_dialog import parse_deadline
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
)


class NewTaskDialog(ModalDialog):
    def __init__(
        self,
        parent: ctk.CTkBaseClass,
        task_service: TaskService,
        on_created: Callable[[Task], None],
    ) -> None:
        super().__init__(parent, title="Create New Task", subtitle="Add a task to the board", height=640)
        self._service = task_service
        self._on_created = on_created
        self._build()

    def _entry(self, placeholder: str) -> ctk.CTkEntry:
        entry = ctk.CTkEntry(
            self.body, placeholder_text=placeholder, font=FONT_BODY, fg_color=INPUT_BG,
            border_color=INPUT_BORDER, text_color=TEXT_PRIMARY, height=38, corner_radius=CORNER_RADIUS,
        )
        entry.pack(fill="x")
        return entry

    def _menu(self, label: str, values: list[str], default: str) -> ctk.CTkOptionMenu:
        self.field_label(self.body, label)
        menu = ctk.CTkOptionMenu(self.body, values=values)
        menu.set(default)
        menu.pack(fill="x")
        return menu

    def _build(self) -> None:
        self.field_label(self.body, "Title *")
        self._title = self._entry("What needs to be done?")

        self.field_label(self.body, "Description")
        self._description = ctk.CTkTextbox(
            self.body, height=90, font=FONT_BODY, fg_color=INPUT_BG, border_color=INPUT_BORDER,
            border_width=1, text_color=TEXT_PRIMARY, corner_radius=CORNER_RADIUS,
        )
        self._description.pack(fill="x")

        self._project = self._menu("Project", list(PROJECTS), PROJECTS[0])
        self._assignee = self._menu("Assignee", list(ASSIGNEES), ASSIGNEES[0])
        self._priority = self._menu("Priority", [p.value for p in Priority], Priority.MEDIUM)

        self.field_label(self.body, "Due date (YYYY-MM-DD)")
        self._due = self._entry("Optional")
        self.field_label(self.body, "Estimated hours")
        self._hours = self._entry("0")

        self._error = ctk.CTkLabel(self.body, text="", font=FONT_SMALL, text_color=ERROR_TEXT, anchor="w")
        self._error.pack(fill="x", pady=(PADDING_SM, 0))

        buttons = ctk.CTkFrame(self.body, fg_color="transparent")
        buttons.pack(fill="x", pady=(PADDING_SM, PADDING_MD))
        ctk.CTkButton(
            buttons, text="Create Task", font=FONT_BUTTON, fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER, command=self._handle_submit,
        ).pack(side="right")
        ctk.CTkButton(
            buttons, text="Cancel", font=FONT_BUTTON, fg_color=BUTTON_NEUTRAL,
            hover_color=BUTTON_NEUTRAL_HOVER, text_color=TEXT_PRIMARY, command=self.destroy,
        ).pack(side="right", padx=PADDING_SM)

    def _handle_submit(self) -> None:
        try:
            due = parse_deadline(self._due.get())
            draft = TaskDraft(
                title=self._title.get(),
                description=self._description.get("1.0", "end").strip(),
                project=self._project.get(),
                assignee=self._assignee.get(),
                priority=self._priority.get(),
                due_date=datetime.combine(due, time(17, 0), tzinfo=timezone.utc) if due else None,
                estimated_hours=float(self._hours.get().strip() or 0),
            )
        except ValidationError:
            self._error.configure(text="Title is required and hours cannot be negative.")
            return
        except ValueError:
            self._error.configure(text="Check the due date (YYYY-MM-DD) and hours.")
            return

        result = self._service.create_task(draft)
        if result.success and result.data is not None:
            self._on_created(result.data)
            self.destroy()
