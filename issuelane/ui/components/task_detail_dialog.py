"""Task Detail Dialog: fields, progress, hours and a status selector."""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from issuelane.models.enums import TaskStatus
from issuelane.models.task import Task
from issuelane.ui.components.dialog import ModalDialog
from issuelane.ui.components.widgets import avatar, priority_badge, status_badge
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


class TaskDetailDialog(ModalDialog):
    def __init__(
        self,
        parent: ctk.CTkBaseClass,
        task: Task,
        on_status_change: Callable[[str, TaskStatus], None],
    ) -> None:
        super().__init__(parent, title=task.title, subtitle=f"{task.id} · {task.project}")
        self._task = task
        self._on_status_change = on_status_change
        self._build()

    def _build(self) -> None:
        task = self._task
        badges = ctk.CTkFrame(self.body, fg_color="transparent")
        badges.pack(fill="x", pady=(0, PADDING_SM))
        status_badge(badges, task.status).pack(side="left", padx=(0, PADDING_SM))
        priority_badge(badges, task.priority).pack(side="left")

        self.field_label(self.body, "Description")
        ctk.CTkLabel(
            self.body, text=task.description or "No description provided.", font=FONT_BODY,
            text_color=TEXT_PRIMARY, anchor="w", justify="left", wraplength=480,
        ).pack(fill="x")

        self.field_label(self.body, f"Progress · {task.progress}%")
        bar = ctk.CTkProgressBar(self.body, progress_color=ACCENT_PRIMARY)
        bar.set(task.progress / 100)
        bar.pack(fill="x")

        self.field_label(self.body, "Assignee")
        row = ctk.CTkFrame(self.body, fg_color="transparent")
        row.pack(fill="x")
        if task.assignee is not None:
            avatar(row, task.assignee.avatar, size=28).pack(side="left", padx=(0, PADDING_SM))
        ctk.CTkLabel(
            row, text=task.assignee.name if task.assignee else "Unassigned",
            font=FONT_BODY, text_color=TEXT_PRIMARY,
        ).pack(side="left")

        self.field_label(self.body, "Schedule")
        due = f"{task.due_date:%b %d, %Y}" if task.due_date else "No due date"
        ctk.CTkLabel(
            self.body,
            text=(
                f"Due {due}  ·  {task.logged_hours:g}h of {task.estimated_hours:g}h logged\n"
                f"Created {relative_time(task.created_at)}  ·  updated {relative_time(task.updated_at)}"
            ),
            font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w", justify="left",
        ).pack(fill="x")

        self.field_label(self.body, "Status")
        footer = ctk.CTkFrame(self.body, fg_color="transparent")
        footer.pack(fill="x", pady=(0, PADDING_MD))
        self._status_menu = ctk.CTkOptionMenu(footer, values=[s.value for s in TaskStatus], width=180)
        self._status_menu.set(task.status)
        self._status_menu.pack(side="left")
        ctk.CTkButton(
            footer, text="Update Status", font=FONT_BUTTON, fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER, command=self._save_status,
        ).pack(side="right")

    def _save_status(self) -> None:
        selected = TaskStatus(self._status_menu.get())
        if selected != self._task.status:
            self._on_status_change(self._task.id, selected)
        self.destroy()
