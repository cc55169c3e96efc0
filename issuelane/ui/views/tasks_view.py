"""Tasks View.

The in-memory task board: stat cards, search, status / priority /
project filters, pagination, detail dialog and a create form.  Nothing
here talks to the backend.
"""

from __future__ import annotations

import customtkinter as ctk

from issuelane.config import AppConfig
from issuelane.logger import StructuredLogger
from issuelane.models.enums import Priority, TaskStatus
from issuelane.models.task import Task
from issuelane.services.dashboard_service import task_stats
from issuelane.services.notifier import Notifier
from issuelane.services.task_service import PROJECTS, TaskService
from issuelane.ui.components.new_task_dialog import NewTaskDialog
from issuelane.ui.components.task_detail_dialog import TaskDetailDialog
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


class TasksView(ListScreen):
    def __init__(
        self,
        parent: ctk.CTkFrame,
        task_service: TaskService,
        notifier: Notifier,
        config: AppConfig,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(
            parent,
            config,
            logger,
            title="Tasks",
            subtitle="Plan and follow up team work",
            action_label="New Task",
            stat_labels=("Total", "To Do", "In Progress", "Completed"),
            statuses=[s.value for s in TaskStatus],
            priorities=[p.value for p in Priority],
            noun="tasks",
        )
        self._service = task_service
        self._notifier = notifier
        self.add_extra_filter("project", "Project", PROJECTS)
        self.reload()

    def reload(self) -> None:
        tasks = self._service.list_tasks()
        stats = task_stats(tasks)
        self.set_stat("Total", stats.total)
        self.set_stat("To Do", stats.todo)
        self.set_stat("In Progress", stats.in_progress, f"{stats.in_review} in review")
        self.set_stat("Completed", stats.completed)
        self.show_records(tasks)

    def on_action(self) -> None:
        NewTaskDialog(self, task_service=self._service, on_created=self._handle_created)

    def _handle_created(self, task: Task) -> None:
        self._notifier.success(f"{task.id} created.", id="create-task")
        self.reload()

    def on_row_selected(self, record: Task) -> None:
        TaskDetailDialog(self, record, on_status_change=self._change_status)

    def _change_status(self, task_id: str, new_status: TaskStatus) -> None:
        result = self._service.change_status(task_id, new_status)
        if result.success:
            self._notifier.success(f"{task_id} moved to {new_status}.", id="task-status")
        else:
            self._notifier.error(result.error or "Could not update task.", id="task-status")
        self.reload()

    def build_row(self, parent: ctk.CTkFrame, record: Task) -> None:
        parent.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(parent, text=record.id, font=FONT_BODY_BOLD, text_color=ACCENT_PRIMARY, width=80, anchor="w").grid(
            row=0, column=0, rowspan=2, padx=(PADDING_MD, PADDING_SM), pady=PADDING_SM, sticky="w",
        )
        ctk.CTkLabel(parent, text=record.title, font=FONT_BODY_BOLD, text_color=TEXT_PRIMARY, anchor="w").grid(
            row=0, column=1, sticky="w", pady=(PADDING_SM, 0),
        )
        ctk.CTkLabel(parent, text=record.project, font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w").grid(
            row=1, column=1, sticky="w", pady=(0, PADDING_SM),
        )

        progress = ctk.CTkFrame(parent, fg_color="transparent")
        progress.grid(row=0, column=2, rowspan=2, padx=PADDING_SM)
        bar = ctk.CTkProgressBar(progress, width=90, progress_color=ACCENT_PRIMARY)
        bar.set(record.progress / 100)
        bar.pack()
        ctk.CTkLabel(progress, text=f"{record.progress}%", font=FONT_CAPTION, text_color=TEXT_SECONDARY).pack()

        status_badge(parent, record.status).grid(row=0, column=3, rowspan=2, padx=PADDING_SM)
        priority_badge(parent, record.priority).grid(row=0, column=4, rowspan=2, padx=PADDING_SM)

        who = ctk.CTkFrame(parent, fg_color="transparent")
        who.grid(row=0, column=5, rowspan=2, padx=(PADDING_SM, PADDING_MD))
        if record.assignee is not None:
            avatar(who, record.assignee.avatar, size=26).pack(side="left", padx=(0, 4))
        due = f"Due {record.due_date:%b %d}" if record.due_date else "No due date"
        ctk.CTkLabel(who, text=due, font=FONT_CAPTION, text_color=TEXT_SECONDARY, width=80, anchor="w").pack(side="left")
