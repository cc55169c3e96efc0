"""Dashboard View — default landing page after sign-in.

Welcome header from the cached profile, ticket stat cards, the five
most recent tasks (with an inline status selector) and the most recent
tickets.  Ticket data is fetched on a worker thread when the view is
built and whenever the user presses refresh.

**Thin UI Rule**: Zero business logic — reads from services and
displays.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import customtkinter as ctk

from issuelane.logger import StructuredLogger
from issuelane.models.enums import TaskStatus
from issuelane.models.service_models import ServiceResult
from issuelane.models.ticket import Ticket
from issuelane.services.dashboard_service import DashboardService
from issuelane.services.notifier import Notifier
from issuelane.services.profile_cache import ProfileCacheService
from issuelane.services.task_service import TaskService
from issuelane.services.ticket_service import TicketService
from issuelane.ui.background import run_in_background
from issuelane.ui.components.widgets import StatCard, card, priority_badge, section_title, status_badge
from issuelane.ui.theme import (
    BUTTON_NEUTRAL,
    BUTTON_NEUTRAL_HOVER,
    CONTENT_BG,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BODY_BOLD,
    FONT_BUTTON,
    FONT_CAPTION,
    FONT_HEADING,
    FONT_SMALL,
    FONT_SUBTITLE,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)
from issuelane.utils.text import relative_time


def _greeting(now: Optional[datetime] = None) -> str:
    hour = (now or datetime.now()).hour
    if hour < 12:
        return "Good morning"
    if hour < 18:
        return "Good afternoon"
    return "Good evening"


class DashboardView(ctk.CTkScrollableFrame):
    """Home screen.

    Parameters
    ----------
    parent:
        Content container provided by the Host Shell.
    dashboard_service:
        Stats and recent-item selection.
    ticket_service:
        Source of tickets.
    task_service:
        Task board, for inline status changes.
    profile_cache:
        The signed-in user shown in the welcome header.
    notifier:
        Toasts for task status changes.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        dashboard_service: DashboardService,
        ticket_service: TicketService,
        task_service: TaskService,
        profile_cache: ProfileCacheService,
        notifier: Notifier,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._dashboard = dashboard_service
        self._tickets = ticket_service
        self._tasks = task_service
        self._profile_cache = profile_cache
        self._notifier = notifier
        self._logger = logger

        self._stats: dict[str, StatCard] = {}
        self._build_ui()
        self.refresh()

    # ------------------------------------------------------------------
    # Widget creation
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        profile = self._profile_cache.get_profile()
        name = profile.first_name if profile else "there"

        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=PADDING_LG, pady=(PADDING_LG, PADDING_MD))
        text = ctk.CTkFrame(header, fg_color="transparent")
        text.pack(side="left")
        ctk.CTkLabel(
            text, text=f"{_greeting()}, {name}!", font=FONT_HEADING, text_color=TEXT_PRIMARY, anchor="w",
        ).pack(fill="x")
        role = f"{profile.role_name} · {profile.designation_name}" if profile else ""
        ctk.CTkLabel(
            text, text=f"Here is what's happening today.  {role}", font=FONT_SUBTITLE,
            text_color=TEXT_SECONDARY, anchor="w",
        ).pack(fill="x")
        ctk.CTkButton(
            header, text="⟳  Refresh", font=FONT_BUTTON, fg_color=BUTTON_NEUTRAL,
            hover_color=BUTTON_NEUTRAL_HOVER, text_color=TEXT_PRIMARY, width=110, command=self.refresh,
        ).pack(side="right")

        stats_row = ctk.CTkFrame(self, fg_color="transparent")
        stats_row.pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_MD))
        for column, label in enumerate(("Open Tickets", "In Progress", "Resolved", "Total Tickets")):
            stats_row.grid_columnconfigure(column, weight=1, uniform="stats")
            stat = StatCard(stats_row, label)
            stat.grid(row=0, column=column, sticky="ew", padx=(0 if column == 0 else PADDING_SM, 0))
            self._stats[label] = stat

        section_title(self, "Recent Tasks").pack(fill="x", padx=PADDING_LG, pady=(PADDING_SM, PADDING_SM))
        self._tasks_box = card(self)
        self._tasks_box.pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_MD))

        section_title(self, "Recent Tickets").pack(fill="x", padx=PADDING_LG, pady=(PADDING_SM, PADDING_SM))
        self._tickets_box = card(self)
        self._tickets_box.pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_LG))

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Re-fetch tickets and redraw the ticket sections."""
        self._render_tasks()
        self._placeholder(self._tickets_box, "Loading tickets...")
        run_in_background(self, self._tickets.fetch_tickets, self._handle_tickets, self._logger, name="dashboard-tickets")

    def _handle_tickets(self, result: ServiceResult[list[Ticket]]) -> None:
        if not result.success or result.data is None:
            self._placeholder(self._tickets_box, "Could not load tickets.", colour=ERROR_TEXT)
            return
        tickets = result.data
        stats = self._dashboard.ticket_stats(tickets)
        self._stats["Open Tickets"].set_value(stats.open, f"{stats.waiting} waiting")
        self._stats["In Progress"].set_value(stats.in_progress)
        self._stats["Resolved"].set_value(stats.resolved, "incl. closed")
        self._stats["Total Tickets"].set_value(stats.total)

        recent = self._dashboard.recent_tickets(tickets)
        if not recent:
            self._placeholder(self._tickets_box, "No tickets yet.")
            return
        self._clear(self._tickets_box)
        for ticket in recent:
            row = ctk.CTkFrame(self._tickets_box, fg_color="transparent")
            row.pack(fill="x", padx=PADDING_MD, pady=4)
            ctk.CTkLabel(row, text=ticket.id, font=FONT_BODY_BOLD, text_color=TEXT_PRIMARY, width=70, anchor="w").pack(side="left")
            ctk.CTkLabel(row, text=ticket.title, font=FONT_BODY, text_color=TEXT_PRIMARY, anchor="w").pack(side="left", fill="x", expand=True)
            ctk.CTkLabel(
                row, text=relative_time(ticket.created_at), font=FONT_CAPTION, text_color=TEXT_SECONDARY, width=90,
            ).pack(side="right")
            priority_badge(row, ticket.priority).pack(side="right", padx=4)
            status_badge(row, ticket.status).pack(side="right", padx=4)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def _render_tasks(self) -> None:
        self._clear(self._tasks_box)
        recent = self._dashboard.recent_tasks()
        if not recent:
            self._placeholder(self._tasks_box, "No tasks yet.")
            return
        for task in recent:
            row = ctk.CTkFrame(self._tasks_box, fg_color="transparent")
            row.pack(fill="x", padx=PADDING_MD, pady=4)
            text = ctk.CTkFrame(row, fg_color="transparent")
            text.pack(side="left", fill="x", expand=True)
            ctk.CTkLabel(text, text=task.title, font=FONT_BODY_BOLD, text_color=TEXT_PRIMARY, anchor="w").pack(fill="x")
            ctk.CTkLabel(
                text, text=f"{task.id} · {task.project} · {task.progress}%", font=FONT_SMALL,
                text_color=TEXT_SECONDARY, anchor="w",
            ).pack(fill="x")
            menu = ctk.CTkOptionMenu(
                row, values=[s.value for s in TaskStatus], width=140,
                command=lambda value, task_id=task.id: self._change_task_status(task_id, TaskStatus(value)),
            )
            menu.set(task.status)
            menu.pack(side="right")
            priority_badge(row, task.priority).pack(side="right", padx=PADDING_SM)

    def _change_task_status(self, task_id: str, status: TaskStatus) -> None:
        result = self._tasks.change_status(task_id, status)
        if result.success:
            self._notifier.success(f"{task_id} moved to {status}.", id="task-status")
        else:
            self._notifier.error(result.error or "Could not update task.", id="task-status")
        # The menu that fired this is rebuilt, so wait for its callback to return.
        self.after(0, self._render_tasks)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _clear(box: ctk.CTkFrame) -> None:
        for child in box.winfo_children():
            child.destroy()

    def _placeholder(self, box: ctk.CTkFrame, text: str, colour: str = TEXT_SECONDARY) -> None:
        self._clear(box)
        ctk.CTkLabel(box, text=text, font=FONT_BODY, text_color=colour).pack(pady=PADDING_MD)
