"""Notifications Dialog.

Inbox with All / Unread tabs, mark-one and mark-all read, and delete.
``on_change`` lets the sidebar refresh its unread badge.
"""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from issuelane.models.notification import Notification
from issuelane.services.notification_service import NotificationFilter, NotificationService
from issuelane.ui.components.dialog import ModalDialog
from issuelane.ui.components.widgets import card
from issuelane.ui.theme import (
    ACCENT_PRIMARY,
    BADGE_UNREAD,
    FONT_BODY_BOLD,
    FONT_CAPTION,
    FONT_SMALL,
    NOTIFICATION_ICONS,
    PADDING_MD,
    PADDING_SM,
    ROW_HOVER,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_TABS: dict[str, NotificationFilter] = {"All": "all", "Unread": "unread"}


class NotificationsDialog(ModalDialog):
    def __init__(
        self,
        parent: ctk.CTkBaseClass,
        notification_service: NotificationService,
        on_change: Callable[[], None],
    ) -> None:
        super().__init__(parent, title="Notifications", height=600)
        self._service = notification_service
        self._on_change = on_change
        self._mode: NotificationFilter = "all"

        toolbar = ctk.CTkFrame(self, fg_color="transparent")
        toolbar.pack(fill="x", padx=PADDING_MD + PADDING_SM, before=self.body)
        self._tabs = ctk.CTkSegmentedButton(toolbar, values=list(_TABS), command=self._set_tab)
        self._tabs.set("All")
        self._tabs.pack(side="left")
        ctk.CTkButton(
            toolbar, text="Mark all as read", font=FONT_SMALL, fg_color="transparent",
            hover_color=ROW_HOVER, text_color=ACCENT_PRIMARY, width=120, command=self._mark_all,
        ).pack(side="right")

        self._render()

    def _set_tab(self, label: str) -> None:
        self._mode = _TABS[label]
        self._render()

    def _render(self) -> None:
        for child in self.body.winfo_children():
            child.destroy()
        items = self._service.filtered(self._mode)
        if not items:
            ctk.CTkLabel(
                self.body, text="You're all caught up!", font=FONT_SMALL, text_color=TEXT_SECONDARY,
            ).pack(pady=PADDING_MD)
            return
        for item in items:
            self._row(item)

    def _row(self, item: Notification) -> None:
        row = card(self.body)
        row.pack(fill="x", pady=(0, PADDING_SM))

        ctk.CTkLabel(
            row, text=NOTIFICATION_ICONS.get(item.type or "", "•"), font=FONT_BODY_BOLD, width=28,
        ).pack(side="left", padx=(PADDING_SM, 0), pady=PADDING_SM)

        text = ctk.CTkFrame(row, fg_color="transparent")
        text.pack(side="left", fill="x", expand=True, padx=PADDING_SM, pady=PADDING_SM)
        ctk.CTkLabel(text, text=item.title, font=FONT_BODY_BOLD, text_color=TEXT_PRIMARY, anchor="w").pack(fill="x")
        ctk.CTkLabel(
            text, text=item.message, font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w",
            justify="left", wraplength=360,
        ).pack(fill="x")
        ctk.CTkLabel(text, text=item.time, font=FONT_CAPTION, text_color=TEXT_SECONDARY, anchor="w").pack(fill="x")

        actions = ctk.CTkFrame(row, fg_color="transparent")
        actions.pack(side="right", padx=PADDING_SM)
        if item.unread:
            ctk.CTkLabel(actions, text="●", text_color=BADGE_UNREAD, font=FONT_SMALL).pack()
            ctk.CTkButton(
                actions, text="✓", width=28, height=24, fg_color="transparent", hover_color=ROW_HOVER,
                text_color=ACCENT_PRIMARY, command=lambda: self._mark(item.id),
            ).pack()
        ctk.CTkButton(
            actions, text="\U0001F5D1", width=28, height=24, fg_color="transparent", hover_color=ROW_HOVER,
            text_color=TEXT_SECONDARY, command=lambda: self._delete(item.id),
        ).pack()

    def _mark(self, notification_id: int) -> None:
        if self._service.mark_as_read(notification_id):
            self._changed()

    def _mark_all(self) -> None:
        if self._service.mark_all_as_read():
            self._changed()

    def _delete(self, notification_id: int) -> None:
        if self._service.delete(notification_id):
            self._changed()

    def _changed(self) -> None:
        self._render()
        self._on_change()
