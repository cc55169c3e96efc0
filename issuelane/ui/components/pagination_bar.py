"""Pagination Bar.

"Showing 1 to 5 of 23 results", a rows-per-page selector, and
first / previous / numbered / next / last buttons.  All state lives in
the injected ``ListController``; the bar only renders it and forwards
clicks.
"""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from issuelane.models.service_models import PageSlice
from issuelane.services.list_controller import ListController
from issuelane.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    BUTTON_NEUTRAL,
    BUTTON_NEUTRAL_HOVER,
    FONT_SMALL,
    PADDING_SM,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_PAGE_WINDOW: int = 5  # numbered buttons shown at once


def page_window(page: int, total_pages: int, width: int = _PAGE_WINDOW) -> range:
    """Page numbers to show as buttons, centred on *page* where possible."""
    start = max(1, min(page - width // 2, total_pages - width + 1))
    return range(start, min(total_pages, start + width - 1) + 1)


class PaginationBar(ctk.CTkFrame):
    """Pager for one list screen.

    Parameters
    ----------
    parent:
        Container frame.
    controller:
        The list state this bar navigates.
    page_size_options:
        Choices for the rows-per-page selector.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        controller: ListController,
        page_size_options: list[int],
    ) -> None:
        super().__init__(parent, fg_color="transparent")
        self._controller = controller

        self._summary = ctk.CTkLabel(self, text="", font=FONT_SMALL, text_color=TEXT_SECONDARY)
        self._summary.pack(side="left")

        ctk.CTkLabel(self, text="Rows:", font=FONT_SMALL, text_color=TEXT_SECONDARY).pack(
            side="left", padx=(PADDING_SM * 2, 4),
        )
        self._size_menu = ctk.CTkOptionMenu(
            self,
            values=[str(size) for size in page_size_options],
            width=70,
            height=28,
            command=lambda value: controller.set_page_size(int(value)),
        )
        self._size_menu.set(str(controller.page_size))
        self._size_menu.pack(side="left")

        self._buttons = ctk.CTkFrame(self, fg_color="transparent")
        self._buttons.pack(side="right")

    def render(self, page: PageSlice) -> None:
        """Redraw for the slice the controller just produced."""
        if page.total == 0:
            self._summary.configure(text="No results")
        else:
            self._summary.configure(
                text=f"Showing {page.start_index + 1} to {page.end_index} of {page.total} results"
            )
        self._size_menu.set(str(page.page_size))

        for child in self._buttons.winfo_children():
            child.destroy()

        self._nav_button("«", self._controller.first, page.has_previous)
        self._nav_button("‹", self._controller.previous, page.has_previous)
        for number in page_window(page.page, page.total_pages):
            current = number == page.page
            ctk.CTkButton(
                self._buttons,
                text=str(number),
                width=32,
                height=28,
                font=FONT_SMALL,
                fg_color=ACCENT_PRIMARY if current else BUTTON_NEUTRAL,
                hover_color=ACCENT_HOVER if current else BUTTON_NEUTRAL_HOVER,
                text_color=TEXT_LIGHT if current else TEXT_PRIMARY,
                command=lambda n=number: self._controller.go_to(n),
            ).pack(side="left", padx=2)
        self._nav_button("›", self._controller.next, page.has_next)
        self._nav_button("»", self._controller.last, page.has_next)

    def _nav_button(self, text: str, command: Callable[[], None], enabled: bool) -> None:
        ctk.CTkButton(
            self._buttons,
            text=text,
            width=32,
            height=28,
            font=FONT_SMALL,
            fg_color=BUTTON_NEUTRAL,
            hover_color=BUTTON_NEUTRAL_HOVER,
            text_color=TEXT_PRIMARY,
            state="normal" if enabled else "disabled",
            command=command,
        ).pack(side="left", padx=2)
