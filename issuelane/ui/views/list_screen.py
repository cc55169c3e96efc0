"""List Screen base.

Shared layout of the tickets and tasks screens: header with a primary
action, stat cards, a filter bar (search + status + priority + any
extra selectors), the row list with loading / error / empty states,
and the pagination bar.

Filtering and paging live in ``ListController``; subclasses supply the
records and how one row is drawn.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import customtkinter as ctk

from issuelane.config import AppConfig
from issuelane.logger import StructuredLogger
from issuelane.models.service_models import ALL, PageSlice
from issuelane.services.list_controller import ListController, ListRecord
from issuelane.ui.components.pagination_bar import PaginationBar
from issuelane.ui.components.widgets import StatCard, card
from issuelane.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    BUTTON_NEUTRAL,
    BUTTON_NEUTRAL_HOVER,
    CONTENT_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BUTTON,
    FONT_HEADING,
    FONT_SMALL,
    FONT_SUBTITLE,
    INPUT_BG,
    INPUT_BORDER,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_ALL_LABEL: str = "All"


def _menu_values(values: Sequence[str]) -> list[str]:
    return [_ALL_LABEL, *values]


def _filter_value(label: str) -> str:
    return ALL if label == _ALL_LABEL else label


LOADING: str = "loading"
ERROR: str = "error"
EMPTY: str = "empty"
NO_MATCH: str = "no-match"
ROWS: str = "rows"


def list_state(loading: bool, error: Optional[str], page: PageSlice, has_records: bool) -> str:
    """What the list area shows: loading, error, empty, no-match or rows.

    Loading wins over a stale error; a fetch of zero rows is ``EMPTY``,
    never loading or error.
    """
    if loading:
        return LOADING
    if error is not None:
        return ERROR
    if page.items:
        return ROWS
    return NO_MATCH if has_records else EMPTY


class ListScreen(ctk.CTkFrame):
    """Filterable, paginated record list.

    Parameters
    ----------
    parent:
        Content container provided by the Host Shell.
    config:
        Page size defaults.
    logger:
        Structured logger instance.
    title, subtitle:
        Header text.
    action_label:
        Text of the primary header button.
    stat_labels:
        Labels of the stat cards, left to right.
    statuses, priorities:
        Options of the status and priority filters.
    noun:
        Plural record name used in empty-state messages.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        config: AppConfig,
        logger: StructuredLogger,
        *,
        title: str,
        subtitle: str,
        action_label: str,
        stat_labels: Sequence[str],
        statuses: Sequence[str],
        priorities: Sequence[str],
        noun: str,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._config = config
        self._logger = logger
        self._noun = noun
        self._loading = False
        self._error: Optional[str] = None
        self.controller = ListController(page_size=config.DEFAULT_PAGE_SIZE, on_change=self._render_rows)

        self._build_header(title, subtitle, action_label)
        self._stats: dict[str, StatCard] = {}
        self._build_stats(stat_labels)
        self._filter_bar = ctk.CTkFrame(self, fg_color="transparent")
        self._filter_bar.pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_SM))
        self._menus: list[ctk.CTkOptionMenu] = []
        self._build_filters(statuses, priorities)

        self._list = ctk.CTkScrollableFrame(self, fg_color="transparent")
        self._list.pack(fill="both", expand=True, padx=PADDING_LG - PADDING_SM)

        self._pager = PaginationBar(self, self.controller, config.PAGE_SIZE_OPTIONS)
        self._pager.pack(fill="x", padx=PADDING_LG, pady=PADDING_MD)

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    def on_action(self) -> None:
        raise NotImplementedError

    def build_row(self, parent: ctk.CTkFrame, record: ListRecord) -> None:
        raise NotImplementedError

    def on_row_selected(self, record: ListRecord) -> None:
        raise NotImplementedError

    def reload(self) -> None:
        """Fetch records again; the default has nothing to fetch."""
        self._render_rows()

    # ------------------------------------------------------------------
    # State changes for subclasses
    # ------------------------------------------------------------------

    def show_loading(self) -> None:
        self._loading, self._error = True, None
        self._render_rows()

    def show_error(self, message: str) -> None:
        """Replace the list with *message*; records of an earlier fetch are dropped."""
        self._loading, self._error = False, message
        self.controller.set_records([])

    def show_records(self, records: Sequence[ListRecord]) -> None:
        self._loading, self._error = False, None
        self.controller.set_records(records)

    def set_stat(self, label: str, value: int, hint: str = "") -> None:
        self._stats[label].set_value(value, hint)

    def add_extra_filter(self, attr: str, label: str, values: Sequence[str]) -> None:
        """Extra categorical selector, e.g. project on the tasks screen."""
        self._menu(label, values, lambda choice: self.controller.set_extra(attr, _filter_value(choice)))

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_header(self, title: str, subtitle: str, action_label: str) -> None:
        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=PADDING_LG, pady=(PADDING_LG, PADDING_MD))
        text = ctk.CTkFrame(header, fg_color="transparent")
        text.pack(side="left")
        ctk.CTkLabel(text, text=title, font=FONT_HEADING, text_color=TEXT_PRIMARY, anchor="w").pack(fill="x")
        ctk.CTkLabel(text, text=subtitle, font=FONT_SUBTITLE, text_color=TEXT_SECONDARY, anchor="w").pack(fill="x")
        ctk.CTkButton(
            header, text=f"+  {action_label}", font=FONT_BUTTON, fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER, height=38, command=self.on_action,
        ).pack(side="right")
        ctk.CTkButton(
            header, text="⟳", width=38, height=38, font=FONT_BUTTON, fg_color=BUTTON_NEUTRAL,
            hover_color=BUTTON_NEUTRAL_HOVER, text_color=TEXT_PRIMARY, command=self.reload,
        ).pack(side="right", padx=PADDING_SM)

    def _build_stats(self, labels: Sequence[str]) -> None:
        row = ctk.CTkFrame(self, fg_color="transparent")
        row.pack(fill="x", padx=PADDING_LG, pady=(0, PADDING_MD))
        for column, label in enumerate(labels):
            row.grid_columnconfigure(column, weight=1, uniform="stats")
            stat = StatCard(row, label)
            stat.grid(row=0, column=column, sticky="ew", padx=(0 if column == 0 else PADDING_SM, 0))
            self._stats[label] = stat

    def _build_filters(self, statuses: Sequence[str], priorities: Sequence[str]) -> None:
        self._search = ctk.CTkEntry(
            self._filter_bar, placeholder_text=f"Search {self._noun}...", font=FONT_BODY, width=280,
            height=34, fg_color=INPUT_BG, border_color=INPUT_BORDER, corner_radius=CORNER_RADIUS,
        )
        self._search.pack(side="left")
        self._search.bind("<KeyRelease>", lambda _event: self.controller.set_search(self._search.get()))
        self._menu("Status", statuses, lambda v: self.controller.set_status(_filter_value(v)))
        self._menu("Priority", priorities, lambda v: self.controller.set_priority(_filter_value(v)))
        ctk.CTkButton(
            self._filter_bar, text="Clear", width=60, height=34, font=FONT_SMALL, fg_color="transparent",
            hover_color=BUTTON_NEUTRAL, text_color=TEXT_SECONDARY, command=self._clear_filters,
        ).pack(side="right")

    def _menu(self, label: str, values: Sequence[str], command: Callable[[str], None]) -> ctk.CTkOptionMenu:
        ctk.CTkLabel(self._filter_bar, text=label, font=FONT_SMALL, text_color=TEXT_SECONDARY).pack(
            side="left", padx=(PADDING_MD, 4),
        )
        menu = ctk.CTkOptionMenu(self._filter_bar, values=_menu_values(values), width=140, height=34, command=command)
        menu.set(_ALL_LABEL)
        menu.pack(side="left")
        self._menus.append(menu)
        return menu

    def _clear_filters(self) -> None:
        self._search.delete(0, "end")
        for menu in self._menus:
            menu.set(_ALL_LABEL)
        self.controller.reset_filters()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_rows(self) -> None:
        for child in self._list.winfo_children():
            child.destroy()

        page: PageSlice = self.controller.current_slice()
        self._pager.render(page)

        state = list_state(self._loading, self._error, page, bool(self.controller.records))
        if state == LOADING:
            self._message(f"Loading {self._noun}...")
            return
        if state == ERROR:
            self._message(self._error or "", colour=ERROR_TEXT, retry=True)
            return
        if state == EMPTY:
            self._message(f"No {self._noun} yet.")
            return
        if state == NO_MATCH:
            self._message(f"No {self._noun} match your filters.")
            return

        for record in page.items:
            row = card(self._list)
            row.pack(fill="x", pady=(0, PADDING_SM), padx=PADDING_SM)
            self.build_row(row, record)
            self._bind_click(row, record)

    def _bind_click(self, widget: ctk.CTkBaseClass, record: ListRecord) -> None:
        widget.bind("<Button-1>", lambda _event: self.on_row_selected(record))
        for child in widget.winfo_children():
            if not isinstance(child, (ctk.CTkButton, ctk.CTkOptionMenu)):
                self._bind_click(child, record)

    def _message(self, text: str, colour: str = TEXT_SECONDARY, retry: bool = False) -> None:
        box = ctk.CTkFrame(self._list, fg_color="transparent")
        box.pack(fill="x", pady=PADDING_LG * 2)
        ctk.CTkLabel(box, text=text, font=FONT_BODY, text_color=colour).pack()
        if retry:
            ctk.CTkButton(
                box, text="Try again", font=FONT_SMALL, width=100, fg_color=BUTTON_NEUTRAL,
                hover_color=BUTTON_NEUTRAL_HOVER, text_color=TEXT_PRIMARY, command=self.reload,
            ).pack(pady=PADDING_SM)
