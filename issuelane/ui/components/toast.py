"""Toast Notifications.

Stacked, self-dismissing messages in the top-right corner of the main
window.  ``ToastOverlay`` satisfies the ``Notifier`` protocol, so the
shell attaches it to the service layer's ``NotifierProxy`` and every
service message surfaces here.

A message sent with an ``id`` replaces the toast already showing under
that id; this is how a "Creating ticket..." spinner turns into
"Ticket created successfully!" in place.
"""

from __future__ import annotations

import itertools
from typing import Callable, Optional

import customtkinter as ctk

from issuelane.ui.theme import (
    CORNER_RADIUS,
    FONT_BODY,
    PADDING_MD,
    PADDING_SM,
    TOAST_COLOURS,
    TOAST_WIDTH,
)

_DISMISS_AFTER_MS: int = 4_000
_MAX_VISIBLE: int = 4
_ICONS: dict[str, str] = {
    "loading": "…",
    "success": "✓",
    "warning": "!",
    "error": "✕",
}


class _Toast(ctk.CTkFrame):
    def __init__(self, parent: ctk.CTkFrame, on_close: Callable[[], None]) -> None:
        super().__init__(parent, corner_radius=CORNER_RADIUS, width=TOAST_WIDTH)
        self._icon = ctk.CTkLabel(self, text="", font=FONT_BODY, width=20)
        self._icon.pack(side="left", padx=(PADDING_MD, PADDING_SM), pady=PADDING_SM)
        self._label = ctk.CTkLabel(
            self, text="", font=FONT_BODY, anchor="w", justify="left",
            wraplength=TOAST_WIDTH - 90,
        )
        self._label.pack(side="left", fill="x", expand=True, pady=PADDING_SM)
        self._close = ctk.CTkButton(
            self, text="✕", width=24, height=24, fg_color="transparent",
            hover=False, command=on_close,
        )
        self._close.pack(side="right", padx=PADDING_SM)

    def show(self, level: str, message: str) -> None:
        bg, fg = TOAST_COLOURS[level]
        self.configure(fg_color=bg)
        self._icon.configure(text=_ICONS[level], text_color=fg)
        self._label.configure(text=message, text_color=fg)
        self._close.configure(text_color=fg)


class ToastOverlay(ctk.CTkFrame):
    """Toast stack anchored to the top-right corner of *parent*.

    Safe to call from worker threads: each call is re-scheduled onto
    the Tk main loop.
    """

    def __init__(self, parent: ctk.CTk) -> None:
        super().__init__(parent, fg_color="transparent")
        self._toasts: dict[str, _Toast] = {}
        self._jobs: dict[str, str] = {}
        self._anonymous = itertools.count(1)
        self.place(relx=1.0, rely=0.0, x=-PADDING_MD, y=PADDING_MD, anchor="ne")

    # -- Notifier protocol ---------------------------------------------------

    def loading(self, message: str, *, id: Optional[str] = None) -> None:
        self._post("loading", message, id)

    def success(self, message: str, *, id: Optional[str] = None) -> None:
        self._post("success", message, id)

    def warning(self, message: str, *, id: Optional[str] = None) -> None:
        self._post("warning", message, id)

    def error(self, message: str, *, id: Optional[str] = None) -> None:
        self._post("error", message, id)

    # -- Internals -----------------------------------------------------------

    def _post(self, level: str, message: str, toast_id: Optional[str]) -> None:
        key = toast_id or f"toast-{next(self._anonymous)}"
        try:
            self.after(0, self._show, level, message, key)
        except RuntimeError:
            pass  # window already destroyed

    def _show(self, level: str, message: str, key: str) -> None:
        if not self.winfo_exists():
            return
        toast = self._toasts.get(key)
        if toast is None:
            toast = _Toast(self, on_close=lambda: self._dismiss(key))
            toast.pack(fill="x", pady=(0, PADDING_SM))
            self._toasts[key] = toast
            self._trim()
        toast.show(level, message)
        self.lift()

        job = self._jobs.pop(key, None)
        if job is not None:
            self.after_cancel(job)
        if level != "loading":
            self._jobs[key] = self.after(_DISMISS_AFTER_MS, self._dismiss, key)

    def _dismiss(self, key: str) -> None:
        job = self._jobs.pop(key, None)
        if job is not None:
            self.after_cancel(job)
        toast = self._toasts.pop(key, None)
        if toast is not None:
            toast.destroy()

    def _trim(self) -> None:
        while len(self._toasts) > _MAX_VISIBLE:
            self._dismiss(next(iter(self._toasts)))

    def clear(self) -> None:
        for key in list(self._toasts):
            self._dismiss(key)
