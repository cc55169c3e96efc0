"""Background work helper for views.

Every backend call runs on a daemon thread; its result is handed back
to the Tk main loop with ``widget.after(0, ...)``.
"""

from __future__ import annotations

import threading
from typing import Callable, TypeVar

import customtkinter as ctk

from issuelane.logger import StructuredLogger

T = TypeVar("T")


def run_in_background(
    widget: ctk.CTkBaseClass,
    work: Callable[[], T],
    on_done: Callable[[T], None],
    logger: StructuredLogger,
    name: str = "issuelane-worker",
) -> None:
    """Run *work* off the UI thread and deliver its result to *on_done*.

    *on_done* runs on the main thread, and only while *widget* still
    exists.  Services return result envelopes, so an exception here is
    a programming error: it is logged and *on_done* is not called.
    """

    def _deliver(result: T) -> None:
        if widget.winfo_exists():
            on_done(result)

    def _target() -> None:
        try:
            result = work()
        except Exception as exc:
            logger.error("Background task %s failed: %s", name, exc, exc_info=True)
            return
        try:
            widget.after(0, _deliver, result)
        except RuntimeError:
            # Main loop already gone (window closed mid-request).
            logger.debug("Dropped result of %s after shutdown.", name)

    threading.Thread(target=_target, name=name, daemon=True).start()
