"""
User-Visible Notifications.

Services report progress and outcomes through a ``Notifier`` rather than
touching widgets.  The UI supplies a toast implementation that marshals
each call onto the Tk main loop; tests supply a recording one.

A notifier call may carry an ``id``: a later call with the same id
replaces the earlier message (a "Signing in..." loading toast becomes
"Welcome back!" or an error).
"""

from __future__ import annotations

from typing import Optional, Protocol

from issuelane.logger import StructuredLogger


class Notifier(Protocol):
    """Transient message surface used by services."""

    def loading(self, message: str, *, id: Optional[str] = None) -> None: ...

    def success(self, message: str, *, id: Optional[str] = None) -> None: ...

    def warning(self, message: str, *, id: Optional[str] = None) -> None: ...

    def error(self, message: str, *, id: Optional[str] = None) -> None: ...


class LoggingNotifier:
    """Notifier that only writes to the structured log.

    Used when no window is attached (e.g. while the shell is starting)
    so services never need a ``None`` check.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self._logger = logger

    def loading(self, message: str, *, id: Optional[str] = None) -> None:
        self._logger.debug("[%s] %s", id or "-", message)

    def success(self, message: str, *, id: Optional[str] = None) -> None:
        self._logger.info("[%s] %s", id or "-", message)

    def warning(self, message: str, *, id: Optional[str] = None) -> None:
        self._logger.warning("[%s] %s", id or "-", message)

    def error(self, message: str, *, id: Optional[str] = None) -> None:
        self._logger.error("[%s] %s", id or "-", message)


class NotifierProxy:
    """Forwards to a swappable target notifier.

    Services are built once at startup, before the main window exists;
    the shell later points the proxy at its toast overlay.
    """

    def __init__(self, target: Notifier) -> None:
        self._target: Notifier = target

    def attach(self, target: Notifier) -> None:
        self._target = target

    def loading(self, message: str, *, id: Optional[str] = None) -> None:
        self._target.loading(message, id=id)

    def success(self, message: str, *, id: Optional[str] = None) -> None:
        self._target.success(message, id=id)

    def warning(self, message: str, *, id: Optional[str] = None) -> None:
        self._target.warning(message, id=id)

    def error(self, message: str, *, id: Optional[str] = None) -> None:
        self._target.error(message, id=id)
