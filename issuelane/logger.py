"""
Structured JSON Logging.

Every repository, service and view receives a ``StructuredLogger``.
Records go to stdout and to a rotating log file as one JSON object per
line.  Background work (sign-in, fetches, uploads) runs on named worker
threads, so each line carries the thread name to tie it to its request.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO

# Attributes every LogRecord has; anything else arrived through ``extra=``.
_RESERVED: frozenset[str] = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``timestamp`` (UTC, ISO-8601), ``level``, ``logger_name``,
    ``thread``, ``message``, plus ``extra`` and ``exception`` when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }

        extra = {key: str(value) for key, value in vars(record).items() if key not in _RESERVED}
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, ensure_ascii=False)


def _build_handlers(
    level: int,
    stream: Optional[TextIO],
    log_file: str,
    max_bytes: int,
    backup_count: int,
) -> tuple[list[logging.Handler], Optional[OSError]]:
    """Console handler always; file handler when *log_file* is writable."""
    formatter = JSONFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    file_error: Optional[OSError] = None
    try:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )
    except OSError as exc:
        file_error = exc

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers, file_error


class StructuredLogger:
    """Injectable JSON logger.

    Wraps the stdlib ``logging.Logger`` of the given *name*.  Handlers are
    attached once per name, so building several ``StructuredLogger``
    objects for the same component does not duplicate output.  File
    settings default to ``LOG_FILE`` / ``LOG_MAX_BYTES`` /
    ``LOG_BACKUP_COUNT`` from ``AppConfig``.

    Usage::

        log = StructuredLogger(name="tickets")
        log.info("Tickets loaded", extra={"count": "12"})
    """

    def __init__(
        self,
        name: str = "issuelane",
        level: int = logging.INFO,
        stream: Optional[TextIO] = None,
        log_file: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        self._logger: logging.Logger = logging.getLogger(name)
        self._logger.setLevel(level)
        if self._logger.handlers:
            return

        # Deferred so importing this module does not load settings.
        from issuelane.config import get_config
        config = get_config()

        resolved_file = log_file or config.LOG_FILE
        handlers, file_error = _build_handlers(
            level,
            stream,
            resolved_file,
            max_bytes if max_bytes is not None else config.LOG_MAX_BYTES,
            backup_count if backup_count is not None else config.LOG_BACKUP_COUNT,
        )
        for handler in handlers:
            self._logger.addHandler(handler)
        if file_error is not None:
            self._logger.warning(
                "Log file '%s' unavailable (%s); logging to console only.", resolved_file, file_error,
            )

    @property
    def logger(self) -> logging.Logger:
        """The wrapped ``logging.Logger``."""
        return self._logger

    def debug(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.critical(msg, *args, **kwargs)


def get_logger(name: str = "issuelane") -> StructuredLogger:
    """Return a ``StructuredLogger`` for component *name*."""
    return StructuredLogger(name=name)
