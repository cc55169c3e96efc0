"""
Base Repository.

Provides shared infrastructure for all repositories:
- DatabaseManager reference (Supabase + local SQLite)
- Logger reference
- Convenience properties for accessing clients
- A single error boundary that wraps backend failures
"""

from __future__ import annotations

import sqlite3
from typing import Callable, TypeVar

from supabase import Client as SupabaseClient

from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger

T = TypeVar("T")


class RepositoryError(Exception):
    """A backend call failed.

    ``operation`` names the failed call for logs and user messages; the
    original exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__."""

    TABLE: str = ""

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        self._db = db
        self._logger = logger

    @property
    def supabase(self) -> SupabaseClient:
        """Returns the Supabase client for backend operations."""
        return self._db.supabase

    @property
    def sqlite(self) -> sqlite3.Connection:
        """Returns the local SQLite connection."""
        return self._db.sqlite

    def _execute(self, op: Callable[[], T], *, operation_name: str) -> T:
        """Run *op* against the backend, wrapping any failure.

        There is no fallback source and no retry: the first failure is
        logged and re-raised as :class:`RepositoryError`, which services
        turn into a user-visible error.

        Parameters
        ----------
        op:
            Zero-argument callable that performs the Supabase call.
        operation_name:
            Human-readable label for log messages, e.g.
            ``"insert (tickets)"``.
        """
        try:
            return op()
        except RepositoryError:
            raise
        except Exception as exc:
            self._logger.error(
                "Backend call failed for %s: %s", operation_name, exc
            )
            raise RepositoryError(operation_name, str(exc)) from exc

    @staticmethod
    def _first_row(response: object) -> dict | None:
        """Return the first row of a PostgREST response, or ``None``.

        ``maybe_single()`` may return ``None`` instead of a response
        when no row matches, so both shapes are accepted.
        """
        data = getattr(response, "data", None)
        if isinstance(data, list):
            return data[0] if data else None
        return data or None
