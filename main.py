"""
IssueLane Desktop Application Entry Point.

Bootstraps the entire dependency graph via constructor injection,
initialises the local SQLite schema, and launches the CustomTkinter
GUI.  Every subsystem is wired here — no module-level globals.

Usage::

    python main.py
"""

from __future__ import annotations

import atexit
import sys
import traceback

from issuelane import __version__
from issuelane.auth import SessionManager
from issuelane.config import get_config
from issuelane.database import DatabaseManager
from issuelane.logger import StructuredLogger, get_logger
from issuelane.schema import initialize_schema
from issuelane.services import create_services
from issuelane.services.session_cache import SessionCacheService
from issuelane.ui.app_shell import AppShell
from issuelane.ui.module_registry import ModuleRegistry
from issuelane.ui.views.dashboard_view import DashboardView
from issuelane.ui.views.tasks_view import TasksView
from issuelane.ui.views.tickets_view import TicketsView


def main() -> None:
    """Application entry point — wire dependencies and launch the GUI."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting IssueLane %s...", __version__)

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Database Manager (Supabase backend + local SQLite state)
    # ------------------------------------------------------------------
    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        sqlite_path=config.LOCAL_DB_PATH,
        logger=StructuredLogger(name="database"),
    )

    # close() is idempotent; this covers exits that skip the finally below.
    atexit.register(db.close)

    # ------------------------------------------------------------------
    # 3. SQLite Schema Initialization (idempotent)
    # ------------------------------------------------------------------
    initialize_schema(db.sqlite, StructuredLogger(name="schema"))

    # ------------------------------------------------------------------
    # 4. Session Manager
    # ------------------------------------------------------------------
    session = SessionManager()

    # ------------------------------------------------------------------
    # 5. Encrypted Session Cache ("Remember me")
    # ------------------------------------------------------------------
    session_cache = SessionCacheService(
        db=db,
        logger=StructuredLogger(name="session_cache"),
        max_age_days=config.REMEMBER_ME_DAYS,
    )

    # ------------------------------------------------------------------
    # 6. Service Container (repositories + services, single composition root)
    # ------------------------------------------------------------------
    services = create_services(
        db=db,
        config=config,
        session=session,
        session_cache=session_cache,
    )

    # ------------------------------------------------------------------
    # 7. Module Registry (sidebar screens)
    # ------------------------------------------------------------------
    registry = ModuleRegistry(logger=get_logger("modules"))

    registry.register(
        module_id="dashboard",
        display_name="Dashboard",
        icon="▦",  # Squared grid
        factory=lambda parent: DashboardView(
            parent=parent,
            dashboard_service=services["dashboard_service"],
            ticket_service=services["ticket_service"],
            task_service=services["task_service"],
            profile_cache=services["profile_cache"],
            notifier=services["notifier"],
            logger=get_logger("dashboard"),
        ),
        default=True,
    )

    registry.register(
        module_id="tickets",
        display_name="Tickets",
        icon="\U0001F3AB",  # Ticket
        factory=lambda parent: TicketsView(
            parent=parent,
            ticket_service=services["ticket_service"],
            config=config,
            logger=get_logger("tickets"),
        ),
    )

    registry.register(
        module_id="tasks",
        display_name="Tasks",
        icon="☑",  # Ballot box with check
        factory=lambda parent: TasksView(
            parent=parent,
            task_service=services["task_service"],
            notifier=services["notifier"],
            config=config,
            logger=get_logger("tasks"),
        ),
    )

    # ------------------------------------------------------------------
    # 8. Launch the GUI (blocks until window closes)
    # ------------------------------------------------------------------
    logger.info("Launching GUI...")
    app = AppShell(
        services=services,
        registry=registry,
        logger=get_logger("ui"),
        version=__version__,
    )
    try:
        app.mainloop()
    finally:
        db.close()
        logger.info("IssueLane shut down.")


def _show_fatal_error(exc: BaseException) -> None:
    """Display a fatal-error dialog so double-click users get feedback.

    Uses ``tkinter.messagebox`` (stdlib) rather than CustomTkinter so
    the dialog works even when CTk initialisation itself is the thing
    that failed.
    """
    detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    try:
        import tkinter
        from tkinter import messagebox

        root = tkinter.Tk()
        root.withdraw()
        messagebox.showerror(
            title="IssueLane: Fatal Error",
            message=(
                "IssueLane hit an unexpected error and cannot continue.\n\n"
                f"{type(exc).__name__}: {exc}"
            ),
            detail=detail,
        )
        root.destroy()
    except Exception:
        # Headless or missing Tcl/Tk: stderr is all that is left.
        sys.stderr.write(f"FATAL: {type(exc).__name__}: {exc}\n{detail}")


def run() -> None:
    """Console-script entry point."""
    try:
        main()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        _show_fatal_error(exc)
        sys.exit(1)


if __name__ == "__main__":
    run()
