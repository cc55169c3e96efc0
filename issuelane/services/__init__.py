"""
Business Logic Services Package.

Services depend on the Repository layer for backend access and on the
injected ``ProfileCacheService`` for the signed-in user.

The ``create_services()`` factory wires every repository and service
together, returning a typed dict that the UI layer can consume without
knowing the internal dependency graph.
"""

from __future__ import annotations

from typing import TypedDict

from issuelane.auth import SessionManager
from issuelane.config import AppConfig
from issuelane.database import DatabaseManager
from issuelane.logger import get_logger
from issuelane.repositories.file_repository import FileRepository
from issuelane.repositories.ticket_repository import TicketRepository
from issuelane.repositories.user_repository import UserRepository
from issuelane.services.auth_service import AuthService
from issuelane.services.dashboard_service import DashboardService
from issuelane.services.local_storage import LocalStorageService
from issuelane.services.notification_service import NotificationService
from issuelane.services.notifier import LoggingNotifier, NotifierProxy
from issuelane.services.profile_cache import ProfileCacheService
from issuelane.services.session_cache import SessionCacheService
from issuelane.services.task_service import TaskService
from issuelane.services.ticket_service import TicketService


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    # --- Session ---
    auth_service: AuthService
    profile_cache: ProfileCacheService
    user_repository: UserRepository
    notifier: NotifierProxy

    # --- Screens ---
    ticket_service: TicketService
    task_service: TaskService
    notification_service: NotificationService
    dashboard_service: DashboardService


def create_services(
    db: DatabaseManager,
    config: AppConfig,
    session: SessionManager,
    session_cache: SessionCacheService,
) -> ServiceContainer:
    """
    Wire all repositories and services together.

    This is the single composition root for the service layer.  The
    entry-point calls this once at startup and passes the returned dict
    to the application shell.

    Args:
        db: Initialised DatabaseManager with Supabase + SQLite ready.
        config: Application configuration.
        session: In-memory session token holder.
        session_cache: Encrypted remember-me store.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    logger = get_logger("services")

    # Until the shell attaches its toast overlay, messages go to the log.
    notifier = NotifierProxy(LoggingNotifier(logger))

    # ------------------------------------------------------------------
    # 1. Repositories (data-access layer)
    # ------------------------------------------------------------------
    user_repo = UserRepository(db=db, logger=logger)
    ticket_repo = TicketRepository(db=db, logger=logger)
    file_repo = FileRepository(db=db, logger=logger, bucket=config.STORAGE_BUCKET)

    # ------------------------------------------------------------------
    # 2. Session context
    # ------------------------------------------------------------------
    local_storage = LocalStorageService(db=db, logger=logger)
    profile_cache = ProfileCacheService(storage=local_storage, logger=logger)

    auth_service = AuthService(
        db=db,
        session=session,
        user_repo=user_repo,
        profile_cache=profile_cache,
        local_storage=local_storage,
        session_cache=session_cache,
        notifier=notifier,
        logger=logger,
    )

    # ------------------------------------------------------------------
    # 3. Screen services
    # ------------------------------------------------------------------
    ticket_service = TicketService(
        ticket_repo=ticket_repo,
        file_repo=file_repo,
        profile_cache=profile_cache,
        notifier=notifier,
        config=config,
        logger=logger,
    )
    task_service = TaskService(logger=logger)
    notification_service = NotificationService(logger=logger)
    dashboard_service = DashboardService(task_service=task_service, logger=logger)

    return ServiceContainer(
        auth_service=auth_service,
        profile_cache=profile_cache,
        user_repository=user_repo,
        notifier=notifier,
        ticket_service=ticket_service,
        task_service=task_service,
        notification_service=notification_service,
        dashboard_service=dashboard_service,
    )
