"""Application Host Shell.

The top-level ``CTk`` window that orchestrates the application
lifecycle: remembered-session restore → login → host shell (sidebar +
screens) → logout.

All dependencies are injected via the constructor.  The shell contains
no business logic — it delegates authentication to ``AuthService``
(through the ``LoginView`` and its own session checks) and screen
rendering to the ``ModuleRegistry`` + ``SidebarNav``.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from issuelane.logger import StructuredLogger
from issuelane.models.auth_models import AuthErrorCode, AuthResult
from issuelane.models.user import UserProfile
from issuelane.services import ServiceContainer
from issuelane.services.auth_service import AuthService
from issuelane.ui.background import run_in_background
from issuelane.ui.components.notifications_dialog import NotificationsDialog
from issuelane.ui.components.profile_dialog import ProfileDialog
from issuelane.ui.components.toast import ToastOverlay
from issuelane.ui.login_view import LoginView
from issuelane.ui.module_registry import ModuleRegistry
from issuelane.ui.sidebar import SidebarNav
from issuelane.ui.theme import (
    CONTENT_BG,
    FONT_BODY,
    LOGIN_WINDOW_HEIGHT,
    LOGIN_WINDOW_WIDTH,
    MAIN_WINDOW_HEIGHT,
    MAIN_WINDOW_WIDTH,
    TEXT_SECONDARY,
)

_SESSION_CHECK_INTERVAL_MS: int = 60_000  # 60 seconds


class AppShell(ctk.CTk):
    """Host Shell — the main application window.

    Lifecycle
    ---------
    1. On boot: tries the remembered session in the background, showing
       a splash; falls back to the ``LoginView``.
    2. On successful sign-in: builds the sidebar and content area and
       switches to the default screen.
    3. Screen switching: caches frames (lazy creation).
    4. Logout: signs out through ``AuthService``; only on success are
       the screens destroyed and the login view shown again.
    5. Periodic token refresh every 60 s via ``self.after()``.

    Parameters
    ----------
    services:
        Fully-wired service container.
    registry:
        Module registry populated before shell launch.
    logger:
        Structured logger instance.
    version:
        Application version for the sidebar footer.
    """

    def __init__(
        self,
        services: ServiceContainer,
        registry: ModuleRegistry,
        logger: StructuredLogger,
        version: str = "",
    ) -> None:
        super().__init__()

        self._services = services
        self._registry = registry
        self._logger = logger
        self._version = version
        self._auth: AuthService = services["auth_service"]

        self._module_frames: dict[str, ctk.CTkFrame] = {}
        self._active_module_id: Optional[str] = None
        self._session_check_job: Optional[str] = None
        self._unsubscribe_profile: Optional[Callable[[], None]] = None

        self._sidebar: Optional[SidebarNav] = None
        self._content_container: Optional[ctk.CTkFrame] = None
        self._login_view: Optional[LoginView] = None
        self._splash: Optional[ctk.CTkLabel] = None

        self.title("IssueLane")
        ctk.set_appearance_mode("light")
        ctk.set_default_color_theme("blue")
        self.configure(fg_color=CONTENT_BG)
        self.geometry(f"{MAIN_WINDOW_WIDTH}x{MAIN_WINDOW_HEIGHT}")
        self.minsize(LOGIN_WINDOW_WIDTH, LOGIN_WINDOW_HEIGHT)

        # Service messages become toasts from here on.
        self._toasts = ToastOverlay(self)
        services["notifier"].attach(self._toasts)

        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self._restore_session()

    # ==================================================================
    # View transitions
    # ==================================================================

    def _restore_session(self) -> None:
        """Skip the login form when a remembered session is still valid."""
        self._splash = ctk.CTkLabel(self, text="Loading IssueLane...", font=FONT_BODY, text_color=TEXT_SECONDARY)
        self._splash.place(relx=0.5, rely=0.5, anchor="center")
        run_in_background(self, self._auth.restore_session, self._handle_restore_result, self._logger, name="restore-session")

    def _handle_restore_result(self, result: AuthResult) -> None:
        if self._splash is not None:
            self._splash.destroy()
            self._splash = None
        if result.success and result.profile is not None:
            self._handle_login_success(result.profile)
            return
        self._show_login()
        if result.error_code == AuthErrorCode.SESSION_EXPIRED:
            self.after(100, self._show_session_expired_message)

    def _show_login(self) -> None:
        """Display the login view."""
        self._clear_main_shell()
        self._login_view = LoginView(
            parent=self,
            auth_service=self._auth,
            on_login_success=self._handle_login_success,
            logger=self._logger,
        )
        self._login_view.pack(fill="both", expand=True)
        self._toasts.lift()

    def _show_main_shell(self, profile: UserProfile) -> None:
        """Build and display the sidebar + content area."""
        self.minsize(900, 560)

        self._sidebar = SidebarNav(
            parent=self,
            profile=profile,
            on_module_selected=self._switch_module,
            on_profile=self._open_profile,
            on_notifications=self._open_notifications,
            on_logout=self._handle_logout,
            logger=self._logger,
            version=self._version,
        )
        self._sidebar.pack(side="left", fill="y")
        for entry in self._registry.modules():
            self._sidebar.register_module(entry.module_id, entry.display_name, entry.icon)
        self._refresh_unread_badge()

        # Profile refreshes (profile dialog) redraw the sidebar identity.
        self._unsubscribe_profile = self._services["profile_cache"].subscribe(
            lambda updated: self.after(0, self._apply_profile, updated)
        )

        self._content_container = ctk.CTkFrame(self, fg_color=CONTENT_BG, corner_radius=0)
        self._content_container.pack(side="top", fill="both", expand=True)

        if self._registry.default_module_id:
            self._switch_module(self._registry.default_module_id)
        else:
            ctk.CTkLabel(
                self._content_container, text="No screens registered.", font=FONT_BODY, text_color=TEXT_SECONDARY,
            ).place(relx=0.5, rely=0.5, anchor="center")

        self._toasts.lift()
        self._schedule_session_check()

    def _apply_profile(self, profile: Optional[UserProfile]) -> None:
        if self._sidebar is not None:
            self._sidebar.set_profile(profile)

    # ==================================================================
    # Screen switching
    # ==================================================================

    def _switch_module(self, module_id: str) -> None:
        """Activate a screen: hide current frame, show (or create) target."""
        if module_id == self._active_module_id:
            return

        if self._active_module_id and self._active_module_id in self._module_frames:
            self._module_frames[self._active_module_id].pack_forget()

        if module_id not in self._module_frames:
            try:
                entry = self._registry.get_module(module_id)
            except KeyError:
                self._logger.error("Cannot switch to unregistered module: %s", module_id)
                return
            self._module_frames[module_id] = entry.factory(self._content_container)

        self._module_frames[module_id].pack(fill="both", expand=True)
        self._active_module_id = module_id
        if self._sidebar:
            self._sidebar.set_active(module_id)
        self._logger.info("Switched to module: %s", module_id)

    # ==================================================================
    # Sidebar dialogs
    # ==================================================================

    def _open_profile(self) -> None:
        ProfileDialog(
            self,
            profile_cache=self._services["profile_cache"],
            user_repo=self._services["user_repository"],
            logger=self._logger,
        )

    def _open_notifications(self) -> None:
        NotificationsDialog(
            self,
            notification_service=self._services["notification_service"],
            on_change=self._refresh_unread_badge,
        )

    def _refresh_unread_badge(self) -> None:
        if self._sidebar is not None:
            self._sidebar.set_unread(self._services["notification_service"].unread_count())

    # ==================================================================
    # Auth lifecycle
    # ==================================================================

    def _handle_login_success(self, profile: UserProfile) -> None:
        """Called after sign-in or a restored session."""
        if self._login_view is not None:
            self._login_view.destroy()
            self._login_view = None
        self._logger.info("Signed in: %s", profile.full_name)
        self._show_main_shell(profile)

    def _handle_logout(self) -> None:
        """Sign out in the background; leave the shell up if it fails."""
        if self._sidebar is not None:
            self._sidebar.set_logout_busy(True)
        run_in_background(self, self._auth.sign_out, self._handle_logout_result, self._logger, name="sign-out")

    def _handle_logout_result(self, result: AuthResult) -> None:
        if not result.success:
            if self._sidebar is not None:
                self._sidebar.set_logout_busy(False)
            return
        self._show_login()

    def _clear_main_shell(self) -> None:
        """Destroy sidebar, content and cached screen frames."""
        self._cancel_session_check()
        if self._unsubscribe_profile is not None:
            self._unsubscribe_profile()
            self._unsubscribe_profile = None
        for frame in self._module_frames.values():
            frame.destroy()
        self._module_frames.clear()
        self._active_module_id = None
        if self._sidebar:
            self._sidebar.destroy()
            self._sidebar = None
        if self._content_container:
            self._content_container.destroy()
            self._content_container = None

    # ==================================================================
    # Session refresh
    # ==================================================================

    def _schedule_session_check(self) -> None:
        self._session_check_job = self.after(_SESSION_CHECK_INTERVAL_MS, self._check_session)

    def _cancel_session_check(self) -> None:
        if self._session_check_job is not None:
            self.after_cancel(self._session_check_job)
            self._session_check_job = None

    def _check_session(self) -> None:
        """Periodic check: refresh the access token via AuthService.

        Dispatches the network call to a background thread so the UI
        event loop is never blocked by Supabase round-trips.
        """
        self._session_check_job = None
        run_in_background(
            self,
            self._auth.refresh_session_token,
            self._handle_session_refresh_result,
            self._logger,
            name="session-refresh",
        )

    def _handle_session_refresh_result(self, result: AuthResult) -> None:
        """Expired/revoked refresh token → back to login; anything else retries next cycle."""
        if self._sidebar is None:
            return
        if not result.success and result.error_code == AuthErrorCode.SESSION_EXPIRED:
            self._logger.warning("Session expired. Returning to login.")
            self._auth.end_expired_session()
            self._show_login()
            self.after(100, self._show_session_expired_message)
            return
        self._schedule_session_check()

    def _show_session_expired_message(self) -> None:
        if self._login_view is not None:
            self._login_view.show_message("Your session has expired. Please sign in again.")

    # ==================================================================
    # Window close
    # ==================================================================

    def _on_close(self) -> None:
        self._cancel_session_check()
        self.destroy()
