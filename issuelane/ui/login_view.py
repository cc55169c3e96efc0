"""Login View — Authentication Screen.

Presents the sign-in card (email or username, password, "Remember me")
and runs the sign-in pipeline via ``AuthService`` on a worker thread.
Stage progress ("Signing in...", "Loading your profile...") arrives as
toasts; the card shows the final error inline as well.

**Thin UI Rule**: This module contains ZERO business logic.  It
gathers inputs, delegates to ``AuthService``, and displays results.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

import customtkinter as ctk

from issuelane.logger import StructuredLogger
from issuelane.models.auth_models import AuthResult
from issuelane.models.user import UserProfile
from issuelane.services.auth_service import AuthService
from issuelane.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CARD_BORDER,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BRAND,
    FONT_BUTTON,
    FONT_CAPTION,
    FONT_ICON_LG,
    FONT_LABEL,
    FONT_SMALL,
    FONT_SUBTITLE,
    INPUT_BG,
    INPUT_BORDER,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_CARD_WIDTH: int = 420
_INPUT_HEIGHT: int = 44
_BUTTON_HEIGHT: int = 48
_BRAND_ICON_SIZE: int = 56


class LoginView(ctk.CTkFrame):
    """Full-screen sign-in frame.

    Parameters
    ----------
    parent:
        The root ``CTk`` window this frame belongs to.
    auth_service:
        Runs the sign-in pipeline.
    on_login_success:
        Callback invoked (on the main thread) with the signed-in
        profile.
    logger:
        Structured JSON logger for audit trail.
    """

    def __init__(
        self,
        parent: ctk.CTk,
        auth_service: AuthService,
        on_login_success: Callable[[UserProfile], None],
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)

        self._auth_service: AuthService = auth_service
        self._on_login_success: Callable[[UserProfile], None] = on_login_success
        self._logger: StructuredLogger = logger

        self._identifier_entry: Optional[ctk.CTkEntry] = None
        self._password_entry: Optional[ctk.CTkEntry] = None
        self._remember_var = ctk.BooleanVar(value=False)
        self._login_button: Optional[ctk.CTkButton] = None
        self._error_label: Optional[ctk.CTkLabel] = None

        self._build_ui()

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        """Centre the sign-in card in the window."""
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)
        self.grid_columnconfigure(0, weight=1)

        card = ctk.CTkFrame(
            self,
            width=_CARD_WIDTH,
            fg_color=CONTENT_CARD_BG,
            corner_radius=16,
            border_width=1,
            border_color=CARD_BORDER,
        )
        card.grid(row=1, column=0, pady=(0, PADDING_SM))

        inner = ctk.CTkFrame(card, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=36, pady=28)

        # -- Brand icon --
        icon_frame = ctk.CTkFrame(
            inner,
            width=_BRAND_ICON_SIZE,
            height=_BRAND_ICON_SIZE,
            corner_radius=14,
            fg_color=ACCENT_PRIMARY,
        )
        icon_frame.pack(pady=(0, 12))
        icon_frame.pack_propagate(False)
        ctk.CTkLabel(icon_frame, text="IL", font=FONT_ICON_LG, text_color=TEXT_LIGHT).place(
            relx=0.5, rely=0.5, anchor="center",
        )

        ctk.CTkLabel(inner, text="IssueLane", font=FONT_BRAND, text_color=TEXT_PRIMARY).pack(pady=(0, 2))
        ctk.CTkLabel(
            inner, text="Sign in to your helpdesk", font=FONT_SUBTITLE, text_color=TEXT_SECONDARY,
        ).pack(pady=(0, PADDING_LG))

        # Identifier
        ctk.CTkLabel(inner, text="EMAIL OR USERNAME", font=FONT_LABEL, text_color=TEXT_PRIMARY, anchor="w").pack(
            fill="x", pady=(0, 4),
        )
        self._identifier_entry = ctk.CTkEntry(
            inner,
            placeholder_text="name@company.com",
            font=FONT_BODY,
            fg_color=INPUT_BG,
            border_color=INPUT_BORDER,
            text_color=TEXT_PRIMARY,
            height=_INPUT_HEIGHT,
            corner_radius=CORNER_RADIUS,
        )
        self._identifier_entry.pack(fill="x", pady=(0, PADDING_MD))

        # Password
        ctk.CTkLabel(inner, text="PASSWORD", font=FONT_LABEL, text_color=TEXT_PRIMARY, anchor="w").pack(
            fill="x", pady=(0, 4),
        )
        self._password_entry = ctk.CTkEntry(
            inner,
            placeholder_text="••••••••",
            font=FONT_BODY,
            fg_color=INPUT_BG,
            border_color=INPUT_BORDER,
            text_color=TEXT_PRIMARY,
            show="*",
            height=_INPUT_HEIGHT,
            corner_radius=CORNER_RADIUS,
        )
        self._password_entry.pack(fill="x", pady=(0, PADDING_SM))

        ctk.CTkCheckBox(
            inner,
            text="Remember me",
            font=FONT_SMALL,
            text_color=TEXT_SECONDARY,
            variable=self._remember_var,
            checkbox_width=18,
            checkbox_height=18,
        ).pack(anchor="w", pady=(0, PADDING_LG))

        self._login_button = ctk.CTkButton(
            inner,
            text="Sign In  →",
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            height=_BUTTON_HEIGHT,
            corner_radius=CORNER_RADIUS,
            command=self._handle_login,
        )
        self._login_button.pack(fill="x", pady=(0, PADDING_SM))

        # Error label (hidden by default)
        self._error_label = ctk.CTkLabel(
            inner,
            text="",
            font=FONT_SMALL,
            text_color=ERROR_TEXT,
            wraplength=_CARD_WIDTH - 100,
        )

        ctk.CTkLabel(
            self,
            text="© 2025 IssueLane. All rights reserved.",
            font=FONT_CAPTION,
            text_color=TEXT_SECONDARY,
        ).grid(row=2, column=0, pady=(PADDING_SM, 0))

        self._identifier_entry.bind("<Return>", self._on_enter_key)
        self._password_entry.bind("<Return>", self._on_enter_key)
        self.after(100, self._identifier_entry.focus_set)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def show_message(self, message: str) -> None:
        """Display *message* in the error slot (e.g. session expired)."""
        self._show_error(message)

    # ------------------------------------------------------------------
    # Event Handlers
    # ------------------------------------------------------------------

    def _on_enter_key(self, _event: object) -> None:
        if self._login_button is not None and self._login_button.cget("state") != "disabled":
            self._handle_login()

    def _handle_login(self) -> None:
        """Gather inputs and start background sign-in."""
        identifier = self._identifier_entry.get().strip()
        password = self._password_entry.get()

        if not identifier or not password:
            self._show_error("Please enter your email or username and password.")
            return

        self._set_loading(True)
        self._clear_error()

        threading.Thread(
            target=self._authenticate,
            args=(identifier, password, bool(self._remember_var.get())),
            name="sign-in",
            daemon=True,
        ).start()

    def _authenticate(self, identifier: str, password: str, remember: bool) -> None:
        """Background thread: delegate to ``AuthService.sign_in``.

        All UI mutations are dispatched back via ``self.after(0, ...)``.
        """
        try:
            result = self._auth_service.sign_in(identifier, password, persist_session=remember)
        except Exception as exc:
            self._logger.error("Unexpected sign-in failure: %s", exc, exc_info=True)
            result = AuthResult(success=False, error_message=f"Sign-in failed: {exc}")

        def _finish() -> None:
            self._set_loading(False)
            if result.success and result.profile is not None:
                self._on_login_success(result.profile)
            else:
                self._show_error(result.error_message or "Sign-in failed.")

        self.after(0, _finish)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _set_loading(self, loading: bool) -> None:
        if not self.winfo_exists() or self._login_button is None:
            return
        if loading:
            self._login_button.configure(state="disabled", text="Signing in...")
            self._identifier_entry.configure(state="disabled")
            self._password_entry.configure(state="disabled")
        else:
            self._login_button.configure(state="normal", text="Sign In  →")
            self._identifier_entry.configure(state="normal")
            self._password_entry.configure(state="normal")

    def _show_error(self, message: str) -> None:
        if self._error_label is None:
            return
        self._error_label.configure(text=message)
        self._error_label.pack(fill="x", pady=(PADDING_SM, 0))

    def _clear_error(self) -> None:
        if self._error_label is not None:
            self._error_label.configure(text="")
            self._error_label.pack_forget()
