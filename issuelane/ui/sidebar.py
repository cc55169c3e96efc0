"""Sidebar Navigation Component.

Displays the registered screens, the signed-in user's avatar and
assignment, a notifications button with an unread badge, and a logout
button.  Follows the **Thin UI** rule: zero business logic — all
actions are delegated via injected callbacks.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from issuelane.logger import StructuredLogger
from issuelane.models.user import UserProfile
from issuelane.ui.components.widgets import avatar
from issuelane.ui.theme import (
    BADGE_UNREAD,
    FONT_BODY,
    FONT_CAPTION,
    FONT_SIDEBAR,
    FONT_SIDEBAR_ACTIVE,
    FONT_SMALL,
    LOGOUT_HOVER,
    LOGOUT_PRIMARY,
    PADDING_MD,
    PADDING_SM,
    SIDEBAR_ACTIVE,
    SIDEBAR_BG,
    SIDEBAR_HOVER,
    SIDEBAR_TEXT,
    SIDEBAR_WIDTH,
    TEXT_LIGHT,
)

_AVATAR_SIZE: int = 40


class _ModuleButton(ctk.CTkButton):
    """Internal clickable sidebar entry for a single screen."""

    def __init__(
        self,
        parent: ctk.CTkFrame,
        module_id: str,
        display_name: str,
        icon: str,
        on_click: Callable[[str], None],
    ) -> None:
        self._module_id = module_id
        super().__init__(
            parent,
            text=f"  {icon}   {display_name}",
            anchor="w",
            font=FONT_SIDEBAR,
            text_color=SIDEBAR_TEXT,
            fg_color="transparent",
            hover_color=SIDEBAR_HOVER,
            height=40,
            corner_radius=6,
            command=lambda: on_click(self._module_id),
        )

    def set_active(self, active: bool) -> None:
        """Highlight or un-highlight this button."""
        if active:
            self.configure(fg_color=SIDEBAR_ACTIVE, font=FONT_SIDEBAR_ACTIVE)
        else:
            self.configure(fg_color="transparent", font=FONT_SIDEBAR)


class SidebarNav(ctk.CTkFrame):
    """Sidebar navigation panel for the Host Shell.

    Parameters
    ----------
    parent:
        The parent widget (typically the AppShell root).
    profile:
        The signed-in user (name, initials, role).
    on_module_selected:
        Called with the ``module_id`` when the user clicks a screen.
    on_profile:
        Called when the user clicks their name or avatar.
    on_notifications:
        Called when the user clicks the notifications button.
    on_logout:
        Called when the user clicks the Logout button.
    logger:
        Structured logger instance.
    version:
        Application version shown at the bottom.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        profile: UserProfile,
        on_module_selected: Callable[[str], None],
        on_profile: Callable[[], None],
        on_notifications: Callable[[], None],
        on_logout: Callable[[], None],
        logger: StructuredLogger,
        version: str = "",
    ) -> None:
        super().__init__(parent, width=SIDEBAR_WIDTH, fg_color=SIDEBAR_BG, corner_radius=0)
        self.pack_propagate(False)

        self._on_module_selected = on_module_selected
        self._on_profile = on_profile
        self._on_notifications = on_notifications
        self._on_logout = on_logout
        self._logger = logger

        self._buttons: dict[str, _ModuleButton] = {}
        self._active_module_id: Optional[str] = None
        self._name_label: Optional[ctk.CTkLabel] = None
        self._role_label: Optional[ctk.CTkLabel] = None
        self._avatar_holder: Optional[ctk.CTkFrame] = None
        self._logout_button: Optional[ctk.CTkButton] = None

        self._build_ui(version)
        self.set_profile(profile)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register_module(self, module_id: str, display_name: str, icon: str) -> None:
        """Add a screen entry to the sidebar."""
        btn = _ModuleButton(
            parent=self._modules_frame,
            module_id=module_id,
            display_name=display_name,
            icon=icon,
            on_click=self._on_module_selected,
        )
        btn.pack(fill="x", padx=PADDING_SM, pady=2)
        self._buttons[module_id] = btn

    def set_active(self, module_id: str) -> None:
        """Highlight *module_id* and un-highlight the previous one."""
        if self._active_module_id and self._active_module_id in self._buttons:
            self._buttons[self._active_module_id].set_active(False)
        if module_id in self._buttons:
            self._buttons[module_id].set_active(True)
        self._active_module_id = module_id

    def set_profile(self, profile: Optional[UserProfile]) -> None:
        """Redraw the identity block; listens to profile cache changes."""
        if self._name_label is None or profile is None:
            return
        self._name_label.configure(text=profile.full_name)
        self._role_label.configure(text=profile.role_name or profile.designation_name)
        for child in self._avatar_holder.winfo_children():
            child.destroy()
        circle = avatar(self._avatar_holder, profile.initials, size=_AVATAR_SIZE)
        circle.pack()
        self._bind_profile_click(circle)

    def set_unread(self, count: int) -> None:
        if count:
            self._badge.configure(text=str(count) if count < 100 else "99+")
            self._badge.pack(side="right", padx=(0, PADDING_SM))
        else:
            self._badge.pack_forget()

    def set_logout_busy(self, busy: bool) -> None:
        if self._logout_button is not None:
            self._logout_button.configure(
                state="disabled" if busy else "normal",
                text="  ⏻   Signing out..." if busy else "  ⏻   Log Out",
            )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_ui(self, version: str) -> None:
        """Construct the sidebar layout."""
        ctk.CTkLabel(
            self, text="IssueLane", font=("Segoe UI", 18, "bold"), text_color=TEXT_LIGHT, anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, PADDING_SM))

        # --- User info section: avatar + name + role ---
        row = ctk.CTkFrame(self, fg_color="transparent")
        row.pack(fill="x", padx=PADDING_MD, pady=(PADDING_SM, PADDING_SM))

        self._avatar_holder = ctk.CTkFrame(row, fg_color="transparent")
        self._avatar_holder.pack(side="left", padx=(0, 10))

        text_frame = ctk.CTkFrame(row, fg_color="transparent")
        text_frame.pack(side="left", fill="x", expand=True)
        self._name_label = ctk.CTkLabel(
            text_frame, text="", font=FONT_SIDEBAR_ACTIVE, text_color=TEXT_LIGHT, anchor="w",
        )
        self._name_label.pack(fill="x")
        self._role_label = ctk.CTkLabel(
            text_frame, text="", font=FONT_SMALL, text_color=SIDEBAR_TEXT, anchor="w",
        )
        self._role_label.pack(fill="x")
        for widget in (row, text_frame, self._name_label, self._role_label):
            self._bind_profile_click(widget)

        # --- Separator ---
        ctk.CTkFrame(self, height=1, fg_color=SIDEBAR_HOVER).pack(fill="x", padx=PADDING_MD, pady=PADDING_SM)

        # --- Screen list ---
        self._modules_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._modules_frame.pack(fill="both", expand=True, padx=0, pady=PADDING_SM)

        # --- Bottom section: version + logout + notifications ---
        ctk.CTkLabel(self, text=f"v{version}", font=FONT_CAPTION, text_color=SIDEBAR_TEXT).pack(
            side="bottom", pady=(0, PADDING_SM),
        )
        bottom_frame = ctk.CTkFrame(self, fg_color="transparent")
        bottom_frame.pack(fill="x", padx=PADDING_SM, pady=PADDING_SM, side="bottom")
        ctk.CTkFrame(self, height=1, fg_color=SIDEBAR_HOVER).pack(fill="x", padx=PADDING_MD, side="bottom")

        notify_row = ctk.CTkFrame(bottom_frame, fg_color="transparent")
        notify_row.pack(fill="x", pady=(0, 2))
        ctk.CTkButton(
            notify_row,
            text="  \U0001F514   Notifications",
            font=FONT_BODY,
            fg_color="transparent",
            hover_color=SIDEBAR_HOVER,
            text_color=SIDEBAR_TEXT,
            anchor="w",
            height=36,
            corner_radius=6,
            command=self._on_notifications,
        ).pack(side="left", fill="x", expand=True)
        self._badge = ctk.CTkLabel(
            notify_row, text="", font=FONT_CAPTION, fg_color=BADGE_UNREAD, text_color=TEXT_LIGHT,
            corner_radius=9, width=22, height=18,
        )

        self._logout_button = ctk.CTkButton(
            bottom_frame,
            text="  ⏻   Log Out",
            font=FONT_BODY,
            fg_color="transparent",
            hover_color=LOGOUT_HOVER,
            text_color=LOGOUT_PRIMARY,
            anchor="w",
            height=36,
            corner_radius=6,
            command=self._on_logout,
        )
        self._logout_button.pack(fill="x")

    def _bind_profile_click(self, widget: ctk.CTkBaseClass) -> None:
        widget.bind("<Button-1>", lambda _event: self._on_profile())
        for child in widget.winfo_children():
            self._bind_profile_click(child)
