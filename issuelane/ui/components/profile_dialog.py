"""Profile Dialog.

Shows the cached profile and its assignment.  "Refresh" re-reads both
from the backend through ``ProfileCacheService.refresh``.
"""

from __future__ import annotations

from typing import Optional

import customtkinter as ctk

from issuelane.logger import StructuredLogger
from issuelane.models.service_models import ServiceResult
from issuelane.models.user import UserProfile
from issuelane.repositories.user_repository import UserRepository
from issuelane.services.profile_cache import ProfileCacheService
from issuelane.ui.background import run_in_background
from issuelane.ui.components.dialog import ModalDialog
from issuelane.ui.components.widgets import avatar
from issuelane.ui.theme import (
    BUTTON_NEUTRAL,
    BUTTON_NEUTRAL_HOVER,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BUTTON,
    FONT_HEADING,
    FONT_SMALL,
    PADDING_MD,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)


class ProfileDialog(ModalDialog):
    def __init__(
        self,
        parent: ctk.CTkBaseClass,
        profile_cache: ProfileCacheService,
        user_repo: UserRepository,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, title="My Profile", height=600)
        self._cache = profile_cache
        self._user_repo = user_repo
        self._logger = logger
        self._render(profile_cache.get_profile())

    def _render(self, profile: Optional[UserProfile]) -> None:
        for child in self.body.winfo_children():
            child.destroy()
        if profile is None:
            ctk.CTkLabel(self.body, text="No profile cached.", font=FONT_BODY, text_color=TEXT_SECONDARY).pack()
            return

        head = ctk.CTkFrame(self.body, fg_color="transparent")
        head.pack(fill="x", pady=(0, PADDING_MD))
        avatar(head, profile.initials, size=64).pack(side="left", padx=(0, PADDING_MD))
        names = ctk.CTkFrame(head, fg_color="transparent")
        names.pack(side="left", fill="x", expand=True)
        ctk.CTkLabel(names, text=profile.full_name, font=FONT_HEADING, text_color=TEXT_PRIMARY, anchor="w").pack(fill="x")
        ctk.CTkLabel(
            names, text=f"@{profile.username}  ·  {profile.role_name} · {profile.designation_name}",
            font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w",
        ).pack(fill="x")

        rows = (
            ("Email", profile.email),
            ("Middle name", profile.middle_name or "–"),
            ("Mobile", profile.mobile_number or "–"),
            ("Address", profile.address or "–"),
            ("Birthday", f"{profile.birthday:%B %d, %Y}" if profile.birthday else "–"),
            ("Sex", profile.sex or "–"),
            ("Member since", f"{profile.created_at:%B %Y}" if profile.created_at else "–"),
            ("User ID", str(profile.user_id)),
        )
        for label, value in rows:
            self.field_label(self.body, label)
            ctk.CTkLabel(self.body, text=value, font=FONT_BODY, text_color=TEXT_PRIMARY, anchor="w").pack(fill="x")

        self._error = ctk.CTkLabel(self.body, text="", font=FONT_SMALL, text_color=ERROR_TEXT, anchor="w")
        self._error.pack(fill="x", pady=(PADDING_SM, 0))
        self._refresh_button = ctk.CTkButton(
            self.body, text="Refresh", font=FONT_BUTTON, fg_color=BUTTON_NEUTRAL,
            hover_color=BUTTON_NEUTRAL_HOVER, text_color=TEXT_PRIMARY, command=self._refresh,
        )
        self._refresh_button.pack(anchor="e", pady=(PADDING_SM, PADDING_MD))

    def _refresh(self) -> None:
        self._refresh_button.configure(state="disabled", text="Refreshing...")
        run_in_background(
            self, lambda: self._cache.refresh(self._user_repo), self._handle_refresh, self._logger,
            name="profile-refresh",
        )

    def _handle_refresh(self, result: ServiceResult[UserProfile]) -> None:
        if result.success:
            self._render(result.data)
            return
        self._refresh_button.configure(state="normal", text="Refresh")
        self._error.configure(text=result.error or "Could not refresh the profile.")
