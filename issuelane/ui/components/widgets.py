"""Small shared widgets: badges, stat cards, avatars and section cards."""

from __future__ import annotations

import customtkinter as ctk

from issuelane.ui.theme import (
    ACCENT_PRIMARY,
    CARD_BORDER,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    FONT_CAPTION,
    FONT_LABEL,
    FONT_SECTION,
    FONT_SMALL,
    FONT_STAT,
    PADDING_MD,
    PADDING_SM,
    PRIORITY_COLOURS,
    STATUS_COLOURS,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_NEUTRAL: tuple[str, str] = ("#e5e7eb", "#374151")


def badge(parent: ctk.CTkBaseClass, text: str, colours: tuple[str, str] = _NEUTRAL) -> ctk.CTkLabel:
    """Rounded pill label."""
    bg, fg = colours
    return ctk.CTkLabel(
        parent,
        text=f" {text} ",
        font=FONT_CAPTION,
        fg_color=bg,
        text_color=fg,
        corner_radius=10,
        height=22,
    )


def status_badge(parent: ctk.CTkBaseClass, status: str) -> ctk.CTkLabel:
    return badge(parent, status, STATUS_COLOURS.get(status, _NEUTRAL))


def priority_badge(parent: ctk.CTkBaseClass, priority: str) -> ctk.CTkLabel:
    return badge(parent, priority, PRIORITY_COLOURS.get(priority, _NEUTRAL))


def avatar(parent: ctk.CTkBaseClass, initials: str, size: int = 32) -> ctk.CTkFrame:
    """Circle with the user's initials."""
    circle = ctk.CTkFrame(
        parent, width=size, height=size, corner_radius=size // 2, fg_color=ACCENT_PRIMARY,
    )
    circle.pack_propagate(False)
    ctk.CTkLabel(
        circle,
        text=initials,
        font=("Segoe UI", max(size // 3, 10), "bold"),
        text_color=TEXT_LIGHT,
    ).place(relx=0.5, rely=0.5, anchor="center")
    return circle


def card(parent: ctk.CTkBaseClass) -> ctk.CTkFrame:
    return ctk.CTkFrame(
        parent,
        fg_color=CONTENT_CARD_BG,
        corner_radius=CORNER_RADIUS,
        border_width=1,
        border_color=CARD_BORDER,
    )


def section_title(parent: ctk.CTkBaseClass, text: str) -> ctk.CTkLabel:
    return ctk.CTkLabel(parent, text=text, font=FONT_SECTION, text_color=TEXT_PRIMARY, anchor="w")


class StatCard(ctk.CTkFrame):
    """Label + big number; ``set_value`` updates it in place."""

    def __init__(self, parent: ctk.CTkBaseClass, label: str, accent: str = ACCENT_PRIMARY) -> None:
        super().__init__(
            parent,
            fg_color=CONTENT_CARD_BG,
            corner_radius=CORNER_RADIUS,
            border_width=1,
            border_color=CARD_BORDER,
        )
        ctk.CTkLabel(
            self, text=label.upper(), font=FONT_LABEL, text_color=TEXT_SECONDARY, anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 0))
        self._value = ctk.CTkLabel(self, text="–", font=FONT_STAT, text_color=accent, anchor="w")
        self._value.pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_SM))
        self._hint = ctk.CTkLabel(self, text="", font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w")
        self._hint.pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_MD))

    def set_value(self, value: int, hint: str = "") -> None:
        self._value.configure(text=str(value))
        self._hint.configure(text=hint)
