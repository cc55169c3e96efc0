"""UI Theme Constants for IssueLane.

Centralises all colour, font, and sizing constants for the
CustomTkinter interface.  Dark sidebar + light content area.

This file contains **zero logic** — only ``Final`` constants and the
lookup tables that map enum values to badge colours.
"""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Colour palette: dark sidebar, light content
# ---------------------------------------------------------------------------

SIDEBAR_BG: Final[str] = "#111827"
SIDEBAR_HOVER: Final[str] = "#1f2937"
SIDEBAR_ACTIVE: Final[str] = "#312e81"
SIDEBAR_TEXT: Final[str] = "#e5e7eb"

CONTENT_BG: Final[str] = "#f3f4f6"
CONTENT_CARD_BG: Final[str] = "#ffffff"
CARD_BORDER: Final[str] = "#e5e7eb"

ACCENT_PRIMARY: Final[str] = "#4f46e5"
ACCENT_HOVER: Final[str] = "#4338ca"
TEXT_PRIMARY: Final[str] = "#111827"
TEXT_SECONDARY: Final[str] = "#6b7280"
TEXT_LIGHT: Final[str] = "#ffffff"

# Input / form
INPUT_BG: Final[str] = "#ffffff"
INPUT_BORDER: Final[str] = "#d1d5db"
ERROR_TEXT: Final[str] = "#dc2626"
SUCCESS_TEXT: Final[str] = "#16a34a"

# Interactive
ROW_HOVER: Final[str] = "#eef2ff"
BUTTON_NEUTRAL: Final[str] = "#e5e7eb"
BUTTON_NEUTRAL_HOVER: Final[str] = "#d1d5db"
LOGOUT_PRIMARY: Final[str] = "#ef4444"
LOGOUT_HOVER: Final[str] = "#3a1a1a"
BADGE_UNREAD: Final[str] = "#ef4444"

# Toasts: level → (background, foreground)
TOAST_COLOURS: Final[dict[str, tuple[str, str]]] = {
    "loading": ("#1f2937", "#f9fafb"),
    "success": ("#dcfce7", "#166534"),
    "warning": ("#fef3c7", "#92400e"),
    "error": ("#fee2e2", "#991b1b"),
}

# Badges: enum value → (background, foreground)
STATUS_COLOURS: Final[dict[str, tuple[str, str]]] = {
    "Open": ("#dbeafe", "#1e40af"),
    "In Progress": ("#fef3c7", "#92400e"),
    "Waiting": ("#ede9fe", "#5b21b6"),
    "Resolved": ("#dcfce7", "#166534"),
    "Closed": ("#e5e7eb", "#374151"),
    "To Do": ("#e5e7eb", "#374151"),
    "In Review": ("#ede9fe", "#5b21b6"),
    "Completed": ("#dcfce7", "#166534"),
}

PRIORITY_COLOURS: Final[dict[str, tuple[str, str]]] = {
    "Low": ("#e5e7eb", "#374151"),
    "Medium": ("#dbeafe", "#1e40af"),
    "High": ("#ffedd5", "#9a3412"),
    "Urgent": ("#fee2e2", "#991b1b"),
}

NOTIFICATION_ICONS: Final[dict[str, str]] = {
    "ticket": "\U0001F3AB",
    "task": "☑",
    "system": "⚙",
    "mention": "@",
}

# ---------------------------------------------------------------------------
# Fonts (Segoe UI on Windows, system fallback elsewhere)
# ---------------------------------------------------------------------------

FONT_FAMILY: Final[str] = "Segoe UI"
FONT_BRAND: Final[tuple[str, int, str]] = (FONT_FAMILY, 22, "bold")
FONT_ICON_LG: Final[tuple[str, int, str]] = (FONT_FAMILY, 24, "bold")
FONT_HEADING: Final[tuple[str, int, str]] = (FONT_FAMILY, 20, "bold")
FONT_SECTION: Final[tuple[str, int, str]] = (FONT_FAMILY, 15, "bold")
FONT_STAT: Final[tuple[str, int, str]] = (FONT_FAMILY, 26, "bold")
FONT_SUBTITLE: Final[tuple[str, int]] = (FONT_FAMILY, 12)
FONT_BODY: Final[tuple[str, int]] = (FONT_FAMILY, 13)
FONT_BODY_BOLD: Final[tuple[str, int, str]] = (FONT_FAMILY, 13, "bold")
FONT_SIDEBAR: Final[tuple[str, int]] = (FONT_FAMILY, 14)
FONT_SIDEBAR_ACTIVE: Final[tuple[str, int, str]] = (FONT_FAMILY, 14, "bold")
FONT_LABEL: Final[tuple[str, int, str]] = (FONT_FAMILY, 11, "bold")
FONT_SMALL: Final[tuple[str, int]] = (FONT_FAMILY, 11)
FONT_CAPTION: Final[tuple[str, int]] = (FONT_FAMILY, 10)
FONT_BUTTON: Final[tuple[str, int, str]] = (FONT_FAMILY, 13, "bold")

# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

SIDEBAR_WIDTH: Final[int] = 240
LOGIN_WINDOW_WIDTH: Final[int] = 480
LOGIN_WINDOW_HEIGHT: Final[int] = 640
MAIN_WINDOW_WIDTH: Final[int] = 1280
MAIN_WINDOW_HEIGHT: Final[int] = 800
CORNER_RADIUS: Final[int] = 8
PADDING_SM: Final[int] = 8
PADDING_MD: Final[int] = 16
PADDING_LG: Final[int] = 24
DIALOG_WIDTH: Final[int] = 560
TOAST_WIDTH: Final[int] = 340
