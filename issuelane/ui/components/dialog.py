"""Modal dialog base shared by the detail, create and profile dialogs."""

from __future__ import annotations

import customtkinter as ctk

from issuelane.ui.theme import (
    CONTENT_BG,
    DIALOG_WIDTH,
    FONT_HEADING,
    FONT_LABEL,
    FONT_SUBTITLE,
    PADDING_LG,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)


class ModalDialog(ctk.CTkToplevel):
    """Centred, window-modal ``CTkToplevel`` with a title block.

    Subclasses build into ``self.body``.
    """

    def __init__(
        self,
        parent: ctk.CTkBaseClass,
        title: str,
        subtitle: str = "",
        height: int = 560,
    ) -> None:
        super().__init__(parent)
        self.title(title)
        self.configure(fg_color=CONTENT_BG)
        self.resizable(False, True)

        root = parent.winfo_toplevel()
        x = root.winfo_rootx() + max((root.winfo_width() - DIALOG_WIDTH) // 2, 0)
        y = root.winfo_rooty() + max((root.winfo_height() - height) // 2, 0)
        self.geometry(f"{DIALOG_WIDTH}x{height}+{x}+{y}")
        self.transient(root)

        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=PADDING_LG, pady=(PADDING_LG, PADDING_SM))
        ctk.CTkLabel(header, text=title, font=FONT_HEADING, text_color=TEXT_PRIMARY, anchor="w").pack(fill="x")
        if subtitle:
            ctk.CTkLabel(
                header, text=subtitle, font=FONT_SUBTITLE, text_color=TEXT_SECONDARY, anchor="w",
            ).pack(fill="x")

        self.body = ctk.CTkScrollableFrame(self, fg_color="transparent")
        self.body.pack(fill="both", expand=True, padx=PADDING_LG - PADDING_SM, pady=(0, PADDING_LG))

        self.bind("<Escape>", lambda _event: self.destroy())
        # grab_set fails until the window is viewable
        self.after(50, self._grab)

    def _grab(self) -> None:
        if self.winfo_exists():
            self.grab_set()
            self.focus_force()

    def field_label(self, parent: ctk.CTkBaseClass, text: str) -> ctk.CTkLabel:
        label = ctk.CTkLabel(parent, text=text.upper(), font=FONT_LABEL, text_color=TEXT_SECONDARY, anchor="w")
        label.pack(fill="x", pady=(PADDING_SM, 2))
        return label
