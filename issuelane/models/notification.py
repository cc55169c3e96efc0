"""Notification Model."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from issuelane.models.enums import NotificationType


class Notification(BaseModel):
    """An entry in the notifications dialog.

    ``time`` is a pre-rendered relative label (``"5 min ago"``).
    """

    id: int
    title: str
    message: str
    time: str
    unread: bool = True
    type: Optional[NotificationType] = None
