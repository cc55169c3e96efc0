"""
Text Helpers.

Display-name and path helpers shared by models, services and views.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Optional, Union
from urllib.parse import unquote, urlparse

__all__ = [
    "JsonValue",
    "file_name_from_url",
    "get_initials",
    "random_storage_name",
    "relative_time",
]

# ---------------------------------------------------------------------------
# Recursive JSON value type (no ``Any``)
# ---------------------------------------------------------------------------

JsonValue = Union[
    str,
    int,
    float,
    bool,
    None,
    dict[str, "JsonValue"],
    list["JsonValue"],
]

DEFAULT_INITIALS: str = "JD"
DEFAULT_ATTACHMENT_NAME: str = "Attachment"

# Anything outside this set is replaced in storage object names.
_RE_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

_TIME_UNITS: tuple[tuple[int, str], ...] = (
    (7 * 86400, "week"),
    (86400, "day"),
    (3600, "hour"),
    (60, "min"),
)


def get_initials(name: str) -> str:
    """Return up to two uppercase initials for *name*.

    Examples
    --------
    >>> get_initials("Sarah Chen")
    'SC'
    >>> get_initials("  mike   ross jr ")
    'MR'
    >>> get_initials("")
    'JD'
    """
    if not name:
        return DEFAULT_INITIALS
    letters = [part[0].upper() for part in name.strip().split() if part]
    return "".join(letters[:2]) or DEFAULT_INITIALS


def file_name_from_url(url: str) -> str:
    """Last path segment of *url*, or ``"Attachment"`` when there is none."""
    try:
        path = urlparse(url).path
    except ValueError:
        return DEFAULT_ATTACHMENT_NAME
    name = PurePosixPath(unquote(path)).name
    return name or DEFAULT_ATTACHMENT_NAME


def random_storage_name(original_name: str, folder: str = "") -> str:
    """Build a collision-free storage key that keeps *original_name* as suffix.

    >>> random_storage_name("screen shot.png", "tickets")  # doctest: +SKIP
    'tickets/3f2a...-screen_shot.png'
    """
    base = PurePosixPath(original_name.replace("\\", "/")).name
    safe = _RE_UNSAFE_NAME_CHARS.sub("_", base).strip("._") or "file"
    key = f"{uuid.uuid4().hex}-{safe}"
    return f"{folder.strip('/')}/{key}" if folder.strip("/") else key


def relative_time(moment: datetime, now: Optional[datetime] = None) -> str:
    """Render *moment* as ``"5 min ago"`` / ``"in 2 days"`` relative to *now*."""
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    seconds = int((now - moment).total_seconds())
    future = seconds < 0
    seconds = abs(seconds)

    if seconds < 60:
        return "just now"
    for unit_seconds, unit in _TIME_UNITS:
        if seconds >= unit_seconds:
            count = seconds // unit_seconds
            label = f"{count} {unit}{'s' if count != 1 and unit != 'min' else ''}"
            return f"in {label}" if future else f"{label} ago"
    return "just now"
