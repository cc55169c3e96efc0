"""Shared utility functions for the IssueLane client.

Convenience re-exports so consumers can import directly from
``issuelane.utils`` while full module imports remain supported.
"""

from issuelane.utils.text import (
    JsonValue,
    file_name_from_url,
    get_initials,
    random_storage_name,
    relative_time,
)

__all__ = [
    "JsonValue",
    "file_name_from_url",
    "get_initials",
    "random_storage_name",
    "relative_time",
]
