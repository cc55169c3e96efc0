"""Tests for display and path helpers.

Covers:
- initials fallback
- attachment names from public URLs
- storage key sanitising
- relative time labels
"""

from datetime import datetime, timedelta, timezone

import pytest

from issuelane.utils.text import (
    file_name_from_url,
    get_initials,
    random_storage_name,
    relative_time,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "name, expected",
    [("Sarah Chen", "SC"), ("mike ross jr", "MR"), ("Cher", "C"), ("", "JD"), ("   ", "JD")],
)
def test_get_initials(name, expected):
    assert get_initials(name) == expected


def test_file_name_from_url():
    assert file_name_from_url("https://cdn.example.test/a/b/screen%20shot.png") == "screen shot.png"
    assert file_name_from_url("https://cdn.example.test/") == "Attachment"


def test_random_storage_name_sanitises_and_is_unique():
    first = random_storage_name("C:\\Users\\me\\my report (1).pdf", "tickets")
    second = random_storage_name("C:\\Users\\me\\my report (1).pdf", "tickets")
    assert first.startswith("tickets/")
    assert first.endswith("-my_report_1_.pdf")
    assert first != second
    assert "/" not in random_storage_name("x.txt")


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=20), "just now"),
        (timedelta(minutes=5), "5 min ago"),
        (timedelta(hours=1), "1 hour ago"),
        (timedelta(hours=3), "3 hours ago"),
        (timedelta(days=2), "2 days ago"),
        (timedelta(days=-2), "in 2 days"),
        (timedelta(weeks=3), "3 weeks ago"),
    ],
)
def test_relative_time(delta, expected):
    assert relative_time(NOW - delta, now=NOW) == expected
