"""
List / Filter / Paginate Controller.

Pure functions and a small state holder shared by the tickets and tasks
screens.  No I/O: the view feeds records in and renders the returned
``PageSlice``.

Lists keep their insertion order; there is no sort step.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Callable, Optional, Protocol, TypeVar

from issuelane.models.service_models import ALL, ListFilters, PageSlice

__all__ = [
    "ListController",
    "distinct_values",
    "filter_records",
    "paginate",
    "status_counts",
]


class ListRecord(Protocol):
    """Attributes the filters read from tickets and tasks."""

    id: str
    title: str
    description: str
    status: str
    priority: str


R = TypeVar("R", bound=ListRecord)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def _matches(record: ListRecord, filters: ListFilters, needle: str) -> bool:
    if filters.status != ALL and record.status != filters.status:
        return False
    if filters.priority != ALL and record.priority != filters.priority:
        return False
    for attr, wanted in filters.extra.items():
        if wanted != ALL and str(getattr(record, attr, "")) != wanted:
            return False
    if needle:
        haystacks = (record.id, record.title, record.description or "")
        if not any(needle in text.lower() for text in haystacks):
            return False
    return True


def filter_records(records: Sequence[R], filters: ListFilters) -> list[R]:
    """Return the records satisfying every active filter, in input order.

    A record matches when status, priority and each ``extra`` filter is
    ``"all"`` or equal to the record's value, and the search text is
    empty or a case-insensitive substring of its id, title or
    description.
    """
    if filters.is_unfiltered:
        return list(records)
    needle = filters.search.strip().lower()
    return [record for record in records if _matches(record, filters, needle)]


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def paginate(matches: Sequence[R], page: int, page_size: int) -> PageSlice[R]:
    """Slice ``[(page-1)*page_size, page*page_size)`` out of *matches*.

    *page* is clamped into ``[1, total_pages]``.  An empty input yields
    one empty page.

    Raises
    ------
    ValueError
        If *page_size* is not positive.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")

    total = len(matches)
    total_pages = max(1, math.ceil(total / page_size))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    items = list(matches[start:start + page_size])

    return PageSlice(
        items=items,
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        start_index=start + 1 if items else 0,
        end_index=start + len(items),
        has_previous=page > 1,
        has_next=page < total_pages,
    )


# ---------------------------------------------------------------------------
# Stats helpers
# ---------------------------------------------------------------------------

def status_counts(records: Iterable[ListRecord]) -> Counter[str]:
    """Count records per status value."""
    return Counter(str(record.status) for record in records)


def distinct_values(records: Iterable[object], attr: str) -> list[str]:
    """Distinct values of *attr* in first-seen order (filter dropdown options)."""
    seen: dict[str, None] = {}
    for record in records:
        value = getattr(record, attr, None)
        if value:
            seen.setdefault(str(value), None)
    return list(seen)


# ---------------------------------------------------------------------------
# Stateful controller
# ---------------------------------------------------------------------------

class ListController:
    """UI state of one list screen: search, filters, page and page size.

    Any change to the search text, a filter, or the page size returns to
    page 1.  Page navigation is clamped to ``[1, total_pages]``.

    Parameters
    ----------
    page_size:
        Initial rows per page.
    on_change:
        Called with no arguments after every state change so the view
        can re-render.
    """

    def __init__(
        self,
        page_size: int = 5,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._records: list[ListRecord] = []
        self._filters: ListFilters = ListFilters()
        self._page: int = 1
        self._page_size: int = page_size
        self._on_change = on_change

    # -- State ---------------------------------------------------------------

    @property
    def filters(self) -> ListFilters:
        return self._filters

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def records(self) -> list[ListRecord]:
        return list(self._records)

    def set_records(self, records: Sequence[ListRecord]) -> None:
        """Replace the source list, keeping the current page when still valid."""
        self._records = list(records)
        self._page = min(self._page, self.current_slice().total_pages)
        self._changed()

    # -- Filters (each resets to page 1) ---------------------------------

    def set_search(self, text: str) -> None:
        self._update_filters(search=text)

    def set_status(self, status: str) -> None:
        self._update_filters(status=status)

    def set_priority(self, priority: str) -> None:
        self._update_filters(priority=priority)

    def set_extra(self, attr: str, value: str) -> None:
        self._update_filters(extra={**self._filters.extra, attr: value})

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._page_size = page_size
        self._page = 1
        self._changed()

    def reset_filters(self) -> None:
        self._filters = ListFilters()
        self._page = 1
        self._changed()

    def _update_filters(self, **changes: object) -> None:
        self._filters = self._filters.model_copy(update=changes)
        self._page = 1
        self._changed()

    # -- Derived views ---------------------------------------------------

    def filtered(self) -> list[ListRecord]:
        return filter_records(self._records, self._filters)

    def current_slice(self) -> PageSlice[ListRecord]:
        return paginate(self.filtered(), self._page, self._page_size)

    # -- Navigation ------------------------------------------------------

    def go_to(self, page: int) -> None:
        total_pages = self.current_slice().total_pages
        target = min(max(page, 1), total_pages)
        if target != self._page:
            self._page = target
            self._changed()

    def first(self) -> None:
        self.go_to(1)

    def previous(self) -> None:
        self.go_to(self._page - 1)

    def next(self) -> None:
        self.go_to(self._page + 1)

    def last(self) -> None:
        self.go_to(self.current_slice().total_pages)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
