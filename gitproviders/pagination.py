"""
Cursor pagination.

Stash list endpoints return pages shaped like::

    {"values": [...], "size": 25, "limit": 25, "start": 0,
     "isLastPage": false, "nextPageStart": 25}

:func:`all_pages` keeps calling a single-page fetcher, advancing the cursor
to ``nextPageStart``, until the provider reports the last page.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from gitproviders.exceptions import PaginationLimitExceededError


@dataclass
class PageCursor:
    """Position in a paginated listing. ``next_page_start`` is authoritative."""

    start: int = 0
    limit: int = 0
    size: int = 0
    is_last_page: bool = True
    next_page_start: int = 0

    def query_params(self) -> dict[str, int]:
        """Paging query parameters. Zero values are omitted (provider default)."""
        params: dict[str, int] = {}
        if self.start:
            params["start"] = self.start
        if self.limit:
            params["limit"] = self.limit
        return params

    @classmethod
    def from_page(cls, data: dict[str, Any]) -> "PageCursor":
        """Read the cursor fields of a decoded page."""
        return cls(
            start=int(data.get("start") or 0),
            limit=int(data.get("limit") or 0),
            size=int(data.get("size") or 0),
            is_last_page=bool(data.get("isLastPage", True)),
            next_page_start=int(data.get("nextPageStart") or 0),
        )


def all_pages(
    cursor: PageCursor,
    fetch_one: Callable[[], PageCursor],
    max_pages: int | None = None,
) -> None:
    """
    Drive ``fetch_one`` until the provider reports the last page.

    ``fetch_one`` reads ``cursor`` to build its request, accumulates the
    page's items into caller-held storage, and returns the page's own cursor.
    Before the next call ``cursor.start`` is set to that page's
    ``next_page_start``. Errors from ``fetch_one`` propagate unchanged; items
    accumulated so far stay in the caller's storage.

    Args:
        cursor: The cursor ``fetch_one`` reads; advanced in place
        fetch_one: Fetches one page and returns its cursor
        max_pages: Upper bound on the number of pages; None means unbounded

    Raises:
        PaginationLimitExceededError: If more than ``max_pages`` pages would be fetched
    """
    pages = 0
    while True:
        if max_pages is not None and pages >= max_pages:
            raise PaginationLimitExceededError(max_pages)
        page = fetch_one()
        pages += 1
        if page.is_last_page:
            return
        cursor.start = page.next_page_start


__all__ = ["PageCursor", "all_pages"]
