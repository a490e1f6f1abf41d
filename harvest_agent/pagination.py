"""
Cursor-driven pagination over GitLab listing endpoints.

The walker is deliberately sequential: one page is requested at a time and
batches are yielded in the order the server returns them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


@dataclass
class PageCursor:
    """Page size and index sent with a listing request."""
    page_size: int = DEFAULT_PAGE_SIZE
    page: int = 1


@dataclass(frozen=True)
class PageInfo:
    """Pagination facts reported by the server for one page."""
    current_page: int
    total_pages: int | None = None
    next_page: int | None = None
    total_items: int | None = None

    @property
    def is_last(self) -> bool:
        """Return True when no further page should be requested."""
        # GitLab omits X-Total-Pages for very large collections
        if self.total_pages is None:
            return self.next_page is None
        return self.current_page >= self.total_pages

    def following_page(self) -> int:
        """
        Page index to request next.

        With a known page count every page up to it is visited in turn, even
        if the server reports a next page further ahead. Without one, the
        server's next page is the only signal and is followed when it moves
        forward.
        """
        if (
            self.total_pages is None
            and self.next_page is not None
            and self.next_page > self.current_page
        ):
            return self.next_page
        return self.current_page + 1


ListPage = Callable[[str, PageCursor], "tuple[list[dict[str, Any]], PageInfo]"]


def walk_pages(
    list_page: ListPage,
    scope: str,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Iterator[list[dict[str, Any]]]:
    """
    Drive a listing function until the server reports no further pages.

    Args:
        list_page: Callable taking (scope, cursor) and returning (records, PageInfo)
        scope: Group path or username passed through to ``list_page``
        page_size: Records requested per page

    Yields:
        One batch of raw records per page, in page order

    Raises:
        PageFetchError: Propagated from ``list_page`` as soon as any page fails
    """
    cursor = PageCursor(page_size=page_size, page=1)

    while True:
        logger.debug(f"Fetching page {cursor.page} of {scope} (per_page={cursor.page_size})")
        records, info = list_page(scope, cursor)

        yield records

        if info.is_last:
            logger.debug(f"Reached last page ({info.current_page}/{info.total_pages}) of {scope}")
            break

        cursor.page = info.following_page()
