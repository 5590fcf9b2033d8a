"""Drain cursor-based AppConfig listings into a single list.

Every AppConfig List* call returns at most one page. Callers that need the
complete set go through collect_pages so results are never silently
truncated.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from apcdeploy.config.defaults import DEFAULT_MAX_PAGES
from apcdeploy.lib.errors import PaginationLimitError
from apcdeploy.lib.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[str | None], tuple[list[T], str | None]]


def collect_pages(
    fetch: PageFetcher[T],
    *,
    operation: str = "list",
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[T]:
    """Call fetch until it stops returning a continuation token.

    Args:
        fetch: Called with None first, then with each returned token.
            Returns the page items and the next token (None when done).
        operation: Operation name used in logs and errors
        max_pages: Maximum number of pages before failing closed

    Returns:
        All items in page order, then in-page order

    Raises:
        PaginationLimitError: If more than max_pages pages are returned
        Exception: The first error raised by fetch; partial results are dropped
    """
    items: list[T] = []
    token: str | None = None
    pages = 0

    while True:
        if pages >= max_pages:
            raise PaginationLimitError(operation, max_pages)
        page, token = fetch(token)
        pages += 1
        items.extend(page)
        if not token:
            break

    logger.debug(f"{operation}: collected {len(items)} items from {pages} page(s)")
    return items
