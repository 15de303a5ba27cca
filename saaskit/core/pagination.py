"""
Cursor pagination adapter.

Turns a page-at-a-time list operation into one lazy sequence of items.
Pages are requested only when the consumer has drained the previous page
and asks for more; nothing is prefetched. An exception raised while
fetching a page propagates out of the iterator after every item of the
earlier pages has been yielded, and ends the sequence.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from typing import TypeVar

from .models import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[str | None], Page[T]]
AsyncPageFetcher = Callable[[str | None], Awaitable[Page[T]]]


def should_fetch_next(page: Page, previous_cursor: str | None) -> bool:
    """
    Decide whether another page should be requested after ``page``.

    Args:
        page: The page that was just drained
        previous_cursor: Cursor that was sent to obtain ``page``

    Returns:
        True if the listing continues with ``page.next_cursor``
    """
    if not page.has_more_pages:
        return False

    if not page.items:
        logger.warning("Server reported more pages after an empty page; stopping")
        return False

    if page.next_cursor is None:
        logger.warning("Server claimed more pages without a cursor; stopping")
        return False

    if page.next_cursor == previous_cursor:
        logger.warning(
            f"Server returned a stale cursor ({page.next_cursor!r}); stopping"
        )
        return False

    return True


def iter_items(fetch_page: PageFetcher) -> Iterator[T]:
    """
    Lazily iterate over every item of a paginated listing.

    Args:
        fetch_page: Callable taking a cursor (None for the first page)
                    and returning a Page. Fixed filters should already be
                    bound into it.

    Yields:
        Items in the order the server returned them, page after page

    Raises:
        Whatever ``fetch_page`` raises, after all items of earlier pages
    """
    cursor = None
    page_number = 1

    while True:
        page = fetch_page(cursor)
        logger.debug(
            f"Fetched page {page_number} (cursor={cursor!r}, items={len(page.items)})"
        )

        yield from page.items

        if not should_fetch_next(page, cursor):
            return

        cursor = page.next_cursor
        page_number += 1


async def aiter_items(fetch_page: AsyncPageFetcher) -> AsyncIterator[T]:
    """
    Async counterpart of :func:`iter_items`.

    The page fetch is awaited inside ``__anext__``, so cancelling the task
    that is pulling from the sequence cancels the in-flight request.
    """
    cursor = None
    page_number = 1

    while True:
        page = await fetch_page(cursor)
        logger.debug(
            f"Fetched page {page_number} (cursor={cursor!r}, items={len(page.items)})"
        )

        for item in page.items:
            yield item

        if not should_fetch_next(page, cursor):
            return

        cursor = page.next_cursor
        page_number += 1
