"""Rippling HR platform adapter."""

import logging
from typing import Any

import httpx

from saaskit.core.models import Page
from .base import ProductAdapter

logger = logging.getLogger(__name__)


def cursor_from_next_link(next_link: str | None) -> str | None:
    """
    Extract the cursor from a Rippling ``next_link`` value.

    Rippling returns the URL of the next page, e.g.
    ``https://rest.ripplingapis.com/workers?cursor=abc``. Some endpoints
    return the bare cursor instead, which is passed through unchanged.

    Args:
        next_link: The ``next_link`` field of a list response

    Returns:
        Cursor string, or None if there is no next page
    """
    if not next_link:
        return None

    if "?" not in next_link and "://" not in next_link and not next_link.startswith("/"):
        return next_link

    cursor = httpx.URL(next_link).params.get("cursor")
    if cursor is None:
        logger.debug(f"No cursor found in next_link {next_link!r}")
    return cursor


class RipplingAdapter(ProductAdapter):
    """
    Rippling REST API.

    Lists answer ``{"results": [...], "next_link": "..."}``; the listing
    is exhausted once ``next_link`` is absent.
    """

    product_id = "rippling"
    display_name = "Rippling"
    cursor_param = "cursor"

    def parse_page(self, payload: Any) -> Page[dict]:
        """
        Parse a Rippling list response.

        Raises:
            KeyError: If ``results`` is missing
            TypeError: If the payload or ``results`` has the wrong type
        """
        results = self._item_list(payload, "results")
        next_link = payload.get("next_link")
        return Page(
            items=results,
            has_more_pages=bool(next_link),
            next_cursor=cursor_from_next_link(next_link),
        )
