"""HubSpot CRM adapter."""

import logging
from typing import Any

from saaskit.core.models import Page
from .base import ProductAdapter

logger = logging.getLogger(__name__)


def extract_after(payload: dict) -> str | None:
    """Return ``paging.next.after`` as a string, or None on the last page."""
    after = ((payload.get("paging") or {}).get("next") or {}).get("after")
    return None if after is None else str(after)


class HubSpotAdapter(ProductAdapter):
    """
    HubSpot v3 CRM objects.

    Lists answer ``{"results": [...], "paging": {"next": {"after": "..."}}}``
    and the ``after`` value is sent back as a query parameter. Private app
    tokens and OAuth tokens both travel as bearer tokens.
    """

    product_id = "hubspot"
    display_name = "HubSpot"
    cursor_param = "after"

    def parse_page(self, payload: Any) -> Page[dict]:
        results = self._item_list(payload, "results")
        after = extract_after(payload)
        logger.debug(f"HubSpot page: {len(results)} results, after={after!r}")
        return Page(items=results, has_more_pages=after is not None, next_cursor=after)
