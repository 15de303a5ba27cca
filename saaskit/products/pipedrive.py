"""Pipedrive CRM adapter."""

import logging
from typing import Any

from saaskit.core.models import ConfigError, Page
from .base import ProductAdapter

logger = logging.getLogger(__name__)


def extract_pagination(payload: dict) -> tuple[bool, str | None]:
    """
    Read ``additional_data.pagination`` from a Pipedrive list response.

    Returns:
        Tuple of (more_items_in_collection, next_start as a string)
    """
    pagination = (payload.get("additional_data") or {}).get("pagination") or {}
    next_start = pagination.get("next_start")
    return (
        bool(pagination.get("more_items_in_collection", False)),
        None if next_start is None else str(next_start),
    )


class PipedriveAdapter(ProductAdapter):
    """
    Pipedrive v1 API.

    Lists answer ``{"success": true, "data": [...], "additional_data":
    {"pagination": {...}}}`` and page through a ``start`` offset. A
    personal API token travels as the ``api_token`` query parameter; an
    OAuth access token as a bearer header.
    """

    product_id = "pipedrive"
    display_name = "Pipedrive"
    cursor_param = "start"

    def build_auth_headers(self, credentials: dict) -> dict[str, str]:
        if credentials.get("access_token"):
            return super().build_auth_headers(credentials)
        if not credentials.get("api_token"):
            raise ConfigError(
                "Pipedrive credentials must include 'api_token' or 'access_token'"
            )
        return {}

    def build_auth_params(self, credentials: dict) -> dict[str, str]:
        if credentials.get("access_token"):
            return {}
        return {"api_token": self._require(credentials, "api_token")}

    def parse_page(self, payload: Any) -> Page[dict]:
        # "data" is null on an empty collection
        data = self._item_list(payload, "data", null_is_empty=True)
        more, next_start = extract_pagination(payload)
        logger.debug(f"Pipedrive page: {len(data)} items, more={more}, next_start={next_start!r}")
        return Page(items=data, has_more_pages=more, next_cursor=next_start)
