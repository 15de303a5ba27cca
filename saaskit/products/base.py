"""Base class for product adapters."""

from abc import ABC, abstractmethod
from typing import Any

from saaskit.core.models import ConfigError, Page, ProductDefinition


class ProductAdapter(ABC):
    """
    What the generic client needs to know about one product's API.

    Subclasses name the query parameter that carries the cursor and say
    where a list response keeps its items and its next cursor. Bearer
    authentication is the default.
    """

    product_id: str
    display_name: str
    cursor_param: str

    def __init__(self, product_def: ProductDefinition):
        self.product_def = product_def

    def build_auth_headers(self, credentials: dict) -> dict[str, str]:
        """
        Headers attached to every request.

        Raises:
            ConfigError: If credentials lack an access_token
        """
        return {"Authorization": f"Bearer {self._require(credentials, 'access_token')}"}

    def build_auth_params(self, credentials: dict) -> dict[str, str]:
        """Query parameters attached to every request."""
        return {}

    @abstractmethod
    def parse_page(self, payload: Any) -> Page[dict]:
        """
        Extract items and pagination metadata from a list response.

        Raises:
            KeyError, TypeError, ValueError: If the payload does not have
                the shape of a list response
        """

    def _require(self, credentials: dict, field: str) -> str:
        value = credentials.get(field)
        if not value:
            raise ConfigError(f"{self.display_name} credentials must include '{field}'")
        return value

    @staticmethod
    def _item_list(payload: Any, key: str, null_is_empty: bool = False) -> list:
        """Return ``payload[key]``, checking that it is a list of records."""
        if not isinstance(payload, dict):
            raise TypeError(f"Expected a JSON object, got {type(payload).__name__}")

        items = payload[key]
        if items is None and null_is_empty:
            return []
        if not isinstance(items, list):
            raise TypeError(f"'{key}' must be a list, got {type(items).__name__}")
        return items
