"""
API client implementation.

Provides sync and async clients that call a product's REST API with the
credentials and page layout described by its ProductAdapter, and expose
list endpoints as lazy item streams.
"""

import dataclasses
import logging
from collections.abc import AsyncIterator, Callable, Iterator
from functools import partial
from typing import Any

import httpx

from ..core.models import ProductDefinition, Page
from ..core.pagination import iter_items, aiter_items
from ..products.base import ProductAdapter

logger = logging.getLogger(__name__)

USER_AGENT = "saaskit-python"

ItemFactory = Callable[[dict], Any]


class APIError(Exception):
    """Raised when an API request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(APIError):
    """Raised when the HTTP request could not complete (connection, timeout)."""
    pass


class ServerError(APIError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Server error: {status_code} {body}", status_code=status_code)
        self.body = body


class DecodeError(APIError):
    """Raised when a successful response body cannot be decoded."""

    def __init__(self, reason: str, body: str, status_code: int | None = None):
        super().__init__(f"Failed to decode response: {reason}", status_code=status_code)
        self.reason = reason
        self.body = body


class _BaseApiClient:
    """Request building and response handling shared by both clients."""

    def __init__(
        self,
        product_def: ProductDefinition,
        adapter: ProductAdapter,
        credentials: dict[str, Any],
        timeout_seconds: float = 10.0,
    ):
        self.product_def = product_def
        self.adapter = adapter
        self.credentials = credentials
        self.timeout_seconds = timeout_seconds

    def _build_url(self, path: str) -> str:
        """
        Build full URL from base URL and path.

        Args:
            path: API path (e.g., "/workers") or an absolute URL

        Returns:
            Full URL
        """
        if path.startswith(("http://", "https://")):
            return path

        base_url = self.product_def.base_url
        path = path.lstrip("/")
        return f"{base_url}/{path}"

    def _substitute_path_params(self, path: str, **params) -> str:
        """
        Substitute path parameters like {id} with actual values.

        Args:
            path: Path template (e.g., "/workers/{id}")
            **params: Parameter values

        Returns:
            Path with substituted values
        """
        result = path
        for key, value in params.items():
            result = result.replace(f"{{{key}}}", str(value))
        return result

    def _prepare(
        self,
        path: str,
        params: dict[str, Any] | None,
        path_params: dict[str, Any] | None,
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Resolve the URL and attach auth headers and auth query params."""
        if path_params:
            path = self._substitute_path_params(path, **path_params)

        url = self._build_url(path)

        headers = self.adapter.build_auth_headers(self.credentials)
        headers["Accept"] = "application/json"

        query = dict(params or {})
        query.update(self.adapter.build_auth_params(self.credentials))

        return url, headers, query

    def _decode(self, response: httpx.Response) -> Any:
        """
        Map a response onto decoded JSON or an APIError.

        Raises:
            ServerError: On non-2xx status
            DecodeError: If a 2xx body is not valid JSON
        """
        if not 200 <= response.status_code < 300:
            raise ServerError(response.status_code, response.text)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(str(e), body=response.text, status_code=response.status_code) from e

    def _build_page(
        self,
        payload: Any,
        response: httpx.Response,
        item_factory: ItemFactory | None,
    ) -> Page:
        """
        Turn a decoded list response into a Page.

        The page is built in full before anything is returned, so a record
        rejected by item_factory discards the whole page.
        """
        try:
            page = self.adapter.parse_page(payload)
            if item_factory is not None:
                page = dataclasses.replace(
                    page, items=[item_factory(item) for item in page.items]
                )
        except Exception as e:
            raise DecodeError(
                f"unexpected page structure: {e!r}",
                body=response.text,
                status_code=response.status_code,
            ) from e

        return page

    def _page_query(self, params: dict[str, Any] | None, cursor: str | None) -> dict[str, Any]:
        query = dict(params or {})
        if cursor is not None:
            query[self.adapter.cursor_param] = cursor
        return query


class ApiClient(_BaseApiClient):
    """
    Synchronous client for a single SaaS product.

    Features:
    - Bearer (or query-token) authentication via ProductAdapter
    - Path parameter substitution
    - Cursor-paginated listings exposed as lazy iterators
    """

    def __init__(
        self,
        product_def: ProductDefinition,
        adapter: ProductAdapter,
        credentials: dict[str, Any],
        http_client: httpx.Client | None = None,
        timeout_seconds: float = 10.0,
    ):
        """
        Initialize the API client.

        Args:
            product_def: Product definition with API base URL
            adapter: Product adapter for auth and page parsing
            credentials: Auth credentials (e.g., {"access_token": "..."})
            http_client: Optional httpx client (created if None)
            timeout_seconds: Request timeout in seconds
        """
        super().__init__(product_def, adapter, credentials, timeout_seconds)

        # Track if we own the HTTP client (for cleanup)
        self._owns_client = http_client is None

        if http_client is None:
            self.http_client = httpx.Client(
                timeout=timeout_seconds, headers={"User-Agent": USER_AGENT}
            )
        else:
            self.http_client = http_client

    def close(self) -> None:
        """Close the HTTP client if we created it."""
        if self._owns_client and self.http_client:
            self.http_client.close()

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager cleanup."""
        self.close()
        return False

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url, headers, query = self._prepare(path, params, path_params)
        logger.debug(f"{method} {url}")

        try:
            return self.http_client.request(
                method=method,
                url=url,
                headers=headers,
                params=query,
            )
        except httpx.RequestError as e:
            raise TransportError(f"Request failed: {e}") from e

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an authenticated HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path
            params: Query parameters
            path_params: Path parameter substitutions

        Returns:
            Decoded response JSON ({} for an empty body)

        Raises:
            TransportError: If the request could not complete
            ServerError: On non-2xx response
            DecodeError: If the body is not valid JSON
        """
        response = self._send(method, path, params, path_params)
        return self._decode(response)

    def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
    ) -> Any:
        """Fetch a single resource."""
        return self._request("GET", path, params=params, path_params=path_params)

    def fetch_page(
        self,
        path: str,
        cursor: str | None = None,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
        item_factory: ItemFactory | None = None,
    ) -> Page:
        """
        Fetch one page of a list endpoint.

        Args:
            path: List endpoint path
            cursor: Cursor from the previous page, None for the first page
            params: Fixed filters sent with every page
            path_params: Path parameter substitutions
            item_factory: Optional callable turning each raw record into an item

        Returns:
            Page of items

        Raises:
            APIError: If the request fails or the page cannot be decoded
        """
        response = self._send(
            "GET", path, params=self._page_query(params, cursor), path_params=path_params
        )
        payload = self._decode(response)
        return self._build_page(payload, response, item_factory)

    def list_stream(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
        item_factory: ItemFactory | None = None,
    ) -> Iterator[Any]:
        """
        Iterate over every item of a list endpoint, page by page.

        Pages are fetched only as the iterator is consumed. Each call
        starts a new listing from the first page.

        Example:
            >>> with create_client("rippling", {"access_token": "..."}) as client:
            ...     for worker in client.list_stream("/workers", {"expand": "user"}):
            ...         print(worker["id"])
        """
        fetch = partial(
            self.fetch_page,
            path,
            params=dict(params or {}),
            path_params=path_params,
            item_factory=item_factory,
        )
        return iter_items(fetch)


class AsyncApiClient(_BaseApiClient):
    """Asynchronous counterpart of ApiClient built on httpx.AsyncClient."""

    def __init__(
        self,
        product_def: ProductDefinition,
        adapter: ProductAdapter,
        credentials: dict[str, Any],
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
    ):
        super().__init__(product_def, adapter, credentials, timeout_seconds)

        self._owns_client = http_client is None

        if http_client is None:
            self.http_client = httpx.AsyncClient(
                timeout=timeout_seconds, headers={"User-Agent": USER_AGENT}
            )
        else:
            self.http_client = http_client

    async def aclose(self) -> None:
        """Close the HTTP client if we created it."""
        if self._owns_client and self.http_client:
            await self.http_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url, headers, query = self._prepare(path, params, path_params)
        logger.debug(f"{method} {url}")

        try:
            return await self.http_client.request(
                method=method,
                url=url,
                headers=headers,
                params=query,
            )
        except httpx.RequestError as e:
            raise TransportError(f"Request failed: {e}") from e

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._send(method, path, params, path_params)
        return self._decode(response)

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
    ) -> Any:
        """Fetch a single resource."""
        return await self._request("GET", path, params=params, path_params=path_params)

    async def fetch_page(
        self,
        path: str,
        cursor: str | None = None,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
        item_factory: ItemFactory | None = None,
    ) -> Page:
        """Fetch one page of a list endpoint. See ApiClient.fetch_page."""
        response = await self._send(
            "GET", path, params=self._page_query(params, cursor), path_params=path_params
        )
        payload = self._decode(response)
        return self._build_page(payload, response, item_factory)

    def list_stream(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        path_params: dict[str, Any] | None = None,
        item_factory: ItemFactory | None = None,
    ) -> AsyncIterator[Any]:
        """
        Asynchronously iterate over every item of a list endpoint.

        Use with ``async for``; the request for each page is awaited when
        the previous page has been consumed.
        """
        fetch = partial(
            self.fetch_page,
            path,
            params=dict(params or {}),
            path_params=path_params,
            item_factory=item_factory,
        )
        return aiter_items(fetch)
