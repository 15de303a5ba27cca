"""HTTP clients for the supported SaaS products."""

from .api_client import (
    ApiClient,
    AsyncApiClient,
    APIError,
    TransportError,
    ServerError,
    DecodeError,
)
from .builder import (
    available_products,
    client_from_env,
    async_client_from_env,
    create_client,
    create_async_client,
    credentials_for,
    resolve_product,
)

__all__ = [
    "ApiClient",
    "AsyncApiClient",
    "APIError",
    "TransportError",
    "ServerError",
    "DecodeError",
    "available_products",
    "client_from_env",
    "async_client_from_env",
    "create_client",
    "create_async_client",
    "credentials_for",
    "resolve_product",
]
