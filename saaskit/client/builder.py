"""
Builder module for creating product API clients.

Combines a product definition, its adapter and credentials into a
ready-to-use ApiClient or AsyncApiClient.
"""

import logging
from typing import Any

from ..core import (
    AuthMethod,
    ProductDefinition,
    ProductNotFoundError,
    Settings,
    find_product,
    known_products,
    load_settings,
    resolve_token,
)
from ..products import get_adapter_for_product
from .api_client import ApiClient, AsyncApiClient

logger = logging.getLogger(__name__)


def _apply_base_url(product: ProductDefinition, settings: Settings) -> ProductDefinition:
    override = settings.base_urls.get(product.product_id)
    if override and override != product.base_url:
        logger.debug(f"Using base URL override for '{product.product_id}': {override}")
        return product.with_base_url(override)
    return product


def resolve_product(product_id: str) -> ProductDefinition:
    """
    Find a product definition by id.

    Lookup order: definitions added at runtime, products saved in the
    settings file, then the built-in catalog. A saved base URL override is
    applied to whichever definition is found.

    Raises:
        ProductNotFoundError: If the product is unknown everywhere
        ConfigError: If the settings file is unreadable
    """
    settings = load_settings()
    product = (
        find_product(product_id, include_builtins=False)
        or settings.products.get(product_id)
        or find_product(product_id)
    )
    if product is None:
        raise ProductNotFoundError(
            f"Product '{product_id}' not found. "
            f"Register it first with 'saaskit register'."
        )
    return _apply_base_url(product, settings)


def available_products() -> list[ProductDefinition]:
    """Every product resolve_product can find, with overrides applied, sorted by id."""
    settings = load_settings()
    merged = {product.product_id: product for product in known_products()}
    for product_id, product in settings.products.items():
        if find_product(product_id, include_builtins=False) is None:
            merged[product_id] = product
    return [_apply_base_url(merged[product_id], settings) for product_id in sorted(merged)]


def credentials_for(product_def: ProductDefinition, token: str) -> dict[str, Any]:
    """
    Map a raw token onto the credential field the product expects.

    Args:
        product_def: Product definition
        token: Access token or API token

    Returns:
        Credentials dict for the product's adapter
    """
    if product_def.auth_method == AuthMethod.API_TOKEN:
        return {"api_token": token}
    return {"access_token": token}


def create_client(product_id: str, credentials: dict[str, Any], **kwargs) -> ApiClient:
    """
    Create a synchronous client for a product.

    Args:
        product_id: Product identifier (e.g., 'rippling')
        credentials: Authentication credentials (e.g., {"access_token": "..."})
        **kwargs: Passed through to ApiClient (http_client, timeout_seconds)

    Returns:
        Configured ApiClient ready to use

    Raises:
        ProductNotFoundError: If product is not known
        AdapterNotFoundError: If no adapter supports the product

    Example:
        >>> client = create_client('rippling', {'access_token': 'token123'})
        >>> workers = list(client.list_stream('/workers'))
        >>> client.close()
    """
    product_def = resolve_product(product_id)
    adapter = get_adapter_for_product(product_def)
    return ApiClient(product_def=product_def, adapter=adapter, credentials=credentials, **kwargs)


def create_async_client(
    product_id: str, credentials: dict[str, Any], **kwargs
) -> AsyncApiClient:
    """Create an asynchronous client for a product. See create_client."""
    product_def = resolve_product(product_id)
    adapter = get_adapter_for_product(product_def)
    return AsyncApiClient(
        product_def=product_def, adapter=adapter, credentials=credentials, **kwargs
    )


def client_from_env(product_id: str, **kwargs) -> ApiClient:
    """
    Create a synchronous client with the token taken from the environment.

    Reads ``<PRODUCT>_API_TOKEN``, then ``<PRODUCT>_ACCESS_TOKEN``.

    Raises:
        ConfigError: If neither variable is set
    """
    product_def = resolve_product(product_id)
    token = resolve_token(product_id)
    return create_client(product_id, credentials_for(product_def, token), **kwargs)


def async_client_from_env(product_id: str, **kwargs) -> AsyncApiClient:
    """Asynchronous counterpart of client_from_env."""
    product_def = resolve_product(product_id)
    token = resolve_token(product_id)
    return create_async_client(product_id, credentials_for(product_def, token), **kwargs)
