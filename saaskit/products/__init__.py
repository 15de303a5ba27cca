"""Product adapters for the supported SaaS APIs."""

import logging

from saaskit.core.models import ProductDefinition
from .base import ProductAdapter
from .hubspot import HubSpotAdapter
from .pipedrive import PipedriveAdapter
from .rippling import RipplingAdapter

logger = logging.getLogger(__name__)

ADAPTERS: dict[str, type[ProductAdapter]] = {
    adapter_cls.product_id: adapter_cls
    for adapter_cls in (HubSpotAdapter, PipedriveAdapter, RipplingAdapter)
}


class AdapterNotFoundError(Exception):
    """Raised when no adapter is available for a product."""
    pass


def get_adapter_for_product(product: ProductDefinition) -> ProductAdapter:
    """
    Pick the adapter for a product by its id (case-insensitive).

    Raises:
        AdapterNotFoundError: If no adapter exists for the product
    """
    adapter_cls = ADAPTERS.get(product.product_id.lower())
    if adapter_cls is None:
        raise AdapterNotFoundError(
            f"No adapter available for product '{product.product_id}'. "
            f"Supported products: {', '.join(sorted(ADAPTERS))}"
        )

    logger.debug(f"Using {adapter_cls.__name__} for '{product.product_id}'")
    return adapter_cls(product)


__all__ = [
    "ADAPTERS",
    "ProductAdapter",
    "HubSpotAdapter",
    "PipedriveAdapter",
    "RipplingAdapter",
    "AdapterNotFoundError",
    "get_adapter_for_product",
]
