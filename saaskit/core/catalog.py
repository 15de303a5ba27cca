"""
Catalog of the products saaskit can talk to.

Built-in products are always known. Definitions added at runtime shadow a
built-in with the same id for the rest of the process.
"""

import logging

from .models import AuthMethod, ProductCategory, ProductDefinition

logger = logging.getLogger(__name__)

BUILTIN_PRODUCTS: dict[str, ProductDefinition] = {
    product.product_id: product
    for product in (
        ProductDefinition(
            "hubspot", "HubSpot", ProductCategory.CRM, "https://api.hubapi.com"
        ),
        ProductDefinition(
            "pipedrive",
            "Pipedrive",
            ProductCategory.CRM,
            "https://api.pipedrive.com/v1",
            AuthMethod.API_TOKEN,
        ),
        ProductDefinition(
            "rippling", "Rippling", ProductCategory.HR, "https://rest.ripplingapis.com"
        ),
    )
}

_runtime_products: dict[str, ProductDefinition] = {}


def add_product(product: ProductDefinition) -> ProductDefinition:
    """Make a product known for the rest of the process."""
    previous = _runtime_products.get(product.product_id) or BUILTIN_PRODUCTS.get(
        product.product_id
    )
    if previous is not None and previous != product:
        logger.warning(
            f"Replacing definition of '{product.product_id}' "
            f"({previous.base_url} -> {product.base_url})"
        )

    _runtime_products[product.product_id] = product
    return product


def find_product(product_id: str, include_builtins: bool = True) -> ProductDefinition | None:
    """Return the runtime definition, else the built-in one, else None."""
    product = _runtime_products.get(product_id)
    if product is None and include_builtins:
        product = BUILTIN_PRODUCTS.get(product_id)
    return product


def known_products() -> list[ProductDefinition]:
    """Every known product, runtime definitions winning, sorted by id."""
    merged = {**BUILTIN_PRODUCTS, **_runtime_products}
    return [merged[product_id] for product_id in sorted(merged)]


def forget_runtime_products() -> None:
    """Drop everything added with add_product; built-ins remain."""
    _runtime_products.clear()
