"""Models, product catalog, settings and the pagination adapter."""

from .models import (
    AuthMethod,
    ConfigError,
    Page,
    ProductCategory,
    ProductDefinition,
    ProductNotFoundError,
)
from .catalog import BUILTIN_PRODUCTS, add_product, find_product, known_products, forget_runtime_products
from .settings import (
    Settings,
    load_settings,
    save_settings,
    save_product,
    set_base_url,
    resolve_token,
)
from .pagination import should_fetch_next, iter_items, aiter_items

__all__ = [
    "AuthMethod",
    "ConfigError",
    "Page",
    "ProductCategory",
    "ProductDefinition",
    "ProductNotFoundError",
    "BUILTIN_PRODUCTS",
    "add_product",
    "find_product",
    "known_products",
    "forget_runtime_products",
    "Settings",
    "load_settings",
    "save_settings",
    "save_product",
    "set_base_url",
    "resolve_token",
    "should_fetch_next",
    "iter_items",
    "aiter_items",
]
