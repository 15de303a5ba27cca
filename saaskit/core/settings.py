"""
Persistent user settings and token lookup.

All settings live in one JSON document, ``settings.json`` under
``$SAASKIT_HOME`` (default ``~/.saaskit``)::

    {
      "products": {"zendesk": {"product_id": "zendesk", "name": "Zendesk", ...}},
      "base_urls": {"rippling": "https://sandbox.rippling.test"}
    }

Tokens are never written to disk. They come from the caller or from
``<PRODUCT>_API_TOKEN`` / ``<PRODUCT>_ACCESS_TOKEN``.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .models import ConfigError, ProductDefinition

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


@dataclass
class Settings:
    """User-defined products and per-product base URL overrides."""
    products: dict[str, ProductDefinition] = field(default_factory=dict)
    base_urls: dict[str, str] = field(default_factory=dict)

    def to_json(self) -> dict:
        return {
            "products": {pid: p.to_json() for pid, p in sorted(self.products.items())},
            "base_urls": dict(sorted(self.base_urls.items())),
        }


def settings_path() -> Path:
    home = os.environ.get("SAASKIT_HOME")
    return (Path(home) if home else Path.home() / ".saaskit") / SETTINGS_FILE


def load_settings() -> Settings:
    """
    Read the settings file. A missing file means default settings.

    Raises:
        ConfigError: If the file cannot be read or has the wrong shape
    """
    path = settings_path()
    try:
        raw = json.loads(path.read_text())
    except FileNotFoundError:
        return Settings()
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    products = raw.get("products", {})
    base_urls = raw.get("base_urls", {})
    if not isinstance(products, dict) or not isinstance(base_urls, dict):
        raise ConfigError(f"{path}: 'products' and 'base_urls' must be objects")

    return Settings(
        products={pid: ProductDefinition.from_json(data) for pid, data in products.items()},
        base_urls={pid: str(url) for pid, url in base_urls.items()},
    )


def save_settings(settings: Settings) -> Path:
    """
    Write the settings file, replacing it in one step.

    Raises:
        ConfigError: If the file cannot be written
    """
    path = settings_path()
    tmp_path = path.with_suffix(".json.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(json.dumps(settings.to_json(), indent=2))
        os.replace(tmp_path, path)
    except OSError as e:
        raise ConfigError(f"Cannot write {path}: {e}") from e

    logger.debug(f"Saved settings to {path}")
    return path


def save_product(product: ProductDefinition) -> Path:
    """Persist a user-defined product."""
    settings = load_settings()
    settings.products[product.product_id] = product
    return save_settings(settings)


def set_base_url(product_id: str, base_url: str | None) -> Path:
    """
    Persist a base URL override for a product; None removes it.

    The override applies to built-in and user-defined products alike.
    """
    settings = load_settings()
    if base_url is None:
        settings.base_urls.pop(product_id, None)
    else:
        settings.base_urls[product_id] = base_url.rstrip("/")
    return save_settings(settings)


def token_env_vars(product_id: str) -> tuple[str, str]:
    prefix = product_id.upper().replace("-", "_")
    return f"{prefix}_API_TOKEN", f"{prefix}_ACCESS_TOKEN"


def resolve_token(product_id: str, token: str | None = None) -> str:
    """
    Find the token to use for a product.

    An explicit token wins, then ``<PRODUCT>_API_TOKEN``, then
    ``<PRODUCT>_ACCESS_TOKEN``.

    Raises:
        ConfigError: If no token can be found
    """
    if token:
        return token

    env_vars = token_env_vars(product_id)
    for env_var in env_vars:
        value = os.environ.get(env_var)
        if value:
            logger.debug(f"Using token from ${env_var}")
            return value

    raise ConfigError(
        f"No token for '{product_id}'. Pass --token or set {' or '.join(env_vars)}."
    )
