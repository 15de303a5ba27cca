"""Core data models for saaskit."""

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ProductCategory(Enum):
    """Business area a SaaS product covers."""
    HR = "hr"
    CRM = "crm"
    SUPPORT = "support"


class AuthMethod(Enum):
    """How the access token is attached to requests."""
    BEARER = "bearer"
    API_TOKEN = "api_token"


class ProductNotFoundError(Exception):
    """Raised when no definition exists for a product id."""
    pass


class ConfigError(Exception):
    """Raised when settings or credentials are missing or malformed."""
    pass


@dataclass(frozen=True)
class ProductDefinition:
    """
    Where a product's REST API lives and how to authenticate against it.

    ``base_url`` never ends with a slash; paths are joined onto it.
    """
    product_id: str
    name: str
    category: ProductCategory
    base_url: str
    auth_method: AuthMethod = AuthMethod.BEARER

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def with_base_url(self, base_url: str) -> "ProductDefinition":
        """Return a copy pointing at another host (sandbox, proxy, region)."""
        return replace(self, base_url=base_url)

    def to_json(self) -> dict[str, str]:
        data = asdict(self)
        data["category"] = self.category.value
        data["auth_method"] = self.auth_method.value
        return data

    @classmethod
    def from_json(cls, data: Any) -> "ProductDefinition":
        """
        Build a definition from its saved JSON form.

        Raises:
            ConfigError: If a field is missing or has an unknown value
        """
        try:
            return cls(
                product_id=data["product_id"],
                name=data["name"],
                category=ProductCategory(data["category"]),
                base_url=data["base_url"],
                auth_method=AuthMethod(data.get("auth_method", AuthMethod.BEARER.value)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid product definition {data!r}: {e!r}") from e


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    One fetched batch of a paginated listing.

    The cursor is opaque: it is handed back to the server unchanged to
    request the following page and is only ever compared by value.
    """
    items: list[T]
    has_more_pages: bool = False
    next_cursor: str | None = None
