"""Tests for core data models."""

import dataclasses

import pytest
from saaskit.core.models import (
    ProductCategory,
    AuthMethod,
    ProductDefinition,
    Page,
    ConfigError,
)


@pytest.fixture
def pipedrive():
    return ProductDefinition(
        product_id="pipedrive",
        name="Pipedrive",
        category=ProductCategory.CRM,
        base_url="https://api.pipedrive.com/v1/",
        auth_method=AuthMethod.API_TOKEN,
    )


def test_product_definition_strips_trailing_slash(pipedrive):
    """Test that base URLs are normalised on construction."""
    assert pipedrive.base_url == "https://api.pipedrive.com/v1"


def test_product_definition_defaults_to_bearer():
    """Test the default auth method."""
    product = ProductDefinition("rippling", "Rippling", ProductCategory.HR, "https://r.test")
    assert product.auth_method == AuthMethod.BEARER


def test_with_base_url_returns_copy(pipedrive):
    """Test pointing a definition at another host."""
    sandbox = pipedrive.with_base_url("https://sandbox.pipedrive.test/")

    assert sandbox.base_url == "https://sandbox.pipedrive.test"
    assert sandbox.auth_method == AuthMethod.API_TOKEN
    assert pipedrive.base_url == "https://api.pipedrive.com/v1"


def test_product_definition_is_immutable(pipedrive):
    """Test that definitions cannot be changed in place."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        pipedrive.base_url = "https://elsewhere.test"


def test_product_definition_json_form(pipedrive):
    """Test the JSON form stores enum values and survives a reload."""
    data = pipedrive.to_json()

    assert data == {
        "product_id": "pipedrive",
        "name": "Pipedrive",
        "category": "crm",
        "base_url": "https://api.pipedrive.com/v1",
        "auth_method": "api_token",
    }
    assert ProductDefinition.from_json(data) == pipedrive


def test_from_json_defaults_auth_method():
    """Test that older entries without auth_method load as bearer."""
    product = ProductDefinition.from_json({
        "product_id": "zendesk",
        "name": "Zendesk",
        "category": "support",
        "base_url": "https://acme.zendesk.com/api/v2",
    })

    assert product.category == ProductCategory.SUPPORT
    assert product.auth_method == AuthMethod.BEARER


@pytest.mark.parametrize("data", [
    {"product_id": "x", "name": "X", "base_url": "https://x.test"},
    {"product_id": "x", "name": "X", "category": "accounting", "base_url": "https://x.test"},
    {"product_id": "x", "name": "X", "category": "hr", "base_url": None},
    ["not", "an", "object"],
])
def test_from_json_rejects_bad_entries(data):
    """Test that malformed entries raise ConfigError."""
    with pytest.raises(ConfigError):
        ProductDefinition.from_json(data)


def test_page_defaults():
    """Test that a Page defaults to an exhausted listing."""
    page = Page(items=[1, 2])

    assert page.items == [1, 2]
    assert page.has_more_pages is False
    assert page.next_cursor is None


def test_page_is_immutable():
    """Test that Page fields cannot be reassigned."""
    page = Page(items=[], has_more_pages=True, next_cursor="c")

    with pytest.raises(dataclasses.FrozenInstanceError):
        page.next_cursor = "other"
