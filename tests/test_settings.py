"""Tests for persistent settings and token lookup."""

import json

import pytest

from saaskit.core.models import AuthMethod, ConfigError, ProductCategory, ProductDefinition
from saaskit.core.settings import (
    Settings,
    settings_path,
    load_settings,
    save_settings,
    save_product,
    set_base_url,
    resolve_token,
)


@pytest.fixture
def temp_home(tmp_path, monkeypatch):
    """Point SAASKIT_HOME at a directory that does not exist yet."""
    home = tmp_path / "saaskit_home"
    monkeypatch.setenv("SAASKIT_HOME", str(home))
    return home


@pytest.fixture
def clean_token_env(monkeypatch):
    """Remove any Rippling tokens from the environment."""
    monkeypatch.delenv("RIPPLING_API_TOKEN", raising=False)
    monkeypatch.delenv("RIPPLING_ACCESS_TOKEN", raising=False)


def zendesk():
    return ProductDefinition(
        "zendesk", "Zendesk", ProductCategory.SUPPORT, "https://acme.zendesk.com/api/v2"
    )


def test_settings_path_uses_env(temp_home):
    """Test that SAASKIT_HOME decides where settings live."""
    assert settings_path() == temp_home / "settings.json"


def test_settings_path_defaults_to_home(tmp_path, monkeypatch):
    """Test the ~/.saaskit default."""
    monkeypatch.delenv("SAASKIT_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert settings_path() == tmp_path / ".saaskit" / "settings.json"


def test_missing_file_means_defaults(temp_home):
    """Test that no settings file gives empty settings without creating one."""
    assert load_settings() == Settings()
    assert not temp_home.exists()


def test_save_creates_directory_and_round_trips(temp_home):
    """Test that saving creates SAASKIT_HOME and the data reloads unchanged."""
    settings = Settings(
        products={"zendesk": zendesk()},
        base_urls={"rippling": "https://sandbox.rippling.test"},
    )

    path = save_settings(settings)

    assert path == temp_home / "settings.json"
    assert load_settings() == settings
    assert not list(temp_home.glob("*.tmp"))


def test_saved_file_layout(temp_home):
    """Test the on-disk JSON document."""
    save_product(zendesk())

    data = json.loads(settings_path().read_text())
    assert data == {
        "products": {"zendesk": zendesk().to_json()},
        "base_urls": {},
    }


def test_invalid_json(temp_home):
    """Test that a corrupt file raises ConfigError."""
    temp_home.mkdir()
    settings_path().write_text("{ not json")

    with pytest.raises(ConfigError) as exc_info:
        load_settings()

    assert "invalid json" in str(exc_info.value).lower()


@pytest.mark.parametrize("content", [
    [],
    {"products": []},
    {"base_urls": "https://x.test"},
    {"products": {"x": {"product_id": "x"}}},
])
def test_wrong_shape(temp_home, content):
    """Test that well-formed JSON with the wrong layout raises ConfigError."""
    temp_home.mkdir()
    settings_path().write_text(json.dumps(content))

    with pytest.raises(ConfigError):
        load_settings()


def test_save_product_keeps_other_settings(temp_home):
    """Test that saving a product does not drop base URL overrides."""
    set_base_url("rippling", "https://sandbox.rippling.test")
    save_product(zendesk())

    settings = load_settings()
    assert settings.products == {"zendesk": zendesk()}
    assert settings.base_urls == {"rippling": "https://sandbox.rippling.test"}


def test_set_base_url_strips_slash_and_resets(temp_home):
    """Test setting and clearing a base URL override."""
    set_base_url("rippling", "https://sandbox.rippling.test/")
    assert load_settings().base_urls == {"rippling": "https://sandbox.rippling.test"}

    set_base_url("rippling", None)
    assert load_settings().base_urls == {}


def test_save_unwritable_location(tmp_path, monkeypatch):
    """Test that an unwritable location raises ConfigError."""
    blocker = tmp_path / "file"
    blocker.write_text("")
    monkeypatch.setenv("SAASKIT_HOME", str(blocker / "sub"))

    with pytest.raises(ConfigError):
        save_settings(Settings())


# ===== Token Resolution Tests =====

def test_resolve_token_explicit_wins(monkeypatch):
    """Test that an explicit token overrides the environment."""
    monkeypatch.setenv("RIPPLING_API_TOKEN", "from-env")
    assert resolve_token("rippling", "explicit") == "explicit"


def test_resolve_token_from_api_token_env(clean_token_env, monkeypatch):
    """Test lookup of PRODUCT_API_TOKEN."""
    monkeypatch.setenv("RIPPLING_API_TOKEN", "api")
    monkeypatch.setenv("RIPPLING_ACCESS_TOKEN", "access")

    assert resolve_token("rippling") == "api"


def test_resolve_token_from_access_token_env(clean_token_env, monkeypatch):
    """Test fallback to PRODUCT_ACCESS_TOKEN."""
    monkeypatch.setenv("RIPPLING_ACCESS_TOKEN", "access")

    assert resolve_token("rippling") == "access"


def test_resolve_token_dashed_product_id(monkeypatch):
    """Test that dashes in ids map to underscores in variable names."""
    monkeypatch.setenv("HUBSPOT_EU_API_TOKEN", "eu")

    assert resolve_token("hubspot-eu") == "eu"


def test_resolve_token_missing(clean_token_env):
    """Test that a missing token raises ConfigError naming the env vars."""
    with pytest.raises(ConfigError) as exc_info:
        resolve_token("rippling")

    assert "RIPPLING_API_TOKEN" in str(exc_info.value)
    assert "RIPPLING_ACCESS_TOKEN" in str(exc_info.value)
