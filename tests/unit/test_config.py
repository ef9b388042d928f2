"""Tests for settings resolution and stored credentials."""

import json
import os
import stat
from pathlib import Path

import pytest

from noir_registry_cli import config
from noir_registry_cli.config import Settings


class TestSettings:
    """Test per-invocation settings."""

    def test_defaults(self):
        settings = Settings.resolve(env={})

        assert settings.registry_url == "http://localhost:8080/api"
        assert settings.cache_root == Path.home() / "nargo"
        assert settings.github_api_url == "https://api.github.com"
        assert settings.manifest_name == "Nargo.toml"

    def test_environment_overrides_default(self):
        settings = Settings.resolve(env={
            "NOIR_REGISTRY_URL": "https://registry.example.com/api/",
            "NOIR_REGISTRY_CACHE_DIR": "/srv/nargo",
        })

        assert settings.registry_url == "https://registry.example.com/api"
        assert settings.cache_root == Path("/srv/nargo")

    def test_flag_overrides_environment(self):
        settings = Settings.resolve("http://flag.test/api", env={"NOIR_REGISTRY_URL": "http://env.test/api"})
        assert settings.registry_url == "http://flag.test/api"


class TestStoredConfig:
    """Test the credentials file."""

    def test_get_config_creates_empty_file(self, config_home):
        assert config.get_config() == {}
        assert (config_home / "config.json").is_file()

    def test_save_credentials(self, config_home):
        config.save_credentials("key-123", "http://registry.test/api/")

        stored = json.loads((config_home / "config.json").read_text())
        assert stored == {"api_key": "key-123", "registry_url": "http://registry.test/api"}

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_credentials_file_is_private(self, config_home):
        config.save_credentials("key-123", "http://registry.test/api")

        mode = stat.S_IMODE((config_home / "config.json").stat().st_mode)
        assert mode == 0o600

    def test_update_config_keeps_other_values(self, config_home):
        config.update_config({"theme": "dark"})
        config.save_credentials("key-123", "http://registry.test/api")

        assert config.get_config()["theme"] == "dark"

    def test_get_api_key_checks_registry(self, config_home):
        assert config.get_api_key() is None

        config.save_credentials("key-123", "http://registry.test/api")

        assert config.get_api_key() == "key-123"
        assert config.get_api_key("http://registry.test/api/") == "key-123"
        assert config.get_api_key("http://other.test/api") is None


@pytest.mark.parametrize("value,expected", [
    (None, "(not set)"),
    ("", "(not set)"),
    ("abc", "****"),
    ("key-123456", "******3456"),
])
def test_mask_secret(value, expected):
    assert config.mask_secret(value) == expected
