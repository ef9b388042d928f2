"""Pytest configuration and fixtures."""

import json

import pytest
import requests

from noir_registry_cli import config as stored_config
from noir_registry_cli.config import Settings


SAMPLE_MANIFEST = """\
# Demo circuit
[package]
name = "demo"
type = "bin"
authors = ["alice"]   # maintainer

[dependencies]
# pinned for the audit
bignum = { git = "https://github.com/noir-lang/noir-bignum", tag = "v0.4.2" }
"""


def make_response(status=200, payload=None, text=None, url="http://registry.test/api"):
    """Build a ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    if payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = (text or "").encode("utf-8")
    return response


@pytest.fixture
def manifest_file(tmp_path):
    """A Nargo.toml with a [package] table and one dependency."""
    manifest = tmp_path / "Nargo.toml"
    manifest.write_text(SAMPLE_MANIFEST, encoding="utf-8")
    return manifest


@pytest.fixture
def bare_manifest_file(tmp_path):
    """A Nargo.toml without a [dependencies] table."""
    manifest = tmp_path / "Nargo.toml"
    manifest.write_text('[package]\nname = "demo"\ntype = "lib"\n', encoding="utf-8")
    return manifest


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fake registry and a temporary cache root."""
    return Settings(registry_url="http://registry.test/api", cache_root=tmp_path / "cache")


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Redirect the stored credentials file into a temporary directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(stored_config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(stored_config, "CONFIG_FILE", str(config_dir / "config.json"))
    return config_dir


@pytest.fixture
def response_factory():
    """Factory for fake ``requests.Response`` objects."""
    return make_response
