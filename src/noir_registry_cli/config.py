"""Configuration management for the Noir registry CLI.

Two kinds of configuration live here:

- ``Settings``: the per-invocation configuration value (registry URL, cache
  root, GitHub API URL, manifest name). It is resolved once at the CLI entry
  point from flags and environment and passed down explicitly; nothing below
  the CLI layer reads the environment for these values.
- The stored credentials file (``~/.noir-registry/config.json``) holding the
  last API key obtained with ``login`` and the registry it belongs to.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


CONFIG_DIR = os.path.expanduser("~/.noir-registry")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

DEFAULT_REGISTRY_URL = "http://localhost:8080/api"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
MANIFEST_NAME = "Nargo.toml"

REGISTRY_URL_ENV = "NOIR_REGISTRY_URL"
CACHE_DIR_ENV = "NOIR_REGISTRY_CACHE_DIR"


def default_cache_root() -> Path:
    """Directory where nargo keeps checked-out git dependencies."""
    return Path.home() / "nargo"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one command invocation."""

    registry_url: str = DEFAULT_REGISTRY_URL
    cache_root: Path = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    manifest_name: str = MANIFEST_NAME

    def __post_init__(self):
        if self.cache_root is None:
            object.__setattr__(self, "cache_root", default_cache_root())
        object.__setattr__(self, "registry_url", self.registry_url.rstrip("/"))

    @classmethod
    def resolve(cls, registry: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from an explicit flag value and the environment.

        Precedence for the registry URL is flag, then ``NOIR_REGISTRY_URL``,
        then the built-in default.
        """
        if env is None:
            env = os.environ

        registry_url = registry or env.get(REGISTRY_URL_ENV) or DEFAULT_REGISTRY_URL
        cache_dir = env.get(CACHE_DIR_ENV)
        cache_root = Path(cache_dir).expanduser() if cache_dir else default_cache_root()
        return cls(registry_url=registry_url, cache_root=cache_root)


def ensure_config_exists():
    """Ensure the configuration directory and file exist."""
    if not os.path.exists(CONFIG_DIR):
        os.makedirs(CONFIG_DIR)

    if not os.path.exists(CONFIG_FILE):
        with open(CONFIG_FILE, "w") as f:
            json.dump({}, f)


def get_config():
    """Get the stored configuration.

    Returns:
        dict: Current configuration.
    """
    ensure_config_exists()
    with open(CONFIG_FILE, "r") as f:
        return json.load(f)


def update_config(updates):
    """Update the stored configuration with new values.

    Args:
        updates (dict): Dictionary of configuration values to update.
    """
    config = get_config()
    config.update(updates)

    with open(CONFIG_FILE, "w") as f:
        json.dump(config, f, indent=2)
    try:
        os.chmod(CONFIG_FILE, 0o600)
    except OSError:
        pass


def save_credentials(api_key: str, registry_url: str):
    """Store the API key obtained from ``login`` and the registry that issued it."""
    update_config({"api_key": api_key, "registry_url": registry_url.rstrip("/")})


def get_api_key(registry_url: Optional[str] = None) -> Optional[str]:
    """Get the stored API key.

    When ``registry_url`` is given, the key is only returned if it was issued
    by that registry.
    """
    config = get_config()
    api_key = config.get("api_key")
    if not api_key:
        return None
    if registry_url is not None:
        stored_registry = config.get("registry_url")
        if stored_registry and stored_registry.rstrip("/") != registry_url.rstrip("/"):
            return None
    return api_key


def mask_secret(value: Optional[str]) -> str:
    """Mask all but the last four characters of a secret for display."""
    if not value:
        return "(not set)"
    if len(value) <= 4:
        return "****"
    return "*" * (len(value) - 4) + value[-4:]
