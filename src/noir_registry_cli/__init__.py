"""Noir registry CLI: manage Nargo.toml dependencies from the Noir package registry."""

from .version import __version__

__all__ = ["__version__"]
