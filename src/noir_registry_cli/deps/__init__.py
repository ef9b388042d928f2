"""Dependency management package for the Noir registry CLI."""

from .manifest import Manifest, find_manifest, resolve_manifest_path, validate_manifest
from .cache import cache_path_for, clean_cache_directory
from .tag_resolver import LatestTagResolver, github_slug_from_url, resolve_version
from .git_remote import detect_repository_url, normalize_remote_url

__all__ = [
    'Manifest',
    'find_manifest',
    'resolve_manifest_path',
    'validate_manifest',
    'cache_path_for',
    'clean_cache_directory',
    'LatestTagResolver',
    'github_slug_from_url',
    'resolve_version',
    'detect_repository_url',
    'normalize_remote_url',
]
