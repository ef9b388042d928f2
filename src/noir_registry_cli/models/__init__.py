"""Models for Noir registry CLI data structures."""

from .package import (
    PackageInfo,
    DependencyEntry,
    PublishRequest,
    sanitize_dependency_key,
)

__all__ = [
    "PackageInfo",
    "DependencyEntry",
    "PublishRequest",
    "sanitize_dependency_key",
]
