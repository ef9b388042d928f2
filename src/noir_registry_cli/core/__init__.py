"""Core command logic for the Noir registry CLI."""

from .operations import (
    AddResult,
    FetchStatus,
    RemovalSummary,
    add_dependency,
    remove_dependencies,
    login,
    publish_package,
)
from .token_manager import GitHubTokenManager
from .toolchain import run_nargo_check

__all__ = [
    "AddResult",
    "FetchStatus",
    "RemovalSummary",
    "add_dependency",
    "remove_dependencies",
    "login",
    "publish_package",
    "GitHubTokenManager",
    "run_nargo_check",
]
