"""Centralized GitHub token lookup.

Two consumers need a GitHub token and accept different variables:

- ``login``/``publish``: the credential exchanged with the registry for an
  API key. ``NOIR_REGISTRY_TOKEN`` takes precedence so a registry-specific
  token can be kept apart from the general-purpose ``GITHUB_TOKEN``.
- ``tags``: optional authentication for the GitHub tags API, which only
  raises the anonymous rate limit.
"""

import os
from typing import Mapping, Optional


class GitHubTokenManager:
    """Resolves GitHub tokens from the environment by purpose."""

    TOKEN_PRECEDENCE = {
        'registry': ['NOIR_REGISTRY_TOKEN', 'GITHUB_TOKEN'],
        'tags': ['GITHUB_TOKEN', 'GH_TOKEN'],
    }

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        """Initialize token manager.

        Args:
            env: Environment to read from (defaults to os.environ)
        """
        self.env = os.environ if env is None else env

    def get_token_for_purpose(self, purpose: str, explicit: Optional[str] = None) -> Optional[str]:
        """Get the best available token for a specific purpose.

        Args:
            purpose: Token purpose ('registry' or 'tags')
            explicit: Token passed on the command line; wins over the environment

        Returns:
            Best available token, or None if not available
        """
        if purpose not in self.TOKEN_PRECEDENCE:
            raise ValueError(f"Unknown purpose: {purpose}")

        if explicit:
            return explicit

        for token_var in self.TOKEN_PRECEDENCE[purpose]:
            token = self.env.get(token_var)
            if token:
                return token
        return None

