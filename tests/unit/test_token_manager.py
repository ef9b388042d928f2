"""Tests for GitHub token resolution."""

import pytest

from noir_registry_cli.core.token_manager import GitHubTokenManager


class TestGitHubTokenManager:

    def test_registry_prefers_dedicated_token(self):
        manager = GitHubTokenManager(env={"NOIR_REGISTRY_TOKEN": "dedicated", "GITHUB_TOKEN": "general"})
        assert manager.get_token_for_purpose("registry") == "dedicated"

    def test_registry_falls_back_to_github_token(self):
        manager = GitHubTokenManager(env={"GITHUB_TOKEN": "general"})
        assert manager.get_token_for_purpose("registry") == "general"

    def test_explicit_token_wins(self):
        manager = GitHubTokenManager(env={"NOIR_REGISTRY_TOKEN": "dedicated"})
        assert manager.get_token_for_purpose("registry", explicit="flag") == "flag"

    def test_tags_use_github_tokens_only(self):
        manager = GitHubTokenManager(env={"NOIR_REGISTRY_TOKEN": "dedicated", "GH_TOKEN": "gh"})
        assert manager.get_token_for_purpose("tags") == "gh"

    def test_empty_values_are_ignored(self):
        manager = GitHubTokenManager(env={"GITHUB_TOKEN": ""})
        assert manager.get_token_for_purpose("tags") is None

    def test_unknown_purpose(self):
        with pytest.raises(ValueError, match="Unknown purpose"):
            GitHubTokenManager(env={}).get_token_for_purpose("deploy")

