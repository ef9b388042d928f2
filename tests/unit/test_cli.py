"""Tests for the command-line interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from noir_registry_cli.cli import cli
from noir_registry_cli.errors import NetworkError, PackageNotFound
from noir_registry_cli.models.package import PublishRequest

TOKEN_ENV = {"NOIR_REGISTRY_TOKEN": None, "GITHUB_TOKEN": None, "GH_TOKEN": None, "NOIR_REGISTRY_URL": None}


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "Noir Registry CLI" in result.output


class TestAddCommand:

    def test_passes_flags_through(self, runner, manifest_file):
        with patch("noir_registry_cli.cli.add_dependency") as add_dependency:
            result = runner.invoke(cli, [
                "add", "foo-lib", "--no-fetch",
                "--registry", "http://flag.test/api/",
                "--manifest-path", str(manifest_file),
            ], env=TOKEN_ENV)

        assert result.exit_code == 0, result.output
        args, kwargs = add_dependency.call_args
        assert args[0] == "foo-lib"
        assert args[1].registry_url == "http://flag.test/api"
        assert kwargs["fetch"] is False
        assert kwargs["manifest_path"] == manifest_file

    def test_registry_from_environment(self, runner):
        with patch("noir_registry_cli.cli.add_dependency") as add_dependency:
            runner.invoke(cli, ["add", "foo-lib"], env={"NOIR_REGISTRY_URL": "http://env.test/api"})

        assert add_dependency.call_args.args[1].registry_url == "http://env.test/api"

    def test_lookup_failure_prints_troubleshooting(self, runner, manifest_file):
        error = PackageNotFound("foo-lib", "http://localhost:8080/api")
        with patch("noir_registry_cli.cli.add_dependency", side_effect=error):
            result = runner.invoke(cli, ["add", "foo-lib"], env=TOKEN_ENV)

        assert result.exit_code == 1
        assert "Package 'foo-lib' not found in registry" in result.output
        assert "Troubleshooting" in result.output
        assert "curl http://localhost:8080/api/packages/foo-lib" in result.output

    def test_network_failure_exits_non_zero(self, runner):
        error = NetworkError("http://localhost:8080/api/packages/foo-lib")
        with patch("noir_registry_cli.cli.add_dependency", side_effect=error):
            result = runner.invoke(cli, ["add", "foo-lib"], env=TOKEN_ENV)

        assert result.exit_code == 1
        assert "Failed to connect" in result.output


class TestRemoveCommand:

    def test_removes_dependency(self, runner, manifest_file):
        result = runner.invoke(cli, ["remove", "bignum", "--manifest-path", str(manifest_file)])

        assert result.exit_code == 0, result.output
        assert "Removed 'bignum'" in result.output
        assert "bignum" not in manifest_file.read_text()

    def test_nothing_removed_fails(self, runner, manifest_file):
        result = runner.invoke(cli, ["remove", "missing", "--manifest-path", str(manifest_file)])

        assert result.exit_code == 1
        assert "No matching dependencies found" in result.output

    def test_requires_a_name(self, runner):
        result = runner.invoke(cli, ["remove"])
        assert result.exit_code == 2

    def test_missing_manifest(self, runner, tmp_path):
        result = runner.invoke(cli, ["remove", "bignum", "--manifest-path", str(tmp_path / "Nargo.toml")])

        assert result.exit_code == 1
        assert "not found at" in result.output


class TestLoginCommand:

    def test_requires_a_token(self, runner):
        result = runner.invoke(cli, ["login"], env=TOKEN_ENV)

        assert result.exit_code == 1
        assert "GitHub token required" in result.output

    def test_uses_environment_token(self, runner):
        env = dict(TOKEN_ENV, GITHUB_TOKEN="ghp_env")
        with patch("noir_registry_cli.cli.login_operation") as login_operation:
            result = runner.invoke(cli, ["login", "--registry", "http://flag.test/api"], env=env)

        assert result.exit_code == 0, result.output
        settings, token = login_operation.call_args.args
        assert settings.registry_url == "http://flag.test/api"
        assert token == "ghp_env"


class TestPublishCommand:

    def test_prints_package_page(self, runner):
        request = PublishRequest(name="demo", source_repository_url="https://github.com/acme/demo")
        with patch("noir_registry_cli.cli.publish_package", return_value=request) as publish_package:
            result = runner.invoke(cli, [
                "publish", "--registry", "https://registry.example.com/api",
                "--repo", "https://github.com/acme/demo", "--package-version", "0.1.0",
                "--license", "MIT",
            ], env=TOKEN_ENV)

        assert result.exit_code == 0, result.output
        assert "View at: https://registry.example.com/packages/demo" in result.output
        args, kwargs = publish_package.call_args
        assert args[1] == {"description": None, "version": "0.1.0", "license": "MIT", "homepage": None}
        assert kwargs["repo_url"] == "https://github.com/acme/demo"

    def test_keeps_flag_token_apart_from_environment(self, runner):
        request = PublishRequest(name="demo", source_repository_url="https://github.com/acme/demo")
        env = dict(TOKEN_ENV, GITHUB_TOKEN="ghp_env")
        with patch("noir_registry_cli.cli.publish_package", return_value=request) as publish_package:
            result = runner.invoke(cli, ["publish", "--token", "ghp_flag"], env=env)

        assert result.exit_code == 0, result.output
        kwargs = publish_package.call_args.kwargs
        assert kwargs["token"] == "ghp_flag"
        assert kwargs["env_token"] == "ghp_env"


class TestConfigCommand:

    def test_without_show(self, runner):
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        assert "Use --show" in result.output

    def test_show(self, runner, config_home):
        result = runner.invoke(cli, ["config", "--show"], env=TOKEN_ENV)

        assert result.exit_code == 0, result.output
        assert "Current Noir Registry Configuration" in result.output
        assert "Registry URL" in result.output
