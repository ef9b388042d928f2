"""Command-line interface for the Noir package registry."""

import sys
from pathlib import Path

import click
from colorama import Fore, Style, init

from noir_registry_cli import config as stored_config
from noir_registry_cli.config import Settings
from noir_registry_cli.core.operations import (
    add_dependency,
    login as login_operation,
    publish_package,
    remove_dependencies,
)
from noir_registry_cli.core.token_manager import GitHubTokenManager
from noir_registry_cli.deps.manifest import find_manifest
from noir_registry_cli.deps.tag_resolver import LatestTagResolver
from noir_registry_cli.errors import (
    ManifestNotFound,
    MissingCredential,
    NetworkError,
    PackageNotFound,
    RegistryCliError,
    ServiceUnavailable,
)
from noir_registry_cli.registry.client import RegistryClient
from noir_registry_cli.utils.console import (
    _rich_echo, _rich_error, _rich_info, _rich_success, _rich_warning, _get_console,
)
from noir_registry_cli.version import get_version

init(autoreset=True)

ERROR = f"{Fore.RED}{Style.BRIGHT}"
RESET = Style.RESET_ALL


def _fail(error: RegistryCliError):
    """Print a terminal error with its next step and exit non-zero."""
    _rich_error(f"Error: {error}", symbol="error")
    if error.hint:
        _rich_echo(f"   {error.hint}", style="muted")
    sys.exit(1)


def print_version(ctx, param, value):
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return

    console = _get_console()
    if console:
        from rich.panel import Panel
        from rich.text import Text
        version_text = Text()
        version_text.append("Noir Registry CLI", style="bold cyan")
        version_text.append(f" version {get_version()}", style="white")
        console.print(Panel(version_text, border_style="cyan", padding=(0, 1)))
    else:
        click.echo(f"Noir Registry CLI version {get_version()}")

    ctx.exit()


@click.group(help="Noir Registry: add, remove and publish Noir packages")
@click.option('--version', is_flag=True, callback=print_version,
              expose_value=False, is_eager=True, help="Show version and exit.")
@click.pass_context
def cli(ctx):
    """Main entry point for the Noir registry CLI."""
    ctx.ensure_object(dict)


@cli.command(help="Add a package dependency from the Noir registry")
@click.argument('package_name')
@click.option('--registry', help="Registry API URL (defaults to NOIR_REGISTRY_URL or http://localhost:8080/api)")
@click.option('--manifest-path', type=click.Path(path_type=Path),
              help="Path to Nargo.toml (searched upward from the current directory by default)")
@click.option('--no-fetch', is_flag=True, help="Skip running `nargo check` after adding the dependency")
def add(package_name, registry, manifest_path, no_fetch):
    """Add a registry package to Nargo.toml (like `cargo add`).

    Examples:
        noir-registry add rocq-of-noir
        noir-registry add bignum --no-fetch
        noir-registry add bignum --registry https://registry.example.com/api
    """
    settings = Settings.resolve(registry)
    tokens = GitHubTokenManager()
    tag_resolver = LatestTagResolver(settings.github_api_url, token=tokens.get_token_for_purpose('tags'))

    try:
        add_dependency(
            package_name,
            settings,
            client=RegistryClient(settings.registry_url),
            tag_resolver=tag_resolver,
            manifest_path=manifest_path,
            fetch=not no_fetch,
        )
    except (PackageNotFound, NetworkError, ServiceUnavailable) as e:
        _rich_error(f"Error: {e}", symbol="error")
        _rich_info("Troubleshooting:", symbol="info")
        _rich_echo("   - Check that the registry server is running", style="muted")
        _rich_echo("   - Verify the package name is correct", style="muted")
        _rich_echo(f"   - Try: curl {settings.registry_url}/packages/{package_name}", style="muted")
        sys.exit(1)
    except RegistryCliError as e:
        _fail(e)


@cli.command(help="Remove package dependencies from Nargo.toml")
@click.argument('package_names', nargs=-1, required=True)
@click.option('--manifest-path', type=click.Path(path_type=Path),
              help="Path to Nargo.toml (searched upward from the current directory by default)")
@click.option('--clean', is_flag=True, help="Also delete the cached sources of removed dependencies")
def remove(package_names, manifest_path, clean):
    """Remove dependencies from Nargo.toml.

    Every package is attempted even if an earlier one fails.

    Examples:
        noir-registry remove rocq-of-noir
        noir-registry remove pkg1 pkg2 --clean
    """
    settings = Settings.resolve()
    try:
        remove_dependencies(list(package_names), settings, manifest_path=manifest_path, clean=clean)
    except RegistryCliError as e:
        _fail(e)


@cli.command(help="Log in to the Noir registry with a GitHub token")
@click.option('--token', help="GitHub token (defaults to NOIR_REGISTRY_TOKEN or GITHUB_TOKEN)")
@click.option('--registry', help="Registry API URL (defaults to NOIR_REGISTRY_URL)")
def login(token, registry):
    """Exchange a GitHub token for a registry API key and store it."""
    settings = Settings.resolve(registry)
    token = GitHubTokenManager().get_token_for_purpose('registry', explicit=token)

    try:
        if not token:
            raise MissingCredential()
        login_operation(settings, token)
    except RegistryCliError as e:
        _fail(e)

    _rich_echo("   You can now use 'noir-registry publish' without a token", style="muted")


@cli.command(help="Publish the current package to the Noir registry")
@click.option('--registry', help="Registry API URL (defaults to NOIR_REGISTRY_URL)")
@click.option('--repo', help="Repository URL (defaults to the 'origin' git remote)")
@click.option('--description', help="Package description")
@click.option('--package-version', help="Version to publish")
@click.option('--license', 'license_', help="License identifier")
@click.option('--homepage', help="Homepage URL")
@click.option('--token', help="GitHub token; exchanged for a fresh API key even when one is stored")
@click.option('--manifest-path', type=click.Path(path_type=Path),
              help="Path to Nargo.toml (searched upward from the current directory by default)")
def publish(registry, repo, description, package_version, license_, homepage, token, manifest_path):
    """Publish the package named in Nargo.toml."""
    settings = Settings.resolve(registry)
    env_token = GitHubTokenManager().get_token_for_purpose('registry')
    fields = {
        "description": description,
        "version": package_version,
        "license": license_,
        "homepage": homepage,
    }

    try:
        request = publish_package(settings, fields, token=token, env_token=env_token,
                                  repo_url=repo, manifest_path=manifest_path)
    except RegistryCliError as e:
        _fail(e)

    site_url = settings.registry_url
    if site_url.endswith("/api"):
        site_url = site_url[:-len("/api")]
    _rich_success(f"Package '{request.name}' published successfully!", symbol="success")
    _rich_echo(f"   View at: {site_url}/packages/{request.name}", style="muted")


@cli.command(help="Show Noir registry CLI configuration")
@click.option('--show', is_flag=True, help="Show current configuration")
def config(show):
    """Show stored credentials and the effective settings."""
    if not show:
        _rich_info("Use --show to display configuration")
        return

    settings = Settings.resolve()
    stored = stored_config.get_config()
    try:
        manifest = str(find_manifest(Path.cwd(), settings.manifest_name))
    except ManifestNotFound:
        manifest = "Not in a Noir project directory"

    from rich.table import Table
    table = Table(title="Current Noir Registry Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Category", style="bold yellow", min_width=12)
    table.add_column("Setting", style="white", min_width=15)
    table.add_column("Value", style="cyan")

    table.add_row("Project", "Manifest", manifest)
    table.add_row("Settings", "Registry URL", settings.registry_url)
    table.add_row("", "Cache root", str(settings.cache_root))
    table.add_row("Credentials", "Config file", stored_config.CONFIG_FILE)
    table.add_row("", "Registry", stored.get("registry_url") or "(not set)")
    table.add_row("", "API key", stored_config.mask_secret(stored.get("api_key")))
    table.add_row("Global", "CLI Version", get_version())

    console = _get_console()
    if console:
        console.print(table)
    else:
        _rich_warning("Console unavailable; cannot render configuration table")


def main():
    """Main entry point for the CLI."""
    try:
        cli(obj={})
    except Exception as e:
        click.echo(f"{ERROR}Error: {e}{RESET}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
