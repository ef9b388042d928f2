"""Core operations for the Noir registry CLI."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..config import Settings, get_api_key, save_credentials
from ..deps.cache import cache_path_for, clean_cache_directory
from ..deps.git_remote import detect_repository_url
from ..deps.manifest import Manifest, resolve_manifest_path, validate_manifest
from ..deps.tag_resolver import LatestTagResolver, resolve_version
from ..errors import MissingCredential, NothingRemoved, RegistryCliError, RemovalFailed, ToolchainError
from ..models.package import DependencyEntry, PublishRequest, sanitize_dependency_key
from ..registry.client import RegistryClient
from ..utils.console import (
    _rich_blank_line, _rich_echo, _rich_error, _rich_info, _rich_success, _rich_warning,
)
from .toolchain import run_nargo_check


class FetchStatus:
    """Outcome of the post-add ``nargo check``."""
    PASSED = "passed"
    SKIPPED = "skipped"
    NO_VERSION = "no_version"
    NOT_INSTALLED = "not_installed"
    FAILED = "failed"


@dataclass
class AddResult:
    """What ``add_dependency`` changed."""
    package_name: str
    dependency_key: str
    manifest_path: Path
    source_url: str
    version: Optional[str] = None
    version_source: Optional[str] = None
    fetch_status: str = FetchStatus.SKIPPED


def _candidate_keys(package_name: str) -> List[str]:
    key = sanitize_dependency_key(package_name)
    return [key] if key == package_name else [key, package_name]


def add_dependency(package_name: str, settings: Settings, client: Optional[RegistryClient] = None,
                   tag_resolver: Optional[LatestTagResolver] = None,
                   manifest_path: Optional[Path] = None, start_dir: Optional[Path] = None,
                   fetch: bool = True,
                   nargo_check: Callable[[Path], bool] = run_nargo_check) -> AddResult:
    """Add a registry package to the manifest.

    Args:
        package_name: Package name as published, hyphens included
        settings: Resolved configuration
        client: Registry client (built from settings when omitted)
        tag_resolver: Fallback version source (built from settings when omitted)
        manifest_path: Explicit manifest path; searched upward from
            ``start_dir`` when omitted
        start_dir: Directory to search from (defaults to the working directory)
        fetch: Run ``nargo check`` afterwards when a version was resolved
        nargo_check: Toolchain runner

    Returns:
        AddResult

    Raises:
        RegistryCliError: On any terminal failure; the manifest is only
            written once the new entry is fully built.
    """
    client = client or RegistryClient(settings.registry_url)
    if tag_resolver is None:
        tag_resolver = LatestTagResolver(settings.github_api_url)

    path = resolve_manifest_path(manifest_path, start_dir or Path.cwd(), settings.manifest_name)

    _rich_info(f"Fetching package '{package_name}' from registry...", symbol="package")
    _rich_echo(f"   Registry: {settings.registry_url}", style="muted")

    package_info = client.fetch_package_info(package_name)

    _rich_success(f"Found package: {package_info.name}", symbol="success")
    _rich_echo(f"   Repository: {package_info.source_repository_url}", style="muted")

    if not package_info.latest_version:
        _rich_echo("   Checking GitHub for latest tag...", style="muted")
    version, version_source = resolve_version(package_info, tag_resolver)
    if version_source == "registry":
        _rich_echo(f"   Latest version: {version}", style="muted")
    elif version_source == "github":
        _rich_echo(f"   Latest tag: {version} (from GitHub)", style="muted")
    else:
        _rich_warning("   No version tag found; the dependency will be added without a tag.", symbol="warning")
        _rich_echo(f"   Add a `tag` manually in {path.name} once the author publishes a release.", style="muted")

    key = sanitize_dependency_key(package_name)
    manifest = Manifest.read(path)
    manifest.insert(key, package_info.source_repository_url, tag=version, package_name=package_name)
    manifest.write()
    _rich_success(f"Added '{package_name}' to {path}", symbol="success")

    try:
        validate_manifest(path)
    except RegistryCliError as e:
        _rich_warning(f"Could not validate {path.name}: {e}", symbol="warning")
        _rich_echo("   Please check the file manually", style="muted")

    # Detached usage ping; the result is ignored
    client.record_download(package_name)

    result = AddResult(
        package_name=package_name,
        dependency_key=key,
        manifest_path=path,
        source_url=package_info.source_repository_url,
        version=version,
        version_source=version_source,
    )

    if not fetch:
        return result
    if version is None:
        # nargo requires a tag for git dependencies
        result.fetch_status = FetchStatus.NO_VERSION
        return result

    result.fetch_status = _fetch_with_nargo(path, package_name, nargo_check)
    return result


def _fetch_with_nargo(path: Path, package_name: str, nargo_check: Callable[[Path], bool]) -> str:
    _rich_info("Fetching dependency with `nargo check`...", symbol="fetch")
    try:
        passed = nargo_check(path.parent)
    except ToolchainError as e:
        _rich_warning(f"{e}", symbol="warning")
        if e.stderr:
            _rich_echo(e.stderr, style="muted")
        _rich_echo(f"   The dependency was added to {path.name} but could not be fetched.", style="muted")
        _rich_echo("   This may be caused by other unresolved dependencies in your project.", style="muted")
        _rich_echo("   Run `nargo check` manually to see the full error, or", style="muted")
        _rich_echo(f"   run `noir-registry remove {package_name}` to undo.", style="muted")
        return FetchStatus.FAILED

    if not passed:
        _rich_warning("nargo not found in PATH; skipping fetch.", symbol="warning")
        _rich_echo("   Run `nargo check` manually to pull the dependency, or install nargo first.", style="muted")
        return FetchStatus.NOT_INSTALLED

    _rich_success("Dependency fetched and validated successfully!", symbol="success")
    return FetchStatus.PASSED


@dataclass
class RemovalSummary:
    """Per-package results of a remove command."""
    manifest_path: Path
    removed: List[DependencyEntry] = field(default_factory=list)
    removed_names: List[str] = field(default_factory=list)
    not_found: List[str] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    cleaned: List[Path] = field(default_factory=list)
    cleanup_skipped: List[Dict[str, str]] = field(default_factory=list)

    def add_removed(self, package_name: str, entry: DependencyEntry):
        self.removed_names.append(package_name)
        self.removed.append(entry)

    def add_not_found(self, package_name: str):
        self.not_found.append(package_name)

    def add_error(self, package_name: str, reason: str):
        self.errors.append({"package": package_name, "reason": reason})

    def log_summary(self):
        _rich_blank_line()
        _rich_echo(
            f"Summary: {len(self.removed_names)} removed, {len(self.not_found)} not found, "
            f"{len(self.errors)} errors"
        )

    def raise_for_outcome(self):
        """Raise when the command as a whole failed.

        Raises:
            RemovalFailed: If any package hit an error.
            NothingRemoved: If nothing was removed and some names were absent.
        """
        if self.errors:
            raise RemovalFailed(item["package"] for item in self.errors)
        if self.not_found and not self.removed_names:
            raise NothingRemoved(self.manifest_path)


def _remove_one(path: Path, package_name: str) -> Optional[DependencyEntry]:
    """Read, delete and write back one dependency.

    The entry is captured before deletion so its source URL survives for
    cache cleanup. Returns None when neither the sanitized key nor the raw
    name is declared; the file is not written in that case.
    """
    manifest = Manifest.read(path)
    for key in _candidate_keys(package_name):
        entry = manifest.get_dependency(key)
        if entry is None:
            continue
        manifest.remove(key)
        manifest.write()
        return entry
    return None


def remove_dependencies(package_names: List[str], settings: Settings,
                        manifest_path: Optional[Path] = None, start_dir: Optional[Path] = None,
                        clean: bool = False) -> RemovalSummary:
    """Remove dependencies from the manifest, optionally deleting cached sources.

    Every name is attempted even when an earlier one fails.

    Raises:
        ManifestNotFound: If no manifest can be located.
        RemovalFailed: If any package hit an error.
        NothingRemoved: If nothing was removed and some names were absent.
    """
    path = resolve_manifest_path(manifest_path, start_dir or Path.cwd(), settings.manifest_name)
    summary = RemovalSummary(manifest_path=path)

    for package_name in package_names:
        try:
            entry = _remove_one(path, package_name)
        except RegistryCliError as e:
            _rich_error(f"Failed to remove '{package_name}': {e}", symbol="error")
            summary.add_error(package_name, str(e))
            continue

        if entry is None:
            _rich_warning(f"Dependency '{package_name}' not found in {path}", symbol="warning")
            summary.add_not_found(package_name)
        else:
            _rich_success(f"Removed '{package_name}' from {path}", symbol="success")
            summary.add_removed(package_name, entry)

    if summary.removed:
        try:
            validate_manifest(path)
        except RegistryCliError as e:
            _rich_warning(f"Could not validate {path.name} after removal: {e}", symbol="warning")
            _rich_echo("   Please check the file manually", style="muted")

        if clean:
            _clean_caches(summary, settings.cache_root)

    if len(package_names) > 1:
        summary.log_summary()

    summary.raise_for_outcome()
    return summary


def _clean_caches(summary: RemovalSummary, cache_root: Path):
    for package_name, entry in zip(summary.removed_names, summary.removed):
        if not entry.source_url:
            _rich_info(f"No git source recorded for '{package_name}'; skipping cache cleanup", symbol="info")
            summary.cleanup_skipped.append({"package": package_name, "reason": "no source url"})
            continue

        try:
            cache_dir = cache_path_for(entry.source_url, cache_root)
        except ValueError as e:
            _rich_info(f"Cannot derive cache path for '{package_name}' ({e}); skipping", symbol="info")
            summary.cleanup_skipped.append({"package": package_name, "reason": str(e)})
            continue

        try:
            deleted = clean_cache_directory(cache_dir)
        except OSError as e:
            _rich_warning(f"Failed to delete cache {cache_dir}: {e}", symbol="warning")
            summary.cleanup_skipped.append({"package": package_name, "reason": str(e)})
            continue

        if deleted:
            _rich_success(f"Deleted cached sources at {cache_dir}", symbol="clean")
            summary.cleaned.append(cache_dir)
        else:
            _rich_info(f"No cached sources at {cache_dir}; skipping", symbol="info")
            summary.cleanup_skipped.append({"package": package_name, "reason": "not present"})


def login(settings: Settings, token: str, client: Optional[RegistryClient] = None) -> str:
    """Exchange a GitHub token for an API key and store it.

    Returns:
        str: The API key.
    """
    client = client or RegistryClient(settings.registry_url)
    _rich_info("Authenticating with GitHub...", symbol="lock")
    api_key = client.authenticate(token)
    _rich_success("Authentication successful", symbol="success")

    save_credentials(api_key, settings.registry_url)
    _rich_success("Credentials saved successfully!", symbol="success")
    return api_key


def publish_package(settings: Settings, request_fields: Dict[str, Optional[str]],
                    token: Optional[str] = None, env_token: Optional[str] = None,
                    repo_url: Optional[str] = None, manifest_path: Optional[Path] = None,
                    start_dir: Optional[Path] = None,
                    client: Optional[RegistryClient] = None) -> PublishRequest:
    """Publish the package described by the nearest manifest.

    The package name comes from ``[package].name``. The repository URL comes
    from ``repo_url`` or the ``origin`` git remote. An explicit ``token`` is
    always exchanged for a fresh API key. Without one, the stored API key for
    this registry is used, and ``env_token`` is exchanged only when no key is
    stored.

    Args:
        request_fields: Optional publish fields (description, version,
            license, homepage)
        token: GitHub token given on the command line
        env_token: GitHub token found in the environment

    Returns:
        PublishRequest: What was published.
    """
    client = client or RegistryClient(settings.registry_url)
    path = resolve_manifest_path(manifest_path, start_dir or Path.cwd(), settings.manifest_name)

    _rich_info(f"Reading package information from {path}", symbol="package")
    package_name = Manifest.read(path).package_name()
    _rich_success(f"Package name: {package_name}", symbol="success")

    if repo_url is None:
        repo_url = detect_repository_url(path.parent)
        _rich_success(f"Detected repository: {repo_url}", symbol="success")

    if token:
        api_key = login(settings, token, client=client)
    else:
        api_key = get_api_key(settings.registry_url)
        if api_key is None:
            if not env_token:
                raise MissingCredential()
            api_key = login(settings, env_token, client=client)

    request = PublishRequest(name=package_name, source_repository_url=repo_url, **request_fields)

    _rich_info("Publishing package to registry...", symbol="upload")
    _rich_echo(f"   Registry: {settings.registry_url}", style="muted")
    _rich_echo(f"   Package: {request.name}", style="muted")
    _rich_echo(f"   Repository: {request.source_repository_url}", style="muted")

    client.publish(api_key, request)
    return request
