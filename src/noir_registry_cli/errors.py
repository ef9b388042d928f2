"""Error taxonomy for the Noir registry CLI.

Every terminal failure raised by the library layer derives from
:class:`RegistryCliError` and carries a ``hint``: one actionable next step the
CLI prints under the error message. Best-effort failures (tag lookup, download
ping, ``nargo check``, cache cleanup) never surface as these errors.
"""

from pathlib import Path
from typing import Optional


class RegistryCliError(Exception):
    """Base class for terminal errors."""

    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        if hint is not None:
            self.hint = hint


# Manifest errors

class ManifestNotFound(RegistryCliError):
    """No manifest at the given path or in any parent directory."""

    def __init__(self, start: Path, name: str = "Nargo.toml", explicit: bool = False):
        self.start = Path(start)
        self.name = name
        if explicit:
            message = f"{name} not found at: {self.start}"
        else:
            message = f"Could not find {name} in {self.start} or any parent directory"
        super().__init__(
            message,
            hint="Run the command from inside a Noir project or pass --manifest-path",
        )


class ManifestParseError(RegistryCliError):
    """The manifest is not valid TOML."""

    def __init__(self, path: Path, detail: str):
        self.path = Path(path)
        super().__init__(
            f"Failed to parse {self.path}: {detail}",
            hint=f"Fix the TOML syntax in {self.path} and try again",
        )


class ManifestError(RegistryCliError):
    """The manifest parses but does not have the expected structure."""


class DuplicateDependency(RegistryCliError):
    """The dependency is already declared in the manifest."""

    def __init__(self, package_name: str, path: Path):
        self.package_name = package_name
        self.path = Path(path)
        super().__init__(
            f"Dependency '{package_name}' already exists in {self.path.name}",
            hint=f"Run `noir-registry remove {package_name}` first to replace it",
        )


# Registry errors

class PackageNotFound(RegistryCliError):
    """The registry answered 404 for the package."""

    def __init__(self, package_name: str, registry_url: str):
        self.package_name = package_name
        self.registry_url = registry_url
        super().__init__(
            f"Package '{package_name}' not found in registry.\nRegistry URL: {registry_url}",
            hint="Check the package name and ensure the registry is up to date",
        )


class NetworkError(RegistryCliError):
    """Transport-level failure after all retry attempts."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Failed to connect to registry at {url}{detail}",
            hint="Check that the registry server is running and reachable",
        )


class ServiceUnavailable(RegistryCliError):
    """The registry kept answering 502/503 until retries ran out."""

    def __init__(self, url: str, status: int):
        self.url = url
        self.status = status
        super().__init__(
            f"Registry server is unavailable (HTTP {status}) at {url}",
            hint="The registry is temporarily down; try again in a few minutes",
        )


class RegistryError(RegistryCliError):
    """Any other non-success status, with the body kept for diagnostics."""

    def __init__(self, status: int, body: str, registry_url: str = ""):
        self.status = status
        self.body = body
        self.registry_url = registry_url
        message = f"Registry returned error {status}: {body}"
        if registry_url:
            message += f"\nRegistry URL: {registry_url}"
        super().__init__(message, hint="Check the registry URL with --registry or NOIR_REGISTRY_URL")


class MalformedResponse(RegistryCliError):
    """A response body did not have the expected shape."""

    def __init__(self, detail: str):
        super().__init__(
            f"Failed to parse response from registry: {detail}",
            hint="The registry may be returning an unexpected format; check the registry URL",
        )


class AuthenticationFailed(RegistryCliError):
    """The registry rejected the login credential."""

    def __init__(self, message: str):
        self.server_message = message
        super().__init__(
            f"Authentication failed: {message}",
            hint="Create a token at https://github.com/settings/tokens and pass it with --token",
        )


class PublishRejected(RegistryCliError):
    """The registry refused to publish the package."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.server_message = message
        self.status = status
        text = f"Publish failed: {message}"
        if status is not None:
            text = f"Publish failed with status {status}: {message}"
        super().__init__(text, hint="Run `noir-registry login` again if your API key has expired")


class MissingCredential(RegistryCliError):
    """No token was given and none is configured in the environment."""

    def __init__(self):
        super().__init__(
            "GitHub token required. Provide --token <token> or set NOIR_REGISTRY_TOKEN or GITHUB_TOKEN",
            hint="Create a token at https://github.com/settings/tokens (with 'repo' scope)",
        )


class RepositoryDetectionError(RegistryCliError):
    """The source repository URL could not be read from git."""

    def __init__(self, detail: str):
        super().__init__(
            f"Could not detect git remote: {detail}",
            hint="Provide --repo <github-url> or run from a git repository with an 'origin' remote",
        )


# Remove command outcomes

class RemovalFailed(RegistryCliError):
    """At least one package could not be removed because of an error."""

    def __init__(self, packages):
        self.packages = list(packages)
        super().__init__(
            f"Some packages could not be removed: {', '.join(self.packages)}",
            hint="Check the errors above; the manifest keeps every entry that failed",
        )


class NothingRemoved(RegistryCliError):
    """None of the requested packages were declared in the manifest."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(
            f"No matching dependencies found in {self.path}",
            hint=f"Check the names declared in the [dependencies] table of {self.path}",
        )


# Best-effort failures

class ToolchainError(Exception):
    """`nargo check` ran but failed. Never a command failure."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr
