"""Registry and manifest data models."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from ..errors import MalformedResponse


def sanitize_dependency_key(package_name: str) -> str:
    """Nargo dependency keys may not contain hyphens; use underscores instead."""
    return package_name.replace("-", "_")


@dataclass
class PackageInfo:
    """Package metadata returned by ``GET /packages/{name}``."""
    name: str
    source_repository_url: str
    latest_version: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "PackageInfo":
        """Build from a decoded JSON body.

        Older registries send ``github_repository_url``; it is accepted as an
        alias for ``source_repository_url``.

        Raises:
            MalformedResponse: If the body does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise MalformedResponse(f"expected a JSON object, got {type(data).__name__}")

        name = data.get("name")
        source_url = data.get("source_repository_url") or data.get("github_repository_url")
        latest_version = data.get("latest_version")

        if not isinstance(name, str) or not name:
            raise MalformedResponse("missing or invalid field 'name'")
        if not isinstance(source_url, str) or not source_url:
            raise MalformedResponse("missing or invalid field 'source_repository_url'")
        if latest_version is not None and not isinstance(latest_version, str):
            raise MalformedResponse("field 'latest_version' must be a string or null")

        return cls(name=name, source_repository_url=source_url, latest_version=latest_version or None)


@dataclass
class DependencyEntry:
    """One record of the manifest's ``[dependencies]`` table."""
    key: str
    source_url: Optional[str] = None
    tag: Optional[str] = None

    def to_inline(self) -> Dict[str, str]:
        """Fields as written to the manifest; the tag is omitted when absent."""
        fields = {"git": self.source_url}
        if self.tag:
            fields["tag"] = self.tag
        return fields


@dataclass
class PublishRequest:
    """Body of ``POST /packages/publish``."""
    name: str
    source_repository_url: str
    description: Optional[str] = None
    version: Optional[str] = None
    license: Optional[str] = None
    homepage: Optional[str] = None

    def to_payload(self) -> Dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value is not None}
