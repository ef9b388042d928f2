"""Fallback version discovery from GitHub tags."""

import re
import urllib.parse
from typing import Optional, Tuple

import requests

from ..models.package import PackageInfo

TAG_LOOKUP_TIMEOUT = 15
GITHUB_HOSTS = ("github.com", "www.github.com")
_NAME_RE = re.compile(r'^[a-zA-Z0-9._-]+$')


def github_slug_from_url(url: str) -> Optional[str]:
    """Extract ``owner/repo`` from a GitHub URL.

    Accepts ``https://github.com/owner/repo`` with an optional ``.git``
    suffix, trailing slash or extra segments such as ``/tree/main/lib``.

    Returns:
        Optional[str]: The slug, or None if the URL is not a GitHub repository.
    """
    parsed = urllib.parse.urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or parsed.hostname not in GITHUB_HOSTS:
        return None

    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) < 2:
        return None

    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not _NAME_RE.match(owner) or not repo or not _NAME_RE.match(repo):
        return None
    return f"{owner}/{repo}"


class LatestTagResolver:
    """Looks up the newest tag of a GitHub repository.

    Every failure (unparseable URL, network error, error status, unexpected
    body) is reported as "no tag": this lookup must never abort an add.
    """

    def __init__(self, api_url: str = "https://api.github.com", token: Optional[str] = None,
                 session: Optional[requests.Session] = None, timeout: float = TAG_LOOKUP_TIMEOUT):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self):
        headers = {
            "User-Agent": "noir-registry-cli",
            "Accept": "application/vnd.github+json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def latest_tag(self, repository_url: str) -> Optional[str]:
        """Return the first tag GitHub lists (newest first), or None."""
        slug = github_slug_from_url(repository_url)
        if slug is None:
            return None

        try:
            response = self.session.get(f"{self.api_url}/repos/{slug}/tags",
                                        headers=self._headers(), timeout=self.timeout)
        except requests.RequestException:
            return None

        if not response.ok:
            return None

        try:
            tags = response.json()
        except ValueError:
            return None

        if not isinstance(tags, list) or not tags:
            return None
        first = tags[0]
        if not isinstance(first, dict) or not isinstance(first.get("name"), str):
            return None
        return first["name"] or None


def resolve_version(package_info: PackageInfo,
                    tag_resolver: Optional[LatestTagResolver]) -> Tuple[Optional[str], Optional[str]]:
    """Pick the version to pin.

    Returns:
        Tuple of (version, source) where source is "registry", "github" or
        None when nothing could be resolved.
    """
    if package_info.latest_version:
        return package_info.latest_version, "registry"

    if tag_resolver is not None:
        tag = tag_resolver.latest_tag(package_info.source_repository_url)
        if tag:
            return tag, "github"

    return None, None
