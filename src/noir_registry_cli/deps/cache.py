"""Map git dependency URLs to nargo's local checkout cache."""

import shutil
import urllib.parse
from pathlib import Path


def cache_path_for(source_url: str, cache_root: Path) -> Path:
    """Derive the cache directory of a git dependency.

    ``https://github.com/acme/foo-lib`` maps to
    ``<cache_root>/github.com/acme/foo-lib``. Checkouts of every tag live
    below that directory.

    Raises:
        ValueError: If the URL has no host or path, is not http(s), or
            contains relative path segments.
    """
    parsed = urllib.parse.urlparse(source_url.strip())
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Unsupported URL scheme in '{source_url}'")

    host = parsed.hostname
    if not host:
        raise ValueError(f"No host in '{source_url}'")

    segments = [segment for segment in parsed.path.split("/") if segment]
    if not segments:
        raise ValueError(f"No repository path in '{source_url}'")
    if any(segment in (".", "..") for segment in segments):
        raise ValueError(f"Relative path segment in '{source_url}'")

    if segments[-1].endswith(".git"):
        segments[-1] = segments[-1][:-4]
        if not segments[-1]:
            raise ValueError(f"Empty repository name in '{source_url}'")

    return Path(cache_root).joinpath(host, *segments)


def clean_cache_directory(path: Path) -> bool:
    """Delete a cache directory tree.

    Returns:
        bool: False if there was nothing to delete.
    """
    if not path.is_dir():
        return False
    shutil.rmtree(path)
    return True
