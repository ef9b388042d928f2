"""Detect a project's repository URL from its git remote."""

from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..errors import RepositoryDetectionError


def normalize_remote_url(url: str) -> str:
    """Convert a git remote URL to the HTTPS form the registry stores.

    ``git@github.com:owner/repo.git`` becomes ``https://github.com/owner/repo``.
    """
    url = url.strip()
    if url.startswith("git@github.com:"):
        url = "https://github.com/" + url[len("git@github.com:"):]
    elif url.startswith("ssh://git@github.com/"):
        url = "https://github.com/" + url[len("ssh://git@github.com/"):]
    url = url.rstrip("/")
    if url.endswith(".git"):
        url = url[:-4]
    return url


def detect_repository_url(project_dir: Path, remote_name: str = "origin") -> str:
    """Read the URL of ``remote_name`` for the repository containing ``project_dir``.

    Raises:
        RepositoryDetectionError: If there is no repository or no such remote.
    """
    try:
        repo = Repo(project_dir, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise RepositoryDetectionError(f"{project_dir} is not inside a git repository")

    try:
        remote = repo.remote(remote_name)
        urls = list(remote.urls)
    except (ValueError, GitCommandError) as e:
        raise RepositoryDetectionError(f"no '{remote_name}' remote ({e})")
    finally:
        repo.close()

    if not urls:
        raise RepositoryDetectionError(f"remote '{remote_name}' has no URL")
    return normalize_remote_url(urls[0])
