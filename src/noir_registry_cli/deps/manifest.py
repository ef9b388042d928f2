"""Nargo.toml location and format-preserving editing.

The manifest is parsed with tomlkit, which keeps comments, whitespace and key
order, so a mutation only touches the lines of the entry it adds or removes.
A ``Manifest`` moves through three states::

    read()                insert() / remove()          write()
    ------> clean (in memory) ----------------> dirty ---------> clean

Nothing touches the file until ``write()``, which renders the whole document
in memory first and then replaces the file in one step.
"""

from collections.abc import MutableMapping
from pathlib import Path
from typing import Dict, Optional, Union

import tomlkit
from tomlkit.exceptions import TOMLKitError

from ..errors import DuplicateDependency, ManifestError, ManifestNotFound, ManifestParseError
from ..models.package import DependencyEntry
from ..utils.helpers import atomic_write

MANIFEST_NAME = "Nargo.toml"
DEPENDENCIES_TABLE = "dependencies"

PathLike = Union[str, Path]


def find_manifest(start_dir: PathLike, name: str = MANIFEST_NAME) -> Path:
    """Find the manifest by walking up from ``start_dir``.

    Args:
        start_dir: Directory to start from
        name: Manifest file name

    Returns:
        Path: Absolute path of the nearest manifest

    Raises:
        ManifestNotFound: If no directory up to the filesystem root has one
    """
    start = Path(start_dir).resolve()
    current = start

    while True:
        candidate = current / name
        if candidate.is_file():
            return candidate

        parent = current.parent
        # The root is its own parent
        if parent == current:
            raise ManifestNotFound(start, name)
        current = parent


def resolve_manifest_path(manifest_path: Optional[PathLike], start_dir: PathLike,
                          name: str = MANIFEST_NAME) -> Path:
    """Use an explicit ``--manifest-path`` when given, else search upward."""
    if manifest_path is not None:
        path = Path(manifest_path)
        if not path.is_file():
            raise ManifestNotFound(path, name, explicit=True)
        return path.resolve()
    return find_manifest(start_dir, name)


def _parse(text: str, path: Path) -> tomlkit.TOMLDocument:
    try:
        return tomlkit.parse(text)
    except TOMLKitError as e:
        raise ManifestParseError(path, str(e)) from e


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Failed to read {path}: {e}") from e


def _spaced_inline_table(fields: Dict[str, str]):
    """Build ``{ git = "...", tag = "..." }`` with the spacing nargo and cargo write."""
    body = ", ".join(f"{name} = {tomlkit.item(value).as_string()}" for name, value in fields.items())
    return tomlkit.parse(f"entry = {{ {body} }}\n")["entry"]


class Manifest:
    """A parsed Nargo.toml bound to the path it was read from."""

    def __init__(self, path: PathLike, document: tomlkit.TOMLDocument):
        self.path = Path(path)
        self.document = document
        self.dirty = False

    @classmethod
    def read(cls, path: PathLike) -> "Manifest":
        """Read and parse a manifest.

        Raises:
            ManifestParseError: If the file is not valid TOML
            ManifestError: If the file cannot be read
        """
        path = Path(path)
        return cls(path, _parse(_read_text(path), path))

    def _existing_dependency_table(self) -> Optional[MutableMapping]:
        table = self.document.get(DEPENDENCIES_TABLE)
        if table is None:
            return None
        if not isinstance(table, MutableMapping):
            raise ManifestError(
                f"'{DEPENDENCIES_TABLE}' in {self.path} is not a table",
                hint=f"Rewrite it as a [{DEPENDENCIES_TABLE}] section",
            )
        return table

    def dependency_table(self) -> MutableMapping:
        """The ``[dependencies]`` table.

        When the manifest has none, an empty detached table is returned; it
        only becomes part of the document once ``insert`` adds an entry.
        """
        table = self._existing_dependency_table()
        if table is None:
            return tomlkit.table()
        return table

    def get_dependency(self, key: str) -> Optional[DependencyEntry]:
        """Read one dependency entry, or None when the key is absent."""
        table = self.dependency_table()
        if key not in table:
            return None

        value = table[key]
        if isinstance(value, MutableMapping):
            git = value.get("git")
            tag = value.get("tag")
            return DependencyEntry(
                key=key,
                source_url=str(git) if git is not None else None,
                tag=str(tag) if tag is not None else None,
            )
        return DependencyEntry(key=key)

    def insert(self, key: str, source_url: str, tag: Optional[str] = None,
               package_name: Optional[str] = None) -> DependencyEntry:
        """Add ``key = { git = source_url[, tag = tag] }``.

        Raises:
            DuplicateDependency: If ``key`` or the raw ``package_name`` is
                already declared. The document is left unchanged.
        """
        package_name = package_name or key
        existing = self._existing_dependency_table()
        if existing is not None and (key in existing or package_name in existing):
            raise DuplicateDependency(package_name, self.path)

        entry = DependencyEntry(key=key, source_url=source_url, tag=tag)
        inline = _spaced_inline_table(entry.to_inline())

        if existing is None:
            self.document.add(DEPENDENCIES_TABLE, tomlkit.table())
            existing = self.document[DEPENDENCIES_TABLE]
        existing[key] = inline

        self.dirty = True
        return entry

    def remove(self, key: str) -> bool:
        """Remove a dependency.

        Returns:
            bool: True if the key existed and was removed. A manifest without a
            ``[dependencies]`` table reports False.
        """
        table = self._existing_dependency_table()
        if table is None or key not in table:
            return False

        del table[key]
        self.dirty = True
        return True

    def package_name(self) -> str:
        """The ``name`` field of the ``[package]`` table."""
        package = self.document.get("package")
        if not isinstance(package, MutableMapping):
            raise ManifestError(f"{self.path.name} does not contain a [package] section")
        name = package.get("name")
        if not name:
            raise ManifestError(f"Package name not found in {self.path.name}")
        return str(name)

    def dumps(self) -> str:
        return tomlkit.dumps(self.document)

    def write(self) -> Path:
        """Serialize the document and atomically replace the file."""
        content = self.dumps()
        try:
            atomic_write(self.path, content)
        except OSError as e:
            raise ManifestError(f"Failed to write {self.path}: {e}") from e
        self.dirty = False
        return self.path


def validate_manifest(path: PathLike) -> None:
    """Re-read the file to confirm it still parses.

    Raises:
        ManifestParseError: If the file on disk is no longer valid TOML
        ManifestError: If the file cannot be read
    """
    path = Path(path)
    _parse(_read_text(path), path)
