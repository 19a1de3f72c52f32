"""Persistent list of tracked repositories.

The registry is a single JSON document holding an ordered list of
``{"name": ..., "path": ...}`` objects. It is read on every query and rewritten
wholesale on every add or remove; there is no schema version and no
incremental update.

Read-modify-write is not locked. Each write replaces the file atomically, but
two callers adding or removing at the same moment can still lose one of the
updates. gitvault assumes one user and one process.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from gitvault.exceptions import (
    InvalidRepositoryError,
    RegistryError,
    RepositoryExistsError,
)
from gitvault.logging import get_logger
from gitvault.models import RepositoryEntry
from gitvault.utils.atomic import atomic_write_json

__all__ = ["RepositoryRegistry", "normalize_path"]

logger = get_logger(__name__)


def normalize_path(path: Path | str) -> str:
    """Absolute, user-expanded path without trailing separators."""
    return os.path.abspath(os.path.expanduser(os.fspath(path)))


class RepositoryRegistry:
    """CRUD over the repository list file.

    Attributes:
        file_path: Location of the JSON document.

    Example:
        ```python
        registry = RepositoryRegistry(config.registry_file)
        registry.add("/home/me/src/project")
        [entry.name for entry in registry.load()]
        ```
    """

    def __init__(self, file_path: Path | str) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> list[RepositoryEntry]:
        """Load all entries in stored order.

        A missing file is an empty registry. An unreadable or malformed file
        is logged and treated as empty as well, so the UI can still start.
        """
        if not self._file_path.exists():
            return []
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(
                "registry_load_failed", path=str(self._file_path), error=str(e)
            )
            return []
        if not isinstance(data, list):
            logger.warning("registry_malformed", path=str(self._file_path))
            return []
        return [entry for entry in map(_entry_from_json, data) if entry is not None]

    def contains(self, path: Path | str) -> bool:
        target = normalize_path(path)
        return any(entry.path == target for entry in self.load())

    def add(self, path: Path | str) -> RepositoryEntry:
        """Register a repository.

        Args:
            path: Working tree to track. Must contain a ``.git`` entry.

        Returns:
            The new entry, named after the directory.

        Raises:
            RegistryError: If path is empty.
            InvalidRepositoryError: If path has no ``.git`` directory or file.
            RepositoryExistsError: If the path is already registered.
        """
        if not os.fspath(path):
            raise RegistryError("Repository path is required")

        normalized = normalize_path(path)
        # .git is a file for worktrees and submodules
        if not os.path.exists(os.path.join(normalized, ".git")):
            raise InvalidRepositoryError(path=normalized)

        entries = self.load()
        if any(entry.path == normalized for entry in entries):
            raise RepositoryExistsError(path=normalized)

        entry = RepositoryEntry(name=os.path.basename(normalized), path=normalized)
        entries.append(entry)
        self._save(entries)
        logger.info("repository_added", name=entry.name, path=entry.path)
        return entry

    def remove(self, path: Path | str) -> bool:
        """Stop tracking a repository.

        Removing a path that is not registered is not an error; the file is
        rewritten either way.

        Returns:
            True if an entry was removed.

        Raises:
            RegistryError: If path is empty or the file cannot be written.
        """
        if not os.fspath(path):
            raise RegistryError("Repository path is required")

        normalized = normalize_path(path)
        entries = self.load()
        remaining = [entry for entry in entries if entry.path != normalized]
        self._save(remaining)
        removed = len(remaining) != len(entries)
        logger.info("repository_removed", path=normalized, removed=removed)
        return removed

    def _save(self, entries: list[RepositoryEntry]) -> None:
        try:
            atomic_write_json(self._file_path, [entry.to_dict() for entry in entries])
        except OSError as e:
            raise RegistryError(
                f"Failed to save repositories: {e}", path=self._file_path
            ) from e


def _entry_from_json(item: Any) -> RepositoryEntry | None:
    if not isinstance(item, dict):
        return None
    path = item.get("path")
    if not isinstance(path, str) or not path:
        return None
    name = item.get("name")
    if not isinstance(name, str) or not name:
        name = os.path.basename(path)
    return RepositoryEntry(name=name, path=path)
