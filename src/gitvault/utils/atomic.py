"""Atomic file writes for gitvault state files.

The repository registry is rewritten wholesale on every change. Writing goes
through a temporary file that is renamed over the target, so a crash mid-write
leaves either the old document or the new one, never a truncated file.

Atomicity here is per write only: two processes doing read-modify-write on the
same file can still lose one of the updates.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from atomicwrites import atomic_write  # type: ignore[import-untyped]

__all__ = [
    "atomic_write_json",
    "atomic_write_text",
]


def atomic_write_text(
    path: Path | str,
    content: str,
    *,
    encoding: str = "utf-8",
    mkdir: bool = True,
) -> None:
    """Replace ``path`` with ``content`` atomically.

    Args:
        path: Destination file path.
        content: Text content to write.
        encoding: Character encoding to use.
        mkdir: Create missing parent directories first.

    Raises:
        OSError: If the write or rename operation fails.
    """
    file_path = Path(path)

    if mkdir:
        file_path.parent.mkdir(parents=True, exist_ok=True)

    with atomic_write(str(file_path), mode="w", encoding=encoding, overwrite=True) as f:
        f.write(content)


def atomic_write_json(
    path: Path | str,
    data: Any,
    *,
    indent: int | None = 2,
    mkdir: bool = True,
) -> None:
    """Serialize ``data`` as JSON and replace ``path`` with it atomically.

    Non-ASCII characters (repository names, paths) are written as-is.

    Raises:
        OSError: If the write or rename operation fails.
        TypeError: If the data is not JSON-serializable.

    Example:
        >>> atomic_write_json(data_dir / "repositories.json", [{"name": "a", "path": "/a"}])
    """
    content = json.dumps(data, indent=indent, ensure_ascii=False)
    atomic_write_text(path, content, mkdir=mkdir)
