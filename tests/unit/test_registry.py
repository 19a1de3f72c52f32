"""Tests for the repository registry."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from gitvault.exceptions import (
    InvalidRepositoryError,
    RegistryError,
    RepositoryExistsError,
)
from gitvault.models import RepositoryEntry
from gitvault.registry import RepositoryRegistry, normalize_path


@pytest.fixture
def registry(data_dir: Path) -> RepositoryRegistry:
    return RepositoryRegistry(data_dir / "repositories.json")


def _fake_repo(parent: Path, name: str) -> Path:
    path = parent / name
    (path / ".git").mkdir(parents=True)
    return path


class TestLoad:
    def test_missing_file_is_empty(self, registry: RepositoryRegistry) -> None:
        assert registry.load() == []

    def test_corrupt_file_is_empty(self, registry: RepositoryRegistry) -> None:
        registry.file_path.write_text("{not json")

        assert registry.load() == []

    def test_non_list_document_is_empty(self, registry: RepositoryRegistry) -> None:
        registry.file_path.write_text('{"name": "a", "path": "/a"}')

        assert registry.load() == []

    def test_invalid_items_skipped(self, registry: RepositoryRegistry) -> None:
        registry.file_path.write_text(
            json.dumps(
                [
                    {"name": "good", "path": "/src/good"},
                    "garbage",
                    {"name": "no-path"},
                    {"path": "/src/unnamed"},
                ]
            )
        )

        assert registry.load() == [
            RepositoryEntry(name="good", path="/src/good"),
            RepositoryEntry(name="unnamed", path="/src/unnamed"),
        ]


class TestAdd:
    def test_add_persists_entry(self, registry: RepositoryRegistry, tmp_path: Path) -> None:
        repo = _fake_repo(tmp_path, "project")

        entry = registry.add(repo)

        assert entry == RepositoryEntry(name="project", path=str(repo))
        stored = json.loads(registry.file_path.read_text())
        assert stored == [{"name": "project", "path": str(repo)}]

    def test_add_creates_data_dir(self, tmp_path: Path) -> None:
        registry = RepositoryRegistry(tmp_path / "nested" / "dir" / "repositories.json")
        repo = _fake_repo(tmp_path, "project")

        registry.add(repo)

        assert registry.file_path.exists()

    def test_git_file_accepted(self, registry: RepositoryRegistry, tmp_path: Path) -> None:
        worktree = tmp_path / "worktree"
        worktree.mkdir()
        (worktree / ".git").write_text("gitdir: /elsewhere/.git/worktrees/wt\n")

        assert registry.add(worktree).name == "worktree"

    def test_not_a_repository(self, registry: RepositoryRegistry, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()

        with pytest.raises(InvalidRepositoryError) as exc_info:
            registry.add(plain)

        assert exc_info.value.message == "Not a Git repository"
        assert not registry.file_path.exists()

    def test_duplicate_rejected(self, registry: RepositoryRegistry, tmp_path: Path) -> None:
        repo = _fake_repo(tmp_path, "project")
        registry.add(repo)

        with pytest.raises(RepositoryExistsError) as exc_info:
            registry.add(str(repo) + "/")

        assert exc_info.value.message == "Repository already added"
        assert len(registry.load()) == 1

    def test_empty_path_rejected(self, registry: RepositoryRegistry) -> None:
        with pytest.raises(RegistryError, match="Repository path is required"):
            registry.add("")

    def test_order_preserved(self, registry: RepositoryRegistry, tmp_path: Path) -> None:
        for name in ("zeta", "alpha", "mid"):
            registry.add(_fake_repo(tmp_path, name))

        assert [entry.name for entry in registry.load()] == ["zeta", "alpha", "mid"]

    def test_unicode_names_written_verbatim(
        self, registry: RepositoryRegistry, tmp_path: Path
    ) -> None:
        registry.add(_fake_repo(tmp_path, "projét"))

        assert "projét" in registry.file_path.read_text(encoding="utf-8")

    def test_write_failure_wrapped(
        self, registry: RepositoryRegistry, tmp_path: Path
    ) -> None:
        repo = _fake_repo(tmp_path, "project")

        with (
            patch(
                "gitvault.registry.atomic_write_json",
                side_effect=PermissionError("read-only"),
            ),
            pytest.raises(RegistryError, match="Failed to save repositories"),
        ):
            registry.add(repo)


class TestRemove:
    def test_remove_existing(self, registry: RepositoryRegistry, tmp_path: Path) -> None:
        first = _fake_repo(tmp_path, "first")
        second = _fake_repo(tmp_path, "second")
        registry.add(first)
        registry.add(second)

        assert registry.remove(first) is True
        assert registry.load() == [RepositoryEntry(name="second", path=str(second))]

    def test_remove_unknown_rewrites_file(
        self, registry: RepositoryRegistry, tmp_path: Path
    ) -> None:
        assert registry.remove(tmp_path / "unknown") is False
        assert json.loads(registry.file_path.read_text()) == []

    def test_contains(self, registry: RepositoryRegistry, tmp_path: Path) -> None:
        repo = _fake_repo(tmp_path, "project")
        registry.add(repo)

        assert registry.contains(repo)
        assert not registry.contains(tmp_path / "other")


def test_normalize_path_expands_user(isolated_home: Path) -> None:
    assert normalize_path("~/src/project") == str(isolated_home / "src" / "project")


def test_normalize_path_strips_trailing_separator(tmp_path: Path) -> None:
    assert normalize_path(f"{tmp_path}/repo/") == str(tmp_path / "repo")
