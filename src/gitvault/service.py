"""Request/response facade used by the user interface.

:class:`GitVaultService` is the only entry point a UI needs. Every method is a
coroutine, one call per user action, and none of them raises: failures come
back as :class:`~gitvault.models.OperationResult` values with a category and
a user-facing message, or as an empty list for read-only queries.

The facade holds no per-repository state. It does not serialize calls against
the same repository; the UI should disable further actions on a repository
while one is in flight.

Example:
    ```python
    service = GitVaultService(config=load_config())
    result = await service.push("/home/me/src/project")
    if not result.success:
        show_error(result.error)
    ```
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from gitvault.config import GitVaultConfig
from gitvault.exceptions import GitError, GitVaultError
from gitvault.git.repository import GIT_ENV, GitRepository
from gitvault.logging import bind_context, clear_context, get_logger
from gitvault.models import (
    CommitEntry,
    OperationResult,
    RepositoryEntry,
    StatusEntry,
)
from gitvault.registry import RepositoryRegistry
from gitvault.runners.command import CommandRunner

__all__ = ["DirectoryPicker", "GitVaultService"]

logger = get_logger(__name__)

T = TypeVar("T")

#: Callable returning a chosen directory, or None when the user cancels
DirectoryPicker = Callable[[], str | None]


class GitVaultService:
    """Facade over the registry and git operations.

    Attributes:
        config: Active configuration.
        registry: Repository registry.
    """

    def __init__(
        self,
        config: GitVaultConfig | None = None,
        runner: CommandRunner | None = None,
        registry: RepositoryRegistry | None = None,
        directory_picker: DirectoryPicker | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Configuration. Defaults to loading from env and user YAML.
            runner: Shared command runner for all repositories.
            registry: Repository registry. Defaults to ``config.registry_file``.
            directory_picker: Native folder picker supplied by the UI.
        """
        self._config = config if config is not None else GitVaultConfig()
        self._runner = (
            runner
            if runner is not None
            else CommandRunner(
                env=GIT_ENV, max_output_bytes=self._config.output.default_max_bytes
            )
        )
        self._registry = (
            registry
            if registry is not None
            else RepositoryRegistry(self._config.registry_file)
        )
        self._directory_picker = directory_picker

    @property
    def config(self) -> GitVaultConfig:
        return self._config

    @property
    def registry(self) -> RepositoryRegistry:
        return self._registry

    def _repository(self, repo_path: Path | str) -> GitRepository:
        return GitRepository(repo_path, runner=self._runner, config=self._config)

    # -------------------------------------------------------------------------
    # Read-only queries: empty list on any failure
    # -------------------------------------------------------------------------

    async def _query(
        self,
        operation: str,
        repo_path: Path | str,
        call: Callable[[GitRepository], Awaitable[list[T]]],
    ) -> list[T]:
        bind_context(repo_path=str(repo_path), operation=operation)
        try:
            return await call(self._repository(repo_path))
        except GitVaultError as e:
            logger.debug("query_failed", error=e.message)
            return []
        except Exception:
            logger.exception("query_crashed")
            return []
        finally:
            clear_context()

    async def status(self, repo_path: Path | str) -> list[StatusEntry]:
        """Per-file change state of the working tree."""
        return await self._query("status", repo_path, lambda repo: repo.status())

    async def log(self, repo_path: Path | str) -> list[CommitEntry]:
        """Most recent commits, newest first."""
        return await self._query("log", repo_path, lambda repo: repo.log())

    async def branches(self, repo_path: Path | str) -> list[str]:
        """Local and remote-tracking branch names."""
        return await self._query("branches", repo_path, lambda repo: repo.branches())

    # -------------------------------------------------------------------------
    # Mutating operations: structured result, never raises
    # -------------------------------------------------------------------------

    async def _execute(
        self,
        operation: str,
        repo_path: Path | str,
        call: Callable[[GitRepository], Awaitable[OperationResult]],
    ) -> OperationResult:
        bind_context(repo_path=str(repo_path), operation=operation)
        try:
            return await call(self._repository(repo_path))
        except GitError as e:
            return OperationResult.fail(
                e.message,
                e.category,
                details=e.details,
                branch=getattr(e, "branch", None),
            )
        except GitVaultError as e:
            return OperationResult.fail(e.message)
        except Exception as e:
            logger.exception("operation_crashed")
            return OperationResult.fail(str(e) or type(e).__name__)
        finally:
            clear_context()

    async def add(self, repo_path: Path | str) -> OperationResult:
        """Stage all changes (``git add .``)."""

        async def call(repo: GitRepository) -> OperationResult:
            await repo.add_all()
            return OperationResult.ok()

        return await self._execute("add", repo_path, call)

    async def commit(self, repo_path: Path | str, message: str) -> OperationResult:
        """Commit staged changes with ``message`` taken literally."""
        if not message or not message.strip():
            return OperationResult.fail("Commit message is required")

        async def call(repo: GitRepository) -> OperationResult:
            return OperationResult.ok(await repo.commit(message))

        return await self._execute("commit", repo_path, call)

    async def pull(self, repo_path: Path | str) -> OperationResult:
        """Pull the current branch from origin with bounded recovery."""

        async def call(repo: GitRepository) -> OperationResult:
            return OperationResult.ok(await repo.pull())

        return await self._execute("pull", repo_path, call)

    async def push(self, repo_path: Path | str) -> OperationResult:
        """Push the current branch to origin, setting upstream if needed."""

        async def call(repo: GitRepository) -> OperationResult:
            outcome = await repo.push()
            return OperationResult.ok(outcome.output, branch=outcome.branch)

        return await self._execute("push", repo_path, call)

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    async def list_repositories(self) -> list[RepositoryEntry]:
        """Tracked repositories in registration order."""
        return await asyncio.to_thread(self._registry.load)

    async def add_repository(self, path: Path | str | None) -> OperationResult:
        """Track a repository; fails if it has no ``.git`` or is already tracked."""
        if not path:
            return OperationResult.fail("Repository path is required")
        try:
            await asyncio.to_thread(self._registry.add, path)
        except GitVaultError as e:
            return OperationResult.fail(e.message)
        return OperationResult.ok()

    async def remove_repository(self, path: Path | str | None) -> OperationResult:
        """Stop tracking a repository."""
        if not path:
            return OperationResult.fail("Repository path is required")
        try:
            await asyncio.to_thread(self._registry.remove, path)
        except GitVaultError as e:
            return OperationResult.fail(e.message)
        return OperationResult.ok()

    async def select_directory(self) -> str | None:
        """Ask the UI's folder picker for a directory; None if cancelled."""
        if self._directory_picker is None:
            return None
        try:
            return await asyncio.to_thread(self._directory_picker)
        except Exception:
            logger.exception("directory_picker_failed")
            return None

