"""gitvault exception hierarchy.

All exceptions can be imported from this package:
    from gitvault.exceptions import GitError, RegistryError, ConfigError
"""

from __future__ import annotations

from gitvault.exceptions.base import GitVaultError
from gitvault.exceptions.config import ConfigError
from gitvault.exceptions.git import (
    DetachedHeadError,
    GitCommandError,
    GitError,
    GitNotFoundError,
    GitTimeoutError,
    NoRemoteError,
    NotARepositoryError,
    NothingToCommitError,
    PushRejectedError,
)
from gitvault.exceptions.registry import (
    InvalidRepositoryError,
    RegistryError,
    RepositoryExistsError,
)
from gitvault.exceptions.runner import (
    RunnerError,
    WorkingDirectoryError,
)

__all__ = [
    # Base
    "GitVaultError",
    # Config
    "ConfigError",
    # Git
    "DetachedHeadError",
    "GitCommandError",
    "GitError",
    "GitNotFoundError",
    "GitTimeoutError",
    "NoRemoteError",
    "NotARepositoryError",
    "NothingToCommitError",
    "PushRejectedError",
    # Registry
    "InvalidRepositoryError",
    "RegistryError",
    "RepositoryExistsError",
    # Runner
    "RunnerError",
    "WorkingDirectoryError",
]
