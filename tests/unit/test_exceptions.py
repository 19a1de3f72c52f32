"""Tests for the exception hierarchy."""

from __future__ import annotations

from gitvault.exceptions import (
    ConfigError,
    DetachedHeadError,
    GitCommandError,
    GitError,
    GitTimeoutError,
    GitVaultError,
    InvalidRepositoryError,
    NoRemoteError,
    NothingToCommitError,
    PushRejectedError,
    RegistryError,
    RepositoryExistsError,
    WorkingDirectoryError,
)
from gitvault.models import ErrorCategory
from tests.fixtures.runners import make_result


def test_everything_derives_from_root() -> None:
    for exc in (
        ConfigError("x"),
        WorkingDirectoryError("x"),
        RegistryError("x"),
        GitError("x"),
    ):
        assert isinstance(exc, GitVaultError)
        assert exc.message == "x"
        assert str(exc) == "x"


def test_registry_defaults() -> None:
    assert InvalidRepositoryError().message == "Not a Git repository"
    assert RepositoryExistsError().message == "Repository already added"
    assert isinstance(RepositoryExistsError(), RegistryError)


def test_git_error_defaults() -> None:
    assert GitError("x").category is ErrorCategory.UNKNOWN
    assert NoRemoteError().category is ErrorCategory.NO_REMOTE
    assert NothingToCommitError().category is ErrorCategory.NO_STAGED_CHANGES
    assert PushRejectedError().category is ErrorCategory.CONFLICT
    assert GitTimeoutError("timed out").category is ErrorCategory.TIMEOUT
    assert DetachedHeadError().message == "Not on any branch."


def test_git_command_error_keeps_result() -> None:
    result = make_result(1, stderr="fatal: x")

    error = GitCommandError(
        "fatal: x",
        result=result,
        operation="status",
        category=ErrorCategory.UNKNOWN,
        details="fatal: x",
    )

    assert error.result is result
    assert error.operation == "status"
    assert error.details == "fatal: x"
