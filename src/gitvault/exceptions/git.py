from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from gitvault.exceptions.base import GitVaultError
from gitvault.models import ErrorCategory

if TYPE_CHECKING:
    from gitvault.runners.models import CommandResult


class GitError(GitVaultError):
    """Exception for git operation failures.

    Every git failure carries the category assigned by the classifier, the
    fixed user-facing message for that category, and the raw git output in
    ``details`` for diagnostics.

    Attributes:
        message: User-facing error message.
        operation: Git operation that failed (e.g., "commit", "push").
        category: Failure category.
        details: Raw (credential-scrubbed) git stderr, if any.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        details: str | None = None,
    ) -> None:
        """Initialize the GitError.

        Args:
            message: User-facing error message.
            operation: Git operation that failed.
            category: Failure category.
            details: Raw git output for diagnostics.
        """
        self.operation = operation
        self.category = category
        self.details = details
        super().__init__(message)


class GitCommandError(GitError):
    """A git invocation exited unsuccessfully.

    Attributes:
        result: The CommandResult of the failed invocation.
    """

    def __init__(
        self,
        message: str,
        result: CommandResult,
        operation: str | None = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        details: str | None = None,
    ) -> None:
        self.result = result
        super().__init__(
            message, operation=operation, category=category, details=details
        )


class GitNotFoundError(GitError):
    """Exception raised when git CLI is not installed or not in PATH."""

    def __init__(self, message: str = "Git CLI not found") -> None:
        super().__init__(message, operation="git_check")


class NotARepositoryError(GitError):
    """Exception raised when operating outside a git repository.

    Attributes:
        message: Human-readable error message.
        path: Directory that is not a repo.
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
    ) -> None:
        """Initialize the NotARepositoryError.

        Args:
            message: Human-readable error message.
            path: Directory that is not a repo.
        """
        self.path = path
        super().__init__(message, operation="repo_check")


class NoRemoteError(GitError):
    """Exception raised when the repository has no ``origin`` remote."""

    def __init__(
        self,
        message: str = "No remote configured. Add a remote repository first.",
        operation: str | None = None,
    ) -> None:
        super().__init__(
            message, operation=operation, category=ErrorCategory.NO_REMOTE
        )


class DetachedHeadError(GitError):
    """Exception raised when no branch is checked out."""

    def __init__(
        self,
        message: str = "Not on any branch.",
        operation: str | None = None,
    ) -> None:
        super().__init__(message, operation=operation)


class NothingToCommitError(GitError):
    """Exception raised when attempting to commit with no staged changes."""

    def __init__(
        self,
        message: str = "No changes staged for commit. Use git add first.",
        details: str | None = None,
    ) -> None:
        super().__init__(
            message,
            operation="commit",
            category=ErrorCategory.NO_STAGED_CHANGES,
            details=details,
        )


class PushRejectedError(GitError):
    """Exception raised when the remote rejects a push as non-fast-forward.

    Attributes:
        branch: Branch whose push was rejected.
    """

    def __init__(
        self,
        message: str = "Push rejected: Remote has newer commits. Pull first.",
        branch: str | None = None,
        details: str | None = None,
    ) -> None:
        self.branch = branch
        super().__init__(
            message,
            operation="push",
            category=ErrorCategory.CONFLICT,
            details=details,
        )


class GitTimeoutError(GitError):
    """Exception raised when a git invocation exceeded its timeout.

    Attributes:
        timeout_seconds: The timeout that was exceeded.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            message, operation=operation, category=ErrorCategory.TIMEOUT
        )
