from __future__ import annotations

from pathlib import Path

from gitvault.exceptions.base import GitVaultError


class RegistryError(GitVaultError):
    """Exception for repository registry failures.

    Attributes:
        message: Human-readable error message.
        path: Repository path the operation was about, if any.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize the RegistryError.

        Args:
            message: Human-readable error message.
            path: Repository path the operation was about.
        """
        self.path = path
        super().__init__(message)


class InvalidRepositoryError(RegistryError):
    """Raised when registering a path that is not a Git working tree."""

    def __init__(
        self,
        message: str = "Not a Git repository",
        path: Path | str | None = None,
    ) -> None:
        super().__init__(message, path=path)


class RepositoryExistsError(RegistryError):
    """Raised when registering a path that is already tracked."""

    def __init__(
        self,
        message: str = "Repository already added",
        path: Path | str | None = None,
    ) -> None:
        super().__init__(message, path=path)
