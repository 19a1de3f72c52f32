from __future__ import annotations


class GitVaultError(Exception):
    """Base exception class for all gitvault-specific errors.

    This is the root of the gitvault exception hierarchy. The service facade
    catches it at the boundary and converts it into a structured result,
    while system exceptions propagate naturally to the caller's logging.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            await repo.push()
        except GitVaultError as e:
            logger.error("push_failed", error=e.message)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the GitVaultError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
