"""Value objects shared across gitvault layers.

All models are frozen dataclasses with slots: they are produced once by a
parser or a flow and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

__all__ = [
    "ErrorCategory",
    "FileState",
    "StatusEntry",
    "CommitEntry",
    "RepositoryEntry",
    "PushOutcome",
    "OperationResult",
]

FileState = Literal["added", "modified", "deleted", "untracked"]


class ErrorCategory(str, Enum):
    """Closed set of failure categories reported to callers."""

    NETWORK = "network"
    AUTHENTICATION = "authentication"
    CONFLICT = "conflict"
    NO_UPSTREAM = "no_upstream"
    NO_REMOTE = "no_remote"
    NO_STAGED_CHANGES = "no_staged_changes"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One line of ``git status --porcelain``.

    Attributes:
        file: Path relative to the repository root.
        status: Simplified change state.
    """

    file: str
    status: FileState

    def to_dict(self) -> dict[str, str]:
        return {"file": self.file, "status": self.status}


@dataclass(frozen=True, slots=True)
class CommitEntry:
    """One commit as reported by ``git log``.

    Attributes:
        hash: Full commit SHA.
        author: Author name.
        date: Author date in ``YYYY-MM-DD`` form.
        message: Subject line.
    """

    hash: str
    author: str
    date: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "hash": self.hash,
            "author": self.author,
            "date": self.date,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class RepositoryEntry:
    """A tracked repository in the registry."""

    name: str
    path: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "path": self.path}


@dataclass(frozen=True, slots=True)
class PushOutcome:
    """Result of a successful push flow.

    Attributes:
        output: Combined git output of the final push attempt.
        branch: Branch that was pushed.
        upstream_set: True if the flow had to retry with ``--set-upstream``.
    """

    output: str
    branch: str
    upstream_set: bool = False


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Structured response returned across the service boundary.

    Exactly one of ``output`` and ``error`` is populated. ``output`` may be
    the empty string for operations with no payload (``add``, registry CRUD).

    Attributes:
        success: Whether the operation succeeded.
        output: Git output on success.
        error: User-facing message on failure.
        error_type: Failure category on failure.
        details: Raw (credential-scrubbed) git stderr for diagnostics.
        branch: Branch affected by the operation, where relevant.
    """

    success: bool
    output: str | None = None
    error: str | None = None
    error_type: ErrorCategory | None = None
    details: str | None = None
    branch: str | None = None

    def __post_init__(self) -> None:
        if (self.output is None) == (self.error is None):
            raise ValueError("Exactly one of output and error must be set")
        if self.success != (self.error is None):
            raise ValueError("Successful results cannot carry an error")

    @classmethod
    def ok(cls, output: str = "", *, branch: str | None = None) -> OperationResult:
        return cls(success=True, output=output, branch=branch)

    @classmethod
    def fail(
        cls,
        error: str,
        error_type: ErrorCategory = ErrorCategory.UNKNOWN,
        *,
        details: str | None = None,
        branch: str | None = None,
    ) -> OperationResult:
        return cls(
            success=False,
            error=error,
            error_type=error_type,
            details=details or None,
            branch=branch,
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the response shape expected by the UI layer.

        Unset keys are omitted; an empty success payload is omitted too so
        ``add`` renders as ``{"success": True}``.
        """
        data: dict[str, Any] = {"success": self.success}
        if self.output:
            data["result"] = self.output
        if self.branch is not None:
            data["branch"] = self.branch
        if self.error is not None:
            data["error"] = self.error
        if self.error_type is not None:
            data["errorType"] = self.error_type.value
        if self.details:
            data["details"] = self.details
        return data
