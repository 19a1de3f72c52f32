"""Git operations package.

Wraps the ``git`` binary with bounded, non-interactive invocations:

- ``GitRepository``: async status/log/branches/add/commit/stash and the
  pull/push recovery flows
- ``classify``: ordered rule table mapping failure text to an ErrorCategory
- ``parse_*``: porcelain output parsers

Usage:
    ```python
    from gitvault.git import GitRepository

    repo = GitRepository("/path/to/repo")
    status = await repo.status()
    await repo.pull()
    ```
"""

from __future__ import annotations

from gitvault.git.classifier import (
    CLASSIFICATION_RULES,
    Classification,
    ClassificationRule,
    RecoveryAction,
    classify,
    is_unstaged_changes_error,
)
from gitvault.git.parsers import parse_branches, parse_log, parse_status
from gitvault.git.repository import DEFAULT_REMOTE, GIT_ENV, GitRepository

__all__ = [
    "CLASSIFICATION_RULES",
    "Classification",
    "ClassificationRule",
    "DEFAULT_REMOTE",
    "GIT_ENV",
    "GitRepository",
    "RecoveryAction",
    "classify",
    "is_unstaged_changes_error",
    "parse_branches",
    "parse_log",
    "parse_status",
]
