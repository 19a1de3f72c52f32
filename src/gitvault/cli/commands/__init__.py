"""Click commands for the gitvault CLI."""

from __future__ import annotations

from gitvault.cli.commands.git import add, branches, commit, log, pull, push, status
from gitvault.cli.commands.repos import repos

__all__ = [
    "add",
    "branches",
    "commit",
    "log",
    "pull",
    "push",
    "repos",
    "status",
]
