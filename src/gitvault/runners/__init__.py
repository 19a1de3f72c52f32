"""Subprocess runner for gitvault.

Usage:
    from gitvault.runners import CommandRunner, CommandResult

    runner = CommandRunner(timeout=10.0)
    result = await runner.run(["git", "--version"])
"""

from __future__ import annotations

from gitvault.runners.command import CommandRunner
from gitvault.runners.models import CommandResult

__all__ = [
    "CommandResult",
    "CommandRunner",
]
