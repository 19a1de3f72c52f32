"""Scripted command runner for git operation tests.

``FakeGitRunner`` replaces :class:`~gitvault.runners.command.CommandRunner`
so the pull and push flows can be driven through every failure branch without
a network or a real remote.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from gitvault.runners.models import CommandResult


def make_result(
    returncode: int = 0,
    stdout: str = "",
    stderr: str = "",
    *,
    timed_out: bool = False,
    timeout_seconds: float | None = None,
) -> CommandResult:
    """Build a CommandResult with sensible defaults."""
    return CommandResult(
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
        duration_ms=1,
        timed_out=timed_out,
        timeout_seconds=timeout_seconds,
    )


class FakeGitRunner:
    """Replays scripted results keyed by the git arguments.

    Each key holds a queue; results are consumed in order and the last one
    repeats. Unscripted commands succeed with empty output.

    Attributes:
        calls: Git argument tuples in invocation order (executable dropped).
        kwargs: Keyword arguments of each call, parallel to ``calls``.

    Example:
        >>> runner = FakeGitRunner()
        >>> runner.script(("push", "origin", "main"), make_result(1, stderr="..."))
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.kwargs: list[dict[str, Any]] = []
        self._scripts: dict[tuple[str, ...], list[CommandResult]] = {}

    def script(self, args: tuple[str, ...], *results: CommandResult) -> FakeGitRunner:
        self._scripts[args] = list(results)
        return self

    async def run(self, command: Sequence[str], **kwargs: Any) -> CommandResult:
        args = tuple(command[1:])
        self.calls.append(args)
        self.kwargs.append(kwargs)
        queue = self._scripts.get(args)
        if not queue:
            return make_result()
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def called(self, *args: str) -> bool:
        return args in self.calls

    def count(self, *prefix: str) -> int:
        return sum(1 for call in self.calls if call[: len(prefix)] == prefix)


@pytest.fixture
def git_runner() -> FakeGitRunner:
    """FakeGitRunner with ``origin`` configured and ``main`` checked out."""
    runner = FakeGitRunner()
    runner.script(
        ("remote", "get-url", "origin"),
        make_result(stdout="https://example.com/team/project.git\n"),
    )
    runner.script(("branch", "--show-current"), make_result(stdout="main\n"))
    return runner
