"""Subprocess-based repository operations for gitvault.

Every operation builds a discrete argument list for the ``git`` binary, runs it
through :class:`~gitvault.runners.command.CommandRunner` with a per-operation
timeout and output cap, and parses the result into value objects. Failures are
classified by :mod:`gitvault.git.classifier` and raised as
:class:`~gitvault.exceptions.GitError` subclasses carrying the category, the
fixed user-facing message and the raw git output.

Pull and push are short linear flows with one bounded recovery step each:

- pull: ``pull --rebase``; if local changes block the rebase, stash, retry and
  pop; otherwise fall back once to a merge ``pull``.
- push: ``push``; if the branch has no upstream, retry once with
  ``--set-upstream``.

No state is kept between calls. Operations on the same repository are not
serialized here; callers must not run two of them at once.

Example:
    ```python
    from gitvault.git import GitRepository

    repo = GitRepository("/path/to/repo")
    entries = await repo.status()
    await repo.add_all()
    await repo.commit('fix: handle "quoted" $messages')
    outcome = await repo.push()
    ```
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from gitvault.config import GitVaultConfig
from gitvault.exceptions import (
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
from gitvault.git.classifier import (
    RecoveryAction,
    classify,
    is_unstaged_changes_error,
    matches_category,
)
from gitvault.git.parsers import (
    LOG_FORMAT,
    parse_branches,
    parse_log,
    parse_status,
)
from gitvault.logging import get_logger
from gitvault.models import CommitEntry, ErrorCategory, PushOutcome, StatusEntry
from gitvault.runners.command import CommandRunner
from gitvault.runners.models import CommandResult

logger = get_logger(__name__)

__all__ = [
    "DEFAULT_REMOTE",
    "GIT_ENV",
    "GitRepository",
]

# =============================================================================
# Constants
# =============================================================================

DEFAULT_REMOTE = "origin"

#: Environment for every git invocation. Prompts are disabled so missing
#: credentials fail immediately instead of waiting on a terminal that does not
#: exist; the C locale keeps failure text in English for the classifier.
GIT_ENV: dict[str, str] = {
    "GIT_TERMINAL_PROMPT": "0",
    "GCM_INTERACTIVE": "never",
    "LC_ALL": "C",
}

#: Markers showing a rebase stopped on conflicts and is still in progress
_REBASE_STOPPED_PATTERNS: tuple[str, ...] = (
    "could not apply",
    "conflict",
    "resolve all conflicts",
)

_NOTHING_STASHED = "no local changes to save"

_STASH_KEPT_NOTE = (
    "Local changes could not be restored automatically; "
    "they remain in the stash (git stash list)."
)


def _failure_text(result: CommandResult) -> str:
    """Text to classify: stderr, else stdout (commit reports there), else generic."""
    return result.stderr.strip() or result.stdout.strip() or result.failure_message


def _combined_output(result: CommandResult) -> str:
    return result.output.strip()


class GitRepository:
    """Async git operations on one working tree.

    Stateless apart from its configuration: the runner may be shared between
    repositories, and each call starts from scratch.

    Attributes:
        path: Repository working tree.
    """

    def __init__(
        self,
        path: Path | str,
        runner: CommandRunner | None = None,
        config: GitVaultConfig | None = None,
    ) -> None:
        """Initialize GitRepository.

        Args:
            path: Path to the repository working tree.
            runner: Command runner to use. Defaults to a new CommandRunner.
            config: Configuration with timeouts and output limits.

        Raises:
            NotARepositoryError: If path is not an existing directory.
        """
        resolved = Path(path).expanduser()
        if not resolved.is_dir():
            raise NotARepositoryError(f"Not a Git repository: {path}", path=path)

        self._path = resolved
        self._config = config if config is not None else GitVaultConfig()
        self._runner = runner if runner is not None else CommandRunner(env=GIT_ENV)

    @property
    def path(self) -> Path:
        """Path to the repository working tree."""
        return self._path

    # -------------------------------------------------------------------------
    # Invocation helpers
    # -------------------------------------------------------------------------

    async def _git(
        self,
        *args: str,
        timeout: float,
        max_output_bytes: int | None = None,
    ) -> CommandResult:
        """Run ``git <args>`` in the working tree.

        Raises:
            GitNotFoundError: If the git executable cannot be started.
        """
        executable = self._config.git_executable
        result = await self._runner.run(
            [executable, *args],
            cwd=self._path,
            timeout=timeout,
            env=GIT_ENV,
            max_output_bytes=(
                max_output_bytes
                if max_output_bytes is not None
                else self._config.output.default_max_bytes
            ),
            scrub_secrets=True,
        )
        if result.returncode in (126, 127) and not result.stdout:
            if result.stderr.startswith(("Command not found", "Permission denied")):
                raise GitNotFoundError(
                    f"Git CLI not found or not executable: {executable}"
                )
        return result

    def _error_from(
        self,
        result: CommandResult,
        operation: str,
        branch: str | None = None,
    ) -> GitError:
        """Build the exception for a failed invocation."""
        if result.timed_out:
            logger.warning(
                "git_command_timed_out",
                operation=operation,
                repo_path=str(self._path),
                timeout_seconds=result.timeout_seconds,
            )
            return GitTimeoutError(
                classify("", timed_out=True, operation=operation).message,
                operation=operation,
                timeout_seconds=result.timeout_seconds,
            )

        text = _failure_text(result)
        classification = classify(text)
        logger.info(
            "git_command_failed",
            operation=operation,
            repo_path=str(self._path),
            category=classification.category.value,
            returncode=result.returncode,
        )

        if classification.category is ErrorCategory.CONFLICT and operation == "push":
            return PushRejectedError(
                classification.message, branch=branch, details=text
            )
        return GitCommandError(
            classification.message,
            result=result,
            operation=operation,
            category=classification.category,
            details=text,
        )

    async def _checked(
        self,
        *args: str,
        operation: str,
        timeout: float,
        max_output_bytes: int | None = None,
    ) -> str:
        """Run git and return stdout, raising the classified error on failure."""
        result = await self._git(
            *args, timeout=timeout, max_output_bytes=max_output_bytes
        )
        if not result.success:
            raise self._error_from(result, operation)
        return result.stdout

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def status(self) -> list[StatusEntry]:
        """Get per-file change state from ``git status --porcelain``."""
        output = await self._checked(
            "status",
            "--porcelain",
            operation="status",
            timeout=self._config.timeouts.status,
            max_output_bytes=self._config.output.probe_max_bytes,
        )
        return parse_status(output)

    async def log(self, limit: int | None = None) -> list[CommitEntry]:
        """Get the most recent commits, newest first.

        Args:
            limit: Maximum number of commits. Defaults to ``config.log_limit``.
        """
        count = limit if limit is not None else self._config.log_limit
        output = await self._checked(
            "log",
            f"--pretty={LOG_FORMAT}",
            "--date=short",
            f"-{count}",
            operation="log",
            timeout=self._config.timeouts.log,
        )
        return parse_log(output)

    async def branches(self) -> list[str]:
        """List local and remote-tracking branches."""
        output = await self._checked(
            "branch",
            "-a",
            operation="branches",
            timeout=self._config.timeouts.branches,
            max_output_bytes=self._config.output.probe_max_bytes,
        )
        return parse_branches(output)

    async def current_branch(self) -> str:
        """Get the checked-out branch name, or ``""`` in detached HEAD state."""
        output = await self._checked(
            "branch",
            "--show-current",
            operation="current_branch",
            timeout=self._config.timeouts.probe,
            max_output_bytes=self._config.output.probe_max_bytes,
        )
        return output.strip()

    async def has_remote(self, remote: str = DEFAULT_REMOTE) -> bool:
        """Check whether ``remote`` is configured."""
        result = await self._git(
            "remote",
            "get-url",
            remote,
            timeout=self._config.timeouts.probe,
            max_output_bytes=self._config.output.probe_max_bytes,
        )
        return result.success and bool(result.stdout.strip())

    # -------------------------------------------------------------------------
    # Local changes
    # -------------------------------------------------------------------------

    async def add_all(self) -> None:
        """Stage every change in the working tree (``git add .``)."""
        await self._checked(
            "add", ".", operation="add", timeout=self._config.timeouts.add
        )

    async def commit(self, message: str) -> str:
        """Commit staged changes.

        The message is passed as a single argument, so quotes, backticks and
        ``$`` reach git literally.

        Args:
            message: Commit message.

        Returns:
            Git's commit summary.

        Raises:
            NothingToCommitError: If nothing is staged.
            GitError: For any other failure.
        """
        result = await self._git(
            "commit", "-m", message, timeout=self._config.timeouts.commit
        )
        if result.success:
            return result.stdout.strip()
        text = _failure_text(result)
        if not result.timed_out and matches_category(
            result.output, ErrorCategory.NO_STAGED_CHANGES
        ):
            raise NothingToCommitError(details=text)
        raise self._error_from(result, "commit")

    async def stash(self) -> bool:
        """Stash local changes.

        Returns:
            True if a stash entry was created, False if there was nothing to stash.
        """
        output = await self._checked(
            "stash", operation="stash", timeout=self._config.timeouts.stash
        )
        return _NOTHING_STASHED not in output.lower()

    async def stash_pop(self) -> str:
        """Apply and drop the latest stash entry."""
        output = await self._checked(
            "stash", "pop", operation="stash_pop", timeout=self._config.timeouts.stash
        )
        return output.strip()

    # -------------------------------------------------------------------------
    # Remote flows
    # -------------------------------------------------------------------------

    async def _resolve_target(self, remote: str, operation: str) -> str:
        """Check the remote exists and a branch is checked out.

        Returns:
            Current branch name.

        Raises:
            NoRemoteError: If ``remote`` is not configured.
            DetachedHeadError: If no branch is checked out.
        """
        remote_exists, branch = await asyncio.gather(
            self.has_remote(remote), self.current_branch()
        )
        if not remote_exists:
            raise NoRemoteError(operation=operation)
        if not branch:
            hint = "Cannot pull." if operation == "pull" else "Checkout a branch first."
            raise DetachedHeadError(f"Not on any branch. {hint}", operation=operation)
        return branch

    async def pull(self, remote: str = DEFAULT_REMOTE) -> str:
        """Pull the current branch from ``remote``.

        Flow: ``pull --rebase``; if local changes block it and stashing is
        enabled, stash, retry the rebase pull once, and pop the stash (a failed
        pop is tolerated and noted in the output); for any other failure except
        a timeout, fall back once to a merge ``pull``. At most two pull
        attempts are made.

        Returns:
            Git output of the successful attempt.

        Raises:
            NoRemoteError: If ``remote`` is not configured.
            DetachedHeadError: If no branch is checked out.
            GitError: If the final attempt failed.
        """
        branch = await self._resolve_target(remote, "pull")
        log = logger.bind(repo_path=str(self._path), remote=remote, branch=branch)
        pull_timeout = self._config.timeouts.pull

        log.info("pull_started", strategy="rebase")
        rebase = await self._git("pull", "--rebase", remote, branch, timeout=pull_timeout)
        if rebase.success:
            return _combined_output(rebase)
        if rebase.timed_out:
            raise self._error_from(rebase, "pull")

        failure = _failure_text(rebase)
        recovery = (
            RecoveryAction.STASH_AND_RETRY
            if is_unstaged_changes_error(failure)
            else RecoveryAction.NONE
        )
        if (
            recovery is RecoveryAction.STASH_AND_RETRY
            and self._config.pull.stash_on_rebase
        ):
            stashed: bool | None
            try:
                stashed = await self.stash()
            except GitError as e:
                log.warning("pull_stash_failed", error=e.message)
                stashed = None
            if stashed is not None:
                return await self._retry_rebase_with_stash(remote, branch, stashed)

        if any(pattern in failure.lower() for pattern in _REBASE_STOPPED_PATTERNS):
            await self._abort_rebase()

        log.info(
            "pull_fallback",
            strategy="merge",
            reason=classify(failure).category.value,
        )
        merge = await self._git("pull", remote, branch, timeout=pull_timeout)
        if merge.success:
            return _combined_output(merge)
        raise self._error_from(merge, "pull")

    async def _retry_rebase_with_stash(
        self, remote: str, branch: str, stashed: bool
    ) -> str:
        """Second pull attempt with local changes shelved."""
        log = logger.bind(repo_path=str(self._path), remote=remote, branch=branch)
        log.info("pull_retry_after_stash", stashed=stashed)
        retry = await self._git(
            "pull", "--rebase", remote, branch, timeout=self._config.timeouts.pull
        )

        stash_kept = False
        if stashed:
            try:
                await self.stash_pop()
            except GitError as e:
                stash_kept = True
                log.warning("stash_pop_failed", error=e.message, details=e.details)

        if retry.success:
            output = _combined_output(retry)
            if stash_kept:
                output = f"{output}\n{_STASH_KEPT_NOTE}" if output else _STASH_KEPT_NOTE
            return output

        error = self._error_from(retry, "pull")
        if stash_kept:
            error.details = (
                f"{error.details}\n{_STASH_KEPT_NOTE}"
                if error.details
                else _STASH_KEPT_NOTE
            )
        raise error

    async def _abort_rebase(self) -> None:
        """Best-effort ``git rebase --abort`` after a rebase stopped on conflicts."""
        result = await self._git("rebase", "--abort", timeout=self._config.timeouts.stash)
        if not result.success:
            logger.debug(
                "rebase_abort_skipped",
                repo_path=str(self._path),
                reason=_failure_text(result),
            )

    async def push(self, remote: str = DEFAULT_REMOTE) -> PushOutcome:
        """Push the current branch to ``remote``.

        If git reports that the branch has no upstream, the push is retried
        exactly once with ``--set-upstream``. Rejections and authentication
        failures are never retried: resolving them needs the user.

        Returns:
            PushOutcome with git output, branch and whether upstream was set.

        Raises:
            NoRemoteError: If ``remote`` is not configured (push never runs).
            DetachedHeadError: If no branch is checked out.
            PushRejectedError: If the remote rejected a non-fast-forward push.
            GitError: For any other failure.
        """
        branch = await self._resolve_target(remote, "push")
        log = logger.bind(repo_path=str(self._path), remote=remote, branch=branch)
        push_timeout = self._config.timeouts.push

        log.info("push_started")
        result = await self._git("push", remote, branch, timeout=push_timeout)
        if result.success:
            return PushOutcome(output=_combined_output(result), branch=branch)

        if (
            not result.timed_out
            and classify(_failure_text(result)).recovery is RecoveryAction.SET_UPSTREAM
        ):
            log.info("push_set_upstream")
            retry = await self._git(
                "push", "--set-upstream", remote, branch, timeout=push_timeout
            )
            if retry.success:
                return PushOutcome(
                    output=_combined_output(retry), branch=branch, upstream_set=True
                )
            raise self._error_from(retry, "push", branch=branch)

        raise self._error_from(result, "push", branch=branch)
