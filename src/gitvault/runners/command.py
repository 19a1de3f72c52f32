"""Command runner for safe async subprocess execution.

This module provides the CommandRunner class for executing external commands
with timeout handling, bounded output capture, and proper error management.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING

from gitvault.exceptions import WorkingDirectoryError
from gitvault.logging import get_logger
from gitvault.runners.models import CommandResult
from gitvault.utils.secrets import scrub_secrets

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["CommandRunner", "DEFAULT_MAX_OUTPUT_BYTES", "TERMINATION_GRACE_PERIOD"]

logger = get_logger(__name__)

#: Seconds between SIGTERM and SIGKILL on timeout
TERMINATION_GRACE_PERIOD: float = 5.0

#: Seconds to wait for pipes to close after the process has exited. A
#: grandchild (ssh, credential helper) can hold the pipe open after git dies.
STREAM_DRAIN_TIMEOUT: float = 1.0

#: Default per-stream capture limit
DEFAULT_MAX_OUTPUT_BYTES: int = 10 * 1024 * 1024

_READ_CHUNK_SIZE = 64 * 1024


class _BoundedBuffer:
    """Accumulates bytes up to a limit and drops the rest."""

    __slots__ = ("limit", "data", "truncated")

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.data = bytearray()
        self.truncated = False

    def feed(self, chunk: bytes) -> None:
        remaining = self.limit - len(self.data)
        if remaining > 0:
            self.data.extend(chunk[:remaining])
        if len(chunk) > remaining:
            self.truncated = True

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


async def _drain(stream: asyncio.StreamReader | None, buffer: _BoundedBuffer) -> None:
    """Read a stream to EOF, keeping at most ``buffer.limit`` bytes."""
    if stream is None:
        return
    while True:
        chunk = await stream.read(_READ_CHUNK_SIZE)
        if not chunk:
            break
        buffer.feed(chunk)


class CommandRunner:
    """Execute commands safely with timeout and environment control.

    Provides async command execution with:
    - Discrete argument lists only (``create_subprocess_exec``, never a shell)
    - No inherited stdin (``DEVNULL``), so nothing can block on a prompt
    - Timeout handling with graceful termination (SIGTERM + grace period + SIGKILL)
    - Per-stream output caps; bytes past the cap are read and discarded
    - Working directory validation
    - Environment variable inheritance and override
    - Duration measurement

    The runner never retries. Retry and fallback decisions belong to the
    caller, which knows what the failure means.

    Attributes:
        cwd: Working directory for command execution.
        timeout: Default timeout in seconds (None for no timeout).
        max_output_bytes: Default capture limit per stream.

    Example:
        ```python
        runner = CommandRunner(cwd=Path("/project"), timeout=30.0)
        result = await runner.run(["git", "status", "--porcelain"])
        if result.success:
            print(result.stdout)
        ```
    """

    def __init__(
        self,
        cwd: Path | None = None,
        timeout: float | None = 30.0,
        env: dict[str, str] | None = None,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ) -> None:
        """Initialize the CommandRunner.

        Args:
            cwd: Working directory for commands. If None, uses current directory.
            timeout: Default timeout in seconds. Use None for no timeout.
            env: Additional environment variables to merge with os.environ.
            max_output_bytes: Default capture limit for each output stream.
        """
        self._cwd = cwd
        self._timeout = timeout
        self._extra_env = env or {}
        self._max_output_bytes = max_output_bytes

    @property
    def cwd(self) -> Path | None:
        """Working directory for command execution."""
        return self._cwd

    @property
    def timeout(self) -> float | None:
        """Default timeout in seconds."""
        return self._timeout

    @property
    def max_output_bytes(self) -> int:
        """Default capture limit per stream."""
        return self._max_output_bytes

    def _validate_cwd(self, cwd: Path | None) -> None:
        """Validate working directory exists.

        Raises:
            WorkingDirectoryError: If directory does not exist.
        """
        if cwd is not None and not cwd.is_dir():
            raise WorkingDirectoryError(
                f"Working directory does not exist: {cwd}",
                path=cwd,
            )

    def _build_env(self, extra_env: dict[str, str] | None = None) -> dict[str, str]:
        """Build environment by merging parent env with overrides."""
        env = os.environ.copy()
        env.update(self._extra_env)
        if extra_env:
            env.update(extra_env)
        return env

    async def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
        max_output_bytes: int | None = None,
        scrub_secrets: bool = False,
    ) -> CommandResult:
        """Execute a command once and return the result.

        Args:
            command: Command and arguments as a sequence (no shell expansion).
            cwd: Override working directory for this command.
            timeout: Override timeout. Use 0 or negative for no timeout.
            env: Additional environment variables for this command.
            max_output_bytes: Override capture limit per stream.
            scrub_secrets: If True, scrub credentials from stderr. Stdout is left
                intact because it carries payload (commit subjects, paths).

        Returns:
            CommandResult with returncode, stdout, stderr, duration_ms,
            timed_out and signal.

        Raises:
            WorkingDirectoryError: If working directory does not exist.
            ValueError: If command is empty.
        """
        if not command:
            raise ValueError("Command cannot be empty")

        effective_cwd = cwd if cwd is not None else self._cwd
        self._validate_cwd(effective_cwd)

        effective_timeout = timeout if timeout is not None else self._timeout
        if effective_timeout is not None and effective_timeout <= 0:
            effective_timeout = None

        limit = (
            max_output_bytes if max_output_bytes is not None else self._max_output_bytes
        )

        result = await self._execute_once(
            command,
            effective_cwd,
            effective_timeout,
            self._build_env(env),
            limit,
        )

        if scrub_secrets:
            result = CommandResult(
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=_scrub(result.stderr),
                duration_ms=result.duration_ms,
                timed_out=result.timed_out,
                signal=result.signal,
                stdout_truncated=result.stdout_truncated,
                stderr_truncated=result.stderr_truncated,
                timeout_seconds=result.timeout_seconds,
            )

        logger.debug(
            "command_finished",
            command=list(command),
            cwd=str(effective_cwd) if effective_cwd else None,
            returncode=result.returncode,
            timed_out=result.timed_out,
            signal=result.signal,
            duration_ms=result.duration_ms,
        )
        return result

    async def _execute_once(
        self,
        command: Sequence[str],
        cwd: Path | None,
        timeout: float | None,
        env: dict[str, str],
        limit: int,
    ) -> CommandResult:
        """Execute a command once.

        Args:
            command: Command and arguments as a sequence.
            cwd: Working directory for the command.
            timeout: Timeout in seconds or None for no timeout.
            env: Environment variables for the command.
            limit: Capture limit per stream in bytes.

        Returns:
            CommandResult for the invocation.
        """
        start_time = time.monotonic()
        timed_out = False
        stdout_buffer = _BoundedBuffer(limit)
        stderr_buffer = _BoundedBuffer(limit)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=env,
            )
        except FileNotFoundError:
            return CommandResult(
                returncode=127,
                stdout="",
                stderr=f"Command not found: {command[0]}",
                duration_ms=_elapsed_ms(start_time),
                timeout_seconds=timeout,
            )
        except PermissionError:
            return CommandResult(
                returncode=126,
                stdout="",
                stderr=f"Permission denied: {command[0]}",
                duration_ms=_elapsed_ms(start_time),
                timeout_seconds=timeout,
            )

        readers = [
            asyncio.create_task(_drain(process.stdout, stdout_buffer)),
            asyncio.create_task(_drain(process.stderr, stderr_buffer)),
        ]

        try:
            try:
                await asyncio.wait_for(process.wait(), timeout=timeout)
            except TimeoutError:
                timed_out = True
                await self._terminate(process)
        finally:
            # Covers cancellation of the awaiting task as well
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
            _, pending = await asyncio.wait(readers, timeout=STREAM_DRAIN_TIMEOUT)
            for task in pending:
                task.cancel()
            await asyncio.gather(*readers, return_exceptions=True)

        returncode = process.returncode if process.returncode is not None else -1
        signal_number: int | None = None
        if timed_out:
            returncode = -1
        elif returncode < 0:
            signal_number = -returncode

        return CommandResult(
            returncode=returncode,
            stdout=stdout_buffer.text(),
            stderr=stderr_buffer.text(),
            duration_ms=_elapsed_ms(start_time),
            timed_out=timed_out,
            signal=signal_number,
            stdout_truncated=stdout_buffer.truncated,
            stderr_truncated=stderr_buffer.truncated,
            timeout_seconds=timeout,
        )

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """SIGTERM, wait out the grace period, then SIGKILL."""
        with contextlib.suppress(ProcessLookupError):
            process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=TERMINATION_GRACE_PERIOD)
        except TimeoutError:
            logger.warning("command_kill_after_grace", pid=process.pid)
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()


def _scrub(text: str) -> str:
    return scrub_secrets(text) if text else text


def _elapsed_ms(start_time: float) -> int:
    return int((time.monotonic() - start_time) * 1000)
