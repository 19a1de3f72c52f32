"""Data models for the subprocess runner.

``CommandResult`` is the immutable record of one external process execution.
It distinguishes three terminal conditions: a normal exit (``returncode``), a
termination by signal (``signal``), and a timeout (``timed_out``). A timeout
is never reported as a plain non-zero exit.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["CommandResult"]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of executing a single command.

    Attributes:
        returncode: Exit code from the command (0 = success, -1 on timeout).
        stdout: Standard output captured from the command (bounded).
        stderr: Standard error captured from the command (bounded).
        duration_ms: Execution time in milliseconds.
        timed_out: True if the command exceeded its timeout limit.
        signal: Signal number that terminated the process, if any.
        stdout_truncated: True if stdout exceeded the capture limit.
        stderr_truncated: True if stderr exceeded the capture limit.
        timeout_seconds: Timeout that applied to the invocation.
    """

    returncode: int
    stdout: str
    stderr: str
    duration_ms: int
    timed_out: bool = False
    signal: int | None = None
    stdout_truncated: bool = False
    stderr_truncated: bool = False
    timeout_seconds: float | None = None

    @property
    def success(self) -> bool:
        """True if command completed successfully (returncode 0, no timeout)."""
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Combined stdout and stderr for convenience."""
        if self.stderr:
            return f"{self.stdout}\n{self.stderr}" if self.stdout else self.stderr
        return self.stdout

    @property
    def failure_message(self) -> str:
        """Failure payload: stderr when present, otherwise a generic message."""
        if self.timed_out:
            if self.timeout_seconds is not None:
                return f"Command timed out after {self.timeout_seconds:g} seconds"
            return "Command timed out"
        stderr = self.stderr.strip()
        if stderr:
            return stderr
        if self.signal is not None:
            return f"Command terminated by signal {self.signal}"
        return f"Command exited with code {self.returncode}"
