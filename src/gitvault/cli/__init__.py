"""CLI utilities for gitvault.

Context management, output formatting and error handling shared by the
Click commands.
"""

from __future__ import annotations

from gitvault.cli.context import CLIContext, ExitCode, async_command
from gitvault.cli.output import OutputFormat

__all__ = [
    "CLIContext",
    "ExitCode",
    "OutputFormat",
    "async_command",
]
