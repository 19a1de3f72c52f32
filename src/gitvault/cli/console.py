"""Shared Rich Console instance for gitvault CLI output.

Styled output in terminals, plain text when piped. Commit messages and file
names are wrapped in ``rich.text.Text`` so brackets in them are not read as
markup.
"""

from __future__ import annotations

from rich.console import Console

__all__ = ["console"]

console = Console()
