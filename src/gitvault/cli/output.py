"""Output formatting utilities for the gitvault CLI."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from rich.table import Table
from rich.text import Text

from gitvault.models import CommitEntry, RepositoryEntry, StatusEntry

__all__ = [
    "OutputFormat",
    "format_error",
    "format_success",
    "format_json",
    "status_table",
    "log_table",
    "repositories_table",
]


class OutputFormat(str, Enum):
    """Supported output formats for CLI commands.

    Values:
        TEXT: Human-readable tables (default).
        JSON: Machine-readable JSON output.
    """

    TEXT = "text"
    JSON = "json"


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error("Push rejected", details=["! [rejected] main"]))
        Error: Push rejected
          ! [rejected] main
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_success(message: str) -> str:
    """Format a success message.

    Example:
        >>> format_success("Pushed main")
        'Success: Pushed main'
    """
    return f"Success: {message}"


def format_json(data: Any) -> str:
    """Format data as indented JSON.

    Raises:
        TypeError: If data is not JSON-serializable.
    """
    return json.dumps(data, indent=2, ensure_ascii=False)


_STATUS_STYLES = {
    "added": "green",
    "modified": "yellow",
    "deleted": "red",
    "untracked": "dim",
}


def status_table(entries: list[StatusEntry]) -> Table:
    table = Table("Status", "File", box=None, show_header=False)
    for entry in entries:
        style = _STATUS_STYLES.get(entry.status, "")
        table.add_row(Text(entry.status, style=style), Text(entry.file))
    return table


def log_table(commits: list[CommitEntry]) -> Table:
    table = Table("Hash", "Date", "Author", "Message", box=None)
    for commit in commits:
        table.add_row(
            commit.hash[:7], commit.date, Text(commit.author), Text(commit.message)
        )
    return table


def repositories_table(entries: list[RepositoryEntry]) -> Table:
    table = Table("Name", "Path", box=None)
    for entry in entries:
        table.add_row(Text(entry.name), Text(entry.path))
    return table
