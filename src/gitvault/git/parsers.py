"""Parsers for git porcelain output.

Each parser is a pure function from command stdout to value objects. Blank
lines are ignored everywhere; nothing here strips leading whitespace from the
whole output before splitting, because the first porcelain status column is
significant (`` M file`` is a worktree modification).
"""

from __future__ import annotations

from gitvault.models import CommitEntry, FileState, StatusEntry

__all__ = [
    "LOG_FIELD_SEPARATOR",
    "LOG_FORMAT",
    "parse_branches",
    "parse_log",
    "parse_status",
    "status_from_code",
]

LOG_FIELD_SEPARATOR = "|"

#: ``git log --pretty`` format producing ``hash|author|date|subject`` lines
LOG_FORMAT = "format:%H|%an|%ad|%s"


def status_from_code(code: str) -> FileState:
    """Map a two-column porcelain status code to a simplified state.

    ``??`` is untracked. Otherwise modification wins over deletion, and
    deletion over addition, so ``AM`` (added then edited) reads as modified.
    Anything else (renames, copies, type changes) reads as modified.
    """
    if code == "??":
        return "untracked"
    if "M" in code:
        return "modified"
    if "D" in code:
        return "deleted"
    if "A" in code:
        return "added"
    return "modified"


def parse_status(output: str) -> list[StatusEntry]:
    """Parse ``git status --porcelain`` output.

    Example:
        >>> parse_status(" M a.py\\n?? b.py\\n")
        [StatusEntry(file='a.py', status='modified'), StatusEntry(file='b.py', status='untracked')]
    """
    entries: list[StatusEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        code = line[:2].strip()
        path = line[3:].strip()
        if not path:
            continue
        entries.append(StatusEntry(file=path, status=status_from_code(code)))
    return entries


def parse_log(output: str) -> list[CommitEntry]:
    """Parse ``git log`` output produced with :data:`LOG_FORMAT`.

    Subjects may themselves contain ``|``; only the first three separators
    split fields. Lines with fewer than four fields are skipped.
    """
    commits: list[CommitEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split(LOG_FIELD_SEPARATOR, 3)
        if len(fields) != 4:
            continue
        commit_hash, author, date, message = fields
        commits.append(
            CommitEntry(
                hash=commit_hash.strip(),
                author=author,
                date=date.strip(),
                message=message,
            )
        )
    return commits


def parse_branches(output: str) -> list[str]:
    """Parse ``git branch -a`` output into trimmed branch names."""
    branches: list[str] = []
    for line in output.splitlines():
        name = line.strip()
        if name.startswith("*"):
            name = name[1:].strip()
        if name:
            branches.append(name)
    return branches
