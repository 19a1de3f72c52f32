"""Failure classification for git output.

Git reports failures as free-form text on stderr. This module maps that text
onto the closed set of :class:`~gitvault.models.ErrorCategory` values using a
single ordered rule table. The first matching rule wins, so rule order is the
policy: a message that mentions both a DNS failure and "rejected" is a
network problem.

Each rule also names the fixed user-facing message for its category and the
automatic recovery, if any, that the pull and push flows may attempt. The
table is plain data and can be tested without running any process.

Example:
    ```python
    from gitvault.git.classifier import classify

    c = classify("fatal: unable to access 'https://h/r.git/': Could not resolve host: h")
    assert c.category is ErrorCategory.NETWORK
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gitvault.models import ErrorCategory

__all__ = [
    "CLASSIFICATION_RULES",
    "CATEGORY_MESSAGES",
    "OPERATION_TIMEOUT_MESSAGES",
    "UNSTAGED_CHANGES_PATTERNS",
    "Classification",
    "ClassificationRule",
    "RecoveryAction",
    "classify",
    "is_unstaged_changes_error",
    "matches_category",
]


class RecoveryAction(str, Enum):
    """Automatic recovery a flow may attempt once for a category."""

    NONE = "none"
    SET_UPSTREAM = "set_upstream"
    STASH_AND_RETRY = "stash_and_retry"


@dataclass(frozen=True, slots=True)
class ClassificationRule:
    """One row of the classification table.

    Attributes:
        category: Category assigned when a pattern matches.
        patterns: Lower-case substrings searched for in the failure text.
        message: Fixed user-facing message for the category.
        recovery: Automatic recovery the push/pull flows may attempt.
    """

    category: ErrorCategory
    patterns: tuple[str, ...]
    message: str
    recovery: RecoveryAction = RecoveryAction.NONE

    def matches(self, text: str) -> bool:
        return any(pattern in text for pattern in self.patterns)


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome of classifying a failure.

    Attributes:
        category: Assigned category.
        message: User-facing message. For ``UNKNOWN`` this is the raw text.
        recovery: Recovery action associated with the category.
        raw: The original failure text.
    """

    category: ErrorCategory
    message: str
    recovery: RecoveryAction
    raw: str

    @property
    def is_known(self) -> bool:
        return self.category is not ErrorCategory.UNKNOWN


TIMEOUT_MESSAGE = "Operation timed out: Large repository or slow connection."

#: Operations whose timeout deserves a more specific hint
OPERATION_TIMEOUT_MESSAGES: dict[str, str] = {
    "commit": "Commit operation timed out.",
    "push": "Push timeout: Large repository or slow connection. Try from terminal.",
}

CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        category=ErrorCategory.NETWORK,
        patterns=(
            "could not resolve host",
            "could not resolve hostname",
            "temporary failure in name resolution",
            "name or service not known",
            "connection refused",
            "network is unreachable",
            "no route to host",
            "connection timed out",
            "operation timed out",
            "connection reset",
            "failed to connect",
            "couldn't connect to server",
        ),
        message="Network error: Check your internet connection.",
    ),
    ClassificationRule(
        category=ErrorCategory.AUTHENTICATION,
        patterns=(
            "authentication failed",
            "permission denied",
            "access denied",
            "could not read username",
            "could not read password",
            "invalid username or password",
            "invalid credentials",
            "terminal prompts disabled",
            "returned error: 401",
            "returned error: 403",
            "denied",
        ),
        message="Authentication failed: Check your Git credentials.",
    ),
    ClassificationRule(
        category=ErrorCategory.CONFLICT,
        patterns=(
            "non-fast-forward",
            "fetch first",
            "updates were rejected",
            "[rejected]",
            "rejected",
        ),
        message="Push rejected: Remote has newer commits. Pull first.",
    ),
    ClassificationRule(
        category=ErrorCategory.NO_UPSTREAM,
        patterns=(
            "has no upstream branch",
            "no upstream",
            "--set-upstream",
            "no tracking information",
        ),
        message="No upstream branch configured for the current branch.",
        recovery=RecoveryAction.SET_UPSTREAM,
    ),
    ClassificationRule(
        category=ErrorCategory.NO_REMOTE,
        patterns=(
            "no configured push destination",
            "'origin' does not appear to be a git repository",
            "no such remote",
            "no remote",
        ),
        message="No remote configured. Add a remote repository first.",
    ),
    ClassificationRule(
        category=ErrorCategory.NO_STAGED_CHANGES,
        patterns=(
            "nothing to commit",
            "no changes added to commit",
        ),
        message="No changes staged for commit. Use git add first.",
    ),
)

#: Message per category; UNKNOWN surfaces the raw text instead
CATEGORY_MESSAGES: dict[ErrorCategory, str] = {
    rule.category: rule.message for rule in CLASSIFICATION_RULES
}
CATEGORY_MESSAGES[ErrorCategory.TIMEOUT] = TIMEOUT_MESSAGE

#: Rebase refusals caused by local modifications; these get stash-and-retry
UNSTAGED_CHANGES_PATTERNS: tuple[str, ...] = (
    "unstaged changes",
    "uncommitted changes",
    "your local changes",
    "please commit or stash",
)


def classify(
    text: str, *, timed_out: bool = False, operation: str | None = None
) -> Classification:
    """Assign exactly one category to a failure.

    Args:
        text: Failure text, usually git's stderr.
        timed_out: True if the invocation was killed by its timeout. A timeout
            takes precedence over anything the text says.
        operation: Operation that failed. Only used to pick the timeout
            message.

    Returns:
        The Classification of the first matching rule, or ``UNKNOWN`` carrying
        the raw text as its message.
    """
    raw = text.strip()
    if timed_out:
        message = OPERATION_TIMEOUT_MESSAGES.get(operation or "", TIMEOUT_MESSAGE)
        return Classification(
            category=ErrorCategory.TIMEOUT,
            message=message,
            recovery=RecoveryAction.NONE,
            raw=raw,
        )

    lowered = raw.lower()
    for rule in CLASSIFICATION_RULES:
        if rule.matches(lowered):
            return Classification(
                category=rule.category,
                message=rule.message,
                recovery=rule.recovery,
                raw=raw,
            )

    return Classification(
        category=ErrorCategory.UNKNOWN,
        message=raw or "Unknown git error",
        recovery=RecoveryAction.NONE,
        raw=raw,
    )


def is_unstaged_changes_error(text: str) -> bool:
    """True if a rebase pull was refused because of local modifications."""
    lowered = text.lower()
    return any(pattern in lowered for pattern in UNSTAGED_CHANGES_PATTERNS)


def matches_category(text: str, category: ErrorCategory) -> bool:
    """True if ``text`` matches the patterns of ``category``'s rule.

    Unlike :func:`classify` this ignores rule order. It answers questions
    that only make sense for one operation, such as whether a failed commit
    had nothing staged, without letting a file name that happens to contain
    "denied" turn it into an authentication failure.
    """
    lowered = text.lower()
    return any(
        rule.matches(lowered)
        for rule in CLASSIFICATION_RULES
        if rule.category is category
    )
