"""Tests for the git failure classification table."""

from __future__ import annotations

import pytest

from gitvault.git.classifier import (
    CATEGORY_MESSAGES,
    CLASSIFICATION_RULES,
    RecoveryAction,
    classify,
    is_unstaged_changes_error,
    matches_category,
)
from gitvault.models import ErrorCategory


class TestClassify:
    @pytest.mark.parametrize(
        ("text", "category"),
        [
            (
                "fatal: unable to access 'https://github.com/o/r.git/': "
                "Could not resolve host: github.com",
                ErrorCategory.NETWORK,
            ),
            (
                "ssh: connect to host github.com port 22: Connection refused",
                ErrorCategory.NETWORK,
            ),
            (
                "fatal: Authentication failed for 'https://h/r.git/'",
                ErrorCategory.AUTHENTICATION,
            ),
            (
                "git@github.com: Permission denied (publickey).\n"
                "fatal: Could not read from remote repository.",
                ErrorCategory.AUTHENTICATION,
            ),
            (
                "fatal: could not read Username for 'https://h': "
                "terminal prompts disabled",
                ErrorCategory.AUTHENTICATION,
            ),
            (
                "fatal: unable to access 'https://git.example.com/r.git/': "
                "The requested URL returned error: 401",
                ErrorCategory.AUTHENTICATION,
            ),
            (
                "remote: Permission to o/r.git denied to bot.\n"
                "fatal: unable to access 'https://github.com/o/r.git/': "
                "The requested URL returned error: 403",
                ErrorCategory.AUTHENTICATION,
            ),
            (
                " ! [rejected]        main -> main (fetch first)\n"
                "error: failed to push some refs to 'h:r.git'",
                ErrorCategory.CONFLICT,
            ),
            (
                " ! [rejected]        main -> main (fetch first)\n"
                "error: failed to push some refs to "
                "'https://git.example.com/team/proj4013.git'",
                ErrorCategory.CONFLICT,
            ),
            (
                "fatal: The current branch feature has no upstream branch.\n"
                "To push the current branch and set the remote as upstream, use\n\n"
                "    git push --set-upstream origin feature",
                ErrorCategory.NO_UPSTREAM,
            ),
            (
                "fatal: No configured push destination.",
                ErrorCategory.NO_REMOTE,
            ),
            (
                "fatal: 'origin' does not appear to be a git repository",
                ErrorCategory.NO_REMOTE,
            ),
            ("nothing to commit, working tree clean", ErrorCategory.NO_STAGED_CHANGES),
        ],
    )
    def test_known_failures(self, text: str, category: ErrorCategory) -> None:
        classification = classify(text)

        assert classification.category is category
        assert classification.message == CATEGORY_MESSAGES[category]
        assert classification.is_known

    def test_case_insensitive(self) -> None:
        assert classify("COULD NOT RESOLVE HOST: x").category is ErrorCategory.NETWORK

    def test_first_matching_rule_wins(self) -> None:
        text = "Could not resolve host: h\n ! [rejected] main (fetch first)"

        assert classify(text).category is ErrorCategory.NETWORK

    def test_authentication_before_conflict(self) -> None:
        text = "remote: Permission to o/r.git denied to bot.\n ! [rejected]"

        assert classify(text).category is ErrorCategory.AUTHENTICATION

    def test_unknown_carries_raw_text(self) -> None:
        classification = classify("  error: something novel happened \n")

        assert classification.category is ErrorCategory.UNKNOWN
        assert classification.message == "error: something novel happened"
        assert classification.raw == "error: something novel happened"
        assert not classification.is_known

    def test_unknown_empty_text(self) -> None:
        assert classify("").message == "Unknown git error"

    def test_timeout_takes_precedence(self) -> None:
        classification = classify("Could not resolve host: h", timed_out=True)

        assert classification.category is ErrorCategory.TIMEOUT
        assert classification.message == (
            "Operation timed out: Large repository or slow connection."
        )
        assert classification.recovery is RecoveryAction.NONE

    @pytest.mark.parametrize(
        ("operation", "message"),
        [
            (
                "push",
                "Push timeout: Large repository or slow connection. "
                "Try from terminal.",
            ),
            ("commit", "Commit operation timed out."),
            ("pull", "Operation timed out: Large repository or slow connection."),
        ],
    )
    def test_timeout_message_per_operation(self, operation: str, message: str) -> None:
        classification = classify("", timed_out=True, operation=operation)

        assert classification.category is ErrorCategory.TIMEOUT
        assert classification.message == message

    def test_unable_to_access_alone_is_not_network(self) -> None:
        text = "fatal: unable to access 'https://h/r.git/': SSL certificate problem"

        assert classify(text).category is ErrorCategory.UNKNOWN

    def test_only_no_upstream_has_set_upstream_recovery(self) -> None:
        with_recovery = [
            rule.category
            for rule in CLASSIFICATION_RULES
            if rule.recovery is RecoveryAction.SET_UPSTREAM
        ]

        assert with_recovery == [ErrorCategory.NO_UPSTREAM]

    def test_rule_order(self) -> None:
        assert [rule.category for rule in CLASSIFICATION_RULES] == [
            ErrorCategory.NETWORK,
            ErrorCategory.AUTHENTICATION,
            ErrorCategory.CONFLICT,
            ErrorCategory.NO_UPSTREAM,
            ErrorCategory.NO_REMOTE,
            ErrorCategory.NO_STAGED_CHANGES,
        ]

    def test_every_category_except_unknown_has_message(self) -> None:
        assert set(CATEGORY_MESSAGES) == set(ErrorCategory) - {ErrorCategory.UNKNOWN}


class TestHelpers:
    @pytest.mark.parametrize(
        "text",
        [
            "error: cannot pull with rebase: You have unstaged changes.",
            "error: cannot pull with rebase: Your index contains uncommitted changes.",
            "error: Your local changes to the following files would be overwritten",
            "Please commit or stash them.",
        ],
    )
    def test_unstaged_changes_detected(self, text: str) -> None:
        assert is_unstaged_changes_error(text)

    def test_unstaged_changes_not_detected_for_conflict(self) -> None:
        assert not is_unstaged_changes_error("CONFLICT (content): Merge conflict in a")

    def test_matches_category_ignores_rule_order(self) -> None:
        # "denied" in a file name would win as authentication under classify()
        text = (
            "On branch main\nUntracked files:\n\taccess-denied.txt\n"
            "nothing added to commit but untracked files present\n"
            "nothing to commit"
        )

        assert classify(text).category is ErrorCategory.AUTHENTICATION
        assert matches_category(text, ErrorCategory.NO_STAGED_CHANGES)

    def test_matches_category_negative(self) -> None:
        assert not matches_category("all good", ErrorCategory.NETWORK)
