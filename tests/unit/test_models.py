"""Tests for value objects shared across layers."""

from __future__ import annotations

import pytest

from gitvault.models import (
    CommitEntry,
    ErrorCategory,
    OperationResult,
    RepositoryEntry,
    StatusEntry,
)


class TestOperationResult:
    def test_ok_defaults_to_empty_output(self) -> None:
        result = OperationResult.ok()

        assert result.success is True
        assert result.output == ""
        assert result.error is None
        assert result.to_dict() == {"success": True}

    def test_ok_with_output_and_branch(self) -> None:
        result = OperationResult.ok("done", branch="main")

        assert result.to_dict() == {"success": True, "result": "done", "branch": "main"}

    def test_fail(self) -> None:
        result = OperationResult.fail(
            "Network error: Check your internet connection.",
            ErrorCategory.NETWORK,
            details="fatal: Could not resolve host: example.com",
        )

        assert result.to_dict() == {
            "success": False,
            "error": "Network error: Check your internet connection.",
            "errorType": "network",
            "details": "fatal: Could not resolve host: example.com",
        }

    def test_fail_defaults_to_unknown(self) -> None:
        assert OperationResult.fail("boom").error_type is ErrorCategory.UNKNOWN

    def test_empty_details_omitted(self) -> None:
        assert "details" not in OperationResult.fail("boom", details="").to_dict()

    def test_output_and_error_are_exclusive(self) -> None:
        with pytest.raises(ValueError):
            OperationResult(success=True, output="x", error="y")
        with pytest.raises(ValueError):
            OperationResult(success=False)

    def test_success_must_match_error(self) -> None:
        with pytest.raises(ValueError):
            OperationResult(success=True, error="y")
        with pytest.raises(ValueError):
            OperationResult(success=False, output="x")


def test_error_category_values() -> None:
    assert [category.value for category in ErrorCategory] == [
        "network",
        "authentication",
        "conflict",
        "no_upstream",
        "no_remote",
        "no_staged_changes",
        "timeout",
        "unknown",
    ]


def test_entry_dicts() -> None:
    assert StatusEntry("a.py", "added").to_dict() == {"file": "a.py", "status": "added"}
    assert CommitEntry("h", "A", "2024-01-01", "m").to_dict() == {
        "hash": "h",
        "author": "A",
        "date": "2024-01-01",
        "message": "m",
    }
    assert RepositoryEntry("r", "/src/r").to_dict() == {"name": "r", "path": "/src/r"}
