"""Tests for CommandResult properties."""

from __future__ import annotations

import pytest

from gitvault.runners.models import CommandResult


def _result(**kwargs: object) -> CommandResult:
    defaults: dict[str, object] = {
        "returncode": 0,
        "stdout": "",
        "stderr": "",
        "duration_ms": 3,
    }
    defaults.update(kwargs)
    return CommandResult(**defaults)  # type: ignore[arg-type]


class TestCommandResult:
    def test_success_requires_zero_exit_and_no_timeout(self) -> None:
        assert _result().success is True
        assert _result(returncode=1).success is False
        assert _result(returncode=0, timed_out=True).success is False

    def test_output_joins_streams(self) -> None:
        assert _result(stdout="a", stderr="b").output == "a\nb"
        assert _result(stdout="a").output == "a"
        assert _result(stderr="b").output == "b"

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            (
                {"returncode": -1, "timed_out": True, "timeout_seconds": 300.0},
                "Command timed out after 300 seconds",
            ),
            ({"returncode": -1, "timed_out": True}, "Command timed out"),
            ({"returncode": 1, "stderr": "  fatal: boom \n"}, "fatal: boom"),
            ({"returncode": -15, "signal": 15}, "Command terminated by signal 15"),
            ({"returncode": 2}, "Command exited with code 2"),
        ],
    )
    def test_failure_message(self, kwargs: dict[str, object], expected: str) -> None:
        assert _result(**kwargs).failure_message == expected

    def test_is_frozen(self) -> None:
        result = _result()
        with pytest.raises(AttributeError):
            result.returncode = 1  # type: ignore[misc]
