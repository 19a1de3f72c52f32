"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from gitvault.logging import bind_context, clear_context, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_context() -> None:
    clear_context()


def test_configure_sets_root_level() -> None:
    configure_logging(level=logging.DEBUG)

    assert logging.getLogger().level == logging.DEBUG
    assert len(logging.getLogger().handlers) == 1


def test_reconfigure_does_not_duplicate_handlers() -> None:
    configure_logging(level=logging.INFO)
    configure_logging(level=logging.ERROR)

    root = logging.getLogger()
    assert root.level == logging.ERROR
    assert len(root.handlers) == 1


def test_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITVAULT_LOG_LEVEL", "debug")

    configure_logging()

    assert logging.getLogger().level == logging.DEBUG


def test_json_output_includes_bound_context(
    capsys: pytest.CaptureFixture[str],
) -> None:
    configure_logging(force_json=True, level=logging.INFO)
    bind_context(repo_path="/src/project", operation="push")

    get_logger("gitvault.test").info("push_started", branch="main")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "push_started"
    assert event["branch"] == "main"
    assert event["repo_path"] == "/src/project"
    assert event["operation"] == "push"
    assert event["level"] == "info"


def test_clear_context() -> None:
    bind_context(operation="pull")
    clear_context()

    assert structlog.contextvars.get_contextvars() == {}
