from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from click.testing import CliRunner

    from gitvault.config import GitVaultConfig

# Register fixture plugins from tests/fixtures/
pytest_plugins = [
    "tests.fixtures.repos",
    "tests.fixtures.runners",
]


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    Logs go to stderr at WARNING level so they never mix with CLI stdout.
    """
    from gitvault.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture(autouse=True)
def isolated_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Point HOME at a scratch directory.

    Keeps ~/.gitvault and ~/.config/gitvault/config.yaml of the person running
    the tests out of every test.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    # git reads the global config from HOME; keep it from reading /etc too
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    yield home


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all GITVAULT_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("GITVAULT_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory for repositories.json."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def config(clean_env: None, data_dir: Path) -> GitVaultConfig:
    """Configuration with short timeouts and an isolated data directory."""
    from gitvault.config import GitVaultConfig

    return GitVaultConfig(data_dir=data_dir)


@pytest.fixture
def sample_config_yaml() -> str:
    """Return sample config.yaml content for testing."""
    return """
log_limit: 5

timeouts:
  pull: 120
  push: 30

pull:
  stash_on_rebase: false

verbosity: "info"
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Example:
        >>> def test_version(cli_runner):
        ...     from gitvault.main import cli
        ...     result = cli_runner.invoke(cli, ["--version"])
        ...     assert result.exit_code == 0
    """
    from click.testing import CliRunner

    return CliRunner()
