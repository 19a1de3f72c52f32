from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from gitvault.exceptions import ConfigError
from gitvault.logging import get_logger

__all__ = [
    "GitVaultConfig",
    "TimeoutConfig",
    "OutputLimitConfig",
    "PullConfig",
    "REGISTRY_FILE_NAME",
    "load_config",
    "get_user_config_path",
    "get_default_data_dir",
]

logger = get_logger(__name__)

#: File name of the repository list inside ``data_dir``
REGISTRY_FILE_NAME = "repositories.json"

# Explicit config file chosen by load_config(); read by settings_customise_sources
_config_file_override: ContextVar[Path | None] = ContextVar(
    "gitvault_config_file", default=None
)


class TimeoutConfig(BaseModel):
    """Per-operation timeouts in seconds.

    Network operations get long timeouts because large repositories over slow
    links legitimately take minutes; local queries fail fast.
    """

    status: float = Field(default=5.0, gt=0)
    log: float = Field(default=10.0, gt=0)
    branches: float = Field(default=5.0, gt=0)
    add: float = Field(default=10.0, gt=0)
    commit: float = Field(default=10.0, gt=0)
    probe: float = Field(default=5.0, gt=0)
    stash: float = Field(default=10.0, gt=0)
    pull: float = Field(default=300.0, gt=0)
    push: float = Field(default=60.0, gt=0)


class OutputLimitConfig(BaseModel):
    """Capture limits for git output streams, in bytes.

    Attributes:
        default_max_bytes: Limit for operations that can produce large output
            (log, pull, push).
        probe_max_bytes: Limit for small lookups (current branch, remote URL,
            status, branches).
    """

    default_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    probe_max_bytes: int = Field(default=512 * 1024, ge=1024)


class PullConfig(BaseModel):
    """Settings for the pull recovery flow.

    Attributes:
        stash_on_rebase: When a rebase pull is blocked by local changes, stash
            them, retry, and pop the stash afterwards. When False the flow
            goes straight to a plain merge pull.
    """

    stash_on_rebase: bool = True


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from a YAML file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e
            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    message=f"Config file {yaml_file} must contain a mapping",
                    value=loaded,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


def get_default_data_dir() -> Path:
    """Directory holding the repository registry (``~/.gitvault``)."""
    return Path.home() / ".gitvault"


class GitVaultConfig(BaseSettings):
    """Root configuration object containing all gitvault settings."""

    model_config = SettingsConfigDict(
        env_prefix="GITVAULT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    data_dir: Path = Field(default_factory=get_default_data_dir)
    git_executable: str = "git"
    log_limit: int = Field(default=20, ge=1, le=1000)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    output: OutputLimitConfig = Field(default_factory=OutputLimitConfig)
    pull: PullConfig = Field(default_factory=PullConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def registry_file(self) -> Path:
        """Location of the persisted repository list."""
        return self.data_dir / REGISTRY_FILE_NAME

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Keyword arguments (explicit injection, e.g. tests or the CLI)
        2. Environment variables (GITVAULT_*)
        3. YAML config (--config file, else ~/.config/gitvault/config.yaml)
        """
        yaml_path = _config_file_override.get() or get_user_config_path()
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, yaml_path),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/gitvault/config.yaml
    """
    return Path.home() / ".config" / "gitvault" / "config.yaml"


def load_config(config_path: Path | None = None, **overrides: Any) -> GitVaultConfig:
    """Load configuration with hierarchy: defaults -> YAML -> env -> overrides.

    Args:
        config_path: Optional config file used instead of the user config.
        **overrides: Field values that take precedence over every source.

    Returns:
        GitVaultConfig instance with merged configuration.

    Raises:
        ConfigError: If configuration is invalid.
    """
    if config_path is not None and not config_path.exists():
        raise ConfigError(
            message=f"Config file not found: {config_path}",
            field=None,
            value=str(config_path),
        )

    token = _config_file_override.set(config_path)
    try:
        return GitVaultConfig(**overrides)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _config_file_override.reset(token)
