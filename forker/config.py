"""Configuration loading from YAML and environment.

Values come from an optional forker.yaml in the project directory, then
from FORKER_* environment variables. The gh CLI handles authentication on
its own; no tokens are read here.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from forker.errors import ConfigError

DEFAULT_CONFIG_FILE = "forker.yaml"


class StorageConfig(BaseSettings):
    """Where fork data lives: {base_path}/{directory}/{name}/."""

    model_config = SettingsConfigDict(env_prefix="FORKER_STORAGE_", extra="ignore")

    base_path: Path = Field(default=Path("."), description="Project directory")
    directory: str = Field(default=".forker", description="Hidden storage directory name")


class GitHubConfig(BaseSettings):
    """GitHub CLI settings."""

    model_config = SettingsConfigDict(env_prefix="FORKER_GITHUB_", extra="ignore")

    command: str = Field(default="gh", description="GitHub CLI executable")
    host: str = Field(default="github.com", description="Host used to build repository URLs")
    fork_list_limit: int = Field(default=100, ge=1, description="Max forks listed per account")
    pr_list_limit: int = Field(default=50, ge=1, description="Max pull requests listed per repository")
    default_branch: str = Field(
        default="main", description="Branch compared when the root does not report its default"
    )


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="FORKER_LOGGING_", extra="ignore")

    level: str = Field(default="WARNING", description="Log level")
    format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _substitute_env(value: Any, env: dict[str, str]) -> Any:
    """Replace ${VAR} and $VAR strings with values from env."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            return env.get(value[2:-1].strip(), value)
        if value.startswith("$"):
            return env.get(value[1:].strip(), value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v, env) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from a YAML file (if present) and environment.

    A missing file yields defaults (still overridable by FORKER_* env).

    Raises:
        ConfigError: the file cannot be read or parsed, or a value is invalid.
    """
    path = config_path or Path(DEFAULT_CONFIG_FILE)
    try:
        if not path.is_file():
            return AppConfig()

        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Invalid config {path}: expected a mapping")
        raw = _substitute_env(raw, dict(os.environ))

        return AppConfig(
            storage=StorageConfig(**(raw.get("storage") or {})),
            github=GitHubConfig(**(raw.get("github") or {})),
            logging=LoggingConfig(**(raw.get("logging") or {})),
        )
    except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
