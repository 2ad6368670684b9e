"""Tests for forker.config (YAML + env)."""

from pathlib import Path

import pytest

from forker.config import AppConfig, load_config
from forker.errors import ConfigError, ForkerError


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    """No config file means default settings."""
    config = load_config(tmp_path / "forker.yaml")
    assert isinstance(config, AppConfig)
    assert config.storage.directory == ".forker"
    assert config.storage.base_path == Path(".")
    assert config.github.command == "gh"
    assert config.github.fork_list_limit == 100
    assert config.github.pr_list_limit == 50
    assert config.github.default_branch == "main"


def test_yaml_values(tmp_path: Path) -> None:
    """Sections in YAML populate the matching settings."""
    path = tmp_path / "forker.yaml"
    path.write_text(
        "storage:\n"
        "  base_path: /srv/project\n"
        "github:\n"
        "  host: ghe.example.com\n"
        "  pr_list_limit: 10\n"
        "logging:\n"
        "  level: DEBUG\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.storage.base_path == Path("/srv/project")
    assert config.github.host == "ghe.example.com"
    assert config.github.pr_list_limit == 10
    assert config.logging.level == "DEBUG"


def test_env_substitution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """${VAR} in YAML is replaced from the environment."""
    monkeypatch.setenv("PROJECT_DIR", "/work/app")
    path = tmp_path / "forker.yaml"
    path.write_text("storage:\n  base_path: ${PROJECT_DIR}\n", encoding="utf-8")
    assert load_config(path).storage.base_path == Path("/work/app")


def test_env_overrides_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """FORKER_* env vars apply when the file does not set a value."""
    monkeypatch.setenv("FORKER_GITHUB_DEFAULT_BRANCH", "trunk")
    monkeypatch.setenv("FORKER_STORAGE_DIRECTORY", ".vendored-forks")
    config = load_config(tmp_path / "absent.yaml")
    assert config.github.default_branch == "trunk"
    assert config.storage.directory == ".vendored-forks"


def test_empty_yaml(tmp_path: Path) -> None:
    """An empty file is treated as no settings."""
    path = tmp_path / "forker.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path).logging.level == "WARNING"


def test_malformed_yaml_raises_config_error(tmp_path: Path) -> None:
    """YAML syntax errors become ConfigError."""
    path = tmp_path / "forker.yaml"
    path.write_text("github: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(path)


def test_invalid_value_raises_config_error(tmp_path: Path) -> None:
    """Values failing validation become ConfigError naming the field."""
    path = tmp_path / "forker.yaml"
    path.write_text("github:\n  pr_list_limit: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="pr_list_limit"):
        load_config(path)


@pytest.mark.parametrize("content", ["- just\n- a list\n", "github:\n  - host\n"])
def test_wrong_shape_raises_config_error(tmp_path: Path, content: str) -> None:
    """Top level and sections must be mappings."""
    path = tmp_path / "forker.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_config_error_is_forker_error() -> None:
    """ConfigError is reported by the CLI like every ForkerError."""
    assert issubclass(ConfigError, ForkerError)
