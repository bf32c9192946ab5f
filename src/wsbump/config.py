"""Configuration management for wsbump."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import CHANGELOG_FILE_NAMES, COMMIT_MESSAGE_TEMPLATE, CONFIG_FILE_NAME


class ConfigError(Exception):
    """Config file could not be read or validated."""

    pass


class ChangelogConfig(BaseModel):
    """Where to find changelogs and how to locate unreleased changes."""

    file_names: list[str] = Field(default_factory=lambda: list(CHANGELOG_FILE_NAMES))
    unreleased_heading: str = "Unreleased"


class ReleaseConfig(BaseModel):
    """Release flow settings."""

    commit_message: str = Field(
        default=COMMIT_MESSAGE_TEMPLATE,
        description="Template with {name} and {version} placeholders",
    )
    select_all_dependents: bool = True  # Pre-check every dependent in the menu

    def format_commit_message(self, name: str, version: str) -> str:
        """Render the commit message for a release."""
        return self.commit_message.format(name=name, version=version)


class GitConfig(BaseModel):
    """Configuration for git commit handling."""

    commit: bool = False  # Commit touched manifests after a release


class WsbumpConfig(BaseModel):
    """Root configuration for wsbump."""

    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    release: ReleaseConfig = Field(default_factory=ReleaseConfig)
    git: GitConfig = Field(default_factory=GitConfig)


def load_config(root: Path) -> WsbumpConfig:
    """Load config from .wsbump.toml.

    Args:
        root: Workspace root directory

    Returns:
        Loaded configuration, or defaults if .wsbump.toml doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return WsbumpConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return WsbumpConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e


def write_config_template(root: Path) -> Path:
    """Write default .wsbump.toml template.

    Args:
        root: Workspace root directory

    Returns:
        Path to the written config file
    """
    config_path = root / CONFIG_FILE_NAME
    template = {
        "changelog": {
            "file_names": list(CHANGELOG_FILE_NAMES),
            "unreleased_heading": "Unreleased",
        },
        "release": {
            "commit_message": COMMIT_MESSAGE_TEMPLATE,
            "select_all_dependents": True,
        },
        "git": {"commit": False},
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
