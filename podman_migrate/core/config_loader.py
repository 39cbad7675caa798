"""Configuration management for runtime migration."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    DEFAULT_IMAGE_NAMESPACE,
    DEFAULT_SOURCE_RUNTIME,
    DEFAULT_SOURCE_VOLUMES_PATH,
    DEFAULT_TARGET_RUNTIME,
)
from .exceptions import ConfigurationError


class MigrationConfig(BaseSettings):
    """Main configuration for a migration run."""

    source_runtime: str = Field(default=DEFAULT_SOURCE_RUNTIME, alias="SOURCE_RUNTIME")
    target_runtime: str = Field(default=DEFAULT_TARGET_RUNTIME, alias="TARGET_RUNTIME")
    source_volumes_path: str = Field(
        default=DEFAULT_SOURCE_VOLUMES_PATH, alias="SOURCE_VOLUMES_PATH"
    )
    archive_dir: str = Field(default=".", alias="ARCHIVE_DIR")
    image_namespace: str = Field(default=DEFAULT_IMAGE_NAMESPACE, alias="IMAGE_NAMESPACE")
    rsync_bin: str = Field(default="rsync", alias="RSYNC_BIN")
    rsync_use_sudo: bool = Field(default=True, alias="RSYNC_USE_SUDO")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )


# Environment variables that take precedence over YAML values
_ENV_OVERRIDES = {
    field_name: field.alias
    for field_name, field in MigrationConfig.model_fields.items()
    if field.alias
}


def load_config(config_path: str | None = None) -> MigrationConfig:
    """Load configuration from defaults, an optional YAML file and the environment.

    Args:
        config_path: Optional path to YAML config file

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If the file is unreadable or holds invalid values
    """
    load_dotenv()

    yaml_config: dict[str, Any] = {}
    if config_path:
        yaml_config = _load_yaml_config(Path(config_path))

    # Keys in the file may use either field names or their env aliases
    values = {key.lower(): value for key, value in yaml_config.items()}
    _apply_env_overrides(values)

    try:
        config = MigrationConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    return config


def _apply_env_overrides(values: dict[str, Any]) -> None:
    """Apply environment variable overrides."""
    for field_name, env_name in _ENV_OVERRIDES.items():
        if (env_value := os.getenv(env_name)) is not None:
            values[field_name] = env_value


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML configuration file."""
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load config from {config_path}: {e}") from e

    # yaml.safe_load can return None, str, list, etc.
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return loaded
