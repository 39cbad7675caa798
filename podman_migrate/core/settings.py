"""Timeout settings for runtime and transfer operations.

Provides centralized timeout configuration using Pydantic BaseSettings
with environment variable support for operational tuning.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MigrationTimeoutSettings(BaseSettings):
    """Subprocess timeout configuration."""

    docker_cli_timeout: int = Field(
        60, alias="DOCKER_CLI_TIMEOUT", description="Runtime CLI command timeout in seconds"
    )

    commit_timeout: int = Field(
        300, alias="COMMIT_TIMEOUT", description="Container commit timeout in seconds"
    )

    archive_timeout: int = Field(
        1800, alias="ARCHIVE_TIMEOUT", description="Image save/load timeout in seconds"
    )

    rsync_timeout: int = Field(
        3600, alias="RSYNC_TIMEOUT", description="Volume data copy timeout in seconds"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


# Global settings instance
timeout_settings = MigrationTimeoutSettings()

# Timeout constants for easy import
DOCKER_CLI_TIMEOUT: int = timeout_settings.docker_cli_timeout
COMMIT_TIMEOUT: int = timeout_settings.commit_timeout
ARCHIVE_TIMEOUT: int = timeout_settings.archive_timeout
RSYNC_TIMEOUT: int = timeout_settings.rsync_timeout
