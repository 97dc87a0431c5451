"""Configuration management using Pydantic Settings.

Sources, highest priority first: constructor arguments, ``SPECKIT_*``
environment variables, ``.env``, the project file ``.speckit/config.json``,
then field defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

PROJECT_CONFIG_FILE = ".speckit/config.json"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SPECKIT_",
        case_sensitive=False,
        extra="ignore",
        json_file=PROJECT_CONFIG_FILE,
        json_file_encoding="utf-8",
    )

    # Workflow files
    base_dir: Path = Field(
        default=Path(".speckit"),
        description="Directory holding workflow state and artifacts",
    )
    plan_filename: str = Field(
        default="PLAN.md",
        description="Plan document name inside base_dir",
    )
    state_filename: str = Field(
        default="state.json",
        description="Workflow state file name inside base_dir",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Console logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional rotating log file",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def plan_path(self) -> Path:
        """Path of the plan document."""
        return self.base_dir / self.plan_filename

    @property
    def state_path(self) -> Path:
        """Path of the workflow state file."""
        return self.base_dir / self.state_filename


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from all sources.

    Example:
        >>> settings = get_settings()
        >>> settings.plan_path
        PosixPath('.speckit/PLAN.md')
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
