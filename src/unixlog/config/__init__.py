"""
unixlog Configuration Module.

Each sub-module is an independent concern with its own environment variable
prefix:

- `UNIXLOG_ENV`: development, testing, staging, production
- `UNIXLOG_LOG_*`: engine thresholds, sinks and console layout

Usage:
    from unixlog.config import settings

    settings.environment.is_production  # False
    settings.logging.level              # "INFO"
"""

from functools import cached_property
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from .environment import EnvironmentSettings
from .logging import LogFormat, LoggingSettings


def _get_env_files() -> tuple[str, ...]:
    """Determine which .env files to load based on UNIXLOG_ENV."""
    env = os.getenv("UNIXLOG_ENV", "development")
    return (
        ".env",
        ".env.local",
        f".env.{env}",
        f".env.{env}.local",
    )


class Settings(BaseSettings):
    """Composite settings aggregating the configuration domains."""

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def environment(self) -> EnvironmentSettings:
        return EnvironmentSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings(_env_file=self.environment.env_files)

    @property
    def output_format(self) -> LogFormat:
        """Configured stdio format, defaulting by environment."""
        if self.logging.format is not None:
            return self.logging.format
        return LogFormat.JSON if self.environment.is_production else LogFormat.CONSOLE


settings = Settings()

__all__ = ["EnvironmentSettings", "LogFormat", "LoggingSettings", "Settings", "settings"]
