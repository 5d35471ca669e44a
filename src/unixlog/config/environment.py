"""
Environment Configuration.

The environment is determined by the `UNIXLOG_ENV` environment variable and
selects which .env files are loaded and the default output format.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


Environment = Literal["development", "testing", "staging", "production"]


class EnvironmentSettings(BaseSettings):
    """
    Environment detection.

    File Resolution Order:
    1. `.env.{environment}.local` (local overrides, gitignored)
    2. `.env.{environment}` (environment-specific)
    3. `.env.local` (local overrides, gitignored)
    4. `.env` (base defaults)
    """

    model_config = SettingsConfigDict(
        env_prefix="UNIXLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: Environment = Field(
        default="development",
        description="Current environment (development, testing, staging, production)",
    )

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_testing(self) -> bool:
        return self.env == "testing"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def env_files(self) -> tuple[str, ...]:
        """Lower index = lower priority (loaded first, overridden later)."""
        return (
            ".env",
            ".env.local",
            f".env.{self.env}",
            f".env.{self.env}.local",
        )
