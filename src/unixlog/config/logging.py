"""
Logging Configuration.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..severity import Severity


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


def _check_level(value: str) -> str:
    name = value.strip().upper()
    if name not in Severity.__members__:
        allowed = ", ".join(Severity.__members__)
        raise ValueError(f"unknown severity {value!r}, expected one of: {allowed}")
    return name


class LoggingSettings(BaseSettings):
    """Engine configuration: thresholds, sinks and console layout."""

    model_config = SettingsConfigDict(
        env_prefix="UNIXLOG_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: str = Field(default="INFO", description="Root threshold severity")
    logger_levels: dict[str, str] = Field(
        default_factory=dict,
        description="Per-logger thresholds keyed by dotted logger name prefix",
    )
    deny_markers: list[str] = Field(default_factory=list, description="Markers whose calls are dropped")
    sinks: str = Field(default="stdio", description="Comma-separated sink names (stdio, file, memory)")
    format: Optional[LogFormat] = Field(
        default=None,
        description="Stdio output format; json in production, console otherwise when unset",
    )
    file_path: str = Field(default="logs/unixlog.log", description="Path for file sink")
    include_source: bool = Field(default=True, description="Attach the calling module:function:line")
    intercept_stdlib: bool = Field(default=False, description="Route stdlib logging records into the engine")
    console_timestamp_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Console timestamp format",
    )
    console_level_width: int = Field(default=7, description="Console level column width")
    console_logger_width: int = Field(default=32, description="Console logger column width")
    console_separator: str = Field(default=" | ", description="Console column separator")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        return _check_level(value)

    @field_validator("logger_levels")
    @classmethod
    def _validate_logger_levels(cls, value: dict[str, str]) -> dict[str, str]:
        return {name: _check_level(level) for name, level in value.items()}
