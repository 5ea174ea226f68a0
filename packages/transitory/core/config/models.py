"""Configuration models for Transitory."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from transitory.core.transitions.config import TransitionConfig


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON log records")
    filename: str | None = Field(default=None, description="Log file (stdout when unset)")


class AppConfig(BaseModel):
    """Application configuration: logging plus the transition styles and timings.

    Example:
        >>> config = AppConfig.model_validate({
        ...     "logging": {"level": "DEBUG"},
        ...     "transitions": {
        ...         "from": {"opacity": 0},
        ...         "enter": {"opacity": 1},
        ...         "leave": {"opacity": 0},
        ...         "enter_duration_ms": 300,
        ...         "leave_duration_ms": 300,
        ...     },
        ... })
    """

    model_config = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    transitions: TransitionConfig

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("transitory.yaml")
