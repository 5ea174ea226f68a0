"""Configuration management for Transitory."""

from transitory.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
    load_transition_config,
)
from transitory.core.config.models import AppConfig, LoggingConfig

__all__ = [
    "AppConfig",
    "LoggingConfig",
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    "load_transition_config",
]
