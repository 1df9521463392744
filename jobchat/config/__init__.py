"""Configuration management for the jobchat service."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import apply_environment_overrides, load_config
from .models import (
    AppConfig,
    CatalogConfig,
    LLMConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MatchingConfig,
    ServerConfig,
    SessionConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_environment_config",
    "apply_environment_overrides",
    # Configuration models
    "AppConfig",
    "ServerConfig",
    "CatalogConfig",
    "MatchingConfig",
    "SessionConfig",
    "LLMConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
