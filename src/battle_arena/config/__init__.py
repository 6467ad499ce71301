"""Configuration management for battle_arena.

This module provides configuration loading and validation for the
match service client.
"""

from .config import (
    DEFAULT_BASE_URL,
    ClientConfig,
    Config,
    ConfigError,
    LoggingConfig,
    load_config,
    load_config_from_env,
    load_config_from_file,
    validate_client_config,
    validate_config,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "ClientConfig",
    "Config",
    "ConfigError",
    "LoggingConfig",
    "load_config",
    "load_config_from_env",
    "load_config_from_file",
    "validate_client_config",
    "validate_config",
]
