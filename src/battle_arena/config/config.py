"""Client configuration: models, YAML/env loading and validation.

Sources are layered per field: built-in defaults, then an optional YAML
file, then ARENA_* environment variables. A YAML file looks like:

    client:
      base_url: http://localhost:8000
      interval_ms: 1000
    logging:
      level: DEBUG
      format: text
"""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_BASE_URL = "http://localhost:8000"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is inconsistent."""

    pass


class ClientConfig(BaseModel):
    """Match service client and sync loop configuration."""

    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Base address of the match service"
    )
    interval_ms: float = Field(
        default=1000.0, description="Sync loop tick interval in milliseconds"
    )
    request_timeout_seconds: float = Field(
        default=10.0, description="Per-request timeout enforced by the HTTP client"
    )
    suppress_deploy_errors: bool = Field(
        default=True,
        description="Log and swallow deploy failures instead of raising",
    )
    failure_threshold: int = Field(
        default=3,
        description="Consecutive failed cycles before the loop reports degraded",
    )
    default_lane: int = Field(default=1, description="Lane used when none is given")


class LoggingConfig(BaseModel):
    """structlog output settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "json"


class Config(BaseModel):
    """Top-level configuration for battle_arena."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


# env var -> (section, field, parser)
ENV_VARS: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "ARENA_BACKEND_URL": ("client", "base_url", str.strip),
    "ARENA_SYNC_INTERVAL_MS": ("client", "interval_ms", float),
    "ARENA_REQUEST_TIMEOUT": ("client", "request_timeout_seconds", float),
    "ARENA_SUPPRESS_DEPLOY_ERRORS": ("client", "suppress_deploy_errors", _parse_bool),
    "ARENA_LOG_LEVEL": ("logging", "level", str.upper),
    "ARENA_LOG_FORMAT": ("logging", "format", str.lower),
}


def load_config_from_file(config_path: Path) -> Config:
    """Read a YAML configuration file. An empty file yields the defaults.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or holds
            values the models reject
    """
    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        return Config.model_validate(raw)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e


def load_config_from_env() -> Config:
    """Build a configuration from the ARENA_* variables that are set.

    Recognized variables are listed in ENV_VARS. Unset or empty variables
    leave the field at its default.

    Raises:
        ConfigError: If a variable cannot be parsed or fails validation
    """
    sections: dict[str, dict[str, Any]] = {}
    for name, (section, field_name, parse) in ENV_VARS.items():
        raw = os.getenv(name)
        if not raw:
            continue
        try:
            sections.setdefault(section, {})[field_name] = parse(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid {name}: {raw}") from e

    try:
        return Config.model_validate(sections)
    except ValidationError as e:
        raise ConfigError(f"Environment configuration validation failed: {e}") from e


def load_config(config_path: Path | None = None) -> Config:
    """Layer defaults, an optional YAML file and the environment.

    Only fields a source actually sets override the layer below it, so an
    env var for the interval keeps the file's base URL.
    """
    layers = [Config()]
    if config_path is not None:
        layers.append(load_config_from_file(config_path))
    layers.append(load_config_from_env())

    merged: dict[str, dict[str, Any]] = layers[0].model_dump()
    for layer in layers[1:]:
        for section, values in layer.model_dump(exclude_unset=True).items():
            merged[section].update(values)

    return Config.model_validate(merged)


def validate_config(config: Config) -> None:
    """Check settings the models alone cannot express.

    Raises:
        ConfigError: On the first problem found
    """
    validate_client_config(config.client)


def validate_client_config(client: ClientConfig) -> None:
    """Check the client section. Raises ConfigError on the first problem."""
    base_url = client.base_url.strip()
    if not base_url:
        raise ConfigError("client.base_url must not be empty")
    parsed = urlparse(base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            f"Invalid client.base_url: {base_url}. Must be an http(s) address"
        )

    if client.interval_ms <= 0:
        raise ConfigError("client.interval_ms must be positive")
    if client.request_timeout_seconds <= 0:
        raise ConfigError("client.request_timeout_seconds must be positive")
    if client.failure_threshold < 1:
        raise ConfigError("client.failure_threshold must be at least 1")
    if client.default_lane not in (0, 1, 2):
        raise ConfigError("client.default_lane must be 0, 1 or 2")
