"""
tunefetch configuration management.

Handles loading and validating configuration from:
- Default values
- Configuration file (TOML)
- Environment variables
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from tunefetch.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "tunefetch"
DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_ENV_PREFIX = "TUNEFETCH_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ValidationError:
    """Validation error for configuration."""
    field: str
    message: str
    severity: str  # "error" or "warning"

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.field}: {self.message}"


@dataclass
class HttpConfig:
    """Configuration for the HTTP client used by queries."""

    timeout: float = 30.0
    user_agent: str = "tunefetch/0.1"
    follow_redirects: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[Path] = None


@dataclass
class TunefetchConfig:
    """Main configuration container."""

    http: HttpConfig = field(default_factory=HttpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Name of the plugin designated as default once registered
    default_plugin: Optional[str] = None


def load_config(
    config_path: Optional[Path] = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> TunefetchConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Default values

    Args:
        config_path: Path to config file (default: ~/.config/tunefetch/config.toml)
        env_prefix: Prefix for environment variables

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If the file exists but cannot be parsed
    """
    config = TunefetchConfig()

    if config_path is None:
        env_config_dir = os.environ.get(f"{env_prefix}CONFIG_DIR")
        if env_config_dir:
            config_path = Path(env_config_dir) / DEFAULT_CONFIG_FILE
        else:
            config_path = DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE

    if config_path.exists():
        config = _load_from_file(config_path, config)

    return _load_from_env(config, env_prefix)


def _load_from_file(path: Path, config: TunefetchConfig) -> TunefetchConfig:
    """Load configuration from a TOML file."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Failed to load config from {path}", str(e)) from e

    if "http" in data:
        for key, value in data["http"].items():
            if hasattr(config.http, key):
                setattr(config.http, key, value)

    if "logging" in data:
        for key, value in data["logging"].items():
            if key == "file":
                config.logging.file = Path(value).expanduser() if value else None
            elif hasattr(config.logging, key):
                setattr(config.logging, key, value)

    if "default_plugin" in data:
        config.default_plugin = data["default_plugin"] or None

    logger.debug(f"Loaded configuration from {path}")
    return config


def _load_from_env(config: TunefetchConfig, prefix: str) -> TunefetchConfig:
    """Load configuration from environment variables."""
    if env_val := os.environ.get(f"{prefix}HTTP_TIMEOUT"):
        try:
            config.http.timeout = float(env_val)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {prefix}HTTP_TIMEOUT: {env_val!r}") from e
    if env_val := os.environ.get(f"{prefix}USER_AGENT"):
        config.http.user_agent = env_val
    if env_val := os.environ.get(f"{prefix}FOLLOW_REDIRECTS"):
        config.http.follow_redirects = env_val.lower() in ("true", "1", "yes")

    if env_val := os.environ.get(f"{prefix}LOG_LEVEL"):
        config.logging.level = env_val.upper()
    if env_val := os.environ.get(f"{prefix}LOG_FILE"):
        config.logging.file = Path(env_val).expanduser()

    if env_val := os.environ.get(f"{prefix}DEFAULT_PLUGIN"):
        config.default_plugin = env_val

    return config


def validate_config(config: TunefetchConfig) -> List[ValidationError]:
    """
    Validate configuration values.

    Returns:
        List of validation errors (empty if valid)
    """
    errors: List[ValidationError] = []

    if not isinstance(config.http.timeout, (int, float)) or config.http.timeout <= 0:
        errors.append(ValidationError(
            field="http.timeout",
            message="Timeout must be a positive number of seconds",
            severity="error",
        ))

    if not config.http.user_agent:
        errors.append(ValidationError(
            field="http.user_agent",
            message="User agent is empty; some services reject such requests",
            severity="warning",
        ))

    if str(config.logging.level).upper() not in LOG_LEVELS:
        errors.append(ValidationError(
            field="logging.level",
            message=f"Unknown log level {config.logging.level!r}, expected one of {', '.join(LOG_LEVELS)}",
            severity="error",
        ))

    if config.default_plugin is not None and not config.default_plugin.strip():
        errors.append(ValidationError(
            field="default_plugin",
            message="Default plugin name is blank",
            severity="error",
        ))

    return errors


def config_to_dict(config: TunefetchConfig) -> dict[str, Any]:
    """Convert configuration to a plain dictionary."""
    return {
        "http": {
            "timeout": config.http.timeout,
            "user_agent": config.http.user_agent,
            "follow_redirects": config.http.follow_redirects,
        },
        "logging": {
            "level": config.logging.level,
            "format": config.logging.format,
            "file": str(config.logging.file) if config.logging.file else None,
        },
        "default_plugin": config.default_plugin,
    }
