"""Centralized configuration for the GitLab updater.

This module provides typed, validated configuration loaded from
environment variables and .env files.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

from gitlab_updater import __version__
from gitlab_updater.core.errors import ConfigError

# Load .env file if it exists
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(
            f"{name} must be a number, got {value!r}",
            config_key=name,
            cause=e
        ) from e


@dataclass
class HttpConfig:
    """HTTP client configuration for GitLab calls."""
    timeout_seconds: float = 30.0
    verify_ssl: bool = True
    user_agent: str = f"gitlab-updater/{__version__}"

    def __post_init__(self):
        self.timeout_seconds = _env_float("GITLAB_UPDATER_TIMEOUT", self.timeout_seconds)
        self.verify_ssl = _env_flag("GITLAB_UPDATER_VERIFY_SSL", self.verify_ssl)
        self.user_agent = os.getenv("GITLAB_UPDATER_USER_AGENT", self.user_agent)


@dataclass
class PathConfig:
    """Path configuration."""
    data_dir: Path = field(default_factory=lambda: Path.home() / ".gitlab-updater")
    options_file: Optional[Path] = None
    state_dir: Optional[Path] = None
    logs_dir: Optional[Path] = None

    def __post_init__(self):
        base = os.getenv("GITLAB_UPDATER_DATA_DIR")
        if base:
            self.data_dir = Path(base)
        self.options_file = self.options_file or self.data_dir / "options.json"
        self.state_dir = self.state_dir or self.data_dir / "state"
        self.logs_dir = self.logs_dir or self.data_dir / "logs"


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "text"  # "json" or "text"
    file_enabled: bool = False
    console_enabled: bool = True

    def __post_init__(self):
        self.level = os.getenv("GITLAB_UPDATER_LOG_LEVEL", self.level).upper()
        self.format = os.getenv("GITLAB_UPDATER_LOG_FORMAT", self.format).lower()
        self.file_enabled = _env_flag("GITLAB_UPDATER_LOG_FILE", self.file_enabled)
        self.console_enabled = _env_flag("GITLAB_UPDATER_LOG_CONSOLE", self.console_enabled)


@dataclass
class Config:
    """Main configuration container."""
    http: HttpConfig = field(default_factory=HttpConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if self.http.timeout_seconds <= 0:
            issues.append("GITLAB_UPDATER_TIMEOUT must be positive")

        if self.log.format not in ("json", "text"):
            issues.append("GITLAB_UPDATER_LOG_FORMAT must be 'json' or 'text'")

        if self.log.level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            issues.append(f"Unknown log level: {self.log.level}")

        return issues

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return len(self.validate()) == 0


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
