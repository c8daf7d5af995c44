"""Structured logging for the GitLab updater.

Provides JSON-formatted logs with file and console output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from logging.handlers import RotatingFileHandler

ROOT_LOGGER = "gitlab_updater"

_CONTEXT_FIELDS = ("component", "extension", "kind", "status_code", "duration_ms", "success")


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _CONTEXT_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for human-readable output."""

    COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.now().strftime("%H:%M:%S")

        prefix = f"{color}[{timestamp}] {record.levelname:8}{self.RESET}"
        if hasattr(record, "component"):
            prefix += f" [{record.component}]"

        message = record.getMessage()

        extras = []
        if hasattr(record, "kind"):
            extras.append(f"kind={record.kind}")
        if hasattr(record, "extension"):
            extras.append(f"ext={record.extension}")
        if hasattr(record, "status_code"):
            extras.append(f"status={record.status_code}")
        if hasattr(record, "duration_ms"):
            extras.append(f"time={record.duration_ms:.0f}ms")

        if extras:
            message += f" ({', '.join(extras)})"

        return f"{prefix} {message}"


class UpdaterLogger:
    """Logger wrapper with convenience methods for update-cycle logging."""

    def __init__(self, name: str, logger: logging.Logger):
        self._name = name
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def _log(self, level: int, message: str, **kwargs):
        """Log with extra context fields."""
        extra = {}

        # Known fields become record attributes
        for key in _CONTEXT_FIELDS:
            if key in kwargs:
                extra[key] = kwargs.pop(key)

        # Remaining fields go into extra_data
        if kwargs:
            extra["extra_data"] = kwargs

        self._logger.log(level, message, extra=extra)

    def update_found(self, kind: str, key: str, installed: str, latest: str):
        self.info(
            f"Update available: {key} {installed} -> {latest}",
            component="prober",
            kind=kind,
            extension=key,
        )

    def check_skipped(self, kind: str, key: str, reason: str, status_code: Optional[int] = None):
        fields = {"component": "prober", "kind": kind, "extension": key}
        if status_code is not None:
            fields["status_code"] = status_code
        self.debug(f"Skipped {key}: {reason}", **fields)

    def source_relocated(self, slug: str, source: str, destination: str, duration_ms: float):
        self.info(
            f"Relocated archive source to {destination}",
            component="relocator",
            extension=slug,
            duration_ms=duration_ms,
            source=source,
        )


_loggers: dict[str, UpdaterLogger] = {}
_initialized = False


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    log_dir: Optional[Path] = None,
    file_enabled: bool = True,
    console_enabled: bool = True
) -> None:
    """Initialize the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "json" or "text"
        log_dir: Directory for log files
        file_enabled: Write logs to file
        console_enabled: Write logs to console (stderr)
    """
    global _initialized

    if _initialized:
        return

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    if console_enabled:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(logging.DEBUG)

        if format_type == "json":
            console.setFormatter(JSONFormatter())
        else:
            console.setFormatter(ColoredFormatter())

        root.addHandler(console)

    if file_enabled and log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / "gitlab-updater.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)

    _initialized = True


def reset_logging() -> None:
    """Drop configured handlers (useful for testing)."""
    global _initialized
    root = logging.getLogger(ROOT_LOGGER)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    _initialized = False


def get_logger(name: str = "updater") -> UpdaterLogger:
    """Get a project logger instance."""
    if name not in _loggers:
        logger = logging.getLogger(f"{ROOT_LOGGER}.{name}")
        _loggers[name] = UpdaterLogger(name, logger)
    return _loggers[name]
