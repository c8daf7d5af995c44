"""Core package - errors, logging and the options store."""

from .config import OptionsStore
from .errors import UpdaterError
from .logging import get_logger, setup_logging

__all__ = ["OptionsStore", "UpdaterError", "get_logger", "setup_logging"]
