"""Utilities module"""

from .errors import (
    CacheStrategyError,
    ConfigurationError,
    ToolNotFoundError,
    CacheDirectoryResolutionError,
    InstallationError,
)
from .validation import InputValidator
from .logging_config import setup_logging

__all__ = [
    "CacheStrategyError",
    "ConfigurationError",
    "ToolNotFoundError",
    "CacheDirectoryResolutionError",
    "InstallationError",
    "InputValidator",
    "setup_logging",
]
