"""Shared utilities and infrastructure.

This module contains the exception hierarchy and logging helpers.
"""

from __future__ import annotations

from piececache.utils.exceptions import (
    BlockRangeError,
    ConfigurationError,
    DiskError,
    PieceCacheError,
    ValidationError,
)
from piececache.utils.logging_config import get_logger, setup_logging

__all__ = [
    # Exceptions
    "BlockRangeError",
    "ConfigurationError",
    "DiskError",
    "PieceCacheError",
    "ValidationError",
    # Logging
    "get_logger",
    "setup_logging",
]
