"""Exception hierarchy for piececache.

Provides the exception types raised by the cache, its configuration layer
and the storage helpers.
"""

from __future__ import annotations

from typing import Any


class PieceCacheError(Exception):
    """Base exception for all piececache errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize piececache error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class DiskError(PieceCacheError):
    """Piece I/O related errors."""


class BlockRangeError(DiskError):
    """A cached block cannot satisfy the requested byte range."""


class ValidationError(PieceCacheError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""
