"""Pydantic models for piececache.

Provides validated data models for torrent files and configuration.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TorrentFile(BaseModel):
    """A file of the torrent's file set and the pieces it spans."""

    path: str = Field(..., description="File path")
    length: int = Field(default=0, ge=0, description="File length in bytes")
    start_piece_index: int = Field(
        ..., ge=0, description="Index of the first piece overlapping this file"
    )
    end_piece_index: int = Field(
        ..., ge=0, description="Index of the last piece overlapping this file"
    )

    @model_validator(mode="after")
    def validate_piece_range(self):
        """Ensure the piece range is not inverted."""
        if self.end_piece_index < self.start_piece_index:
            msg = (
                f"end_piece_index ({self.end_piece_index}) must not be less than "
                f"start_piece_index ({self.start_piece_index})"
            )
            raise ValueError(msg)
        return self

    def contains_piece(self, piece_index: int) -> bool:
        """Return True if the piece falls within this file's piece range."""
        return self.start_piece_index <= piece_index <= self.end_piece_index


class CacheConfig(BaseModel):
    """Write-back cache configuration."""

    capacity_kib: int = Field(
        default=2048,
        ge=0,
        description="Cache capacity in KiB, measured in whole blocks",
    )
    block_size_kib: int = Field(
        default=16,
        ge=1,
        le=1024,
        description="Block size in KiB used to account for buffered blocks",
    )
    synchronized: bool = Field(
        default=False,
        description="Serialize all cache operations behind a lock",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False, description="Write JSON records to the log file"
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )


class Config(BaseModel):
    """Main configuration model."""

    cache: CacheConfig = Field(
        default_factory=CacheConfig,
        description="Cache configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
