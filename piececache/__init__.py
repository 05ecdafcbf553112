"""piececache - A write-back memory cache for BitTorrent piece writers."""

from __future__ import annotations

__version__ = "0.1.0"

from piececache.config.config import Config, ConfigManager, get_config, init_config
from piececache.models import CacheConfig, ObservabilityConfig, TorrentFile
from piececache.storage import (
    BLOCK_SIZE,
    BufferedIO,
    MemoryWriter,
    PieceWriter,
    SynchronizedPieceWriter,
    create_memory_writer,
)
from piececache.utils.exceptions import (
    BlockRangeError,
    ConfigurationError,
    PieceCacheError,
)

__all__ = [
    "BLOCK_SIZE",
    "BlockRangeError",
    "BufferedIO",
    "CacheConfig",
    "Config",
    "ConfigManager",
    "ConfigurationError",
    "MemoryWriter",
    "ObservabilityConfig",
    "PieceCacheError",
    "PieceWriter",
    "SynchronizedPieceWriter",
    "TorrentFile",
    "__version__",
    "create_memory_writer",
    "get_config",
    "init_config",
]
