"""Piece writers and the write-back memory cache.

This module handles block records, the writer interface, and the caching
and locking writer layers built on it.
"""

from __future__ import annotations

from piececache.storage.buffered_io import BLOCK_SIZE, BufferedIO
from piececache.storage.memory_writer import DEFAULT_CAPACITY, CacheStats, MemoryWriter
from piececache.storage.piece_writer import PieceWriter
from piececache.storage.synchronized_writer import SynchronizedPieceWriter
from piececache.storage.writer_init import create_memory_writer

__all__ = [
    "BLOCK_SIZE",
    "DEFAULT_CAPACITY",
    "BufferedIO",
    "CacheStats",
    "MemoryWriter",
    "PieceWriter",
    "SynchronizedPieceWriter",
    "create_memory_writer",
]
