"""Construction of configured cache layers.

Provides:
- create_memory_writer(): wrap a backend writer in a MemoryWriter sized from config.cache.*
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from piececache.config.config import get_config
from piececache.storage.memory_writer import MemoryWriter
from piececache.storage.synchronized_writer import SynchronizedPieceWriter
from piececache.utils.logging_config import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from piececache.models import Config
    from piececache.storage.piece_writer import PieceWriter

logger = get_logger(__name__)


def create_memory_writer(
    writer: PieceWriter,
    config: Config | None = None,
    synchronized: bool | None = None,
) -> PieceWriter:
    """Wrap ``writer`` in a write-back memory cache.

    Args:
        writer: Backend writer the cache flushes to
        config: Configuration to size the cache from (uses global config if None)
        synchronized: Wrap the cache in a SynchronizedPieceWriter. Defaults
            to ``config.cache.synchronized``

    Returns:
        The MemoryWriter, or a SynchronizedPieceWriter around it

    Example:
        ```python
        cache = create_memory_writer(disk_writer)
        cache.write(block)
        cache.dispose()  # flushes everything to disk_writer
        ```

    """
    config = config or get_config()
    cache_config = config.cache

    memory_writer = MemoryWriter(
        writer,
        capacity=cache_config.capacity_kib * 1024,
        block_size=cache_config.block_size_kib * 1024,
    )

    if synchronized is None:
        synchronized = cache_config.synchronized

    logger.debug(
        "Created memory writer (capacity=%d bytes, block_size=%d bytes, synchronized=%s)",
        memory_writer.capacity,
        memory_writer.block_size,
        synchronized,
    )

    if synchronized:
        return SynchronizedPieceWriter(memory_writer)
    return memory_writer
