"""Write-back memory cache for piece writers.

Holds incoming block writes in memory and only hands them to the wrapped
writer when the cache is full, when a file is flushed or closed, or when the
cache is disposed. Reads consult the buffered blocks before falling through
to the wrapped writer so unflushed data stays visible.

The cache performs no locking of its own. Callers that share one instance
between threads must serialize access, for example with
:class:`~piececache.storage.synchronized_writer.SynchronizedPieceWriter`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Callable

from piececache.storage.buffered_io import BLOCK_SIZE, BufferedIO
from piececache.storage.piece_writer import PieceWriter
from piececache.utils.exceptions import BlockRangeError
from piececache.utils.logging_config import LoggingContext, get_logger, log_exception

if TYPE_CHECKING:  # pragma: no cover
    from piececache.models import TorrentFile

DEFAULT_CAPACITY = 2 * 1024 * 1024


@dataclass
class CacheStats:
    """Statistics for cache operations."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    blocks_flushed: int = 0
    peak_used: int = 0


class MemoryWriter(PieceWriter):
    """Piece writer that buffers block writes in memory."""

    def __init__(
        self,
        writer: PieceWriter,
        capacity: int = DEFAULT_CAPACITY,
        block_size: int = BLOCK_SIZE,
    ) -> None:
        """Initialize the memory writer.

        Args:
            writer: Writer that buffered blocks are flushed to
            capacity: Upper bound in bytes for buffered blocks, counted in
                whole ``block_size`` units
            block_size: Size charged against the capacity per buffered block

        """
        if writer is None:
            msg = "writer must not be None"
            raise TypeError(msg)
        if capacity < 0:
            msg = f"capacity must be non-negative, got {capacity}"
            raise ValueError(msg)
        if block_size <= 0:
            msg = f"block_size must be positive, got {block_size}"
            raise ValueError(msg)

        self._writer = writer
        self._capacity = capacity
        self._block_size = block_size
        self._buffer: list[BufferedIO] = []
        self.stats = CacheStats()
        self.logger = get_logger(__name__)

    @property
    def writer(self) -> PieceWriter:
        """The wrapped writer."""
        return self._writer

    @property
    def capacity(self) -> int:
        """Configured capacity in bytes."""
        return self._capacity

    @property
    def block_size(self) -> int:
        """Bytes charged per buffered block."""
        return self._block_size

    @property
    def used(self) -> int:
        """Bytes charged against the capacity by buffered blocks."""
        return len(self._buffer) * self._block_size

    @property
    def buffered_blocks(self) -> int:
        """Number of blocks currently held in memory."""
        return len(self._buffer)

    def __contains__(self, key: object) -> bool:
        """Return True if a block with this ``(piece_index, block_index)`` is buffered."""
        return any(io.key == key for io in self._buffer)

    def read(self, data: BufferedIO) -> int:
        """Read a block, serving it from memory when it is buffered.

        A buffered block that only partly covers the request yields a short
        read; the remainder is not fetched from the wrapped writer.

        Args:
            data: Read request; its buffer receives the bytes

        Returns:
            Number of bytes copied into ``data.buffer``

        """
        # TODO: index buffered blocks by (piece_index, block_index) instead
        # of sorting and scanning on every read
        self._buffer.sort(key=lambda io: io.offset)
        cached = next((io for io in self._buffer if io.key == data.key), None)

        if cached is None:
            self.stats.misses += 1
            return self._writer.read(data)

        delta = cached.offset - data.offset
        to_copy = min(data.count, cached.count + delta)
        source = cached.buffer_offset + delta
        if to_copy < 0 or source < 0 or source + to_copy > len(cached.buffer):
            msg = "Buffered block cannot satisfy the requested range"
            raise BlockRangeError(
                msg,
                {
                    "piece_index": data.piece_index,
                    "block_index": data.block_index,
                    "requested_offset": data.offset,
                    "cached_offset": cached.offset,
                },
            )

        self.stats.hits += 1
        dest = data.buffer_offset
        data.buffer[dest : dest + to_copy] = cached.buffer[source : source + to_copy]
        data.actual_count += to_copy
        return to_copy

    def write(self, data: BufferedIO, force_write: bool = False) -> None:
        """Buffer a block, or write it straight through.

        When admitting the block would overflow the capacity, the oldest
        buffered block is flushed first. Only one block is evicted per
        call, so a write can leave ``used`` above ``capacity``.

        Args:
            data: Block to write
            force_write: Bypass the cache and write to the wrapped writer

        """
        if force_write:
            self._writer.write(data)
            return

        if self.used > self._capacity - data.count and self._buffer:
            oldest = self._buffer[0]
            self.logger.debug(
                "Evicting block %d/%d to make room (used=%d, capacity=%d)",
                oldest.piece_index,
                oldest.block_index,
                self.used,
                self._capacity,
            )
            self.stats.evictions += 1
            self.flush_where(lambda io: io is oldest)

        self._buffer.append(data)
        self.stats.peak_used = max(self.stats.peak_used, self.used)

    def close(self, file: TorrentFile) -> None:
        """Flush buffered blocks of ``file`` and close it in the wrapped writer."""
        self.flush(file)
        self._writer.close(file)

    def exists(self, file: TorrentFile) -> bool:
        """Check the wrapped writer; buffered blocks do not count."""
        return self._writer.exists(file)

    def flush(self, file: TorrentFile) -> None:
        """Write out every buffered block that belongs to ``file``."""
        self.flush_where(lambda io: io.touches(file))

    def flush_where(self, predicate: Callable[[BufferedIO], bool]) -> int:
        """Write out and drop every buffered block matching ``predicate``.

        All matching blocks are written before any is removed. If a write
        raises, nothing is removed and the blocks stay buffered.

        Args:
            predicate: Selects the blocks to flush

        Returns:
            Number of blocks written to the wrapped writer

        """
        flushed = 0
        for io in self._buffer:
            if not predicate(io):
                continue
            try:
                self.write(io, force_write=True)
            except Exception as exc:
                log_exception(
                    self.logger,
                    exc,
                    f"Writing buffered block {io.piece_index}/{io.block_index}",
                )
                raise
            flushed += 1

        self._buffer[:] = [io for io in self._buffer if not predicate(io)]

        if flushed:
            self.stats.blocks_flushed += flushed
            self.logger.debug(
                "Flushed %d buffered block(s), %d remaining",
                flushed,
                len(self._buffer),
            )
        return flushed

    def move(self, old_path: str, new_path: str, ignore_existing: bool) -> None:
        """Move data in the wrapped writer.

        Buffered blocks are keyed by piece and block index, not by path, so
        nothing needs flushing first.
        """
        self._writer.move(old_path, new_path, ignore_existing)

    def dispose(self) -> None:
        """Flush every buffered block, then dispose the wrapped writer."""
        self.logger.debug(
            "Disposing memory writer with %d buffered block(s)", len(self._buffer)
        )
        with LoggingContext("memory_writer_dispose", buffered_blocks=len(self._buffer)):
            self.flush_where(lambda io: True)
            self._writer.dispose()
        super().dispose()

    def get_cache_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Hit/miss/eviction counters plus current usage

        """
        stats = asdict(self.stats)
        stats.update(
            {
                "used": self.used,
                "capacity": self._capacity,
                "buffered_blocks": len(self._buffer),
            }
        )
        return stats
