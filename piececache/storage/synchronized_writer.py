"""Lock-guarded piece writer wrapper."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Callable

from piececache.storage.memory_writer import MemoryWriter
from piececache.storage.piece_writer import PieceWriter

if TYPE_CHECKING:  # pragma: no cover
    from piececache.models import TorrentFile
    from piececache.storage.buffered_io import BufferedIO


class SynchronizedPieceWriter(PieceWriter):
    """Serializes every call to the wrapped writer behind one re-entrant lock.

    Use this around a :class:`~piececache.storage.memory_writer.MemoryWriter`
    shared between threads; the memory writer itself does no locking. The
    cache-only operations (``force_write``, ``flush_where`` and
    ``get_cache_stats``) are forwarded when the wrapped writer is a
    MemoryWriter.
    """

    def __init__(self, writer: PieceWriter) -> None:
        """Initialize the wrapper.

        Args:
            writer: Writer whose calls are serialized

        """
        if writer is None:
            msg = "writer must not be None"
            raise TypeError(msg)
        self.writer = writer
        self.lock = threading.RLock()

    def _memory_writer(self, operation: str) -> MemoryWriter:
        if not isinstance(self.writer, MemoryWriter):
            msg = f"{operation}() requires a wrapped MemoryWriter, got {type(self.writer).__name__}"
            raise TypeError(msg)
        return self.writer

    def read(self, data: BufferedIO) -> int:
        """Read a block under the lock."""
        with self.lock:
            return self.writer.read(data)

    def write(self, data: BufferedIO, force_write: bool = False) -> None:
        """Write a block under the lock, passing ``force_write`` to a cache."""
        with self.lock:
            if isinstance(self.writer, MemoryWriter):
                self.writer.write(data, force_write=force_write)
            else:
                self.writer.write(data)

    def close(self, file: TorrentFile) -> None:
        """Close ``file`` under the lock."""
        with self.lock:
            self.writer.close(file)

    def exists(self, file: TorrentFile) -> bool:
        """Check ``file`` exists under the lock."""
        with self.lock:
            return self.writer.exists(file)

    def flush(self, file: TorrentFile) -> None:
        """Flush ``file`` under the lock."""
        with self.lock:
            self.writer.flush(file)

    def flush_where(self, predicate: Callable[[BufferedIO], bool]) -> int:
        """Flush the wrapped cache's blocks matching ``predicate`` under the lock."""
        with self.lock:
            return self._memory_writer("flush_where").flush_where(predicate)

    def get_cache_stats(self) -> dict[str, Any]:
        """Snapshot the wrapped cache's statistics under the lock."""
        with self.lock:
            return self._memory_writer("get_cache_stats").get_cache_stats()

    def move(self, old_path: str, new_path: str, ignore_existing: bool) -> None:
        """Move stored data under the lock."""
        with self.lock:
            self.writer.move(old_path, new_path, ignore_existing)

    def dispose(self) -> None:
        """Dispose the wrapped writer while holding the lock."""
        with self.lock:
            self.writer.dispose()
            super().dispose()
