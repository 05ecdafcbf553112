"""Abstract piece writer interface.

A piece writer moves block data between the download engine and storage.
Writers can be layered: a caching writer implements the same interface as
the backend it wraps, so either can be used wherever a writer is expected.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from piececache.models import TorrentFile
    from piececache.storage.buffered_io import BufferedIO


class PieceWriter(ABC):
    """Base class for all piece writers."""

    _disposed = False

    @abstractmethod
    def read(self, data: BufferedIO) -> int:
        """Fill ``data`` from storage and return the number of bytes copied."""

    @abstractmethod
    def write(self, data: BufferedIO) -> None:
        """Write the block described by ``data``."""

    @abstractmethod
    def close(self, file: TorrentFile) -> None:
        """Close any handle held for ``file``."""

    @abstractmethod
    def exists(self, file: TorrentFile) -> bool:
        """Return True if ``file`` exists in storage."""

    @abstractmethod
    def flush(self, file: TorrentFile) -> None:
        """Push pending data for ``file`` down to storage."""

    @abstractmethod
    def move(self, old_path: str, new_path: str, ignore_existing: bool) -> None:
        """Move stored data from ``old_path`` to ``new_path``."""

    @property
    def disposed(self) -> bool:
        """Whether dispose() has run."""
        return self._disposed

    def dispose(self) -> None:
        """Release resources held by this writer."""
        self._disposed = True

    def __enter__(self):
        """Enter the context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Dispose the writer on leaving the context."""
        self.dispose()
        return False
