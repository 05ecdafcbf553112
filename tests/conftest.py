"""Pytest configuration and shared fixtures for piececache tests."""

from __future__ import annotations

import logging
import os
from typing import Callable

import pytest

from piececache.models import TorrentFile
from piececache.storage.buffered_io import BLOCK_SIZE, BufferedIO
from piececache.storage.piece_writer import PieceWriter

BLOCKS_PER_PIECE = 4


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("storage", "marks tests as piece writer/cache tests"),
        ("config", "marks tests as configuration tests"),
        ("utils", "marks tests as utility tests"),
        ("slow", "marks tests as slow (deselect with '-m \"not slow\"')"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    # setup_logging() stops propagation, restore it so caplog keeps working
    package_logger = logging.getLogger("piececache")
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Keep config discovery away from real user files and reset the global manager."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in list(os.environ):
        if name.startswith("PIECECACHE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("piececache.config.config._config_manager", None)


class RecordingWriter(PieceWriter):
    """In-memory backend that records every call it receives."""

    def __init__(self) -> None:
        self.storage: dict[tuple[int, int], bytes] = {}
        self.writes: list[BufferedIO] = []
        self.reads: list[BufferedIO] = []
        self.closed: list[TorrentFile] = []
        self.flushed: list[TorrentFile] = []
        self.moves: list[tuple[str, str, bool]] = []
        self.existing: set[str] = set()
        self.dispose_calls = 0
        self.fail_writes = False

    @property
    def written_keys(self) -> list[tuple[int, int]]:
        return [io.key for io in self.writes]

    def read(self, data: BufferedIO) -> int:
        self.reads.append(data)
        stored = self.storage.get(data.key)
        if stored is None:
            return 0
        count = min(len(stored), data.count)
        data.buffer[data.buffer_offset : data.buffer_offset + count] = stored[:count]
        data.actual_count += count
        return count

    def write(self, data: BufferedIO) -> None:
        if self.fail_writes:
            msg = f"disk full writing block {data.key}"
            raise OSError(msg)
        self.writes.append(data)
        self.storage[data.key] = bytes(data.data)

    def close(self, file: TorrentFile) -> None:
        self.closed.append(file)

    def exists(self, file: TorrentFile) -> bool:
        return file.path in self.existing

    def flush(self, file: TorrentFile) -> None:
        self.flushed.append(file)

    def move(self, old_path: str, new_path: str, ignore_existing: bool) -> None:
        self.moves.append((old_path, new_path, ignore_existing))

    def dispose(self) -> None:
        self.dispose_calls += 1
        super().dispose()


@pytest.fixture
def backend() -> RecordingWriter:
    """Recording backend writer."""
    return RecordingWriter()


@pytest.fixture
def torrent_file() -> TorrentFile:
    """A file spanning pieces 0-1."""
    return TorrentFile(
        path="movie.mkv",
        length=2 * BLOCKS_PER_PIECE * BLOCK_SIZE,
        start_piece_index=0,
        end_piece_index=1,
    )


def block_payload(piece_index: int, block_index: int, count: int) -> bytes:
    """Deterministic payload for a block."""
    return bytes([(piece_index * BLOCKS_PER_PIECE + block_index) % 256]) * count


@pytest.fixture
def make_block() -> Callable[..., BufferedIO]:
    """Factory for write blocks laid out with four blocks per piece."""

    def _make_block(
        piece_index: int,
        block_index: int,
        count: int = BLOCK_SIZE,
        files: list[TorrentFile] | None = None,
        payload: bytes | None = None,
    ) -> BufferedIO:
        if payload is None:
            payload = block_payload(piece_index, block_index, count)
        return BufferedIO(
            piece_index=piece_index,
            block_index=block_index,
            offset=(piece_index * BLOCKS_PER_PIECE + block_index) * BLOCK_SIZE,
            count=count,
            buffer=bytearray(payload),
            files=list(files or []),
        )

    return _make_block


@pytest.fixture
def make_request() -> Callable[..., BufferedIO]:
    """Factory for read requests with an empty destination buffer."""

    def _make_request(
        piece_index: int,
        block_index: int,
        count: int = BLOCK_SIZE,
        buffer_offset: int = 0,
    ) -> BufferedIO:
        return BufferedIO(
            piece_index=piece_index,
            block_index=block_index,
            offset=(piece_index * BLOCKS_PER_PIECE + block_index) * BLOCK_SIZE,
            count=count,
            buffer=bytearray(buffer_offset + count),
            buffer_offset=buffer_offset,
        )

    return _make_request
