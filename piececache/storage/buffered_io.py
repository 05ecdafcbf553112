"""Block records passed between the download engine and piece writers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from piececache.models import TorrentFile

# Size of one block request; cache usage is counted in these units
BLOCK_SIZE = 16 * 1024

Buffer = Union[bytearray, memoryview]


@dataclass(eq=False)
class BufferedIO:
    """One block of piece data to write, or one block-sized read request.

    The record references a slice of the caller's buffer rather than owning
    a copy. For a write the slice holds the payload; for a read it is the
    destination that gets filled in and ``actual_count`` tracks how many
    bytes were satisfied.

    Records compare by identity so that two requests for the same block
    stay distinct inside a writer's buffer.
    """

    piece_index: int
    block_index: int
    offset: int
    count: int
    buffer: Buffer
    buffer_offset: int = 0
    files: list[TorrentFile] = field(default_factory=list)
    actual_count: int = 0

    def __post_init__(self) -> None:
        """Validate the record against its backing buffer."""
        if self.count < 0:
            msg = f"count must be non-negative, got {self.count}"
            raise ValueError(msg)
        if self.offset < 0:
            msg = f"offset must be non-negative, got {self.offset}"
            raise ValueError(msg)
        if self.buffer_offset < 0:
            msg = f"buffer_offset must be non-negative, got {self.buffer_offset}"
            raise ValueError(msg)
        if self.buffer_offset + self.count > len(self.buffer):
            msg = (
                f"Block of {self.count} bytes at buffer offset "
                f"{self.buffer_offset} exceeds buffer of {len(self.buffer)} bytes"
            )
            raise ValueError(msg)

    @property
    def key(self) -> tuple[int, int]:
        """The ``(piece_index, block_index)`` pair identifying this block."""
        return (self.piece_index, self.block_index)

    @property
    def data(self) -> memoryview:
        """View of the ``count`` bytes this record covers."""
        return memoryview(self.buffer)[
            self.buffer_offset : self.buffer_offset + self.count
        ]

    def touches(self, file: TorrentFile) -> bool:
        """Return True if this block belongs to ``file``.

        The block must list the file and its piece must fall within the
        file's piece range.
        """
        return file in self.files and file.contains_piece(self.piece_index)
