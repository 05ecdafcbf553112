"""Tests for package __init__.py module."""

from __future__ import annotations

import pytest

pytestmark = [pytest.mark.unit]


class TestPackageInit:
    """Tests for piececache/__init__.py."""

    def test_version(self):
        """Test version is defined."""
        import piececache

        assert piececache.__version__ == "0.1.0"

    def test_public_api(self):
        """Test that the main classes are exported."""
        import piececache

        for name in piececache.__all__:
            assert hasattr(piececache, name), name

    def test_memory_writer_is_a_piece_writer(self):
        """Test that the cache can stand in for any writer."""
        from piececache import MemoryWriter, PieceWriter

        assert issubclass(MemoryWriter, PieceWriter)
