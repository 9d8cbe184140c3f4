"""
Unit Tests for File Comparison

Author: mirrorsync Project
License: MIT
"""

import hashlib
import os
import pytest
from unittest.mock import Mock

from mirrorsync.sync_engine.file_comparer import FileComparer
from mirrorsync.utils.file_system import FileSystem


def _set_mtime(path, ns):
    os.utime(path, ns=(ns, ns))


class TestFileComparer:
    """Test suite for FileComparer."""

    @pytest.fixture
    def comparer(self):
        return FileComparer()

    def test_same_path_is_identical(self, comparer, tmp_path):
        target = tmp_path / "a.txt"
        target.write_text("x")

        assert comparer.are_identical(str(target), str(target))

    def test_missing_file_is_not_identical(self, comparer, tmp_path):
        target = tmp_path / "a.txt"
        target.write_text("x")

        assert not comparer.are_identical(str(target), str(tmp_path / "missing.txt"))

    def test_different_sizes(self, comparer, tmp_path):
        first = tmp_path / "a.txt"
        first.write_text("short")
        second = tmp_path / "b.txt"
        second.write_text("much longer")

        assert not comparer.are_identical(str(first), str(second))

    def test_equal_timestamp_trusted_without_reading(self, tmp_path):
        """Same size plus same last-write time short-circuits the content check."""
        first = tmp_path / "a.txt"
        first.write_bytes(b"AAAA")
        second = tmp_path / "b.txt"
        second.write_bytes(b"BBBB")
        _set_mtime(first, 1_600_000_000_000_000_000)
        _set_mtime(second, 1_600_000_000_000_000_000)

        fs = Mock(wraps=FileSystem())
        comparer = FileComparer(fs)

        assert comparer.are_identical(str(first), str(second))
        fs.iter_chunks.assert_not_called()

    def test_small_files_compared_by_hash(self, comparer, tmp_path):
        first = tmp_path / "a.txt"
        first.write_bytes(b"same content")
        second = tmp_path / "b.txt"
        second.write_bytes(b"same content")
        _set_mtime(first, 1_600_000_000_000_000_000)
        _set_mtime(second, 1_700_000_000_000_000_000)

        assert comparer.are_identical(str(first), str(second))

        second.write_bytes(b"diff content")
        _set_mtime(second, 1_700_000_000_000_000_000)
        assert not comparer.are_identical(str(first), str(second))

    def test_large_files_compared_in_chunks(self, tmp_path):
        size = FileComparer.HASH_SIZE_THRESHOLD + 10
        first = tmp_path / "a.bin"
        first.write_bytes(b"A" * size)
        second = tmp_path / "b.bin"
        second.write_bytes(b"A" * (size - 1) + b"B")
        _set_mtime(first, 1_600_000_000_000_000_000)
        _set_mtime(second, 1_700_000_000_000_000_000)

        comparer = FileComparer()
        hash_spy = Mock(wraps=comparer.hash_file)
        comparer.hash_file = hash_spy

        assert not comparer.are_identical(str(first), str(second))
        hash_spy.assert_not_called()

        second.write_bytes(b"A" * size)
        _set_mtime(second, 1_700_000_000_000_000_000)
        assert comparer.are_identical(str(first), str(second))

    def test_hash_file_md5(self, comparer, tmp_path):
        target = tmp_path / "a.txt"
        target.write_bytes(b"test content")

        assert comparer.hash_file(str(target)) == hashlib.md5(b"test content").hexdigest()

    def test_are_identical_swallows_errors(self, tmp_path):
        fs = Mock()
        fs.file_exists.return_value = True
        fs.stat_file.side_effect = PermissionError("denied")
        comparer = FileComparer(fs)

        assert comparer.are_identical(str(tmp_path / "a"), str(tmp_path / "b")) is False

    def test_check_identical_propagates_errors(self, tmp_path):
        fs = Mock()
        fs.file_exists.return_value = True
        fs.stat_file.side_effect = PermissionError("denied")
        comparer = FileComparer(fs)

        with pytest.raises(PermissionError):
            comparer.check_identical(str(tmp_path / "a"), str(tmp_path / "b"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
