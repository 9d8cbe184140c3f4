"""
Unit Tests for the Filesystem Abstraction

Tests copying, moving, deleting, enumeration and metadata queries.

Author: mirrorsync Project
License: MIT
"""

import os
import stat
import pytest

from mirrorsync.utils.file_system import FileSystem


class TestFileOperations:
    """Test suite for single-file primitives."""

    @pytest.fixture
    def fs(self):
        return FileSystem()

    def test_copy_preserves_timestamp(self, fs, tmp_path):
        """Copies carry the last-write time across."""
        source = tmp_path / "a.txt"
        source.write_text("hello")
        os.utime(source, ns=(1_600_000_000_000_000_000, 1_600_000_000_000_000_000))

        target = tmp_path / "b.txt"
        fs.copy_file(str(source), str(target))

        assert target.read_text() == "hello"
        assert fs.stat_file(str(target)).last_write_time_ns == fs.stat_file(str(source)).last_write_time_ns

    def test_copy_without_overwrite_raises(self, fs, tmp_path):
        source = tmp_path / "a.txt"
        source.write_text("new")
        target = tmp_path / "b.txt"
        target.write_text("old")

        with pytest.raises(FileExistsError):
            fs.copy_file(str(source), str(target))

        assert target.read_text() == "old"

    def test_copy_overwrites_read_only_destination(self, fs, tmp_path):
        source = tmp_path / "a.txt"
        source.write_text("new")
        target = tmp_path / "b.txt"
        target.write_text("old")
        os.chmod(target, stat.S_IREAD)

        fs.copy_file(str(source), str(target), overwrite=True)

        assert target.read_text() == "new"

    def test_copy_missing_source_raises(self, fs, tmp_path):
        with pytest.raises(FileNotFoundError):
            fs.copy_file(str(tmp_path / "missing.txt"), str(tmp_path / "b.txt"))

    def test_move_file(self, fs, tmp_path):
        source = tmp_path / "a.txt"
        source.write_text("content")
        target = tmp_path / "b.txt"

        fs.move_file(str(source), str(target))

        assert not source.exists()
        assert target.read_text() == "content"

    def test_move_onto_existing_raises(self, fs, tmp_path):
        source = tmp_path / "a.txt"
        source.write_text("a")
        target = tmp_path / "b.txt"
        target.write_text("b")

        with pytest.raises(FileExistsError):
            fs.move_file(str(source), str(target))

    def test_delete_read_only_file(self, fs, tmp_path):
        target = tmp_path / "ro.txt"
        target.write_text("x")
        os.chmod(target, stat.S_IREAD)

        fs.delete_file(str(target))

        assert not target.exists()

    def test_write_bytes_creates_parent(self, fs, tmp_path):
        target = tmp_path / "nested" / "deep" / "file.bin"

        fs.write_bytes(str(target), b"\x00\x01")

        assert fs.read_bytes(str(target)) == b"\x00\x01"

    def test_iter_chunks(self, fs, tmp_path):
        target = tmp_path / "data.bin"
        target.write_bytes(b"a" * 10)

        chunks = list(fs.iter_chunks(str(target), chunk_size=4))

        assert chunks == [b"aaaa", b"aaaa", b"aa"]


class TestDirectoryOperations:
    """Test suite for directory primitives and enumeration."""

    @pytest.fixture
    def fs(self):
        return FileSystem()

    @pytest.fixture
    def tree(self, tmp_path):
        root = tmp_path / "root"
        (root / "a" / "b").mkdir(parents=True)
        (root / "c").mkdir()
        (root / "top.txt").write_text("top")
        (root / "a" / "one.txt").write_text("1")
        (root / "a" / "b" / "two.txt").write_text("2")
        return root

    def test_list_all_files(self, fs, tree):
        files = fs.list_all_files(str(tree))

        assert files == {
            str(tree / "top.txt"),
            str(tree / "a" / "one.txt"),
            str(tree / "a" / "b" / "two.txt"),
        }

    def test_list_all_folders_excludes_root(self, fs, tree):
        folders = fs.list_all_folders(str(tree))

        assert folders == {str(tree / "a"), str(tree / "a" / "b"), str(tree / "c")}

    def test_listing_missing_root_is_empty(self, fs, tmp_path):
        assert fs.list_all_files(str(tmp_path / "missing")) == set()
        assert fs.list_all_folders(str(tmp_path / "missing")) == set()

    def test_immediate_children(self, fs, tree):
        assert fs.list_files(str(tree)) == [str(tree / "top.txt")]
        assert sorted(fs.list_subdirectories(str(tree))) == [str(tree / "a"), str(tree / "c")]

    def test_delete_directory_non_recursive_requires_empty(self, fs, tree):
        with pytest.raises(OSError):
            fs.delete_directory(str(tree / "a"))

        fs.delete_directory(str(tree / "c"))
        assert not (tree / "c").exists()

    def test_delete_directory_recursive(self, fs, tree):
        fs.delete_directory(str(tree / "a"), recursive=True)

        assert not (tree / "a").exists()

    def test_move_directory(self, fs, tree):
        fs.move_directory(str(tree / "a"), str(tree / "renamed"))

        assert (tree / "renamed" / "b" / "two.txt").read_text() == "2"
        assert not (tree / "a").exists()

    def test_stat_directory_missing_raises(self, fs, tmp_path):
        with pytest.raises(FileNotFoundError):
            fs.stat_directory(str(tmp_path / "missing"))

    def test_stat_file(self, fs, tree):
        result = fs.stat_file(str(tree / "top.txt"))

        assert result.size == 3
        assert result.creation_time_utc.tzinfo is not None
        assert result.last_write_time_utc.tzinfo is not None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
