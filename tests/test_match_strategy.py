"""
Unit Tests for Move/Rename Matching

Author: mirrorsync Project
License: MIT
"""

from datetime import datetime, timedelta, timezone

import pytest
from unittest.mock import Mock

from mirrorsync.sync_engine.match_strategy import ContentBasedMatchStrategy, MatchOutcome
from mirrorsync.utils.file_system import DirectoryStat, FileSystem


@pytest.fixture
def roots(tmp_path):
    source = tmp_path / "source"
    destination = tmp_path / "destination"
    source.mkdir()
    destination.mkdir()
    return source, destination


class TestFileMatching:
    """Test suite for file matching."""

    def test_identical_relocated_file_matches(self, roots):
        source, destination = roots
        (source / "new").mkdir()
        (source / "new" / "photo.jpg").write_bytes(b"pixels")
        (destination / "old").mkdir()
        (destination / "old" / "photo.jpg").write_bytes(b"pixels")

        strategy = ContentBasedMatchStrategy()
        outcome = strategy.match_file(
            str(source / "new" / "photo.jpg"), str(destination / "old" / "photo.jpg"),
            str(source), str(destination)
        )

        assert outcome is MatchOutcome.MATCH
        assert outcome.is_match

    def test_different_content_does_not_match(self, roots):
        source, destination = roots
        (source / "a.txt").write_bytes(b"aaaa")
        (destination / "b.txt").write_bytes(b"bbbb")

        strategy = ContentBasedMatchStrategy()

        assert not strategy.is_file_match(
            str(source / "a.txt"), str(destination / "b.txt"), str(source), str(destination)
        )

    def test_candidate_with_own_source_counterpart_is_not_taken(self, roots):
        """A destination file that still mirrors its own source file stays put."""
        source, destination = roots
        (source / "a.txt").write_bytes(b"same")
        (source / "b.txt").write_bytes(b"same")
        (destination / "b.txt").write_bytes(b"same")

        strategy = ContentBasedMatchStrategy()
        outcome = strategy.match_file(
            str(source / "a.txt"), str(destination / "b.txt"), str(source), str(destination)
        )

        assert outcome is MatchOutcome.NO_MATCH

    def test_missing_candidate_does_not_match(self, roots):
        source, destination = roots
        (source / "a.txt").write_bytes(b"data")

        strategy = ContentBasedMatchStrategy()
        outcome = strategy.match_file(
            str(source / "a.txt"), str(destination / "gone.txt"), str(source), str(destination)
        )

        assert outcome is MatchOutcome.NO_MATCH

    def test_comparison_failure_is_indeterminate(self, roots):
        source, destination = roots
        (source / "a.txt").write_bytes(b"data")
        (destination / "b.txt").write_bytes(b"data")

        comparer = Mock()
        comparer.check_identical.side_effect = PermissionError("locked")
        strategy = ContentBasedMatchStrategy(FileSystem(), comparer)

        outcome = strategy.match_file(
            str(source / "a.txt"), str(destination / "b.txt"), str(source), str(destination)
        )

        assert outcome is MatchOutcome.INDETERMINATE
        assert not outcome.is_match


class TestFolderMatching:
    """Test suite for folder matching."""

    def test_renamed_folder_matches(self, roots):
        source, destination = roots
        (source / "Holiday 2024").mkdir()
        (destination / "Holiday").mkdir()
        for name, data in (("a.jpg", b"1" * 10), ("b.jpg", b"2" * 20), ("c.jpg", b"3" * 30)):
            (source / "Holiday 2024" / name).write_bytes(data)
            (destination / "Holiday" / name).write_bytes(data)

        strategy = ContentBasedMatchStrategy()

        assert strategy.match_folder(
            str(source / "Holiday 2024"), str(destination / "Holiday"), str(source), str(destination)
        ) is MatchOutcome.MATCH

    def test_unrelated_folder_does_not_match(self, roots):
        source, destination = roots
        (source / "docs").mkdir()
        (destination / "music").mkdir()
        for i in range(4):
            (source / "docs" / f"{i}.txt").write_bytes(b"x" * (i + 1))
            (destination / "music" / f"{i}.mp3").write_bytes(b"y" * (100 + i))

        strategy = ContentBasedMatchStrategy()

        assert not strategy.is_folder_match(
            str(source / "docs"), str(destination / "music"), str(source), str(destination)
        )

    def test_large_file_count_difference_does_not_match(self, roots):
        source, destination = roots
        (source / "a").mkdir()
        (destination / "b").mkdir()
        (source / "a" / "only.txt").write_bytes(b"data")
        for i in range(5):
            (destination / "b" / f"{i}.txt").write_bytes(b"data")

        strategy = ContentBasedMatchStrategy()

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.NO_MATCH

    def test_candidate_with_own_source_counterpart_is_not_taken(self, roots):
        source, destination = roots
        for folder in ("a", "b"):
            (source / folder).mkdir()
            (source / folder / "f.txt").write_bytes(b"same")
        (destination / "b").mkdir()
        (destination / "b" / "f.txt").write_bytes(b"same")

        strategy = ContentBasedMatchStrategy()

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.NO_MATCH

    def test_metadata_failure_is_indeterminate(self, roots):
        source, destination = roots
        (source / "a").mkdir()
        (destination / "b").mkdir()

        fs = Mock(wraps=FileSystem())
        fs.stat_directory.side_effect = PermissionError("denied")
        strategy = ContentBasedMatchStrategy(fs)

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.INDETERMINATE


class TestFolderMatchingByCreationTime:
    """Test suite for the creation-time branches of folder matching."""

    CREATED = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def _strategy(self, source_folder, dest_folder, dest_offset):
        """Strategy whose folders report creation times dest_offset apart."""
        times = {
            str(source_folder): self.CREATED,
            str(dest_folder): self.CREATED + dest_offset,
        }
        fs = Mock(wraps=FileSystem())
        fs.stat_directory.side_effect = lambda path: DirectoryStat(creation_time_utc=times[path])
        return ContentBasedMatchStrategy(fs)

    @staticmethod
    def _fill(folder, sizes):
        folder.mkdir()
        for i, size in enumerate(sizes):
            (folder / f"{i}.bin").write_bytes(b"z" * size)

    def test_small_file_count_difference_matches_with_creation_time(self, roots):
        source, destination = roots
        self._fill(source / "a", [10])
        self._fill(destination / "b", [20, 30, 40])

        strategy = self._strategy(source / "a", destination / "b", timedelta(minutes=1))

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.MATCH

    def test_small_file_count_difference_without_creation_time(self, roots):
        source, destination = roots
        self._fill(source / "a", [10])
        self._fill(destination / "b", [20, 30, 40])

        strategy = self._strategy(source / "a", destination / "b", timedelta(hours=1))

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.NO_MATCH

    def test_empty_folders_match_on_creation_time(self, roots):
        source, destination = roots
        self._fill(source / "a", [])
        self._fill(destination / "b", [])

        strategy = self._strategy(source / "a", destination / "b", timedelta(minutes=4))

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.MATCH

    def test_empty_folders_created_apart_do_not_match(self, roots):
        source, destination = roots
        self._fill(source / "a", [])
        self._fill(destination / "b", [])

        strategy = self._strategy(source / "a", destination / "b", timedelta(minutes=10))

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.NO_MATCH

    def test_partial_size_overlap_matches_with_creation_time(self, roots):
        """One of four sizes shared is below the half threshold but enough with a creation-time match."""
        source, destination = roots
        self._fill(source / "a", [10, 11, 12, 13])
        self._fill(destination / "b", [10, 21, 22, 23])

        strategy = self._strategy(source / "a", destination / "b", timedelta(seconds=30))

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.MATCH

    def test_partial_size_overlap_without_creation_time(self, roots):
        source, destination = roots
        self._fill(source / "a", [10, 11, 12, 13])
        self._fill(destination / "b", [10, 21, 22, 23])

        strategy = self._strategy(source / "a", destination / "b", timedelta(hours=2))

        assert strategy.match_folder(
            str(source / "a"), str(destination / "b"), str(source), str(destination)
        ) is MatchOutcome.NO_MATCH


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
