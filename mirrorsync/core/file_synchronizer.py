"""
File Synchronizer

Reconciles the file layer of two trees. Destination files missing from the
expected spot are first searched for among same-size destination files that
nobody has claimed yet; a content match is moved into place, otherwise the
source file is copied fresh. Unclaimed destination files are deleted last.

Author: mirrorsync Project
License: MIT
"""

import os
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..utils.logger import get_logger
from ..utils.file_system import FileSystem
from ..sync_engine.file_operator import FileOperator
from ..sync_engine.match_strategy import ContentBasedMatchStrategy, MatchOutcome
from .exceptions import SourceChangedError
from .statistics import SyncStatistics

logger = get_logger(__name__)


@dataclass
class FileReconciliationSession:
    """
    Bookkeeping owned by one file-sync pass.

    Attributes:
        source_root: Source tree root
        destination_root: Destination tree root
        destination_files: Destination snapshot taken before any mutation
        candidates_by_size: Unclaimed destination files keyed by size (size > 0 only)
        processed: Destination paths accounted for during this pass
    """
    source_root: str
    destination_root: str
    destination_files: Set[str]
    candidates_by_size: Dict[int, List[str]] = field(default_factory=lambda: defaultdict(list))
    processed: Set[str] = field(default_factory=set)

    def claim(self, dest_file: str, size: Optional[int] = None) -> None:
        """Mark a destination file as accounted for and withdraw it as a move candidate."""
        self.processed.add(dest_file)
        if size is not None and dest_file in self.candidates_by_size.get(size, ()):
            self.candidates_by_size[size].remove(dest_file)

    def unclaimed(self) -> List[str]:
        return [path for path in self.destination_files if path not in self.processed]


class FileSynchronizer:
    """
    File-level reconciliation between a source and a destination tree.
    """

    def __init__(
        self,
        file_system: FileSystem,
        file_operator: FileOperator,
        match_strategy: ContentBasedMatchStrategy,
        progress_interval: int = 100
    ):
        """
        Initialize file synchronizer.

        Args:
            file_system: Filesystem for enumeration and metadata
            file_operator: Operator used for copy/move/delete
            match_strategy: Strategy deciding whether a stray destination file is a moved source file
            progress_interval: Log progress every N source files
        """
        self.file_system = file_system
        self.file_operator = file_operator
        self.match_strategy = match_strategy
        self.progress_interval = progress_interval

    def synchronize(self, source: str, destination: str, stats: SyncStatistics) -> None:
        """
        Make the files under destination mirror the files under source.

        Args:
            source: Source tree root
            destination: Destination tree root
            stats: Counters to update

        Raises:
            SourceChangedError: A source file vanished mid-pass
            OSError: Unrecoverable I/O failure for a source file
        """
        source_files = self.file_system.list_all_files(source)
        session = FileReconciliationSession(
            source_root=source,
            destination_root=destination,
            destination_files=self.file_system.list_all_files(destination)
        )
        self._index_candidates(session)

        total = len(source_files)
        processed_count = 0

        for source_file in source_files:
            self._process_source_file(source_file, session, stats)

            processed_count += 1
            if processed_count % self.progress_interval == 0 or processed_count == total:
                logger.info(
                    f"Processed {processed_count}/{total} files "
                    f"({int(processed_count * 100 / total)}%)"
                )

        self._delete_extra_files(session, stats)

    def _index_candidates(self, session: FileReconciliationSession) -> None:
        """Bucket destination files by size. Empty files carry no signal and are never move candidates."""
        for dest_file in session.destination_files:
            size = self.file_system.stat_file(dest_file).size
            if size > 0:
                session.candidates_by_size[size].append(dest_file)

    def _process_source_file(
        self,
        source_file: str,
        session: FileReconciliationSession,
        stats: SyncStatistics
    ) -> None:
        dest_file = os.path.join(session.destination_root, os.path.relpath(source_file, session.source_root))

        try:
            self._ensure_destination_directory(dest_file)

            if not self.file_system.file_exists(dest_file):
                self._handle_missing_destination_file(source_file, dest_file, session, stats)
            else:
                session.claim(dest_file)
                self._update_file_if_modified(source_file, dest_file, stats)

        except FileNotFoundError as e:
            if not self.file_system.file_exists(source_file):
                logger.error(f"Source file not found: {source_file}")
                raise SourceChangedError(source_file) from e
            logger.error(f"Error handling file {source_file} -> {dest_file}: {e}")
            raise
        except OSError as e:
            logger.error(f"I/O error handling file {source_file} -> {dest_file}: {e}")
            raise

    def _ensure_destination_directory(self, dest_file: str) -> None:
        dest_dir = os.path.dirname(dest_file)
        if dest_dir and self.file_operator.create_directory(dest_dir):
            logger.info(f"Created directory: {dest_dir}")

    def _handle_missing_destination_file(
        self,
        source_file: str,
        dest_file: str,
        session: FileReconciliationSession,
        stats: SyncStatistics
    ) -> None:
        size = self.file_system.stat_file(source_file).size

        for candidate in list(session.candidates_by_size.get(size, ())):
            if candidate in session.processed:
                continue

            outcome = self.match_strategy.match_file(
                source_file, candidate, session.source_root, session.destination_root
            )
            if outcome is MatchOutcome.INDETERMINATE:
                logger.warning(f"Could not compare {source_file} and {candidate}. Skipping this potential match.")
                continue
            if outcome is not MatchOutcome.MATCH:
                continue

            logger.info(f"Moving/renaming FILE: {candidate} to {dest_file}")
            try:
                self.file_operator.move(candidate, dest_file)
            except Exception as e:
                logger.warning(f"Failed to move file from {candidate} to {dest_file}: {e}. Falling back to copy.")
                break

            session.claim(candidate, size)
            session.processed.add(dest_file)
            stats.files_moved += 1
            return

        logger.info(f"Copying new file: {source_file} to {dest_file}")
        self.file_operator.copy(source_file, dest_file)
        session.processed.add(dest_file)
        stats.changed_count += 1

    def _update_file_if_modified(self, source_file: str, dest_file: str, stats: SyncStatistics) -> None:
        source_stat = self.file_system.stat_file(source_file)
        dest_stat = self.file_system.stat_file(dest_file)

        if source_stat.size == dest_stat.size and source_stat.last_write_time_ns == dest_stat.last_write_time_ns:
            return

        if self.file_operator.copy(source_file, dest_file, overwrite=True):
            logger.info(f"Updated modified file: {dest_file}")
            stats.changed_count += 1

    def _delete_extra_files(self, session: FileReconciliationSession, stats: SyncStatistics) -> None:
        for dest_file in session.unclaimed():
            logger.info(f"Deleting extra FILE: {dest_file}")
            if self.file_operator.delete(dest_file):
                stats.deleted_files += 1
