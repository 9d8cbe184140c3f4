"""
Folder Synchronizer

Reconciles the directory layer of two trees before any file is touched:
missing folders are either recognised as renamed/moved destination folders
(and moved into place with their whole subtree) or created by copying, and
destination folders without a source counterpart are deleted.

Author: mirrorsync Project
License: MIT
"""

import os
from dataclasses import dataclass, field
from typing import List, Set

from ..utils.logger import get_logger
from ..utils.file_system import FileSystem
from ..sync_engine.folder_operator import FolderOperator
from ..sync_engine.match_strategy import ContentBasedMatchStrategy, MatchOutcome
from .exceptions import SourceChangedError
from .statistics import SyncStatistics

logger = get_logger(__name__)


def _is_within(path: str, ancestor: str) -> bool:
    """True if path equals ancestor or lies below it."""
    return path == ancestor or path.startswith(ancestor.rstrip(os.sep) + os.sep)


@dataclass
class FolderReconciliationSession:
    """
    Bookkeeping owned by one folder-sync pass.

    Attributes:
        source_root: Source tree root
        destination_root: Destination tree root
        source_folders: Source snapshot
        destination_folders: Destination folders, kept current as folders move or get created
        processed: Destination folders accounted for during this pass
    """
    source_root: str
    destination_root: str
    source_folders: Set[str]
    destination_folders: Set[str]
    processed: Set[str] = field(default_factory=set)

    def destination_for(self, source_folder: str) -> str:
        return os.path.join(self.destination_root, os.path.relpath(source_folder, self.source_root))

    def source_for(self, dest_folder: str) -> str:
        return os.path.join(self.source_root, os.path.relpath(dest_folder, self.destination_root))

    def relocate(self, old_path: str, new_path: str) -> None:
        """
        Re-root every tracked path at or below old_path onto new_path.

        Later lookups must find relocated descendants at their new location,
        not at the stale pre-move path.
        """
        for path in [p for p in self.destination_folders if _is_within(p, old_path)]:
            rewritten = new_path + path[len(old_path):]

            self.destination_folders.discard(path)
            self.destination_folders.add(rewritten)

            if path in self.processed:
                self.processed.discard(path)
                self.processed.add(rewritten)

    def record_created(self, folders: List[str]) -> None:
        for folder in folders:
            self.destination_folders.add(folder)
            self.processed.add(folder)


class FolderSynchronizer:
    """
    Folder-level reconciliation between a source and a destination tree.
    """

    def __init__(
        self,
        file_system: FileSystem,
        folder_operator: FolderOperator,
        match_strategy: ContentBasedMatchStrategy
    ):
        """
        Initialize folder synchronizer.

        Args:
            file_system: Filesystem for enumeration
            folder_operator: Operator used for copy/move/delete
            match_strategy: Strategy deciding whether a destination folder is a moved source folder
        """
        self.file_system = file_system
        self.folder_operator = folder_operator
        self.match_strategy = match_strategy

    def synchronize(self, source: str, destination: str, stats: SyncStatistics) -> None:
        """
        Make the folder structure under destination mirror source.

        Args:
            source: Source tree root
            destination: Destination tree root
            stats: Counters to update
        """
        session = FolderReconciliationSession(
            source_root=source,
            destination_root=destination,
            source_folders=self.file_system.list_all_folders(source),
            destination_folders=self.file_system.list_all_folders(destination)
        )

        # Parents sort before their children
        for source_folder in sorted(session.source_folders):
            dest_equivalent = session.destination_for(source_folder)

            if dest_equivalent in session.destination_folders:
                session.processed.add(dest_equivalent)
            else:
                self._handle_missing_destination_folder(source_folder, dest_equivalent, session, stats)

        self._delete_extra_folders(session, stats)

    def _handle_missing_destination_folder(
        self,
        source_folder: str,
        dest_equivalent: str,
        session: FolderReconciliationSession,
        stats: SyncStatistics
    ) -> None:
        if self.file_system.file_exists(dest_equivalent):
            # Source turned a file into a folder; the stale file blocks the path
            logger.info(f"Deleting FILE in the way of folder: {dest_equivalent}")
            if self.folder_operator.file_operator.delete(dest_equivalent):
                stats.deleted_files += 1

        try:
            source_files = self.file_system.list_files(source_folder)
            has_content = bool(source_files) or bool(self.file_system.list_subdirectories(source_folder))
        except FileNotFoundError as e:
            logger.error(f"Source folder not found: {source_folder}")
            raise SourceChangedError(source_folder) from e

        if has_content and self._try_move_matching_folder(source_folder, dest_equivalent, session):
            stats.folders_moved_count += 1
            stats.files_in_moved_folders += len(source_files)
            return

        self._copy_folder(source_folder, dest_equivalent, session, stats)

    def _try_move_matching_folder(
        self,
        source_folder: str,
        dest_equivalent: str,
        session: FolderReconciliationSession
    ) -> bool:
        """Search unclaimed destination folders for a match and move it into place."""
        for candidate in sorted(session.destination_folders):
            if candidate in session.processed or _is_within(dest_equivalent, candidate):
                continue

            outcome = self.match_strategy.match_folder(
                source_folder, candidate, session.source_root, session.destination_root
            )
            if outcome is MatchOutcome.INDETERMINATE:
                logger.warning(f"Could not compare folders {source_folder} and {candidate}. Skipping this potential match.")
                continue
            if outcome is not MatchOutcome.MATCH:
                continue

            logger.info(f"Moving/renaming FOLDER: {candidate} to {dest_equivalent}")
            try:
                self.folder_operator.move(candidate, dest_equivalent)
            except Exception as e:
                logger.warning(f"Failed to move folder {candidate}: {e}. Creating new folder instead.")
                return False

            session.relocate(candidate, dest_equivalent)
            session.processed.add(dest_equivalent)
            return True

        return False

    def _copy_folder(
        self,
        source_folder: str,
        dest_equivalent: str,
        session: FolderReconciliationSession,
        stats: SyncStatistics
    ) -> None:
        try:
            logger.info(f"Copying FOLDER: {source_folder} to {dest_equivalent}")
            copied_files = self.folder_operator.copy(source_folder, dest_equivalent)
        except Exception as e:
            if not self.file_system.directory_exists(source_folder):
                logger.error(f"Source folder not found: {source_folder}")
                raise SourceChangedError(source_folder) from e
            logger.error(f"Error copying folder {source_folder}: {e}")
            return

        new_subfolders = sorted(self.file_system.list_all_folders(dest_equivalent))
        session.record_created([dest_equivalent] + new_subfolders)

        stats.changed_count += copied_files
        stats.folders_changed_count += 1 + len(new_subfolders)

    def _delete_extra_folders(self, session: FolderReconciliationSession, stats: SyncStatistics) -> None:
        """
        Delete destination folders without a source counterpart.

        Folders are evaluated longest path first. A folder lying inside
        another extra folder goes away with that ancestor's recursive delete
        and is not counted separately.
        """
        extra = {
            folder for folder in session.destination_folders
            if folder not in session.processed and session.source_for(folder) not in session.source_folders
        }

        for dest_folder in sorted(extra, key=len, reverse=True):
            if self._has_extra_ancestor(dest_folder, extra, session.destination_root):
                continue

            file_count = len(self.file_system.list_all_files(dest_folder))
            logger.info(f"Deleting extra FOLDER: {dest_folder} (not present in source)")
            if self.folder_operator.delete(dest_folder, recursive=True):
                stats.deleted_folders += 1
                stats.deleted_files += file_count

    @staticmethod
    def _has_extra_ancestor(folder: str, extra: Set[str], root: str) -> bool:
        parent = os.path.dirname(folder)
        while parent and parent != folder and _is_within(parent, root) and parent != root:
            if parent in extra:
                return True
            folder, parent = parent, os.path.dirname(parent)
        return False
