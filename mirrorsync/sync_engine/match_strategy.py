"""
Match Strategy

Decides whether a source item and a differently located destination item
are the same logical file or folder, in which case the destination item is
moved into place instead of copying the source and deleting the stray.

Author: mirrorsync Project
License: MIT
"""

import os
from collections import Counter
from datetime import timedelta
from enum import Enum
from typing import Optional

from ..utils.logger import get_logger
from ..utils.file_system import FileSystem
from .file_comparer import FileComparer

logger = get_logger(__name__)


def _normalize(path: str) -> str:
    return os.path.normcase(os.path.normpath(path))


class MatchOutcome(Enum):
    """Result of a match check."""
    MATCH = "match"
    NO_MATCH = "no_match"
    INDETERMINATE = "indeterminate"  # the check itself failed

    @property
    def is_match(self) -> bool:
        return self is MatchOutcome.MATCH


class ContentBasedMatchStrategy:
    """
    Heuristic matching of relocated files and folders.

    Files match when the comparer reports identical content. Folders match
    on a mix of creation time, file count and file-size overlap. The size
    overlap can produce false positives when many files share a size; a
    wrongly matched folder is still corrected file-by-file afterwards.
    """

    CREATION_TIME_TOLERANCE = timedelta(minutes=5)
    FILE_COUNT_TOLERANCE = 2

    def __init__(
        self,
        file_system: Optional[FileSystem] = None,
        file_comparer: Optional[FileComparer] = None
    ):
        """
        Initialize match strategy.

        Args:
            file_system: Filesystem used for existence and metadata queries
            file_comparer: Comparer used for file content equality
        """
        self.file_system = file_system or FileSystem()
        self.file_comparer = file_comparer or FileComparer(self.file_system)

    def match_file(
        self,
        source_file: str,
        dest_file: str,
        source_root: str,
        dest_root: str
    ) -> MatchOutcome:
        """
        Check whether dest_file is a relocated copy of source_file.

        Args:
            source_file: File under source_root with no counterpart in dest_root
            dest_file: Candidate file under dest_root
            source_root: Source tree root
            dest_root: Destination tree root

        Returns:
            MatchOutcome
        """
        try:
            if not self.file_system.file_exists(source_file) or not self.file_system.file_exists(dest_file):
                return MatchOutcome.NO_MATCH

            if self._belongs_elsewhere(source_file, dest_file, source_root, dest_root, is_file=True):
                return MatchOutcome.NO_MATCH

            if self.file_comparer.check_identical(source_file, dest_file):
                return MatchOutcome.MATCH
            return MatchOutcome.NO_MATCH

        except Exception as e:
            logger.warning(f"Error during file matching of {source_file} and {dest_file}: {e}")
            return MatchOutcome.INDETERMINATE

    def match_folder(
        self,
        source_folder: str,
        dest_folder: str,
        source_root: str,
        dest_root: str
    ) -> MatchOutcome:
        """
        Check whether dest_folder is a renamed or moved copy of source_folder.

        Only immediate files are considered, not the whole subtree.

        Args:
            source_folder: Folder under source_root with no counterpart in dest_root
            dest_folder: Candidate folder under dest_root
            source_root: Source tree root
            dest_root: Destination tree root

        Returns:
            MatchOutcome
        """
        try:
            if not self.file_system.directory_exists(source_folder) or not self.file_system.directory_exists(dest_folder):
                return MatchOutcome.NO_MATCH

            if self._belongs_elsewhere(source_folder, dest_folder, source_root, dest_root, is_file=False):
                return MatchOutcome.NO_MATCH

            source_created = self.file_system.stat_directory(source_folder).creation_time_utc
            dest_created = self.file_system.stat_directory(dest_folder).creation_time_utc
            creation_time_match = abs(source_created - dest_created) < self.CREATION_TIME_TOLERANCE

            source_files = self.file_system.list_files(source_folder)
            dest_files = self.file_system.list_files(dest_folder)

            if len(source_files) != len(dest_files):
                if creation_time_match and abs(len(source_files) - len(dest_files)) <= self.FILE_COUNT_TOLERANCE:
                    logger.debug(
                        f"Folders matched by creation time despite file count difference: "
                        f"{source_folder} and {dest_folder}"
                    )
                    return MatchOutcome.MATCH
                return MatchOutcome.NO_MATCH

            if not source_files:
                return MatchOutcome.MATCH if creation_time_match else MatchOutcome.NO_MATCH

            source_sizes = Counter(self.file_system.stat_file(f).size for f in source_files)
            dest_sizes = Counter(self.file_system.stat_file(f).size for f in dest_files)
            matched = sum((source_sizes & dest_sizes).values())

            size_match = matched >= max(1, len(source_files) // 2)
            if size_match or (creation_time_match and matched > 0):
                logger.debug(
                    f"Folders matched: {source_folder} and {dest_folder} "
                    f"({matched}/{len(source_files)} files by size, creation time match={creation_time_match})"
                )
                return MatchOutcome.MATCH

            return MatchOutcome.NO_MATCH

        except Exception as e:
            logger.error(f"Error during folder matching of {source_folder} and {dest_folder}: {e}")
            return MatchOutcome.INDETERMINATE

    def is_file_match(self, source_file: str, dest_file: str, source_root: str, dest_root: str) -> bool:
        return self.match_file(source_file, dest_file, source_root, dest_root).is_match

    def is_folder_match(self, source_folder: str, dest_folder: str, source_root: str, dest_root: str) -> bool:
        return self.match_folder(source_folder, dest_folder, source_root, dest_root).is_match

    def _belongs_elsewhere(
        self,
        source_item: str,
        dest_item: str,
        source_root: str,
        dest_root: str,
        is_file: bool
    ) -> bool:
        """
        True when the candidate already has its own counterpart in the source tree.

        Such a candidate is in its rightful place and must not be moved away.
        """
        expected_source = os.path.join(source_root, os.path.relpath(dest_item, dest_root))
        exists = (
            self.file_system.file_exists(expected_source) if is_file
            else self.file_system.directory_exists(expected_source)
        )
        return exists and _normalize(expected_source) != _normalize(source_item)
