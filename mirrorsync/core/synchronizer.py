"""
Synchronizer

Runs one reconciliation pass: folders first so that the directory
structure exists, then files, then logs a single summary line.

Author: mirrorsync Project
License: MIT
"""

import os
import time
from typing import Optional

from ..utils.logger import get_logger
from ..utils.file_system import FileSystem
from ..config.schema import RetryConfig
from ..sync_engine.file_comparer import FileComparer
from ..sync_engine.match_strategy import ContentBasedMatchStrategy
from ..sync_engine.file_operator import FileOperator
from ..sync_engine.folder_operator import FolderOperator
from .file_synchronizer import FileSynchronizer
from .folder_synchronizer import FolderSynchronizer
from .statistics import SyncStatistics

logger = get_logger(__name__)


class Synchronizer:
    """
    One-way mirror of a source tree into a destination tree.

    Holds no state between calls; every call re-reads both trees.
    """

    def __init__(
        self,
        folder_synchronizer: FolderSynchronizer,
        file_synchronizer: FileSynchronizer,
        file_system: Optional[FileSystem] = None
    ):
        if folder_synchronizer is None or file_synchronizer is None:
            raise ValueError("Synchronizer requires both a folder and a file synchronizer")

        self.folder_synchronizer = folder_synchronizer
        self.file_synchronizer = file_synchronizer
        self.file_system = file_system or FileSystem()

    def synchronize(self, source: str, destination: str) -> SyncStatistics:
        """
        Mirror source into destination.

        Args:
            source: Source directory (must exist)
            destination: Destination directory (created if missing)

        Returns:
            Statistics of this pass

        Raises:
            ValueError: Empty paths, or destination inside source (or vice versa)
            FileNotFoundError: Source directory does not exist
        """
        if not source or not destination:
            raise ValueError("Source and destination paths are required")

        source = os.path.abspath(source)
        destination = os.path.abspath(destination)
        self._validate_roots(source, destination)

        logger.info(f"Starting synchronization from {source} to {destination}")
        started = time.monotonic()
        stats = SyncStatistics()

        if not self.file_system.directory_exists(destination):
            logger.info(f"Creating destination directory: {destination}")
            self.file_system.create_directory(destination)

        self.folder_synchronizer.synchronize(source, destination, stats)
        self.file_synchronizer.synchronize(source, destination, stats)

        logger.info(f"Synchronization summary: {stats.summary()}")
        logger.info(f"Synchronization completed in {time.monotonic() - started:.2f}s")
        return stats

    def _validate_roots(self, source: str, destination: str) -> None:
        if not self.file_system.directory_exists(source):
            raise FileNotFoundError(f"Source directory does not exist: {source}")

        common = os.path.commonpath([os.path.normcase(source), os.path.normcase(destination)])
        if common in (os.path.normcase(source), os.path.normcase(destination)):
            raise ValueError(f"Source and destination must not contain each other: {source}, {destination}")


def create_synchronizer(
    retry_config: Optional[RetryConfig] = None,
    progress_interval: int = 100,
    file_system: Optional[FileSystem] = None
) -> Synchronizer:
    """
    Wire up a Synchronizer with its default collaborators.

    Args:
        retry_config: Retry policy for filesystem operations
        progress_interval: Log file-sync progress every N files
        file_system: Filesystem implementation (real filesystem by default)

    Returns:
        Ready-to-use Synchronizer
    """
    file_system = file_system or FileSystem()
    retry_config = retry_config or RetryConfig()

    comparer = FileComparer(file_system)
    match_strategy = ContentBasedMatchStrategy(file_system, comparer)
    file_operator = FileOperator(file_system, comparer, retry_config)
    folder_operator = FolderOperator(file_system, file_operator, retry_config)

    return Synchronizer(
        folder_synchronizer=FolderSynchronizer(file_system, folder_operator, match_strategy),
        file_synchronizer=FileSynchronizer(file_system, file_operator, match_strategy, progress_interval),
        file_system=file_system
    )
