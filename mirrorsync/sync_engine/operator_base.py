"""
Filesystem Operator Base

Shared validation and retry handling for the file and folder operators.

Author: mirrorsync Project
License: MIT
"""

import errno
import os
import time
from typing import Callable, Optional, TypeVar

from ..utils.logger import get_logger
from ..utils.file_system import FileSystem
from ..config.schema import RetryConfig

logger = get_logger(__name__)

T = TypeVar("T")


class DirectoryNotEmptyError(OSError):
    """Non-recursive delete of a folder that still has content."""

    def __init__(self, path: str):
        super().__init__(errno.ENOTEMPTY, "Directory is not empty", path)


# Permanent conditions: retrying cannot change the outcome
PERMANENT_ERRORS = (
    FileNotFoundError,
    FileExistsError,
    NotADirectoryError,
    IsADirectoryError,
    DirectoryNotEmptyError,
)


def is_transient_error(error: BaseException) -> bool:
    """True for I/O and permission errors worth retrying."""
    if not isinstance(error, OSError) or isinstance(error, PERMANENT_ERRORS):
        return False
    return error.errno not in (errno.ENOENT, errno.EEXIST, errno.ENOTEMPTY)


class FileSystemOperatorBase:
    """
    Base class for operators that mutate the filesystem.

    Wraps each mutating call in a fixed-delay retry loop. Only transient
    errors are retried; everything else propagates on the first attempt.
    """

    def __init__(self, file_system: Optional[FileSystem] = None, retry_config: Optional[RetryConfig] = None):
        """
        Initialize operator.

        Args:
            file_system: Filesystem to operate on
            retry_config: Retry policy (defaults to 3 attempts, 1 second apart)
        """
        self.file_system = file_system or FileSystem()
        self.retry_config = retry_config or RetryConfig()

    def _with_retry(self, action: Callable[[], T], description: str) -> T:
        """
        Run action, retrying transient failures.

        Args:
            action: Zero-argument callable performing the operation
            description: Human readable operation for log messages

        Returns:
            Whatever action returns
        """
        retry_count = self.retry_config.retry_count
        attempt = 0

        while True:
            attempt += 1
            try:
                return action()
            except OSError as e:
                if not is_transient_error(e):
                    raise
                if attempt >= retry_count:
                    logger.error(f"Failed after {attempt} attempts for {description}: {e}")
                    raise
                logger.warning(f"Retry {attempt}/{retry_count} for {description}: {e}")
                time.sleep(self.retry_config.retry_delay)

    @staticmethod
    def _validate_path(path: str, operation: str) -> None:
        if not path or not str(path).strip():
            raise ValueError(f"{operation}: Path cannot be null or empty")

    @staticmethod
    def _validate_paths(source: str, destination: str, operation: str) -> None:
        if not source or not str(source).strip() or not destination or not str(destination).strip():
            raise ValueError(f"{operation}: Source or destination path cannot be null or empty")

    def create_directory(self, path: str) -> bool:
        """
        Create a directory and any missing parents.

        Returns:
            True if the directory did not exist before
        """
        self._validate_path(path, "create directory")
        if self.file_system.directory_exists(path):
            return False

        self._with_retry(
            lambda: self.file_system.create_directory(path),
            f"Create directory {path}"
        )
        return True

    def _ensure_parent_directory(self, path: str) -> None:
        parent = os.path.dirname(path)
        if parent:
            self.create_directory(parent)
