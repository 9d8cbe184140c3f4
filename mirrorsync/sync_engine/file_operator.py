"""
File Operator

Validated, retrying copy/move/delete for single files.

Author: mirrorsync Project
License: MIT
"""

import os
from typing import Optional

from ..utils.logger import get_logger
from ..utils.file_system import FileSystem
from ..config.schema import RetryConfig
from .file_comparer import FileComparer
from .operator_base import FileSystemOperatorBase

logger = get_logger(__name__)


class FileOperator(FileSystemOperatorBase):
    """
    File-level operations for the synchronizers.

    Features:
    - Path validation and source existence checks
    - Destination directory auto-creation
    - Skips overwriting a destination that is already identical
    - Idempotent delete
    """

    def __init__(
        self,
        file_system: Optional[FileSystem] = None,
        file_comparer: Optional[FileComparer] = None,
        retry_config: Optional[RetryConfig] = None
    ):
        super().__init__(file_system, retry_config)
        self.file_comparer = file_comparer or FileComparer(self.file_system)

    def copy(self, source: str, destination: str, overwrite: bool = False) -> bool:
        """
        Copy a file.

        Args:
            source: Existing source file
            destination: Target path
            overwrite: Replace an existing destination

        Returns:
            True if bytes were copied, False if an identical destination was kept

        Raises:
            ValueError: Empty path
            FileNotFoundError: Source missing
            FileExistsError: Destination exists and overwrite is False
        """
        self._validate(source, destination, "copy")
        self._ensure_parent_directory(destination)

        if overwrite and self.file_system.file_exists(destination):
            if self.file_comparer.are_identical(source, destination):
                logger.info(f"Skipping unchanged file: {destination}")
                return False

        self._with_retry(
            lambda: self.file_system.copy_file(source, destination, overwrite),
            f"Copy file from {source} to {destination}"
        )
        return True

    def move(self, source: str, destination: str, overwrite: bool = False) -> None:
        """
        Move or rename a file.

        Args:
            source: Existing source file
            destination: Target path
            overwrite: Delete an existing destination first
        """
        self._validate(source, destination, "move")
        self._ensure_parent_directory(destination)

        if overwrite and self.file_system.file_exists(destination):
            self.delete(destination)

        self._with_retry(
            lambda: self.file_system.move_file(source, destination),
            f"Move file from {source} to {destination}"
        )

    def delete(self, path: str) -> bool:
        """
        Delete a file. A missing file is not an error.

        Returns:
            True if a file was removed
        """
        self._validate_path(path, "delete")

        if not self.file_system.file_exists(path):
            return False

        self._with_retry(
            lambda: self.file_system.delete_file(path),
            f"Delete file {path}"
        )
        return True

    def rename(self, path: str, new_name: str, overwrite: bool = False) -> str:
        """
        Rename a file within its folder.

        Returns:
            The new path
        """
        self._validate_path(path, "rename")
        if not new_name or not new_name.strip():
            raise ValueError("rename: New name cannot be null or empty")

        new_path = os.path.join(os.path.dirname(path), new_name)
        self.move(path, new_path, overwrite)
        return new_path

    def _validate(self, source: str, destination: str, operation: str) -> None:
        self._validate_paths(source, destination, operation)
        if not self.file_system.file_exists(source):
            raise FileNotFoundError(f"Source file not found: {source}")
