"""
Folder Operator

Validated, retrying copy/move/delete/rename for whole folders.

Author: mirrorsync Project
License: MIT
"""

import os
from typing import Optional

from ..utils.logger import get_logger
from ..utils.file_system import FileSystem
from ..config.schema import RetryConfig
from .file_operator import FileOperator
from .operator_base import FileSystemOperatorBase, DirectoryNotEmptyError

logger = get_logger(__name__)


class FolderOperator(FileSystemOperatorBase):
    """
    Folder-level operations for the synchronizers.

    Folder copies go through the FileOperator file by file so that each file
    gets the same validation, timestamp preservation and retry handling.
    """

    def __init__(
        self,
        file_system: Optional[FileSystem] = None,
        file_operator: Optional[FileOperator] = None,
        retry_config: Optional[RetryConfig] = None
    ):
        super().__init__(file_system, retry_config)
        self.file_operator = file_operator or FileOperator(self.file_system, retry_config=self.retry_config)

    def copy(self, source: str, destination: str, overwrite: bool = False, recursive: bool = True) -> int:
        """
        Copy a folder.

        Args:
            source: Existing source folder
            destination: Target folder path
            overwrite: Wipe an existing destination folder first
            recursive: Also copy subfolders

        Returns:
            Number of files copied
        """
        self._validate(source, destination, "copy")

        if self.file_system.directory_exists(destination) and overwrite:
            self.delete(destination, recursive=True)

        self._with_retry(
            lambda: self.file_system.create_directory(destination),
            f"Create folder {destination}"
        )

        copied = 0
        for file_path in self.file_system.list_files(source):
            target = os.path.join(destination, os.path.basename(file_path))
            if self.file_operator.copy(file_path, target, overwrite):
                copied += 1

        if recursive:
            for subfolder in self.file_system.list_subdirectories(source):
                target = os.path.join(destination, os.path.basename(subfolder))
                copied += self.copy(subfolder, target, overwrite, recursive)

        self.file_system.copy_directory_metadata(source, destination)
        return copied

    def delete(self, path: str, recursive: bool = True) -> bool:
        """
        Delete a folder. A missing folder is not an error.

        Raises:
            DirectoryNotEmptyError: recursive is False and the folder has content

        Returns:
            True if a folder was removed
        """
        self._validate_path(path, "delete")

        if not self.file_system.directory_exists(path):
            return False

        if not recursive and (self.file_system.list_files(path) or self.file_system.list_subdirectories(path)):
            raise DirectoryNotEmptyError(path)

        self._with_retry(
            lambda: self.file_system.delete_directory(path, recursive),
            f"Delete folder {path}{' recursively' if recursive else ''}"
        )
        return True

    def move(self, source: str, destination: str, overwrite: bool = False) -> None:
        """
        Move a folder and its whole subtree, creating missing parents of destination.
        """
        self._validate(source, destination, "move")
        self._ensure_parent_directory(destination)

        if overwrite and self.file_system.directory_exists(destination):
            self.delete(destination, recursive=True)

        self._with_retry(
            lambda: self.file_system.move_directory(source, destination),
            f"Move folder from {source} to {destination}"
        )

    def rename(self, path: str, new_name: str, overwrite: bool = False) -> str:
        """
        Rename a folder. new_name may be a bare name or an absolute path.

        Returns:
            The new path
        """
        self._validate_path(path, "rename")
        if not new_name or not new_name.strip():
            raise ValueError("rename: New name cannot be null or empty")
        if not self.file_system.directory_exists(path):
            raise FileNotFoundError(f"Folder not found: {path}")

        new_path = new_name if os.path.isabs(new_name) else os.path.join(os.path.dirname(path), new_name)

        if self.file_system.directory_exists(new_path) and not overwrite:
            raise FileExistsError(f"Folder already exists at {new_path}")

        self.move(path, new_path, overwrite)
        return new_path

    def _validate(self, source: str, destination: str, operation: str) -> None:
        self._validate_paths(source, destination, operation)
        if not self.file_system.directory_exists(source):
            raise FileNotFoundError(f"Source folder not found: {source}")
        if self.file_system.file_exists(destination):
            raise FileExistsError(f"A file already exists at folder destination: {destination}")
