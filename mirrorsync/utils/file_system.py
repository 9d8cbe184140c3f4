"""
Filesystem Abstraction

Thin wrapper around os/shutil exposing the primitives the sync engine needs:
existence checks, byte access, copy/move/delete for files and folders,
metadata queries and recursive enumeration.

Copies carry the source's timestamps through. The file comparer trusts
equal last-write times as equal content, so this is not optional.

Author: mirrorsync Project
License: MIT
"""

import os
import shutil
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator, List, Set


def _timestamp_to_utc(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _creation_time(st: os.stat_result) -> float:
    # st_birthtime is missing on most Linux builds; st_ctime is the closest
    # available value there (and the creation time on older Windows builds).
    return getattr(st, "st_birthtime", st.st_ctime)


@dataclass(frozen=True)
class FileStat:
    """Metadata of a single file."""
    size: int
    last_write_time_ns: int
    creation_time_utc: datetime

    @property
    def last_write_time_utc(self) -> datetime:
        return _timestamp_to_utc(self.last_write_time_ns / 1_000_000_000)


@dataclass(frozen=True)
class DirectoryStat:
    """Metadata of a single directory."""
    creation_time_utc: datetime


class FileSystem:
    """
    Local filesystem implementation.

    Errors:
    - missing source: FileNotFoundError
    - existing destination without overwrite: FileExistsError
    - anything else (locked file, permission denied): OSError
    """

    READ_CHUNK_SIZE = 8192

    # Existence

    def file_exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def directory_exists(self, path: str) -> bool:
        return os.path.isdir(path)

    # Byte access

    def read_bytes(self, path: str) -> bytes:
        with open(path, 'rb') as f:
            return f.read()

    def write_bytes(self, path: str, data: bytes) -> None:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, 'wb') as f:
            f.write(data)

    def iter_chunks(self, path: str, chunk_size: int = READ_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the file's content in fixed-size chunks."""
        with open(path, 'rb') as f:
            while chunk := f.read(chunk_size):
                yield chunk

    # Files

    def copy_file(self, source: str, destination: str, overwrite: bool = False) -> None:
        """Copy a file, preserving its timestamps."""
        if not os.path.isfile(source):
            raise FileNotFoundError(f"Source file not found: {source}")

        if os.path.exists(destination):
            if not overwrite:
                raise FileExistsError(f"Destination file already exists: {destination}")
            self._clear_read_only(destination)

        shutil.copy2(source, destination)

    def move_file(self, source: str, destination: str) -> None:
        if not os.path.isfile(source):
            raise FileNotFoundError(f"Source file not found: {source}")
        if os.path.exists(destination):
            raise FileExistsError(f"Destination file already exists: {destination}")

        os.rename(source, destination)

    def delete_file(self, path: str) -> None:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"File not found: {path}")

        self._clear_read_only(path)
        os.remove(path)

    # Directories

    def create_directory(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        if not os.path.isdir(path):
            raise FileNotFoundError(f"Directory not found: {path}")

        if recursive:
            shutil.rmtree(path)
        else:
            os.rmdir(path)

    def move_directory(self, source: str, destination: str) -> None:
        if not os.path.isdir(source):
            raise FileNotFoundError(f"Source directory not found: {source}")
        if os.path.exists(destination):
            raise FileExistsError(f"Destination directory already exists: {destination}")

        os.rename(source, destination)

    def copy_directory_metadata(self, source: str, destination: str) -> None:
        """Carry a directory's timestamps and mode bits over to another directory."""
        shutil.copystat(source, destination)

    # Listing

    def list_files(self, directory: str) -> List[str]:
        """Immediate child files of a directory."""
        with os.scandir(directory) as entries:
            return [entry.path for entry in entries if entry.is_file()]

    def list_subdirectories(self, directory: str) -> List[str]:
        """Immediate child directories of a directory."""
        with os.scandir(directory) as entries:
            return [entry.path for entry in entries if entry.is_dir(follow_symlinks=False)]

    def list_all_files(self, root: str) -> Set[str]:
        """All files under root, recursively. Empty if root does not exist."""
        files: Set[str] = set()
        if not self.directory_exists(root):
            return files

        pending = [root]
        while pending:
            current = pending.pop()
            files.update(self.list_files(current))
            pending.extend(self.list_subdirectories(current))

        return files

    def list_all_folders(self, root: str) -> Set[str]:
        """All folders under root (excluding root), recursively."""
        folders: Set[str] = set()
        if not self.directory_exists(root):
            return folders

        pending = [root]
        while pending:
            current = pending.pop()
            for subdirectory in self.list_subdirectories(current):
                folders.add(subdirectory)
                pending.append(subdirectory)

        return folders

    # Metadata

    def stat_file(self, path: str) -> FileStat:
        st = os.stat(path)
        return FileStat(
            size=st.st_size,
            last_write_time_ns=st.st_mtime_ns,
            creation_time_utc=_timestamp_to_utc(_creation_time(st))
        )

    def stat_directory(self, path: str) -> DirectoryStat:
        if not os.path.isdir(path):
            raise FileNotFoundError(f"Directory not found: {path}")
        st = os.stat(path)
        return DirectoryStat(creation_time_utc=_timestamp_to_utc(_creation_time(st)))

    # Helpers

    @staticmethod
    def _clear_read_only(path: str) -> None:
        mode = os.stat(path).st_mode
        if not mode & stat.S_IWRITE:
            os.chmod(path, mode | stat.S_IWRITE)
