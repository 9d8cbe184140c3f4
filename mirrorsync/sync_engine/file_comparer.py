"""
File Comparer

Decides whether two files hold identical content, cheapest check first:
path, existence, size, last-write time, then an MD5 digest for small files
or a chunked byte comparison for large ones.

Author: mirrorsync Project
License: MIT
"""

import hashlib
import os
from itertools import zip_longest
from typing import Optional

from ..utils.logger import get_logger
from ..utils.file_system import FileSystem

logger = get_logger(__name__)


class FileComparer:
    """
    Content comparison between two files.

    Equal sizes plus equal last-write timestamps are trusted as equal
    content. This holds because every copy made through the FileSystem
    carries the source timestamp across.
    """

    HASH_ALGORITHM = 'md5'
    HASH_SIZE_THRESHOLD = 1024 * 1024  # 1 MiB
    CHUNK_SIZE = 8192

    def __init__(self, file_system: Optional[FileSystem] = None):
        """
        Initialize file comparer.

        Args:
            file_system: Filesystem used for metadata and content reads
        """
        self.file_system = file_system or FileSystem()

    def are_identical(self, first: str, second: str) -> bool:
        """
        Check whether two files are identical. Never raises.

        Any error while comparing is logged and reported as "not identical",
        which steers callers toward re-copying rather than trusting a file.
        """
        try:
            return self.check_identical(first, second)
        except Exception as e:
            logger.error(f"Error comparing files {first} and {second}: {e}")
            return False

    def check_identical(self, first: str, second: str) -> bool:
        """
        Same as are_identical, but lets I/O errors propagate.

        Callers that need to tell "different" apart from "could not tell"
        use this variant.
        """
        if self._same_path(first, second):
            return True

        if not self.file_system.file_exists(first) or not self.file_system.file_exists(second):
            return False

        first_stat = self.file_system.stat_file(first)
        second_stat = self.file_system.stat_file(second)

        if first_stat.size != second_stat.size:
            return False

        if first_stat.last_write_time_ns == second_stat.last_write_time_ns:
            return True

        if first_stat.size < self.HASH_SIZE_THRESHOLD:
            return self.hash_file(first) == self.hash_file(second)

        return self._compare_contents(first, second)

    def hash_file(self, path: str) -> str:
        """
        Calculate the hex digest of a file.

        Args:
            path: Path to the file

        Returns:
            Lowercase hexadecimal digest
        """
        hasher = hashlib.new(self.HASH_ALGORITHM)

        try:
            for chunk in self.file_system.iter_chunks(path, self.CHUNK_SIZE):
                hasher.update(chunk)
        except Exception as e:
            logger.error(f"Error calculating hash for {path}: {e}")
            raise

        return hasher.hexdigest()

    def _compare_contents(self, first: str, second: str) -> bool:
        """Byte-for-byte comparison in fixed-size chunks, stopping at the first difference."""
        first_chunks = self.file_system.iter_chunks(first, self.CHUNK_SIZE)
        second_chunks = self.file_system.iter_chunks(second, self.CHUNK_SIZE)

        for first_chunk, second_chunk in zip_longest(first_chunks, second_chunks):
            if first_chunk != second_chunk:
                return False

        return True

    @staticmethod
    def _same_path(first: str, second: str) -> bool:
        return os.path.normcase(os.path.abspath(first)) == os.path.normcase(os.path.abspath(second))
