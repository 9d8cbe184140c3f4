"""
Sync Statistics

Counters accumulated during a single synchronization run.

Author: mirrorsync Project
License: MIT
"""

from dataclasses import dataclass, asdict


@dataclass
class SyncStatistics:
    """Mutable counters for one reconciliation pass."""
    changed_count: int = 0            # files copied fresh or updated
    folders_changed_count: int = 0    # folders created by copying
    files_moved: int = 0              # files moved/renamed individually
    folders_moved_count: int = 0
    files_in_moved_folders: int = 0
    deleted_files: int = 0
    deleted_folders: int = 0

    @property
    def total_operations(self) -> int:
        return (
            self.changed_count + self.folders_changed_count + self.files_moved
            + self.folders_moved_count + self.deleted_files + self.deleted_folders
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for structured logging."""
        return asdict(self)

    def summary(self) -> str:
        return (
            f"{self.changed_count} files changed/added, "
            f"{self.folders_changed_count} folders added, "
            f"{self.files_moved} files moved/renamed individually, "
            f"{self.folders_moved_count} folders moved/renamed containing {self.files_in_moved_folders} files, "
            f"{self.deleted_files} files and {self.deleted_folders} folders deleted"
        )
