"""
Sync Exceptions

Author: mirrorsync Project
License: MIT
"""


class SyncError(Exception):
    """Base class for synchronization failures."""


class SourceChangedError(SyncError):
    """
    A source item vanished between the snapshot and its processing.

    The snapshot is stale, so the pass is abandoned before anything else is
    deleted. The next scheduled pass starts from a fresh snapshot.
    """

    def __init__(self, path: str):
        super().__init__(f"Source item disappeared during synchronization: {path}")
        self.path = path
