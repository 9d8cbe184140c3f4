"""
mirrorsync Core Module

Reconciliation passes over two directory trees and their orchestration.

Author: mirrorsync Project
License: MIT
"""

from .exceptions import SyncError, SourceChangedError
from .statistics import SyncStatistics
from .file_synchronizer import FileSynchronizer
from .folder_synchronizer import FolderSynchronizer
from .synchronizer import Synchronizer, create_synchronizer

__all__ = [
    'SyncError', 'SourceChangedError', 'SyncStatistics',
    'FileSynchronizer', 'FolderSynchronizer', 'Synchronizer', 'create_synchronizer'
]
