"""
Sync Engine Module

Building blocks of a reconciliation pass: content comparison, move
detection and retrying file/folder operations.

Author: mirrorsync Project
License: MIT
"""

from .file_comparer import FileComparer
from .match_strategy import ContentBasedMatchStrategy, MatchOutcome
from .operator_base import DirectoryNotEmptyError, is_transient_error
from .file_operator import FileOperator
from .folder_operator import FolderOperator

__all__ = [
    'FileComparer', 'ContentBasedMatchStrategy', 'MatchOutcome',
    'DirectoryNotEmptyError', 'is_transient_error',
    'FileOperator', 'FolderOperator'
]
