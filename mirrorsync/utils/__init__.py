"""
Utilities Module

Logging setup, the filesystem abstraction and privilege helpers.

Author: mirrorsync Project
License: MIT
"""

from .file_system import FileSystem, FileStat, DirectoryStat
from .logger import get_logger, setup_logging

__all__ = ['FileSystem', 'FileStat', 'DirectoryStat', 'get_logger', 'setup_logging']
