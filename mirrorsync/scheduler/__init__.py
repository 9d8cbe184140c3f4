"""
Scheduler Module

Periodic execution of mirror passes.

Author: mirrorsync Project
License: MIT
"""

from .sync_scheduler import SyncScheduler

__all__ = ['SyncScheduler']
