"""
Sync Scheduler

APScheduler integration that runs a mirror pass immediately and then at a
fixed interval, skipping ticks while a previous pass is still running.

Author: mirrorsync Project
License: MIT
"""

import time
from datetime import datetime, timedelta
from threading import Lock
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..utils.logger import get_logger
from ..core.synchronizer import Synchronizer

logger = get_logger(__name__)

SYNC_JOB_ID = 'periodic_sync'


class SyncScheduler:
    """
    Periodic driver for a Synchronizer.

    States: idle -> running (job armed, at most one pass in flight) -> idle.

    Ticks that fire while a pass is running are dropped, never queued.
    stop() disarms future ticks but lets an in-flight pass finish.
    """

    def __init__(self, synchronizer: Synchronizer):
        """
        Initialize scheduler.

        Args:
            synchronizer: Synchronizer to run on every tick
        """
        if synchronizer is None:
            raise ValueError("SyncScheduler requires a synchronizer")

        self.synchronizer = synchronizer
        self.scheduler: Optional[BackgroundScheduler] = None

        self._source: Optional[str] = None
        self._destination: Optional[str] = None
        self._sync_lock = Lock()
        self._is_syncing = False

    @property
    def is_running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    @property
    def is_syncing(self) -> bool:
        return self._is_syncing

    def start(self, source: str, destination: str, interval: timedelta):
        """
        Run one pass now, then arm the periodic job.

        Blocks the caller for the duration of the first pass.

        Args:
            source: Source directory
            destination: Destination directory
            interval: Time between ticks
        """
        if self.is_running:
            logger.warning("Scheduler already running")
            return
        if interval <= timedelta(0):
            raise ValueError(f"Interval must be positive: {interval}")

        self._source = source
        self._destination = destination

        logger.info(f"Starting scheduler with interval: {interval}")

        self.sync_folders()

        self.scheduler = BackgroundScheduler(
            timezone='UTC',
            job_defaults={
                'coalesce': True,  # Combine missed executions
                # Let overlapping ticks reach the in-progress guard so they are logged
                'max_instances': 3
            }
        )
        self.scheduler.add_job(
            func=self._on_tick,
            trigger=IntervalTrigger(seconds=interval.total_seconds()),
            id=SYNC_JOB_ID,
            name='Periodic Folder Sync',
            replace_existing=True
        )
        self.scheduler.start()
        logger.info("Scheduler started")

    def stop(self, wait: bool = False):
        """
        Disarm the periodic job. Safe to call when not started.

        Args:
            wait: Block until an in-flight pass has finished
        """
        logger.info("Stopping scheduler")

        if self.scheduler is not None:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=wait)
            self.scheduler = None

        if wait:
            self.wait_until_idle()

        self._source = None
        self._destination = None

    def wait_until_idle(self, poll_interval: float = 0.05, timeout: Optional[float] = None) -> bool:
        """
        Block until no pass is in flight.

        Returns:
            False if timeout expired first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while self._is_syncing:
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(poll_interval)
        return True

    def _on_tick(self):
        """Scheduled job body."""
        if not self.sync_folders():
            logger.warning("Previous sync operation still in progress. Skipping this scheduled sync.")

    def sync_folders(self) -> bool:
        """
        Run one pass unless another is in flight.

        Errors are logged, never raised, so the next tick can retry.

        Returns:
            False if skipped because a pass was already running
        """
        with self._sync_lock:
            if self._is_syncing:
                return False
            self._is_syncing = True

        source, destination = self._source, self._destination
        try:
            started = time.monotonic()
            logger.info(f"Scheduled sync starting at {datetime.now()}")
            self.synchronizer.synchronize(source, destination)
            logger.info(
                f"Scheduled sync completed at {datetime.now()} "
                f"(took {time.monotonic() - started:.2f}s)"
            )
        except Exception as e:
            logger.error(f"Error during scheduled sync: {e}")
        finally:
            self._is_syncing = False

        return True

    def get_next_run_time(self) -> Optional[datetime]:
        """Next scheduled tick, or None when not running."""
        if not self.is_running:
            return None
        job = self.scheduler.get_job(SYNC_JOB_ID)
        return job.next_run_time if job else None
