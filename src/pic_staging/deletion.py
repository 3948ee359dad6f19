"""
Deletion Queue

Best-effort cleanup of staged files. Files that can't be deleted right away
(a locked file, for instance) stay queued and are retried on a timer until
they go away or the queue is shut down.

Design Choices:
- A private schedule.Scheduler holds the retry job, polled by a daemon thread
- The retry job only exists while something is pending and cancels itself
  once the queue drains

Author: AI Creator Team
License: MIT
"""

import logging
import threading
from typing import Iterable, Optional, Set, Union

import schedule

from .config import DEFAULT_POLL_SECONDS, DEFAULT_RETRY_SECONDS
from .errors import NoSuchFileError
from .registry import VirtualFileRegistry

logger = logging.getLogger(__name__)


class DeletionQueue:
    """Deletes staged files, retrying failures every retry_interval seconds.

    Attributes:
        registry: Registry whose files are deleted
        retry_interval: Seconds between retries of failed deletions
        poll_interval: Seconds between scheduler checks in the worker thread
    """

    def __init__(
        self,
        registry: VirtualFileRegistry,
        retry_interval: int = DEFAULT_RETRY_SECONDS,
        poll_interval: float = DEFAULT_POLL_SECONDS
    ):
        self.registry = registry
        self.retry_interval = retry_interval
        self.poll_interval = poll_interval

        self._pending: Set[str] = set()
        self._lock = threading.RLock()

        self._scheduler: Optional[schedule.Scheduler] = None
        self._job: Optional[schedule.Job] = None
        self._thread: Optional[threading.Thread] = None
        self._stopped = threading.Event()

    @property
    def pending(self) -> Set[str]:
        """Virtual filenames still waiting to be deleted."""
        with self._lock:
            return set(self._pending)

    @property
    def scheduler(self) -> schedule.Scheduler:
        """Scheduler holding the retry job, created on first use."""
        with self._lock:
            if self._scheduler is None:
                self._scheduler = schedule.Scheduler()
            return self._scheduler

    def request_deletion(self, names: Union[str, Iterable[str]]) -> Set[str]:
        """Queue files for deletion and try to delete everything queued.

        Names the registry doesn't know about are dropped silently.

        Args:
            names: A virtual filename or several of them

        Returns:
            Virtual filenames still waiting to be deleted
        """
        if isinstance(names, str):
            names = [names]

        with self._lock:
            self._pending |= set(names) & self.registry.list()

        return self.drain()

    def drain(self) -> Set[str]:
        """Attempt to delete every pending file, arming a retry if any remain.

        Returns:
            Virtual filenames still waiting to be deleted
        """
        with self._lock:
            for name in sorted(self._pending):
                try:
                    self.registry.remove(name)
                except NoSuchFileError:
                    # Removed elsewhere already
                    pass
                except OSError as e:
                    logger.warning(f"Couldn't delete {name}, will retry: {e}")
                    continue
                self._pending.discard(name)

            remaining = set(self._pending)
            if remaining:
                self._arm()

        return remaining

    def _arm(self) -> None:
        if self._stopped.is_set():
            return

        if self._job is None:
            self._job = self.scheduler.every(self.retry_interval).seconds.do(self._retry)
            logger.info(f"Retrying deletion of {len(self._pending)} file(s) in {self.retry_interval}s")

        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self._run, daemon=True, name="pic-staging-deletion")
            self._thread.start()

    def _retry(self):
        # Drain and disarm atomically; a later request arms a fresh job
        with self._lock:
            self.drain()
            if self._pending:
                return None
            self._job = None

        logger.info("Deletion queue drained")
        return schedule.CancelJob

    def _run(self) -> None:
        while not self._stopped.wait(self.poll_interval):
            try:
                self.scheduler.run_pending()
            except Exception as e:
                logger.error(f"Deletion retry failed: {e}", exc_info=True)

            with self._lock:
                if not self.scheduler.jobs:
                    # Nothing left to retry; the next _arm() starts a new thread
                    self._thread = None
                    return

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Cancel pending retries and stop the worker thread.

        Files still queued stay on disk.
        """
        self._stopped.set()
        with self._lock:
            if self._scheduler is not None:
                self._scheduler.clear()
            self._job = None
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

        if self._pending:
            logger.warning(f"Shut down with {len(self._pending)} file(s) left undeleted")
