"""APScheduler-based periodic checkpointing of a page index.

Used when the index runs with `flush_on_mutation` disabled: pending in-memory
changes are written to the snapshot file on a fixed interval.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional, Protocol

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from pagedex.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_JOB_ID = "pagedex-checkpoint"


class Flushable(Protocol):
    def flush(self) -> bool: ...


class CheckpointScheduler:
    """Schedules periodic `flush()` calls using a BackgroundScheduler."""

    def __init__(self, scheduler: Optional[BackgroundScheduler] = None) -> None:
        self._scheduler = scheduler or BackgroundScheduler()
        self._started = False

    @property
    def running(self) -> bool:
        return self._started

    def start(self) -> None:
        """Start the underlying scheduler if not already started."""
        if not self._started:
            self._scheduler.start(paused=False)
            self._started = True

    def shutdown(self, *, wait: bool = True) -> None:
        """Shut down the scheduler."""
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False

    def schedule_checkpoint(
        self,
        index: Flushable,
        *,
        interval: timedelta = timedelta(seconds=30),
        job_id: str = DEFAULT_JOB_ID,
        replace_existing: bool = True,
    ) -> None:
        """Schedule periodic execution of `index.flush()`.

        Parameters
        ----------
        index: Flushable
            The index whose pending changes should be written.
        interval: timedelta
            How often to flush (default 30 seconds).
        job_id: str
            Job id, allowing the checkpoint to be replaced or removed.
        replace_existing: bool
            If True, replace any existing job with the same id.
        """

        def _job() -> None:
            run_checkpoint(index)

        trigger = IntervalTrigger(seconds=max(1, int(interval.total_seconds())))
        self._scheduler.add_job(
            _job,
            trigger=trigger,
            id=job_id,
            replace_existing=replace_existing,
            max_instances=1,
            coalesce=True,
        )

    def remove_checkpoint(self, job_id: str = DEFAULT_JOB_ID) -> None:
        self._scheduler.remove_job(job_id)


def run_checkpoint(index: Flushable) -> bool:
    """Flush `index` once. Storage failures are logged and the changes stay pending."""
    try:
        written = index.flush()
    except StorageError:
        logger.exception("Checkpoint flush failed")
        return False
    if written:
        logger.debug("Checkpoint written")
    return written
