from datetime import timedelta
from typing import List

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from pagedex.exceptions import PersistenceError
from pagedex.storage.checkpoint import DEFAULT_JOB_ID, CheckpointScheduler, run_checkpoint


class FakeIndex:
    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.calls: List[int] = []
        self.result = result
        self.error = error

    def flush(self) -> bool:
        self.calls.append(1)
        if self.error is not None:
            raise self.error
        return self.result


def test_run_checkpoint_flushes_index() -> None:
    index = FakeIndex(result=True)
    assert run_checkpoint(index) is True
    assert index.calls == [1]


def test_run_checkpoint_logs_storage_failures(caplog: pytest.LogCaptureFixture) -> None:
    index = FakeIndex(error=PersistenceError("disk full"))
    assert run_checkpoint(index) is False
    assert "Checkpoint flush failed" in caplog.text


def test_schedule_checkpoint_registers_single_interval_job() -> None:
    scheduler = BackgroundScheduler()
    checkpoints = CheckpointScheduler(scheduler)
    checkpoints.start()
    try:
        checkpoints.schedule_checkpoint(FakeIndex(), interval=timedelta(seconds=5))
        checkpoints.schedule_checkpoint(FakeIndex(), interval=timedelta(seconds=7))
        jobs = scheduler.get_jobs()
        assert [job.id for job in jobs] == [DEFAULT_JOB_ID]
        assert jobs[0].trigger.interval == timedelta(seconds=7)
        assert jobs[0].max_instances == 1

        checkpoints.remove_checkpoint()
        assert scheduler.get_jobs() == []
    finally:
        checkpoints.shutdown(wait=False)
    assert checkpoints.running is False
