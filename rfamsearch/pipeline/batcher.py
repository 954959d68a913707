import threading
from collections.abc import Sequence

from rfamsearch.logging.logger import Log
from rfamsearch.pipeline.collector import ResultCollector
from rfamsearch.pipeline.delay_queue import DelayQueue
from rfamsearch.pipeline.progress import ProgressCounters
from rfamsearch.pipeline.state import fail
from rfamsearch.search.models import Job, SequenceRecord


class Batcher:
    """Releases sequences into the pipeline in paced groups.

    Job ids are input positions, so results can be placed back in input order.
    """

    def __init__(
        self,
        new_jobs: DelayQueue[Job],
        collector: ResultCollector,
        progress: ProgressCounters,
        *,
        batch_size: int,
        inter_batch_delay_seconds: float,
        cancel_event: threading.Event,
    ) -> None:
        self._new_jobs = new_jobs
        self._collector = collector
        self._progress = progress
        self._batch_size = batch_size
        self._delay = inter_batch_delay_seconds
        self._cancel_event = cancel_event
        self._released = 0

    @property
    def released(self) -> int:
        return self._released

    def emit(self, records: Sequence[SequenceRecord]) -> list[list[int]]:
        """Put READY jobs on the new-jobs queue, pausing between batches.

        Returns the job ids of each released batch. If cancellation is
        signaled, unreleased records are recorded as failed.
        """
        batches: list[list[int]] = []
        for start in range(0, len(records), self._batch_size):
            cancelled = (
                self._cancel_event.wait(self._delay) if start else self._cancel_event.is_set()
            )
            if cancelled:
                self.abandon_unreleased(records)
                break
            batch_ids = []
            for offset, record in enumerate(records[start : start + self._batch_size]):
                job = Job(id=start + offset, sequence=record)
                self._new_jobs.put(job)
                self._released = job.id + 1
                self._progress.mark_created()
                batch_ids.append(job.id)
            batches.append(batch_ids)
            Log.info(
                f"Released batch {len(batches)}: jobs {batch_ids[0]}-{batch_ids[-1]} "
                f"of {len(records)}"
            )
        return batches

    def abandon_unreleased(self, records: Sequence[SequenceRecord]) -> None:
        """Record every sequence not yet put on the queue as cancelled."""
        remaining = len(records) - self._released
        if remaining <= 0:
            return
        Log.warning(f"Cancelled before releasing {remaining} sequences")
        for job_id in range(self._released, len(records)):
            job = Job(id=job_id, sequence=records[job_id])
            fail(job, "cancelled")
            self._collector.record(job)
        self._released = len(records)
