import threading
import time
from collections.abc import Callable, Sequence

from rfamsearch.logging.logger import Log
from rfamsearch.pipeline.batcher import Batcher
from rfamsearch.pipeline.collector import JobOutcome, ResultCollector
from rfamsearch.pipeline.config import PipelineConfig
from rfamsearch.pipeline.delay_queue import DelayQueue
from rfamsearch.pipeline.poller import PollerPool
from rfamsearch.pipeline.progress import ProgressCounters, ProgressObserver
from rfamsearch.pipeline.submitter import SubmitterPool
from rfamsearch.search.client_base import BaseSearchClient
from rfamsearch.search.models import Job, SequenceRecord


class SearchPipeline:
    """Runs a batch of sequences through remote submission and polling.

    Pipeline: batcher -> new queue -> submitters -> pending queue -> pollers
    -> result table. run() returns once every sequence has a terminal outcome.
    """

    def __init__(
        self,
        client: BaseSearchClient,
        config: PipelineConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._config = config
        self._clock = clock
        self._cancel_event = threading.Event()
        self._queues: list[DelayQueue[Job]] = []
        self._lock = threading.Lock()
        self._progress: ProgressCounters | None = None

    @property
    def progress(self) -> ProgressCounters | None:
        """Counters of the current or last run."""
        return self._progress

    def cancel(self) -> None:
        """Abandon outstanding jobs; each is recorded as failed with reason 'cancelled'."""
        self._cancel_event.set()
        with self._lock:
            queues = list(self._queues)
        for queue in queues:
            queue.expedite()

    def run(
        self,
        records: Sequence[SequenceRecord],
        observer: ProgressObserver | None = None,
    ) -> list[JobOutcome]:
        """Search every record and return outcomes ordered by input position."""
        total = len(records)
        progress = ProgressCounters(total)
        if observer is not None:
            progress.subscribe(observer)
        self._progress = progress
        if total == 0:
            return []

        collector = ResultCollector(total, progress)
        new_jobs: DelayQueue[Job] = DelayQueue(maxsize=total, clock=self._clock)
        pending_jobs: DelayQueue[Job] = DelayQueue(maxsize=total, clock=self._clock)
        with self._lock:
            self._queues = [new_jobs, pending_jobs]

        submitters = SubmitterPool(
            new_jobs,
            pending_jobs,
            collector,
            self._client,
            self._config,
            progress,
            cancel_event=self._cancel_event,
        )
        pollers = PollerPool(
            pending_jobs,
            collector,
            self._client,
            self._config,
            cancel_event=self._cancel_event,
            clock=self._clock,
        )
        batcher = Batcher(
            new_jobs,
            collector,
            progress,
            batch_size=self._config.batch_size,
            inter_batch_delay_seconds=self._config.inter_batch_delay_seconds,
            cancel_event=self._cancel_event,
        )

        submitters.start()
        pollers.start()
        Log.info(
            f"Searching {total} sequences with {self._config.submitter_workers} submitters "
            f"and {self._config.poller_workers} pollers"
        )
        try:
            batcher.emit(records)
            collector.wait()
        except KeyboardInterrupt:
            Log.warning("Interrupted, cancelling outstanding jobs")
            self.cancel()
            batcher.abandon_unreleased(records)
            collector.wait()
        finally:
            new_jobs.close()
            pending_jobs.close()
            submitters.join()
            pollers.join()
            with self._lock:
                self._queues = []

        summary = collector.summary()
        Log.info(
            f"Finished {total} jobs: {summary.completed} completed, {summary.failed} failed"
        )
        for failure in summary.failures:
            Log.warning(f"Job {failure.job_id} failed: {failure.failure_reason}")
        return collector.outcomes()
