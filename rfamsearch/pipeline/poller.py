import threading
import time
from collections.abc import Callable

from rfamsearch.logging.logger import Log
from rfamsearch.pipeline.backoff import retry_delay
from rfamsearch.pipeline.collector import ResultCollector
from rfamsearch.pipeline.config import PipelineConfig
from rfamsearch.pipeline.delay_queue import DelayQueue
from rfamsearch.pipeline.state import transition
from rfamsearch.pipeline.worker_pool import WorkerPool
from rfamsearch.search.client_base import BaseSearchClient
from rfamsearch.search.exceptions import SearchError, TransientNetworkError
from rfamsearch.search.models import Job, JobResult, JobStatus, PollStatus


class PollerPool(WorkerPool):
    """Polls submitted jobs until they close, fail, or run out of attempts.

    A job is never polled twice within min_poll_interval_seconds; unfinished
    jobs go back on the pending queue with a delay instead.
    """

    stage = "poller"

    def __init__(
        self,
        pending_jobs: DelayQueue[Job],
        collector: ResultCollector,
        client: BaseSearchClient,
        config: PipelineConfig,
        *,
        cancel_event: threading.Event,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(
            pending_jobs,
            collector,
            config,
            workers=config.poller_workers,
            cancel_event=cancel_event,
        )
        self._client = client
        self._clock = clock

    def _handle(self, job: Job) -> None:
        too_soon = self._time_until_next_poll(job)
        if too_soon > 0:
            self._requeue(job, too_soon)
            return

        transition(job, JobStatus.POLLING)
        job.poll_attempts += 1
        try:
            polled = self._client.poll(job.result_location)
        except TransientNetworkError as exc:
            job.last_polled_at = self._clock()
            self._retry_or_fail(job, exc)
            return
        except SearchError as exc:
            self._fail(job, f"poll failed: {exc}")
            return
        job.last_polled_at = self._clock()

        if polled.status is PollStatus.CLOSED:
            self._complete(job, polled.result)
            return
        if job.poll_attempts >= self._config.max_poll_attempts:
            self._fail(job, "poll attempts exhausted")
            return
        transition(job, JobStatus.PENDING)
        self._requeue(job, self._config.min_poll_interval_seconds)

    def _time_until_next_poll(self, job: Job) -> float:
        if job.last_polled_at is None:
            return 0.0
        elapsed = self._clock() - job.last_polled_at
        return self._config.min_poll_interval_seconds - elapsed

    def _complete(self, job: Job, result: JobResult | None) -> None:
        if result is None:
            self._fail(job, "poll failed: closed response without a result")
            return
        job.result = result
        transition(job, JobStatus.COMPLETED)
        self._collector.record(job)
        Log.info(
            f"Job {job.id} completed: "
            f"{result.hit_family or 'no match'} ({len(result.matches)} matches)"
        )

    def _retry_or_fail(self, job: Job, exc: TransientNetworkError) -> None:
        job.poll_errors += 1
        if job.poll_errors >= self._config.max_poll_errors:
            self._fail(job, f"poll errors exhausted: {exc}")
            return
        transition(job, JobStatus.PENDING)
        delay = max(
            self._config.min_poll_interval_seconds,
            retry_delay(
                exc,
                job.poll_errors,
                base_seconds=self._config.backoff_base_seconds,
                max_seconds=self._config.backoff_max_seconds,
                rate_limit_factor=self._config.rate_limit_backoff_factor,
            ),
        )
        Log.warning(
            f"Job {job.id} poll failed, retrying in {delay:.1f}s "
            f"({job.poll_errors}/{self._config.max_poll_errors}): {exc}"
        )
        self._requeue(job, delay)
