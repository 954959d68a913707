import threading

from rfamsearch.logging.logger import Log
from rfamsearch.pipeline.backoff import backoff_delay, retry_delay
from rfamsearch.pipeline.collector import ResultCollector
from rfamsearch.pipeline.config import PipelineConfig
from rfamsearch.pipeline.delay_queue import DelayQueue
from rfamsearch.pipeline.progress import ProgressCounters
from rfamsearch.pipeline.state import transition
from rfamsearch.pipeline.worker_pool import WorkerPool
from rfamsearch.search.client_base import BaseSearchClient
from rfamsearch.search.exceptions import RejectedByService, SearchError, TransientNetworkError
from rfamsearch.search.models import Job, JobStatus


class SubmitterPool(WorkerPool):
    """Submits READY jobs and hands accepted ones to the pending queue."""

    stage = "submitter"

    def __init__(
        self,
        new_jobs: DelayQueue[Job],
        pending_jobs: DelayQueue[Job],
        collector: ResultCollector,
        client: BaseSearchClient,
        config: PipelineConfig,
        progress: ProgressCounters,
        *,
        cancel_event: threading.Event,
    ) -> None:
        super().__init__(
            new_jobs,
            collector,
            config,
            workers=config.submitter_workers,
            cancel_event=cancel_event,
        )
        self._pending_jobs = pending_jobs
        self._client = client
        self._progress = progress

    def _handle(self, job: Job) -> None:
        transition(job, JobStatus.SUBMITTING)
        job.submit_attempts += 1
        Log.debug(f"Submitting job {job.id} (attempt {job.submit_attempts})")
        try:
            submitted = self._client.submit(job.sequence.sequence)
        except (TransientNetworkError, RejectedByService) as exc:
            self._retry_or_fail(job, str(exc), exc)
            return
        except SearchError as exc:
            self._fail(job, f"submission failed: {exc}")
            return

        if not submitted.result_location:
            self._retry_or_fail(job, "service did not return a result location")
            return

        job.remote_job_id = submitted.remote_job_id
        job.result_location = submitted.result_location
        transition(job, JobStatus.SUBMITTED)
        self._progress.mark_submitted()
        Log.info(f"Job {job.id} submitted as {job.remote_job_id or job.result_location}")
        self._pending_jobs.put(job)

    def _retry_or_fail(self, job: Job, reason: str, exc: SearchError | None = None) -> None:
        """Send the job back to READY for another attempt, or fail it at the limit."""
        if job.submit_attempts >= self._config.max_submit_attempts:
            self._fail(job, f"submission attempts exhausted: {reason}")
            return
        transition(job, JobStatus.READY)
        if exc is not None:
            delay = retry_delay(
                exc,
                job.submit_attempts,
                base_seconds=self._config.backoff_base_seconds,
                max_seconds=self._config.backoff_max_seconds,
                rate_limit_factor=self._config.rate_limit_backoff_factor,
            )
        else:
            delay = backoff_delay(
                job.submit_attempts,
                base_seconds=self._config.backoff_base_seconds,
                max_seconds=self._config.backoff_max_seconds,
            )
        Log.warning(
            f"Job {job.id} will be resubmitted in {delay:.1f}s "
            f"(attempt {job.submit_attempts}/{self._config.max_submit_attempts}): {reason}"
        )
        self._requeue(job, delay)
