import threading
from abc import ABC, abstractmethod
from typing import ClassVar

from rfamsearch.logging.logger import Log
from rfamsearch.pipeline.collector import ResultCollector
from rfamsearch.pipeline.config import PipelineConfig
from rfamsearch.pipeline.delay_queue import DelayQueue
from rfamsearch.pipeline.state import fail
from rfamsearch.search.models import Job


class WorkerPool(ABC):
    """Fixed set of threads that take jobs from one queue and handle them.

    A failure while handling one job fails that job only; the worker keeps
    going until the queue is closed.
    """

    stage: ClassVar[str] = "worker"

    def __init__(
        self,
        source: DelayQueue[Job],
        collector: ResultCollector,
        config: PipelineConfig,
        *,
        workers: int,
        cancel_event: threading.Event,
    ) -> None:
        self._source = source
        self._collector = collector
        self._config = config
        self._workers = workers
        self._cancel_event = cancel_event
        self._threads: list[threading.Thread] = []

    def start(self) -> None:
        for number in range(1, self._workers + 1):
            thread = threading.Thread(
                target=self._run_worker,
                name=f"{self.stage}-{number}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)

    def join(self, timeout: float | None = None) -> None:
        for thread in self._threads:
            thread.join(timeout)

    def process(self, job: Job) -> None:
        """Handle one dequeued job. Never raises."""
        try:
            if self._cancel_event.is_set():
                self._fail(job, "cancelled")
                return
            self._handle(job)
        except Exception as exc:
            Log.error(f"Job {job.id}: unexpected error in {self.stage}: {exc}")
            if not job.status.is_terminal:
                self._fail(job, f"unexpected error: {exc}")

    def _run_worker(self) -> None:
        while True:
            job = self._source.get()
            if job is None:
                break
            self.process(job)
        Log.debug(f"{threading.current_thread().name} stopped")

    def _requeue(self, job: Job, delay: float) -> None:
        """Put the job back on its queue, or fail it if the run was cancelled meanwhile."""
        if self._cancel_event.is_set():
            self._fail(job, "cancelled")
            return
        self._source.put(job, delay=delay)
        if self._cancel_event.is_set():
            self._source.expedite()

    def _fail(self, job: Job, reason: str) -> None:
        fail(job, reason)
        self._collector.record(job)
        Log.error(f"Job {job.id} failed: {reason}")

    @abstractmethod
    def _handle(self, job: Job) -> None:
        """Move the job one step forward: requeue it, pass it on, or record it."""
