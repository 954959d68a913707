import threading
from dataclasses import dataclass, field

from rfamsearch.logging.logger import Log
from rfamsearch.pipeline.exceptions import DuplicateOutcomeError
from rfamsearch.pipeline.progress import ProgressCounters
from rfamsearch.search.models import Job, JobResult, JobStatus, SequenceRecord


@dataclass(frozen=True)
class JobOutcome:
    """Terminal snapshot of a job, stored in the result table."""

    job_id: int
    sequence: SequenceRecord
    status: JobStatus
    result: JobResult | None = None
    failure_reason: str | None = None
    remote_job_id: str = ""
    result_location: str = ""
    submit_attempts: int = 0
    poll_attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status is JobStatus.COMPLETED

    @classmethod
    def from_job(cls, job: Job) -> "JobOutcome":
        return cls(
            job_id=job.id,
            sequence=job.sequence,
            status=job.status,
            result=job.result,
            failure_reason=job.failure_reason,
            remote_job_id=job.remote_job_id,
            result_location=job.result_location,
            submit_attempts=job.submit_attempts,
            poll_attempts=job.poll_attempts,
        )


@dataclass(frozen=True)
class RunSummary:
    """Completed/failed counts of a finished run."""

    completed: int
    failed: int
    failures: list[JobOutcome] = field(default_factory=list)


class ResultCollector:
    """Indexed table of finished jobs plus a completion signal.

    Slot i is written once, by whichever worker finishes job i. wait()
    returns once every slot is filled.
    """

    def __init__(self, total: int, progress: ProgressCounters | None = None) -> None:
        self._table: list[JobOutcome | None] = [None] * total
        self._remaining = total
        self._progress = progress
        self._cond = threading.Condition()

    def record(self, job: Job) -> JobOutcome:
        """Write a terminal job into its slot and decrement the completion counter.

        Raises:
            ValueError: if the job is not in a terminal state.
            DuplicateOutcomeError: if the slot has already been written.
        """
        if not job.status.is_terminal:
            raise ValueError(f"Job {job.id} is not finished ({job.status.value})")
        outcome = JobOutcome.from_job(job)
        with self._cond:
            if self._table[job.id] is not None:
                raise DuplicateOutcomeError(f"Result for job {job.id} already recorded")
            self._table[job.id] = outcome
            self._remaining -= 1
            self._cond.notify_all()

        if self._progress is not None:
            if outcome.succeeded:
                self._progress.mark_completed()
            else:
                self._progress.mark_failed()
        Log.debug(f"Job {job.id} recorded as {job.status.value}")
        return outcome

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every job is recorded. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: self._remaining == 0, timeout=timeout)

    @property
    def remaining(self) -> int:
        with self._cond:
            return self._remaining

    def is_recorded(self, job_id: int) -> bool:
        with self._cond:
            return self._table[job_id] is not None

    def outcomes(self) -> list[JobOutcome]:
        """Return the result table ordered by job id.

        Raises:
            RuntimeError: if some jobs have not finished yet.
        """
        with self._cond:
            if self._remaining:
                raise RuntimeError(f"{self._remaining} jobs have not finished")
            return [outcome for outcome in self._table if outcome is not None]

    def summary(self) -> RunSummary:
        return summarize(self.outcomes())


def summarize(outcomes: list[JobOutcome]) -> RunSummary:
    """Count completed and failed outcomes and list the failures."""
    failures = [outcome for outcome in outcomes if not outcome.succeeded]
    return RunSummary(
        completed=len(outcomes) - len(failures),
        failed=len(failures),
        failures=failures,
    )
