"""Job state machine.

READY -> SUBMITTING -> SUBMITTED -> POLLING -> COMPLETED, with POLLING <-> PENDING
while the remote job runs and FAILED reachable from every non-terminal state.
"""

from rfamsearch.pipeline.exceptions import InvalidTransitionError
from rfamsearch.search.models import Job, JobStatus

_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.READY: frozenset({JobStatus.SUBMITTING, JobStatus.FAILED}),
    JobStatus.SUBMITTING: frozenset(
        {JobStatus.SUBMITTED, JobStatus.READY, JobStatus.FAILED}
    ),
    JobStatus.SUBMITTED: frozenset({JobStatus.POLLING, JobStatus.FAILED}),
    JobStatus.PENDING: frozenset({JobStatus.POLLING, JobStatus.FAILED}),
    JobStatus.POLLING: frozenset(
        {JobStatus.COMPLETED, JobStatus.PENDING, JobStatus.FAILED}
    ),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}

_LOCATED_STATES = frozenset(
    {JobStatus.SUBMITTED, JobStatus.POLLING, JobStatus.PENDING, JobStatus.COMPLETED}
)


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    return target in _TRANSITIONS[current]


def transition(job: Job, target: JobStatus) -> None:
    """Move a job to `target`, enforcing the allowed transitions.

    Raises:
        InvalidTransitionError: if the move is not allowed, or the job lacks
            the result location / result the target state requires.
    """
    if not can_transition(job.status, target):
        raise InvalidTransitionError(
            f"Job {job.id}: cannot move from {job.status.value} to {target.value}"
        )
    if target in _LOCATED_STATES and not job.result_location:
        raise InvalidTransitionError(
            f"Job {job.id}: {target.value} requires a result location"
        )
    if target is JobStatus.COMPLETED and job.result is None:
        raise InvalidTransitionError(f"Job {job.id}: completed requires a result")
    job.status = target


def fail(job: Job, reason: str) -> None:
    """Move a job to FAILED and record why."""
    transition(job, JobStatus.FAILED)
    job.failure_reason = reason
