import enum
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SequenceRecord:
    """Input sequence to search for (one FASTA record or an ad-hoc sequence)."""

    sequence: str
    label: str = ""

    @property
    def length(self) -> int:
        return len(self.sequence)


@dataclass(frozen=True)
class Alignment:
    """Alignment of the query against the family covariance model."""

    query_sequence: str = ""
    hit_sequence: str = ""
    secondary_structure: str = ""
    match: str = ""
    posterior_probability: str = ""
    non_canonical_pairs: str = ""


@dataclass(frozen=True)
class RNAMatch:
    """A single family hit reported by the search service."""

    accession: str
    family_id: str = ""
    score: float = 0.0
    e_value: float = 0.0
    start: int = 0
    end: int = 0
    strand: str = ""
    gc_content: float = 0.0
    alignment: Alignment = field(default_factory=Alignment)


@dataclass(frozen=True)
class JobResult:
    """Outcome of a closed remote search job."""

    remote_job_id: str = ""
    opened_at: str = ""
    closed_at: str = ""
    started_at: str = ""
    search_sequence: str = ""
    num_hits: int = 0
    hit_family: str = ""
    matches: tuple[RNAMatch, ...] = ()

    @property
    def has_hit(self) -> bool:
        return bool(self.hit_family)


@dataclass(frozen=True)
class SubmitResult:
    """Fields returned by the service when a sequence is submitted."""

    remote_job_id: str
    result_location: str


class PollStatus(enum.Enum):
    RUNNING = "running"
    CLOSED = "closed"


@dataclass(frozen=True)
class PollResult:
    """Parsed poll response. `result` is set only when status is CLOSED."""

    status: PollStatus
    result: JobResult | None = None


class JobStatus(enum.Enum):
    READY = "ready"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    POLLING = "polling"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass
class Job:
    """One sequence's round trip through submission and polling.

    A Job is owned by exactly one worker at a time; ownership moves with the
    object when it is put on a queue, so it carries no lock of its own.
    """

    id: int
    sequence: SequenceRecord
    status: JobStatus = JobStatus.READY
    remote_job_id: str = ""
    result_location: str = ""
    last_polled_at: float | None = None
    result: JobResult | None = None
    submit_attempts: int = 0
    poll_attempts: int = 0
    poll_errors: int = 0
    failure_reason: str | None = None
