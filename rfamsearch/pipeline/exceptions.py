class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""


class InvalidTransitionError(PipelineError):
    """Raised when a job is moved to a state its current state cannot reach."""


class DuplicateOutcomeError(PipelineError):
    """Raised when a result table slot is written more than once."""


class QueueClosedError(PipelineError):
    """Raised when an item is put on a closed queue."""
