from abc import ABC, abstractmethod

from rfamsearch.search.models import PollResult, SubmitResult


class BaseSearchClient(ABC):
    """Contract for remote sequence search service adapters.

    Both calls must be safe to retry: the pipeline repeats them after
    transient failures.
    """

    @abstractmethod
    def submit(self, sequence: str) -> SubmitResult:
        """Submit a sequence for searching.

        Args:
            sequence: Nucleotide sequence text.

        Returns:
            SubmitResult with the remote job id and result location. An empty
            result location means the service did not accept the job yet.

        Raises:
            TransientNetworkError: on network failures (retryable).
            RateLimitExceeded: when the service throttles the caller (retryable).
            RejectedByService: when the service refuses the sequence.
            FatalProtocolError: on malformed or unexpected responses.
        """

    @abstractmethod
    def poll(self, result_location: str) -> PollResult:
        """Fetch the current state of a submitted job.

        Args:
            result_location: Location returned by submit().

        Returns:
            PollResult with RUNNING status, or CLOSED status and the parsed result.

        Raises:
            TransientNetworkError: on network failures (retryable).
            RateLimitExceeded: when the service throttles the caller (retryable).
            FatalProtocolError: on malformed responses or a failed remote job.
        """

    def close(self) -> None:
        """Release network resources held by the adapter."""
