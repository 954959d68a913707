class SearchError(Exception):
    """Raised when a remote search call fails."""


class TransientNetworkError(SearchError):
    """Raised when the search service call fails due to network/infrastructure issues."""


class RateLimitExceeded(TransientNetworkError):
    """Raised when the search service asks the caller to slow down."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class RejectedByService(SearchError):
    """Raised when the search service refuses to accept a sequence."""


class FatalProtocolError(SearchError):
    """Raised when the search service response is malformed or unexpected."""
