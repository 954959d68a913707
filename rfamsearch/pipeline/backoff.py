from rfamsearch.search.exceptions import RateLimitExceeded, SearchError


def backoff_delay(
    attempt: int,
    *,
    base_seconds: float,
    max_seconds: float,
    factor: float = 1.0,
) -> float:
    """Exponential delay before retry number `attempt` (1-based)."""
    if attempt < 1 or base_seconds <= 0:
        return 0.0
    return min(max_seconds, base_seconds * factor * 2 ** (attempt - 1))


def retry_delay(
    exc: SearchError,
    attempt: int,
    *,
    base_seconds: float,
    max_seconds: float,
    rate_limit_factor: float,
) -> float:
    """Delay before retrying after `exc`.

    Rate limits wait longer and honour Retry-After, capped at max_seconds.
    """
    if isinstance(exc, RateLimitExceeded):
        delay = backoff_delay(
            attempt,
            base_seconds=base_seconds,
            max_seconds=max_seconds,
            factor=rate_limit_factor,
        )
        if exc.retry_after is not None:
            delay = max(delay, min(exc.retry_after, max_seconds))
        return delay
    return backoff_delay(attempt, base_seconds=base_seconds, max_seconds=max_seconds)
