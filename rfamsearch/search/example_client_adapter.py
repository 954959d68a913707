"""Example search client adapter.

Use this module as a reference when implementing new search service adapters.
Implement BaseSearchClient and register the provider in SearchClientFactory.
"""

import itertools
import threading
from typing import ClassVar

from rfamsearch.search.client_base import BaseSearchClient
from rfamsearch.search.exceptions import FatalProtocolError, RejectedByService
from rfamsearch.search.models import JobResult, PollResult, PollStatus, SubmitResult


class ExampleClientAdapter(BaseSearchClient):
    """Example adapter that simulates the search service without network calls.

    Every submitted job reports RUNNING for `polls_until_closed` polls and
    then closes with no family hits. Useful for local development and tests.
    """

    LOCATION_PREFIX: ClassVar[str] = "example://jobs/"

    def __init__(self, *, polls_until_closed: int = 1) -> None:
        self._polls_until_closed = polls_until_closed
        self._ids = itertools.count(1)
        self._poll_counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def submit(self, sequence: str) -> SubmitResult:
        if not sequence.strip():
            raise RejectedByService("Empty sequence")
        with self._lock:
            job_number = next(self._ids)
        return SubmitResult(
            remote_job_id=f"example-{job_number}",
            result_location=f"{self.LOCATION_PREFIX}{job_number}",
        )

    def poll(self, result_location: str) -> PollResult:
        if not result_location.startswith(self.LOCATION_PREFIX):
            raise FatalProtocolError(f"Unknown result location: {result_location}")
        with self._lock:
            count = self._poll_counts.get(result_location, 0) + 1
            self._poll_counts[result_location] = count
        if count <= self._polls_until_closed:
            return PollResult(status=PollStatus.RUNNING)
        job_number = result_location.removeprefix(self.LOCATION_PREFIX)
        return PollResult(
            status=PollStatus.CLOSED,
            result=JobResult(remote_job_id=f"example-{job_number}", closed_at="example"),
        )
