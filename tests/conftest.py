import threading
from typing import Any

import pytest

from rfamsearch.pipeline.config import PipelineConfig
from rfamsearch.search.client_base import BaseSearchClient
from rfamsearch.search.models import (
    JobResult,
    PollResult,
    PollStatus,
    RNAMatch,
    SubmitResult,
)

ScriptStep = SubmitResult | PollResult | Exception


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedSearchClient(BaseSearchClient):
    """Search client that replays per-sequence scripts.

    Each script is a list of steps; the last step repeats forever. Sequences
    without a script are accepted at once and close on the first poll.
    """

    def __init__(self) -> None:
        self.submit_script: dict[str, list[ScriptStep]] = {}
        self.poll_script: dict[str, list[ScriptStep]] = {}
        self.submit_calls: list[str] = []
        self.poll_calls: list[str] = []
        self._lock = threading.Lock()

    @staticmethod
    def location_for(sequence: str) -> str:
        return f"https://rfam.test/results/{sequence}"

    def submit(self, sequence: str) -> SubmitResult:
        with self._lock:
            self.submit_calls.append(sequence)
            step = self._next_step(self.submit_script.get(sequence))
        if isinstance(step, Exception):
            raise step
        if isinstance(step, SubmitResult):
            return step
        return SubmitResult(
            remote_job_id=f"job-{sequence}",
            result_location=self.location_for(sequence),
        )

    def poll(self, result_location: str) -> PollResult:
        with self._lock:
            self.poll_calls.append(result_location)
            step = self._next_step(self.poll_script.get(result_location))
        if isinstance(step, Exception):
            raise step
        if isinstance(step, PollResult):
            return step
        return closed_poll_result(result_location.rsplit("/", 1)[-1])

    @staticmethod
    def _next_step(script: list[ScriptStep] | None) -> ScriptStep | None:
        if not script:
            return None
        if len(script) == 1:
            return script[0]
        return script.pop(0)


def closed_poll_result(remote_job_id: str = "job-1") -> PollResult:
    return PollResult(
        status=PollStatus.CLOSED,
        result=JobResult(
            remote_job_id=remote_job_id,
            opened_at="2026-10-18 10:00:00",
            started_at="2026-10-18 10:00:01",
            closed_at="2026-10-18 10:00:09",
            num_hits=1,
            hit_family="5S_rRNA",
            matches=(RNAMatch(accession="RF00001", family_id="5S_rRNA", score=75.2),),
        ),
    )


@pytest.fixture()
def scripted_client() -> ScriptedSearchClient:
    return ScriptedSearchClient()


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fast_config() -> PipelineConfig:
    """Pipeline settings with no pacing or backoff, for threaded tests."""
    return PipelineConfig(
        submitter_workers=2,
        poller_workers=2,
        batch_size=2,
        inter_batch_delay_seconds=0.0,
        min_poll_interval_seconds=0.0,
        max_submit_attempts=3,
        max_poll_attempts=5,
        max_poll_errors=3,
        backoff_base_seconds=0.0,
    )


@pytest.fixture()
def rfam_closed_payload() -> dict[str, Any]:
    """A finished Rfam search job with one family and two hits."""
    return {
        "jobId": "8a3c7b2e-0f4d-4e1b-9d55-3e1c2b9a7f10",
        "opened": "2026-10-18 10:00:00",
        "started": "2026-10-18 10:00:01",
        "closed": "2026-10-18 10:00:09",
        "searchSequence": "GCCTGGCGGCCGTAGCGCGGTGGTCCCACCTGACCCCATGCCGAACTCAGAAGTGAAAC",
        "numHits": 2,
        "hits": {
            "5S_rRNA": [
                {
                    "score": "75.2",
                    "E": "1.3e-16",
                    "acc": "RF00001",
                    "end": "59",
                    "strand": "+",
                    "id": "5S_rRNA",
                    "GC": "0.61",
                    "start": "1",
                    "alignment": {
                        "user_seq": "GCCUGGCGGCCGUAGCGCGG",
                        "hit_seq": "GCCUGGCGGCCAUAGCGCGG",
                        "ss": "((((((((....((((((((",
                        "match": "GCCUGGCGGCC UAGCGCGG",
                        "pp": "********************",
                        "nc": "                    ",
                    },
                },
                {
                    "score": "21.0",
                    "E": "0.004",
                    "acc": "RF00001",
                    "end": "120",
                    "strand": "-",
                    "id": "5S_rRNA",
                    "GC": "0.55",
                    "start": "62",
                },
            ]
        },
    }


@pytest.fixture()
def closed_result() -> PollResult:
    return closed_poll_result("abc")
