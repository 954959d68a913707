"""Decodes raw search service payloads into domain results."""

from typing import Any

from pydantic import ValidationError

from rfamsearch.logging.logger import Log
from rfamsearch.search.exceptions import FatalProtocolError
from rfamsearch.search.models import (
    Alignment,
    JobResult,
    PollResult,
    PollStatus,
    RNAMatch,
    SubmitResult,
)
from rfamsearch.search.schemas import ClosedResponse, HitSchema, RunningResponse, SubmitResponse

_FAILED_REMOTE_STATUSES = frozenset({"FAIL", "DEL", "NOT_FOUND", "ERROR"})


def parse_submit_response(payload: Any) -> SubmitResult:
    """Build a SubmitResult from a decoded submission response.

    Raises:
        FatalProtocolError: if the payload does not match the expected shape.
    """
    if not isinstance(payload, dict):
        raise FatalProtocolError("Submit response must be an object")
    try:
        response = SubmitResponse.model_validate(payload)
    except ValidationError as exc:
        raise FatalProtocolError(f"Invalid submit response: {exc}") from exc
    return SubmitResult(
        remote_job_id=response.job_id,
        result_location=response.result_url.strip(),
    )


def parse_poll_response(payload: Any) -> PollResult:
    """Build a PollResult from a decoded poll response.

    A response carrying a non-empty 'closed' timestamp is a finished job; one
    carrying only 'status' is still running.

    Raises:
        FatalProtocolError: if the payload matches neither shape, or the
            remote job reports a failure.
    """
    if not isinstance(payload, dict):
        raise FatalProtocolError("Poll response must be an object")
    if payload.get("closed"):
        return PollResult(status=PollStatus.CLOSED, result=_build_job_result(payload))
    if "status" in payload:
        return _build_running(payload)
    raise FatalProtocolError("Poll response has neither 'closed' nor 'status'")


def _build_running(payload: dict[str, Any]) -> PollResult:
    try:
        response = RunningResponse.model_validate(payload)
    except ValidationError as exc:
        raise FatalProtocolError(f"Invalid running response: {exc}") from exc
    if response.status.upper() in _FAILED_REMOTE_STATUSES:
        raise FatalProtocolError(f"Remote job reported status {response.status!r}")
    return PollResult(status=PollStatus.RUNNING)


def _build_job_result(payload: dict[str, Any]) -> JobResult:
    try:
        response = ClosedResponse.model_validate(payload)
    except ValidationError as exc:
        raise FatalProtocolError(f"Invalid closed response: {exc}") from exc

    hit_family = ""
    matches: tuple[RNAMatch, ...] = ()
    if response.hits:
        families = list(response.hits)
        hit_family = families[0]
        matches = tuple(_build_match(hit) for hit in response.hits[hit_family])
        if len(families) > 1:
            Log.warning(
                f"Job {response.job_id} reported {len(families)} families, "
                f"keeping first: {hit_family} (ignored: {', '.join(families[1:])})"
            )

    return JobResult(
        remote_job_id=response.job_id,
        opened_at=response.opened,
        closed_at=response.closed,
        started_at=response.started,
        search_sequence=response.search_sequence,
        num_hits=response.num_hits,
        hit_family=hit_family,
        matches=matches,
    )


def _build_match(hit: HitSchema) -> RNAMatch:
    return RNAMatch(
        accession=hit.acc,
        family_id=hit.id,
        score=hit.score,
        e_value=hit.e_value,
        start=hit.start,
        end=hit.end,
        strand=hit.strand,
        gc_content=hit.gc,
        alignment=Alignment(
            query_sequence=hit.alignment.user_seq,
            hit_sequence=hit.alignment.hit_seq,
            secondary_structure=hit.alignment.ss,
            match=hit.alignment.match,
            posterior_probability=hit.alignment.pp,
            non_canonical_pairs=hit.alignment.nc,
        ),
    )
