import copy
from typing import Any

import pytest

from rfamsearch.search.exceptions import FatalProtocolError
from rfamsearch.search.models import PollStatus
from rfamsearch.search.response_parser import parse_poll_response, parse_submit_response


class TestParseSubmitResponse:
    def test_builds_submit_result(self) -> None:
        result = parse_submit_response(
            {
                "jobId": "8a3c",
                "opened": "2026-10-18 10:00:00",
                "estimatedTime": 12,
                "resultURL": "https://rfam.org/search/sequence/8a3c",
            }
        )
        assert result.remote_job_id == "8a3c"
        assert result.result_location == "https://rfam.org/search/sequence/8a3c"

    def test_missing_result_url_gives_empty_location(self) -> None:
        result = parse_submit_response({"jobId": "8a3c"})
        assert result.result_location == ""

    def test_non_object_raises(self) -> None:
        with pytest.raises(FatalProtocolError, match="must be an object"):
            parse_submit_response(["not", "an", "object"])

    def test_wrong_field_type_raises(self) -> None:
        with pytest.raises(FatalProtocolError, match="Invalid submit response"):
            parse_submit_response({"jobId": {"nested": True}})


class TestParseRunningResponse:
    @pytest.mark.parametrize("status", ["PEND", "RUN", "HOLD"])
    def test_running_statuses(self, status: str) -> None:
        result = parse_poll_response({"status": status, "jobId": "8a3c"})
        assert result.status is PollStatus.RUNNING
        assert result.result is None

    def test_failed_remote_job_raises(self) -> None:
        with pytest.raises(FatalProtocolError, match="FAIL"):
            parse_poll_response({"status": "FAIL"})

    def test_unknown_shape_raises(self) -> None:
        with pytest.raises(FatalProtocolError, match="neither"):
            parse_poll_response({"jobId": "8a3c"})


class TestParseClosedResponse:
    def test_builds_job_result(self, rfam_closed_payload: dict[str, Any]) -> None:
        polled = parse_poll_response(rfam_closed_payload)

        assert polled.status is PollStatus.CLOSED
        result = polled.result
        assert result is not None
        assert result.remote_job_id == "8a3c7b2e-0f4d-4e1b-9d55-3e1c2b9a7f10"
        assert result.closed_at == "2026-10-18 10:00:09"
        assert result.started_at == "2026-10-18 10:00:01"
        assert result.num_hits == 2
        assert result.hit_family == "5S_rRNA"

    def test_maps_match_fields_in_service_order(
        self, rfam_closed_payload: dict[str, Any]
    ) -> None:
        result = parse_poll_response(rfam_closed_payload).result
        assert result is not None

        first, second = result.matches
        assert first.accession == "RF00001"
        assert first.score == 75.2
        assert first.e_value == 1.3e-16
        assert (first.start, first.end, first.strand) == (1, 59, "+")
        assert first.gc_content == 0.61
        assert first.alignment.secondary_structure == "((((((((....(((((((("
        assert first.alignment.hit_sequence == "GCCUGGCGGCCAUAGCGCGG"
        assert second.strand == "-"
        assert second.alignment.query_sequence == ""

    def test_first_family_wins(self, rfam_closed_payload: dict[str, Any]) -> None:
        payload = copy.deepcopy(rfam_closed_payload)
        payload["hits"]["tRNA"] = [
            {"score": "40", "E": "1e-5", "acc": "RF00005", "start": "3", "end": "70"}
        ]

        result = parse_poll_response(payload).result

        assert result is not None
        assert result.hit_family == "5S_rRNA"
        assert {m.accession for m in result.matches} == {"RF00001"}

    def test_no_hits_means_no_family(self, rfam_closed_payload: dict[str, Any]) -> None:
        payload = copy.deepcopy(rfam_closed_payload)
        payload["hits"] = {}
        payload["numHits"] = 0

        result = parse_poll_response(payload).result

        assert result is not None
        assert result.hit_family == ""
        assert result.matches == ()

    def test_closed_wins_over_status(self, rfam_closed_payload: dict[str, Any]) -> None:
        payload = dict(rfam_closed_payload, status="DONE")
        assert parse_poll_response(payload).status is PollStatus.CLOSED

    def test_invalid_hit_raises(self, rfam_closed_payload: dict[str, Any]) -> None:
        payload = copy.deepcopy(rfam_closed_payload)
        del payload["hits"]["5S_rRNA"][0]["acc"]
        with pytest.raises(FatalProtocolError, match="Invalid closed response"):
            parse_poll_response(payload)

    def test_parsing_twice_gives_same_matches(
        self, rfam_closed_payload: dict[str, Any]
    ) -> None:
        first = parse_poll_response(rfam_closed_payload).result
        second = parse_poll_response(rfam_closed_payload).result

        assert first == second
        assert first is not None and len(first.matches) == 2
