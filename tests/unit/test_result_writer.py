from pathlib import Path

import pytest

from rfamsearch.io.exceptions import ResultSinkError
from rfamsearch.io.result_writer import HEADER, ResultWriter, outcome_row
from rfamsearch.pipeline.collector import JobOutcome
from rfamsearch.search.models import JobResult, JobStatus, RNAMatch, SequenceRecord


def _completed(job_id: int, family: str = "5S_rRNA") -> JobOutcome:
    matches = (RNAMatch(accession="RF00001"),) if family else ()
    return JobOutcome(
        job_id=job_id,
        sequence=SequenceRecord(sequence="ACGU", label=f"seq{job_id}"),
        status=JobStatus.COMPLETED,
        result=JobResult(closed_at="now", hit_family=family, matches=matches),
    )


def _failed(job_id: int) -> JobOutcome:
    return JobOutcome(
        job_id=job_id,
        sequence=SequenceRecord(sequence="NN", label=f"seq{job_id}"),
        status=JobStatus.FAILED,
        failure_reason="poll attempts exhausted",
    )


class TestOutcomeRow:
    def test_hit_row(self) -> None:
        assert outcome_row(_completed(0)) == (
            "0", "5S_rRNA", "RF00001", "4", "seq0", "ACGU", "completed", "",
        )

    def test_no_match_row(self) -> None:
        row = outcome_row(_completed(1, family=""))
        assert row[1:3] == ("NoMatch", "")

    def test_failed_row_carries_reason(self) -> None:
        row = outcome_row(_failed(2))
        assert row[1] == "NoMatch"
        assert row[-2:] == ("failed", "poll attempts exhausted")


class TestResultWriter:
    def test_writes_tsv_in_table_order(self, tmp_path: Path) -> None:
        path = tmp_path / "data.txt"

        ResultWriter(path).write([_completed(0), _failed(1)])

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "\t".join(HEADER)
        assert lines[1].startswith("0\t5S_rRNA\tRF00001")
        assert lines[2].startswith("1\tNoMatch\t")
        assert len(lines) == 3

    def test_check_writable_accepts_existing_directory(self, tmp_path: Path) -> None:
        ResultWriter(tmp_path / "data.txt").check_writable()

    def test_check_writable_rejects_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ResultSinkError, match="does not exist"):
            ResultWriter(tmp_path / "nope" / "data.txt").check_writable()

    def test_check_writable_rejects_directory_path(self, tmp_path: Path) -> None:
        with pytest.raises(ResultSinkError, match="is a directory"):
            ResultWriter(tmp_path).check_writable()
