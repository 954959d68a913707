import csv
from collections.abc import Sequence
from pathlib import Path

from rfamsearch.io.exceptions import ResultSinkError
from rfamsearch.pipeline.collector import JobOutcome

HEADER = ("index", "rna", "family", "length", "label", "sequence", "status", "reason")
NO_MATCH = "NoMatch"


def outcome_row(outcome: JobOutcome) -> tuple[str, ...]:
    """One TSV row: family name and first match accession, or NoMatch."""
    result = outcome.result
    rna = NO_MATCH
    family = ""
    if result is not None and result.hit_family:
        rna = result.hit_family
        family = result.matches[0].accession if result.matches else ""
    return (
        str(outcome.job_id),
        rna,
        family,
        str(outcome.sequence.length),
        outcome.sequence.label,
        outcome.sequence.sequence,
        outcome.status.value,
        outcome.failure_reason or "",
    )


class ResultWriter:
    """Writes the result table as tab-separated values."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def check_writable(self) -> None:
        """Fail early if the output location cannot be written.

        Raises:
            ResultSinkError: if the parent directory is missing or the path is a directory.
        """
        parent = self._path.parent
        if not parent.is_dir():
            raise ResultSinkError(f"Output directory does not exist: {parent}")
        if self._path.is_dir():
            raise ResultSinkError(f"Output path is a directory: {self._path}")

    def write(self, outcomes: Sequence[JobOutcome]) -> None:
        """Write one row per outcome, in table order.

        Raises:
            ResultSinkError: if the file cannot be written.
        """
        try:
            with self._path.open("w", encoding="utf-8", newline="") as handle:
                writer = csv.writer(handle, delimiter="\t", lineterminator="\n")
                writer.writerow(HEADER)
                writer.writerows(outcome_row(outcome) for outcome in outcomes)
        except OSError as exc:
            raise ResultSinkError(f"Failed to write results to {self._path}: {exc}") from exc
