from pathlib import Path

from rfamsearch.io.exceptions import SequenceSourceError
from rfamsearch.search.models import SequenceRecord


def single_sequence_records(sequence: str) -> list[SequenceRecord]:
    """Wrap one ad-hoc sequence as a batch of one."""
    cleaned = "".join(sequence.split())
    if not cleaned:
        raise SequenceSourceError("Sequence is empty")
    return [SequenceRecord(sequence=cleaned)]


class FastaLoader:
    """Reads sequence records from a FASTA file."""

    def load(self, path: Path) -> list[SequenceRecord]:
        """Parse every '>' record in the file, in file order.

        Raises:
            SequenceSourceError: if the file cannot be read or holds no records.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SequenceSourceError(f"Failed to read FASTA file {path}: {exc}") from exc
        records = self.parse(text)
        if not records:
            raise SequenceSourceError(f"No FASTA records found in {path}")
        return records

    @staticmethod
    def parse(text: str) -> list[SequenceRecord]:
        records: list[SequenceRecord] = []
        for entry in text.split(">")[1:]:
            header, _, body = entry.partition("\n")
            sequence = "".join(body.split())
            if not sequence:
                continue
            records.append(SequenceRecord(sequence=sequence, label=header.strip()))
        return records
