import time
from pathlib import Path

from rfamsearch.config.settings import Settings
from rfamsearch.io.exceptions import ResultSinkError, SequenceSourceError
from rfamsearch.io.fasta_loader import FastaLoader, single_sequence_records
from rfamsearch.io.result_writer import ResultWriter, outcome_row
from rfamsearch.logging.logger import Log
from rfamsearch.pipeline.collector import summarize
from rfamsearch.pipeline.config import PipelineConfig
from rfamsearch.pipeline.progress import ProgressSnapshot
from rfamsearch.pipeline.search_pipeline import SearchPipeline
from rfamsearch.search.factory import SearchClientFactory

EXIT_NO_INPUT = 3
EXIT_IO_ERROR = 1


def log_progress(snapshot: ProgressSnapshot) -> None:
    Log.debug(
        f"Created {snapshot.created}/{snapshot.total}, "
        f"submitted {snapshot.submitted}/{snapshot.total}, "
        f"finished {snapshot.finished}/{snapshot.total}"
    )


def run(settings: Settings) -> int:
    """Load sequences, search them, and export the results. Returns an exit code."""
    if not settings.fasta_file and not settings.sequence:
        Log.error("No input provided: set fasta_file or sequence")
        return EXIT_NO_INPUT

    config = PipelineConfig.from_settings(settings)
    writer: ResultWriter | None = None
    try:
        if settings.sequence:
            records = single_sequence_records(settings.sequence)
            config = config.for_single_sequence()
        else:
            records = FastaLoader().load(Path(settings.fasta_file))
            writer = ResultWriter(Path(settings.output_file))
            writer.check_writable()
    except (SequenceSourceError, ResultSinkError) as exc:
        Log.error(str(exc))
        return EXIT_IO_ERROR

    try:
        client = SearchClientFactory.create(settings)
    except ValueError as exc:
        Log.error(str(exc))
        return EXIT_IO_ERROR

    Log.info(f"Loaded {len(records)} sequences")
    started = time.monotonic()
    try:
        outcomes = SearchPipeline(client, config).run(records, observer=log_progress)
    finally:
        client.close()
    elapsed = time.monotonic() - started

    for outcome in outcomes:
        if outcome.result is not None and outcome.result.has_hit:
            index, rna, family, *_ = outcome_row(outcome)
            Log.info(f"#{index} {outcome.sequence.label or '-'}\t{rna}\t{family}")

    if writer is not None:
        try:
            writer.write(outcomes)
        except ResultSinkError as exc:
            Log.error(str(exc))
            return EXIT_IO_ERROR
        Log.info(f"Results written to {settings.output_file}")

    summary = summarize(outcomes)
    Log.info(
        f"Completed {summary.completed} jobs, {summary.failed} failed, in {elapsed:.1f}s"
    )
    return 0


def main() -> None:
    """Entry point: settings (env, .env, CLI flags) -> pipeline -> exit code."""
    settings = Settings(_cli_parse_args=True)  # type: ignore[call-arg]
    Log.configure(settings.log_level)
    raise SystemExit(run(settings))


if __name__ == "__main__":
    main()
