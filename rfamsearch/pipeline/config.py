from dataclasses import dataclass, replace

from rfamsearch.config.settings import Settings


@dataclass(frozen=True)
class PipelineConfig:
    """Pool sizes, pacing and retry limits for one pipeline run."""

    submitter_workers: int = 10
    poller_workers: int = 10
    batch_size: int = 10
    inter_batch_delay_seconds: float = 5.0
    min_poll_interval_seconds: float = 5.0
    max_submit_attempts: int = 3
    max_poll_attempts: int = 360
    max_poll_errors: int = 5
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 60.0
    rate_limit_backoff_factor: float = 4.0

    def __post_init__(self) -> None:
        for name in (
            "submitter_workers",
            "poller_workers",
            "batch_size",
            "max_submit_attempts",
            "max_poll_attempts",
            "max_poll_errors",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            submitter_workers=settings.submitter_workers,
            poller_workers=settings.poller_workers,
            batch_size=settings.batch_size,
            inter_batch_delay_seconds=settings.inter_batch_delay_seconds,
            min_poll_interval_seconds=settings.min_poll_interval_seconds,
            max_submit_attempts=settings.max_submit_attempts,
            max_poll_attempts=settings.max_poll_attempts,
            max_poll_errors=settings.max_poll_errors,
            backoff_base_seconds=settings.backoff_base_seconds,
            backoff_max_seconds=settings.backoff_max_seconds,
            rate_limit_backoff_factor=settings.rate_limit_backoff_factor,
        )

    def for_single_sequence(self) -> "PipelineConfig":
        """One ad-hoc sequence: a single worker per stage and no batch pacing."""
        return replace(
            self,
            submitter_workers=1,
            poller_workers=1,
            inter_batch_delay_seconds=0.0,
        )
