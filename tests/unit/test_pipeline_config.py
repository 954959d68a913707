import pytest

from rfamsearch.config.settings import Settings
from rfamsearch.pipeline.config import PipelineConfig


class TestPipelineConfig:
    def test_from_settings(self) -> None:
        settings = Settings(
            submitter_workers=4,
            poller_workers=6,
            batch_size=3,
            inter_batch_delay_seconds=1.5,
            max_poll_attempts=12,
        )

        config = PipelineConfig.from_settings(settings)

        assert config.submitter_workers == 4
        assert config.poller_workers == 6
        assert config.batch_size == 3
        assert config.inter_batch_delay_seconds == 1.5
        assert config.max_poll_attempts == 12

    def test_single_sequence_uses_one_worker_per_stage(self) -> None:
        config = PipelineConfig(submitter_workers=10, poller_workers=10).for_single_sequence()

        assert config.submitter_workers == 1
        assert config.poller_workers == 1
        assert config.inter_batch_delay_seconds == 0.0

    @pytest.mark.parametrize("field", ["submitter_workers", "batch_size", "max_poll_attempts"])
    def test_rejects_non_positive_limits(self, field: str) -> None:
        with pytest.raises(ValueError, match=field):
            PipelineConfig(**{field: 0})
