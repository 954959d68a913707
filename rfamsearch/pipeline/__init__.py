from rfamsearch.pipeline.collector import JobOutcome, ResultCollector
from rfamsearch.pipeline.config import PipelineConfig
from rfamsearch.pipeline.search_pipeline import SearchPipeline

__all__ = ["JobOutcome", "PipelineConfig", "ResultCollector", "SearchPipeline"]
