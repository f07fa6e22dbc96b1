"""
Token top-up report pipeline.

Orchestrates record loading, aggregation and report writing.
"""

from topup.pipeline.core import PipelineResult, TopUpPipeline, run_pipeline

__all__ = ["PipelineResult", "TopUpPipeline", "run_pipeline"]
