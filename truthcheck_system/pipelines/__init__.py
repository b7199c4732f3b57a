"""Pipelines wiring the agents and scorers end to end."""

from truthcheck_system.pipelines.trust_pipeline import PipelineStats, TrustPipeline, trust_band

__all__ = ["PipelineStats", "TrustPipeline", "trust_band"]
