"""
netops/services package marker.
"""

from netops.services.aggregation_service import CategoryAggregator, MergeResult
from netops.services.business_impact_service import (
    BusinessImpactClassifier,
    ImpactBreakdown,
    ImpactSummary,
)
from netops.services.pipeline_service import (
    FindingsPipeline,
    MissingPagesError,
    PipelineResult,
    build_default_pipeline,
    run_pipeline,
)
from netops.services.ranking import DefaultSeverityPolicy, SeverityPolicy, rank_top_across_all

__all__ = [
    "BusinessImpactClassifier",
    "CategoryAggregator",
    "DefaultSeverityPolicy",
    "FindingsPipeline",
    "ImpactBreakdown",
    "ImpactSummary",
    "MergeResult",
    "MissingPagesError",
    "PipelineResult",
    "SeverityPolicy",
    "build_default_pipeline",
    "rank_top_across_all",
    "run_pipeline",
]
