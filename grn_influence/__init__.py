"""
GRN Influence

Estimates how strongly transcription factors influence a measured outcome by
propagating enrichment evidence through a directed gene regulatory network.
"""

__version__ = "0.1.0"

from .network import (
    MalformedGraphError,
    RegulatoryGraph,
    TraversalDirection,
    TraversalResult,
    bounded_traversal,
    get_downstream,
    get_upstream,
)
from .scoring import (
    adjust_scores_multilevel_decay,
    adjust_scores_target_average,
    calculate_relative_score,
    count_targets,
)
from .pipeline import InfluencePipeline, InfluenceResult, PipelineConfig

__all__ = [
    "InfluencePipeline",
    "InfluenceResult",
    "MalformedGraphError",
    "PipelineConfig",
    "RegulatoryGraph",
    "TraversalDirection",
    "TraversalResult",
    "adjust_scores_multilevel_decay",
    "adjust_scores_target_average",
    "bounded_traversal",
    "calculate_relative_score",
    "count_targets",
    "get_downstream",
    "get_upstream",
    "__version__",
]
