"""
TF Scoring

Turns enrichment scores into network-aware TF influence scores.

Components:
- DecayPropagator: Multilevel target evidence with exponential decay
- BlendedScorer: Alpha-weighted blend of own and direct-target scores
- count_targets: Target counts and overlap with genes of interest
- calculate_relative_score: Regulon enrichment through a pluggable engine

Example Usage:
    from grn_influence.scoring import (
        adjust_scores_multilevel_decay,
        adjust_scores_target_average,
        count_targets,
    )

    decay_df = adjust_scores_multilevel_decay(scores, grn, max_depth=2, decay_factor=0.6)
    blend_df = adjust_scores_target_average(scores, grn, alpha=0.5)
    census_df = count_targets(grn, interest_set=degs)
"""

from .propagation import (
    DecayConfig,
    DecayPropagationResult,
    DecayPropagator,
    adjust_scores_multilevel_decay,
)

from .blending import (
    BlendConfig,
    BlendedScorer,
    adjust_scores_target_average,
)

from .census import count_targets

from .enrichment import (
    ENRICHMENT_COLUMNS,
    EnrichmentEngine,
    EnrichmentRecord,
    calculate_relative_score,
    scores_from_enrichment,
)

__all__ = [
    # Decay propagation
    "DecayConfig",
    "DecayPropagationResult",
    "DecayPropagator",
    "adjust_scores_multilevel_decay",
    # Blending
    "BlendConfig",
    "BlendedScorer",
    "adjust_scores_target_average",
    # Census
    "count_targets",
    # Enrichment
    "ENRICHMENT_COLUMNS",
    "EnrichmentEngine",
    "EnrichmentRecord",
    "calculate_relative_score",
    "scores_from_enrichment",
]
