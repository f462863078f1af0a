"""
Blended Scoring

Combines each TF's own score with the mean score of its directly regulated,
scored targets.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional
import logging

import numpy as np
import pandas as pd

from ..network.graph import GraphLike, as_regulatory_graph

logger = logging.getLogger(__name__)


@dataclass
class BlendConfig:
    """Configuration for direct/indirect score blending."""

    alpha: float = 0.5  # Weight of the direct score; 1 keeps original scores

    def __post_init__(self):
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must be in [0, 1], got {self.alpha}")


class BlendedScorer:
    """Scores TFs as alpha * own score + (1 - alpha) * mean target score."""

    def __init__(self, config: Optional[BlendConfig] = None):
        self.config = config or BlendConfig()

    def score(self, scores: Mapping[str, float], graph: GraphLike) -> pd.DataFrame:
        """
        Compute direct, indirect and combined scores.

        Only depth-1 targets that are themselves scored contribute to the
        indirect score; a TF with none gets an indirect score of 0.

        Args:
            scores: Mapping from TF identifier to score
            graph: RegulatoryGraph or TF -> targets mapping

        Returns:
            DataFrame with columns tf, direct, indirect, combined
        """
        graph = as_regulatory_graph(graph)
        alpha = self.config.alpha
        original = {str(k): float(v) for k, v in dict(scores).items()}

        indirect: Dict[str, float] = {}
        for tf in original:
            scored_targets = [t for t in graph.successors(tf) if t in original]
            if scored_targets:
                indirect[tf] = float(np.mean([original[t] for t in scored_targets]))
            else:
                indirect[tf] = 0.0

        tfs = list(original)
        df = pd.DataFrame(
            {
                "tf": pd.Series(tfs, dtype=object),
                "direct": pd.Series([original[tf] for tf in tfs], dtype=float),
                "indirect": pd.Series([indirect[tf] for tf in tfs], dtype=float),
            }
        )
        df["combined"] = alpha * df["direct"] + (1 - alpha) * df["indirect"]

        logger.info(f"Blended scores for {len(df)} TFs (alpha={alpha})")
        return df


def adjust_scores_target_average(
    scores: Mapping[str, float],
    graph: GraphLike,
    alpha: float = 0.5,
) -> pd.DataFrame:
    """
    Direct, indirect (mean of direct scored targets) and alpha-combined TF scores.

    Args:
        scores: Original TF scores (e.g. NES from enrichment)
        graph: RegulatoryGraph or TF -> targets mapping
        alpha: Weight of the original score in the combined score

    Returns:
        DataFrame with columns tf, direct, indirect, combined
    """
    return BlendedScorer(BlendConfig(alpha=alpha)).score(scores, graph)
