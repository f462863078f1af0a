"""
Enrichment Adapter

Runs a pre-ranked enrichment of regulons (TF target sets) against a ranked
gene statistic and turns the result into TF scores. The enrichment
statistics themselves come from an external engine implementing
`EnrichmentEngine`.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Protocol, Set, Union
import logging

import numpy as np
import pandas as pd

from ..network.graph import RegulatoryGraph

logger = logging.getLogger(__name__)

ENRICHMENT_COLUMNS = ["tf", "nes", "pval", "padj", "leading_edge"]


@dataclass
class EnrichmentRecord:
    """Enrichment result for one gene set."""

    set_id: str
    nes: float  # Normalized enrichment score
    pval: float
    padj: float
    leading_edge: FrozenSet[str] = field(default_factory=frozenset)


class EnrichmentEngine(Protocol):
    """Pre-ranked gene set enrichment (e.g. an fgsea/GSEA implementation)."""

    def run(
        self,
        gene_sets: Mapping[str, Set[str]],
        ranked_genes: pd.Series,
        min_size: int,
        max_size: int,
    ) -> Iterable[EnrichmentRecord]:
        ...


def calculate_relative_score(
    gene_sets: Union[RegulatoryGraph, Mapping[str, Iterable[str]]],
    ranked_list: Union[pd.Series, Mapping[str, float]],
    engine: EnrichmentEngine,
    min_size: int = 10,
    max_size: int = 1000,
) -> pd.DataFrame:
    """
    Score TFs by enrichment of their target sets in a ranked gene list.

    The ranked list is sorted in decreasing order and gene sets outside
    [min_size, max_size] are dropped before the engine is called.

    Args:
        gene_sets: TF -> target genes, or a RegulatoryGraph (its regulons are used)
        ranked_list: Gene-level statistic (e.g. logFC) indexed by gene symbol
        engine: Enrichment engine
        min_size: Minimum gene set size to test
        max_size: Maximum gene set size to test

    Returns:
        DataFrame with columns tf, nes, pval, padj, leading_edge
    """
    if min_size > max_size:
        raise ValueError(f"min_size ({min_size}) must not exceed max_size ({max_size})")

    if isinstance(gene_sets, RegulatoryGraph):
        sets = gene_sets.to_gene_sets()
    else:
        sets = {tf: set(genes) for tf, genes in gene_sets.items()}

    filtered = {
        tf: genes
        for tf, genes in sets.items()
        if min_size <= len(genes) <= max_size
    }
    if len(filtered) < len(sets):
        logger.info(
            f"Filtered {len(sets) - len(filtered)} gene sets outside size range "
            f"[{min_size}, {max_size}]"
        )

    ranked = pd.Series(ranked_list, dtype=float).dropna().sort_values(ascending=False)

    records = list(engine.run(filtered, ranked, min_size, max_size))
    df = pd.DataFrame(
        [(r.set_id, r.nes, r.pval, r.padj, frozenset(r.leading_edge)) for r in records],
        columns=ENRICHMENT_COLUMNS,
    )

    logger.info(f"Enrichment returned {len(df)} results for {len(filtered)} gene sets")
    return df


def scores_from_enrichment(
    results: pd.DataFrame,
    score_column: str = "nes",
    id_column: str = "tf",
) -> Dict[str, float]:
    """
    Extract a TF score vector from enrichment results.

    Rows with a missing (NaN) score are skipped.

    Args:
        results: Output of calculate_relative_score or an equivalent table
        score_column: Column to use as score
        id_column: Column with TF identifiers

    Returns:
        Dictionary mapping TF to score
    """
    for column in (id_column, score_column):
        if column not in results.columns:
            raise ValueError(f"Enrichment results have no column '{column}'")

    scores: Dict[str, float] = {}
    for tf, value in zip(results[id_column], results[score_column]):
        value = float(value)
        if np.isnan(value):
            continue
        scores[str(tf)] = value
    return scores
