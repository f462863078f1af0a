"""
TF Influence Pipeline

End-to-end run from a regulatory network and TF scores to network-aware
influence tables.

This pipeline integrates:
- network: GRN loading and downstream/upstream queries
- scoring: enrichment scores, decay propagation, blended scores, target census

Example Usage:
    from grn_influence.pipeline import InfluencePipeline, PipelineConfig

    config = PipelineConfig.from_yaml("configs/run.yaml")
    result = InfluencePipeline(config).run()
    print(result.summary)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import pandas as pd
import yaml

from .network import (
    RegulatoryGraph,
    TraversalResult,
    get_downstream,
    get_upstream,
    load_gene_list,
    load_grn_edges,
    load_ranked_genes,
    load_regulons_gmt,
    load_score_table,
)
from .scoring import (
    BlendConfig,
    BlendedScorer,
    DecayConfig,
    DecayPropagator,
    EnrichmentEngine,
    calculate_relative_score,
    count_targets,
    scores_from_enrichment,
)

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(name: str) -> str:
    """Replace path separators and other unsafe characters with underscores."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name).strip(".") or "_"


# =============================================================================
# Configuration Dataclasses
# =============================================================================

@dataclass
class DataConfig:
    """Configuration for data loading."""

    # Network: adjacency table or regulon GMT
    grn_path: Optional[str] = None
    regulons_gmt_path: Optional[str] = None
    grn_source_column: str = "TF"
    grn_target_column: str = "target"
    grn_weight_column: Optional[str] = "importance"
    grn_sep: str = "\t"

    # TF scores: precomputed table, or ranked genes + an enrichment engine
    scores_path: Optional[str] = None
    score_id_column: str = "tf"
    score_column: str = "nes"
    ranked_genes_path: Optional[str] = None
    ranked_gene_column: str = "gene"
    ranked_stat_column: str = "logFC"
    min_size: int = 10
    max_size: int = 1000

    # Optional genes of interest (e.g. DEGs)
    interest_genes_path: Optional[str] = None
    interest_gene_column: Optional[str] = None


@dataclass
class QueryConfig:
    """Downstream/upstream queries to run for selected roots."""

    downstream: List[str] = field(default_factory=list)
    upstream: List[str] = field(default_factory=list)
    max_depth: int = 2
    exclude_self_loops: bool = False
    restrict_to_interest: bool = False


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""

    data: DataConfig = field(default_factory=DataConfig)
    decay: DecayConfig = field(default_factory=DecayConfig)
    blend: BlendConfig = field(default_factory=BlendConfig)
    queries: QueryConfig = field(default_factory=QueryConfig)

    # Pipeline behavior
    verbose: bool = True

    # Output
    output_dir: Optional[str] = None

    def __post_init__(self):
        if self.decay.max_depth < 0:
            raise ValueError(f"decay.max_depth must be non-negative, got {self.decay.max_depth}")
        if self.queries.max_depth < 0:
            raise ValueError(f"queries.max_depth must be non-negative, got {self.queries.max_depth}")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "PipelineConfig":
        """Build a config from nested dictionaries (unknown keys are rejected)."""
        sections = {
            "data": DataConfig,
            "decay": DecayConfig,
            "blend": BlendConfig,
            "queries": QueryConfig,
        }
        known = {f.name for f in fields(cls)}
        unknown = set(raw) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")

        kwargs: Dict[str, Any] = {}
        for key, value in raw.items():
            if key in sections:
                section_cls = sections[key]
                section_fields = {f.name for f in fields(section_cls)}
                bad = set(value or {}) - section_fields
                if bad:
                    raise ValueError(f"Unknown keys in '{key}' section: {sorted(bad)}")
                kwargs[key] = section_cls(**(value or {}))
            else:
                kwargs[key] = value
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str) -> "PipelineConfig":
        """Load configuration from a YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(config_path, "r") as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(raw)


# =============================================================================
# Pipeline Result
# =============================================================================

@dataclass
class InfluenceResult:
    """Complete results from the TF influence pipeline."""

    scores: Dict[str, float]
    decay_scores: pd.DataFrame
    blended_scores: pd.DataFrame
    target_counts: pd.DataFrame
    downstream: Dict[str, TraversalResult] = field(default_factory=dict)
    upstream: Dict[str, TraversalResult] = field(default_factory=dict)
    enrichment: Optional[pd.DataFrame] = None
    n_nodes: int = 0
    n_edges: int = 0
    runtime_seconds: float = 0.0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def summary(self) -> str:
        """Generate a summary of the pipeline results."""
        lines = [
            "=" * 60,
            "TF INFLUENCE PIPELINE RESULTS",
            "=" * 60,
            f"Timestamp: {self.timestamp}",
            f"Runtime: {self.runtime_seconds:.1f} seconds",
            "",
            "NETWORK:",
            f"  Nodes: {self.n_nodes}",
            f"  Edges: {self.n_edges}",
            f"  Scored TFs: {len(self.scores)}",
        ]

        if not self.decay_scores.empty:
            top = self.decay_scores.sort_values("adjusted_score", ascending=False, kind="mergesort").head(5)
            lines.extend(["", "TOP ADJUSTED SCORES:"])
            for row in top.itertuples(index=False):
                lines.append(f"  {row.tf}: {row.original_score:.3f} -> {row.adjusted_score:.3f}")

        for label, queries in (("DOWNSTREAM", self.downstream), ("UPSTREAM", self.upstream)):
            if queries:
                lines.extend(["", f"{label} QUERIES:"])
                for root, res in queries.items():
                    lines.append(f"  {root}: {len(res.nodes)} nodes, {len(res.edges)} edges")

        lines.append("=" * 60)
        return "\n".join(lines)


# =============================================================================
# Main Pipeline
# =============================================================================

class InfluencePipeline:
    """
    Pipeline estimating TF influence over a regulatory network.

    Loads the GRN and TF scores, then runs decay propagation, blended
    scoring, the target census and any configured reachability queries.
    """

    def __init__(self, config: PipelineConfig, engine: Optional[EnrichmentEngine] = None):
        """
        Initialize the pipeline.

        Args:
            config: Complete pipeline configuration
            engine: Enrichment engine, required when scores come from a ranked gene list
        """
        self.config = config
        self.engine = engine
        self._setup_logging()

    def _setup_logging(self) -> None:
        """Configure logging based on verbosity setting."""
        level = logging.INFO if self.config.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    def run(
        self,
        graph: Optional[RegulatoryGraph] = None,
        scores: Optional[Dict[str, float]] = None,
    ) -> InfluenceResult:
        """
        Execute the pipeline.

        Args:
            graph: Optional pre-built network (overrides the configured paths)
            scores: Optional TF scores (override the configured score source)

        Returns:
            InfluenceResult with all pipeline outputs
        """
        start_time = datetime.now()
        logger.info("Starting TF influence pipeline")

        logger.info("Step 1: Loading regulatory network")
        graph = graph if graph is not None else self._load_graph()
        interest = self._load_interest_genes()

        logger.info("Step 2: Obtaining TF scores")
        enrichment = None
        if scores is None:
            scores, enrichment = self._load_scores(graph)

        logger.info("Step 3: Decay propagation")
        decay_df = DecayPropagator(self.config.decay).propagate(scores, graph).to_dataframe()

        logger.info("Step 4: Blended scoring")
        blended_df = BlendedScorer(self.config.blend).score(scores, graph)

        logger.info("Step 5: Target census")
        census_df = count_targets(graph, interest_set=interest)

        downstream, upstream = self._run_queries(graph, interest)

        runtime = (datetime.now() - start_time).total_seconds()
        logger.info(f"Pipeline completed in {runtime:.1f} seconds")

        result = InfluenceResult(
            scores=dict(scores),
            decay_scores=decay_df,
            blended_scores=blended_df,
            target_counts=census_df,
            downstream=downstream,
            upstream=upstream,
            enrichment=enrichment,
            n_nodes=graph.n_nodes,
            n_edges=graph.n_edges,
            runtime_seconds=runtime,
        )

        if self.config.output_dir:
            self._save_results(result)

        return result

    def _load_graph(self) -> RegulatoryGraph:
        data = self.config.data
        if data.grn_path:
            return load_grn_edges(
                data.grn_path,
                source_column=data.grn_source_column,
                target_column=data.grn_target_column,
                weight_column=data.grn_weight_column,
                sep=data.grn_sep,
            )
        if data.regulons_gmt_path:
            return load_regulons_gmt(data.regulons_gmt_path)
        raise ValueError("No network configured: set data.grn_path or data.regulons_gmt_path")

    def _load_interest_genes(self) -> Optional[Set[str]]:
        data = self.config.data
        if not data.interest_genes_path:
            return None
        return load_gene_list(data.interest_genes_path, column=data.interest_gene_column)

    def _load_scores(self, graph: RegulatoryGraph):
        data = self.config.data
        if data.scores_path:
            scores = load_score_table(
                data.scores_path,
                id_column=data.score_id_column,
                score_column=data.score_column,
            )
            return scores, None

        if data.ranked_genes_path:
            if self.engine is None:
                raise ValueError("data.ranked_genes_path requires an enrichment engine")
            ranked = load_ranked_genes(
                data.ranked_genes_path,
                gene_column=data.ranked_gene_column,
                stat_column=data.ranked_stat_column,
            )
            enrichment = calculate_relative_score(
                graph,
                ranked,
                self.engine,
                min_size=data.min_size,
                max_size=data.max_size,
            )
            return scores_from_enrichment(enrichment), enrichment

        raise ValueError("No TF scores configured: set data.scores_path or data.ranked_genes_path")

    def _run_queries(self, graph: RegulatoryGraph, interest: Optional[Set[str]]):
        queries = self.config.queries
        restrict = interest if queries.restrict_to_interest else None
        if queries.restrict_to_interest and interest is None:
            logger.warning("queries.restrict_to_interest is set but no interest genes were loaded")

        downstream = {
            tf: get_downstream(
                graph,
                tf,
                max_depth=queries.max_depth,
                exclude_self_loops=queries.exclude_self_loops,
                interest_set=restrict,
            )
            for tf in queries.downstream
        }
        upstream = {
            gene: get_upstream(
                graph,
                gene,
                max_depth=queries.max_depth,
                exclude_self_loops=queries.exclude_self_loops,
                interest_set=restrict,
            )
            for gene in queries.upstream
        }
        for root in list(queries.downstream) + list(queries.upstream):
            if root not in graph:
                logger.warning(f"Query root {root} is not in the network")
        return downstream, upstream

    def _save_results(self, result: InfluenceResult) -> None:
        """Save pipeline results to output directory."""
        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        result.decay_scores.to_csv(output_dir / "decay_adjusted_scores.csv", index=False)
        result.blended_scores.to_csv(output_dir / "target_average_scores.csv", index=False)
        result.target_counts.to_csv(output_dir / "target_counts.csv", index=False)

        if result.enrichment is not None:
            enrichment = result.enrichment.copy()
            enrichment["leading_edge"] = [";".join(sorted(genes)) for genes in enrichment["leading_edge"]]
            enrichment.to_csv(output_dir / "enrichment.csv", index=False)

        for prefix, queries in (("downstream", result.downstream), ("upstream", result.upstream)):
            for root, res in queries.items():
                filename = f"{prefix}_{_safe_filename(root)}_edges.csv"
                res.edges_frame().to_csv(output_dir / filename, index=False)

        with open(output_dir / "summary.txt", "w") as f:
            f.write(result.summary)

        logger.info(f"Results saved to {output_dir}")


# =============================================================================
# Convenience Functions
# =============================================================================

def run_influence_analysis(
    grn_path: str,
    scores_path: str,
    output_dir: Optional[str] = None,
    **kwargs: Any,
) -> InfluenceResult:
    """
    Convenience function to run the pipeline with minimal configuration.

    Args:
        grn_path: Path to GRN adjacency table
        scores_path: Path to TF score table
        output_dir: Optional output directory
        **kwargs: Options of the decay, blend and queries sections. An option
            found in more than one section (max_depth) must carry the
            section prefix, e.g. decay_max_depth or queries_max_depth.

    Returns:
        InfluenceResult with pipeline outputs

    Raises:
        ValueError: For unknown, ambiguous or invalid options
    """
    sections = {"decay": DecayConfig, "blend": BlendConfig, "queries": QueryConfig}
    section_fields = {name: {f.name for f in fields(cls)} for name, cls in sections.items()}
    overrides: Dict[str, Dict[str, Any]] = {name: {} for name in sections}

    for key, value in kwargs.items():
        prefixed = [
            name for name in sections
            if key.startswith(f"{name}_") and key[len(name) + 1:] in section_fields[name]
        ]
        if prefixed:
            name = prefixed[0]
            overrides[name][key[len(name) + 1:]] = value
            continue

        matches = [name for name in sections if key in section_fields[name]]
        if not matches:
            raise ValueError(f"Unknown option: {key}")
        if len(matches) > 1:
            options = ", ".join(f"{name}_{key}" for name in matches)
            raise ValueError(f"Ambiguous option: {key} (use one of {options})")
        overrides[matches[0]][key] = value

    config = PipelineConfig(
        data=DataConfig(grn_path=grn_path, scores_path=scores_path),
        decay=DecayConfig(**overrides["decay"]),
        blend=BlendConfig(**overrides["blend"]),
        queries=QueryConfig(**overrides["queries"]),
        output_dir=output_dir,
    )

    return InfluencePipeline(config).run()
